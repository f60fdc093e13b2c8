"""Loading dialogue scripts from JSON into a graph of nodes."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .nodes import (
    ChoiceNode,
    ConditionNode,
    DialogueNode,
    MiniGameNode,
    NodeCharacterSetting,
    TextNode,
)
from .types import (
    ChoiceNodeInfo,
    ConditionNodeInfo,
    DialogueBGImage,
    DialogueBGM,
    DialogueCutScene,
    DialogueExpression,
    DialoguePosition,
    DialogueSFX,
    MiniGameType,
    enum_from_name,
)

log = logging.getLogger(__name__)

DIALOGUE_DIR = "Dialogue"


def _string(obj: Mapping[str, Any], key: str) -> str:
    value = obj.get(key)
    return "" if value is None else str(value)


def _integer(obj: Mapping[str, Any], key: str) -> int:
    value = obj.get(key)
    return 0 if value is None else int(value)


def _array(obj: Mapping[str, Any], key: str) -> list[Any]:
    return list(obj.get(key) or [])


class DialogueGraph:
    """Holds dialogue nodes by id, built from JSON scripts under ``base_dir/Dialogue``."""

    def __init__(self, base_dir: str | Path = ".") -> None:
        self.base_dir = Path(base_dir)
        self.nodes: dict[str, DialogueNode] = {}

    def get_node(self, node_id: str) -> DialogueNode | None:
        return self.nodes.get(node_id)

    def load_json(self, file_name: str) -> None:
        """Read ``<base_dir>/Dialogue/<file_name>.json`` and add its nodes."""
        path = self.base_dir / DIALOGUE_DIR / f"{file_name}.json"
        with path.open(encoding="utf-8") as handle:
            data = json.load(handle)
        self.load_data(data)
        log.info("Loaded dialogue file: %s", path)

    def load_data(self, data: Mapping[str, Any]) -> None:
        """Add the nodes of an already parsed dialogue script."""
        meta = data.get("meta") or {}
        builders = {
            "dialogue": lambda node: self._text_node(node, meta),
            "choice": self._choice_node,
            "condition": self._condition_node,
            "miniGame": self._minigame_node,
        }
        for node in _array(data, "nodes"):
            builder = builders.get(_string(node, "type"))
            if builder is not None:
                created = builder(node)
                self.nodes[created.node_id] = created

    @staticmethod
    def _text_node(node: Mapping[str, Any], meta: Mapping[str, Any]) -> TextNode:
        settings = [
            NodeCharacterSetting(
                character_id=_string(setting, "characterId"),
                expression=enum_from_name(DialogueExpression, _string(setting, "expression")),
                position=enum_from_name(DialoguePosition, _string(setting, "position")),
            )
            for setting in _array(node, "characterSettings")
        ]
        return TextNode(
            node_id=_string(node, "id"),
            chapter_name=_string(meta, "chapterName"),
            next_node_id=_string(node, "nextNodeId"),
            speaker_id=_string(node, "speakerId"),
            dialogue_text=_string(node, "dialogue"),
            bg_image=enum_from_name(DialogueBGImage, _string(node, "BGImage")),
            bgm=enum_from_name(DialogueBGM, _string(node, "BGM")),
            sfx=enum_from_name(DialogueSFX, _string(node, "soundEffect")),
            cut_scene=enum_from_name(DialogueCutScene, _string(node, "cutScene")),
            character_settings=settings,
        )

    @staticmethod
    def _choice_node(node: Mapping[str, Any]) -> ChoiceNode:
        choices = [
            ChoiceNodeInfo(
                required_nodes={str(name) for name in _array(choice, "requiredNodes")},
                required_affection=_integer(choice, "requiredAffection"),
                choice_text=_string(choice, "choiceText"),
                affection_gain=_integer(choice, "affectionGain"),
                related_character_id=_string(choice, "relatedCharacterId"),
                next_node_id=_string(choice, "nextNodeId"),
            )
            for choice in _array(node, "choices")
        ]
        return ChoiceNode(node_id=_string(node, "id"), choices=choices)

    @staticmethod
    def _condition_node(node: Mapping[str, Any]) -> ConditionNode:
        condition = ConditionNodeInfo(
            required_nodes={str(name) for name in _array(node, "requiredNodes")},
            required_affection=_integer(node, "requiredAffection"),
            related_character_id=_string(node, "relatedCharacterId"),
            true_node_id=_string(node, "trueNodeId"),
            false_node_id=_string(node, "falseNodeId"),
        )
        return ConditionNode(node_id=_string(node, "id"), condition=condition)

    @staticmethod
    def _minigame_node(node: Mapping[str, Any]) -> MiniGameNode:
        return MiniGameNode(
            node_id=_string(node, "id"),
            minigame_type=enum_from_name(MiniGameType, _string(node, "miniGameType")),
            level=_integer(node, "level"),
            node_id_after_clear=_string(node, "nodeIdAfterClear"),
        )