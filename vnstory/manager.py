"""Turns dialogue graph nodes into the records the UI presents."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from pathlib import Path

from .dialogue_info import DialogueInfo
from .graph import DialogueGraph
from .nodes import ChoiceNode, ConditionNode, DialogueNode, MiniGameNode, TextNode
from .types import (
    CharacterSetting,
    ChoiceNodeInfo,
    ConditionNodeInfo,
    DialogueBGM,
    DialogueSFX,
    DialogueType,
    MiniGameNodeInfo,
    TextDialogueInfo,
)

log = logging.getLogger(__name__)


class DialogueManager:
    """Reads nodes from a dialogue graph and resolves their assets."""

    def __init__(
        self,
        file_names: Iterable[str] = (),
        info: DialogueInfo | None = None,
        base_dir: str | Path = ".",
    ) -> None:
        self.file_names = list(file_names)
        self.info = info
        self.base_dir = Path(base_dir)
        self.graph: DialogueGraph | None = None

    def init(self) -> None:
        """Build the graph from every configured script; nothing happens without any."""
        if not self.file_names:
            return
        self.graph = DialogueGraph(self.base_dir)
        for name in self.file_names:
            self.graph.load_json(name)

    def get_node(self, node_id: str) -> DialogueNode | None:
        if self.graph is not None:
            return self.graph.get_node(node_id)
        log.warning("No dialogue graph loaded; invalid node id: %s", node_id)
        return None

    def dialogue_type(self, node_id: str) -> DialogueType:
        node = self.get_node(node_id)
        return node.node_type if node is not None else DialogueType.NONE

    def _require_info(self) -> DialogueInfo:
        if self.info is None:
            raise RuntimeError("dialogue asset tables are not set")
        return self.info

    @staticmethod
    def _expect(node: DialogueNode, kind: type, node_id: str):
        if not isinstance(node, kind):
            raise TypeError(f"node {node_id!r} is not a {kind.__name__}")
        return node

    def text_dialogue_info(self, node_id: str) -> TextDialogueInfo:
        """Presentation record of a text node; ``is_valid`` is False if it is missing."""
        info = self._require_info()
        node = self.get_node(node_id)
        if node is None:
            return TextDialogueInfo(is_valid=False)
        text: TextNode = self._expect(node, TextNode, node_id)

        result = TextDialogueInfo(
            character_settings=[
                CharacterSetting(
                    position=setting.position,
                    image=info.find_character_texture(setting.character_id, setting.expression),
                    is_speaking=text.speaker_id == setting.character_id,
                )
                for setting in text.character_settings
            ],
            speaker_name=info.find_character_name(text.speaker_id),
            dialogue_text=text.dialogue_text,
            bg_image=info.find_background_image(text.bg_image),
            cut_scene=info.find_cut_scene(text.cut_scene),
            cut_scene_enum=text.cut_scene,
            next_node_id=text.next_node_id,
            chapter_name=text.chapter_name,
        )
        if text.bgm is not DialogueBGM.STOP:
            result.play_bgm = True
            result.bgm = info.find_bgm(text.bgm)
        if text.sfx is not DialogueSFX.STOP:
            result.play_sfx = True
            result.sound_effect = info.find_sfx(text.sfx)
        return result

    def choice_infos(self, node_id: str) -> list[ChoiceNodeInfo]:
        """Copies of a choice node's options; empty if the node is missing."""
        node = self.get_node(node_id)
        if node is None:
            return []
        choice: ChoiceNode = self._expect(node, ChoiceNode, node_id)
        return copy.deepcopy(choice.choices)

    def condition_info(self, node_id: str) -> ConditionNodeInfo:
        node = self.get_node(node_id)
        if node is None:
            return ConditionNodeInfo(is_valid=False)
        condition: ConditionNode = self._expect(node, ConditionNode, node_id)
        return copy.deepcopy(condition.condition)

    def minigame_info(self, node_id: str) -> MiniGameNodeInfo:
        node = self.get_node(node_id)
        if node is None:
            return MiniGameNodeInfo(is_valid=False)
        minigame: MiniGameNode = self._expect(node, MiniGameNode, node_id)
        info = self._require_info()
        return MiniGameNodeInfo(
            minigame_map=info.find_minigame_world(minigame.minigame_type, minigame.level),
            node_id_after_clear=minigame.node_id_after_clear,
        )