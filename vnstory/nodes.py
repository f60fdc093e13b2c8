"""Dialogue graph nodes."""

from __future__ import annotations

from dataclasses import dataclass, field

from .types import (
    ChoiceNodeInfo,
    ConditionNodeInfo,
    DialogueBGImage,
    DialogueBGM,
    DialogueCutScene,
    DialogueExpression,
    DialoguePosition,
    DialogueSFX,
    DialogueType,
    MiniGameType,
)


@dataclass
class DialogueNode:
    """Common part of every node: its id and kind."""

    node_id: str = ""
    node_type: DialogueType = DialogueType.NONE


@dataclass
class NodeCharacterSetting:
    """A character on stage as described by a text node."""

    character_id: str = ""
    expression: DialogueExpression = DialogueExpression.NONE
    position: DialoguePosition = DialoguePosition.NONE


@dataclass
class TextNode(DialogueNode):
    """A spoken line with its staging, sound and successor."""

    node_type: DialogueType = DialogueType.DIALOGUE
    speaker_id: str = ""
    dialogue_text: str = ""
    character_settings: list[NodeCharacterSetting] = field(default_factory=list)
    sfx: DialogueSFX = DialogueSFX.NONE
    bgm: DialogueBGM = DialogueBGM.NONE
    bg_image: DialogueBGImage = DialogueBGImage.NONE
    cut_scene: DialogueCutScene = DialogueCutScene.NONE
    next_node_id: str = ""
    chapter_name: str = ""


@dataclass
class ChoiceNode(DialogueNode):
    """A set of options offered to the player."""

    node_type: DialogueType = DialogueType.CHOICE
    choices: list[ChoiceNodeInfo] = field(default_factory=list)


@dataclass
class ConditionNode(DialogueNode):
    """A branch decided by the player's progress."""

    node_type: DialogueType = DialogueType.CONDITION
    condition: ConditionNodeInfo = field(default_factory=ConditionNodeInfo)


@dataclass
class MiniGameNode(DialogueNode):
    """A mini-game interlude."""

    node_type: DialogueType = DialogueType.MINI_GAME
    minigame_type: MiniGameType = MiniGameType.NONE
    level: int = 1
    node_id_after_clear: str = ""