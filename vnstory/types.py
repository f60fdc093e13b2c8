"""Dialogue enumerations and the records passed between graph, manager and UI."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, TypeVar

log = logging.getLogger(__name__)


class _NamedEnum(enum.IntEnum):
    """Integer enum whose members also carry the CamelCase name used in data files."""

    @property
    def label(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


class DialogueType(_NamedEnum):
    NONE = 0
    DIALOGUE = 1
    CHOICE = 2
    CONDITION = 3
    MINI_GAME = 4


class DialoguePosition(_NamedEnum):
    NONE = 0
    CENTER = 1
    LEFT = 2
    RIGHT = 3


class DialogueExpression(_NamedEnum):
    NONE = 0
    NEUTRAL = 1
    HAPPY = 2
    ANGRY = 3
    SAD = 4
    SURPRISED = 5
    EMBARRASSED = 6


class DialogueSFX(_NamedEnum):
    NONE = 0
    STOP = 1


class DialogueBGM(_NamedEnum):
    NONE = 0
    STOP = 1
    TEST = 2
    MAIN = 3


class DialogueBGImage(_NamedEnum):
    NONE = 0
    SAME = 1
    TEST = 2
    STREET = 3
    SCHOOL = 4


class DialogueCutScene(_NamedEnum):
    NONE = 0
    TEST = 1


class MiniGameType(_NamedEnum):
    NONE = 0
    COMBAT = 1
    ROAD_CROSSING = 2
    OBSTACLE_COURSE = 3


class DialogueSpeed(_NamedEnum):
    SLOW = 0
    NORMAL = 1
    FAST = 2


E = TypeVar("E", bound=_NamedEnum)


def enum_from_name(enum_type: type[E], name: str) -> E:
    """Return the member of ``enum_type`` called ``name``.

    Names are matched case-insensitively against the CamelCase label and may
    carry a ``Type::`` prefix. An unknown name yields the member with value 0.
    """
    key = name.rpartition("::")[2].casefold()
    for member in enum_type:
        if member.label.casefold() == key:
            return member
    log.warning("'%s' is not a valid name for enum %s.", name, enum_type.__name__)
    return enum_type(0)


@dataclass
class CharacterSetting:
    """How one character is shown on a dialogue line."""

    position: DialoguePosition = DialoguePosition.NONE
    image: Any = None
    is_speaking: bool = False


@dataclass
class TextDialogueInfo:
    """Everything the UI needs to present one line of dialogue."""

    character_settings: list[CharacterSetting] = field(default_factory=list)
    speaker_name: str = ""
    dialogue_text: str = ""
    play_sfx: bool = False
    sound_effect: Any = None
    play_bgm: bool = False
    bgm: Any = None
    bg_image: Any = None
    cut_scene: Any = None
    cut_scene_enum: DialogueCutScene = DialogueCutScene.NONE
    next_node_id: str = ""
    chapter_name: str = ""
    is_valid: bool = True


@dataclass
class ChoiceNodeInfo:
    """One selectable option of a choice node."""

    required_nodes: set[str] = field(default_factory=set)
    required_affection: int = 0
    related_character_id: str = ""
    choice_text: str = ""
    affection_gain: int = 0
    next_node_id: str = ""
    is_condition_met: bool = True


@dataclass
class ConditionNodeInfo:
    """A branch taken on affection and previously selected nodes."""

    required_nodes: set[str] = field(default_factory=set)
    required_affection: int = 0
    related_character_id: str = ""
    true_node_id: str = ""
    false_node_id: str = ""
    is_valid: bool = True


@dataclass
class MiniGameNodeInfo:
    """The map to open for a mini-game and where to resume after it."""

    minigame_map: Any = None
    node_id_after_clear: str = ""
    is_valid: bool = True