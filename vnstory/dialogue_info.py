"""Lookup tables that map dialogue ids and enums to concrete assets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .types import (
    DialogueBGImage,
    DialogueBGM,
    DialogueCutScene,
    DialogueExpression,
    DialogueSFX,
    MiniGameType,
)


@dataclass
class CharacterVisual:
    """A character's display name and its image for each expression."""

    character_id: str = ""
    name: str = ""
    expressions: dict[DialogueExpression, Any] = field(default_factory=dict)


@dataclass
class MiniGameMapInfo:
    """The map used for one mini-game type at one level."""

    minigame_type: MiniGameType = MiniGameType.NONE
    level: int = 1
    map: Any = None


@dataclass
class DialogueInfo:
    """Asset tables consulted when presenting dialogue nodes."""

    visuals: list[CharacterVisual] = field(default_factory=list)
    sfx: dict[DialogueSFX, Any] = field(default_factory=dict)
    bgm: dict[DialogueBGM, Any] = field(default_factory=dict)
    background_images: dict[DialogueBGImage, Any] = field(default_factory=dict)
    cut_scenes: dict[DialogueCutScene, Any] = field(default_factory=dict)
    minigames: list[MiniGameMapInfo] = field(default_factory=list)

    def _visual(self, character_id: str) -> CharacterVisual | None:
        return next((v for v in self.visuals if v.character_id == character_id), None)

    def find_character_name(self, character_id: str) -> str:
        visual = self._visual(character_id)
        return visual.name if visual else ""

    def find_character_texture(self, character_id: str, expression: DialogueExpression) -> Any:
        """Image of a known character; KeyError if that expression has none."""
        visual = self._visual(character_id)
        return visual.expressions[expression] if visual else None

    def find_sfx(self, sound_effect: DialogueSFX) -> Any:
        return None if sound_effect is DialogueSFX.NONE else self.sfx[sound_effect]

    def find_bgm(self, bgm: DialogueBGM) -> Any:
        return None if bgm is DialogueBGM.NONE else self.bgm[bgm]

    def find_background_image(self, image: DialogueBGImage) -> Any:
        return None if image is DialogueBGImage.NONE else self.background_images[image]

    def find_cut_scene(self, cut_scene: DialogueCutScene) -> Any:
        return None if cut_scene is DialogueCutScene.NONE else self.cut_scenes[cut_scene]

    def find_minigame_world(self, minigame_type: MiniGameType, level: int) -> Any:
        if minigame_type is MiniGameType.NONE:
            return None
        return next(
            (
                info.map
                for info in self.minigames
                if info.minigame_type is minigame_type and info.level == level
            ),
            None,
        )