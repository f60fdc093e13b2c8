"""Save data and its storage as JSON files, one per slot."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .types import DialogueCutScene, DialogueSpeed, enum_from_name

META_SLOT_NAME = "MetaSlot"


@dataclass
class SaveGame:
    """Everything stored in one slot: meta settings and per-slot progress."""

    slot_name: str = ""
    seen_cut_scenes: set[DialogueCutScene] = field(default_factory=set)
    dialogue_play_speed: DialogueSpeed = DialogueSpeed.NORMAL
    skip_dialogue_speed: DialogueSpeed = DialogueSpeed.SLOW
    auto_mode_speed: DialogueSpeed = DialogueSpeed.NORMAL
    master_volume: float = 1.0
    bgm_volume: float = 1.0
    sfx_volume: float = 1.0
    ui_volume: float = 1.0
    chapter_name: str = ""
    node_name: str = ""
    selected_node_ids: set[str] = field(default_factory=set)
    character_affection_map: dict[str, int] = field(default_factory=dict)
    saved_time: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "slot_name": self.slot_name,
            "seen_cut_scenes": sorted(scene.label for scene in self.seen_cut_scenes),
            "dialogue_play_speed": self.dialogue_play_speed.label,
            "skip_dialogue_speed": self.skip_dialogue_speed.label,
            "auto_mode_speed": self.auto_mode_speed.label,
            "master_volume": self.master_volume,
            "bgm_volume": self.bgm_volume,
            "sfx_volume": self.sfx_volume,
            "ui_volume": self.ui_volume,
            "chapter_name": self.chapter_name,
            "node_name": self.node_name,
            "selected_node_ids": sorted(self.selected_node_ids),
            "character_affection_map": dict(self.character_affection_map),
            "saved_time": self.saved_time,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SaveGame:
        default = cls()

        def speed(key: str) -> DialogueSpeed:
            if key not in data:
                return getattr(default, key)
            return enum_from_name(DialogueSpeed, str(data[key]))

        def volume(key: str) -> float:
            return float(data.get(key, getattr(default, key)))

        return cls(
            slot_name=str(data.get("slot_name", "")),
            seen_cut_scenes={
                enum_from_name(DialogueCutScene, str(name))
                for name in data.get("seen_cut_scenes", [])
            },
            dialogue_play_speed=speed("dialogue_play_speed"),
            skip_dialogue_speed=speed("skip_dialogue_speed"),
            auto_mode_speed=speed("auto_mode_speed"),
            master_volume=volume("master_volume"),
            bgm_volume=volume("bgm_volume"),
            sfx_volume=volume("sfx_volume"),
            ui_volume=volume("ui_volume"),
            chapter_name=str(data.get("chapter_name", "")),
            node_name=str(data.get("node_name", "")),
            selected_node_ids={str(n) for n in data.get("selected_node_ids", [])},
            character_affection_map={
                str(k): int(v) for k, v in dict(data.get("character_affection_map", {})).items()
            },
            saved_time=str(data.get("saved_time", "")),
        )


@dataclass
class SaveGameDataParams:
    """Progress handed to the save manager when writing a slot."""

    chapter_name: str = ""
    node_name: str = ""
    selected_node_ids: set[str] = field(default_factory=set)
    character_affection_map: dict[str, int] = field(default_factory=dict)
    saved_time: str = ""


class SaveManager:
    """Keeps the meta save in memory and reads and writes slot files under ``save_dir``."""

    def __init__(self, save_dir: str | Path) -> None:
        self.save_dir = Path(save_dir)
        self.meta_save_game: SaveGame | None = None

    def init(self) -> None:
        self.load_meta_data()

    def _path(self, slot_name: str, slot_index: int) -> Path:
        return self.save_dir / f"{slot_name}_{slot_index}.json"

    def _write(self, game: SaveGame, slot_name: str, slot_index: int) -> None:
        self.save_dir.mkdir(parents=True, exist_ok=True)
        self._path(slot_name, slot_index).write_text(
            json.dumps(game.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8"
        )

    def _read(self, slot_name: str, slot_index: int) -> SaveGame:
        text = self._path(slot_name, slot_index).read_text(encoding="utf-8")
        return SaveGame.from_dict(json.loads(text))

    def exists(self, slot_name: str, slot_index: int) -> bool:
        return self._path(slot_name, slot_index).is_file()

    def load_meta_data(self) -> SaveGame:
        """Load the meta slot, or start a fresh one if it was never saved."""
        if self.exists(META_SLOT_NAME, 0):
            self.meta_save_game = self._read(META_SLOT_NAME, 0)
        else:
            self.meta_save_game = SaveGame()
        return self.meta_save_game

    def _meta(self) -> SaveGame:
        return self.meta_save_game if self.meta_save_game is not None else self.load_meta_data()

    def save_sound_volume(self, master: float, sfx: float, bgm: float, ui: float) -> None:
        meta = self._meta()
        meta.master_volume = master
        meta.sfx_volume = sfx
        meta.bgm_volume = bgm
        meta.ui_volume = ui
        self._write(meta, META_SLOT_NAME, 0)

    def save_dialogue_speed(
        self, play_speed: DialogueSpeed, skip_speed: DialogueSpeed, auto_speed: DialogueSpeed
    ) -> None:
        meta = self._meta()
        meta.dialogue_play_speed = play_speed
        meta.skip_dialogue_speed = skip_speed
        meta.auto_mode_speed = auto_speed
        self._write(meta, META_SLOT_NAME, 0)

    def save_slot(self, slot_name: str, slot_index: int, params: SaveGameDataParams) -> None:
        game = SaveGame(
            slot_name=slot_name,
            chapter_name=params.chapter_name,
            saved_time=params.saved_time,
            character_affection_map=dict(params.character_affection_map),
            node_name=params.node_name,
            selected_node_ids=set(params.selected_node_ids),
        )
        self._write(game, slot_name, slot_index)

    def load_slot(self, slot_name: str, slot_index: int) -> SaveGame | None:
        """The saved slot, or None if nothing was saved there."""
        if self.exists(slot_name, slot_index):
            return self._read(slot_name, slot_index)
        return None