"""Per-player story progress: affection, chosen nodes and seen cut scenes."""

from __future__ import annotations

from dataclasses import dataclass, field

from .types import DialogueCutScene


@dataclass
class PlayerState:
    """The player's relationship values and story history."""

    selected_node_ids: set[str] = field(default_factory=set)
    affection_map: dict[str, int] = field(default_factory=dict)
    seen_cut_scenes: set[DialogueCutScene] = field(default_factory=set)

    def affection(self, character_id: str) -> int:
        """Affection towards a character, 0 if none was recorded."""
        return self.affection_map.get(character_id, 0)

    def set_affection(self, character_id: str, value: int) -> None:
        self.affection_map[character_id] = value

    def add_affection(self, character_id: str, amount: int) -> None:
        self.affection_map[character_id] = self.affection_map.get(character_id, 0) + amount

    def add_selected_node(self, node_id: str) -> None:
        self.selected_node_ids.add(node_id)

    def add_seen_cut_scene(self, cut_scene: DialogueCutScene) -> None:
        self.seen_cut_scenes.add(cut_scene)