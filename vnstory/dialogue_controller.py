"""Drives the dialogue: walks the graph, tracks history and feeds the UI."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .manager import DialogueManager
from .save import SaveGameDataParams
from .types import (
    ChoiceNodeInfo,
    DialogueCutScene,
    DialogueSpeed,
    DialogueType,
    MiniGameNodeInfo,
    TextDialogueInfo,
)
from .widget_controller import PlayerController, WidgetController

log = logging.getLogger(__name__)

NO_RECORD = "기록 없음"


class Event:
    """A multicast callback list."""

    def __init__(self) -> None:
        self._handlers: list[Callable[..., Any]] = []

    def subscribe(self, handler: Callable[..., Any]) -> Callable[..., Any]:
        self._handlers.append(handler)
        return handler

    def broadcast(self, *args: Any) -> None:
        for handler in list(self._handlers):
            handler(*args)


class NodeType(enum.Enum):
    DIALOGUE = 0
    CHOICE = 1


@dataclass
class BackLogEntry:
    """One line of the dialogue history."""

    node_type: NodeType = NodeType.DIALOGUE
    character_name: str = ""
    log: str = ""


@dataclass
class LoadSlotInfo:
    """What a save slot shows in the load menu."""

    saved_time: str = ""
    chapter_name: str = NO_RECORD


def _is_none_name(name: str) -> bool:
    return not name or name.casefold() == "none"


class DialogueController(WidgetController):
    """Advances through dialogue nodes and announces each one to the widgets."""

    def __init__(
        self,
        player_controller: PlayerController | None = None,
        dialogue_id: str = "",
        back_log_size: int = 50,
    ) -> None:
        super().__init__(player_controller)
        self.dialogue_id = dialogue_id
        self.dialogue_play_speed = DialogueSpeed.NORMAL
        self.skip_dialogue_speed = DialogueSpeed.SLOW
        self.auto_mode_play_speed = DialogueSpeed.NORMAL
        self.back_log_size = back_log_size
        self.text_dialogue_received = Event()
        self.choice_received = Event()
        self.minigame_received = Event()
        self.dialogue_manager: DialogueManager | None = None
        self.chapter_name = ""
        self.last_dialogue_id = ""
        self._back_log: list[BackLogEntry] = []
        self._back_log_head = 0

    @property
    def back_log(self) -> list[BackLogEntry]:
        """The history buffer in storage order; once full, the oldest slot is overwritten."""
        return list(self._back_log)

    def init(self) -> None:
        super().init()
        self.load_speed_data()

    def _manager(self) -> DialogueManager:
        if self.dialogue_manager is None:
            self.dialogue_manager = self._require_game().dialogue_manager
        return self.dialogue_manager

    def broadcast_dialogue(self) -> None:
        """Present the current node, following condition nodes to their target."""
        manager = self._manager()
        while True:
            kind = manager.dialogue_type(self.dialogue_id)
            if kind is DialogueType.DIALOGUE:
                self._handle_text(manager)
            elif kind is DialogueType.CHOICE:
                self._handle_choice(manager)
            elif kind is DialogueType.CONDITION:
                if self._follow_condition(manager):
                    continue
            elif kind is DialogueType.MINI_GAME:
                self._handle_minigame(manager)
            return

    def on_choice_clicked(
        self,
        next_node_id: str,
        chosen_text: str,
        related_character_id: str = "",
        affection_gain: int = 0,
    ) -> None:
        """Record the player's choice and move on to the node it leads to."""
        state = self.player_state
        if state is None:
            log.error("No player state to record the choice in")
            return
        if not _is_none_name(related_character_id) and affection_gain != 0:
            state.add_affection(related_character_id, affection_gain)
        state.add_selected_node(next_node_id)
        self.add_to_back_log(NodeType.CHOICE, "", chosen_text)
        self.dialogue_id = next_node_id
        self.broadcast_dialogue()

    def load_speed_data(self) -> None:
        save_manager = getattr(self._require_game(), "save_manager", None)
        if save_manager is None:
            return
        meta = save_manager.load_meta_data()
        if meta is not None:
            self.dialogue_play_speed = meta.dialogue_play_speed
            self.skip_dialogue_speed = meta.skip_dialogue_speed
            self.auto_mode_play_speed = meta.auto_mode_speed

    def save_speed_data(self) -> None:
        save_manager = getattr(self._require_game(), "save_manager", None)
        if save_manager is not None:
            save_manager.save_dialogue_speed(
                self.dialogue_play_speed, self.skip_dialogue_speed, self.auto_mode_play_speed
            )

    def slot_ui_info(self, slot_name: str, slot_index: int) -> LoadSlotInfo:
        """Chapter and time of a saved slot, or the 'no record' entry."""
        if self.player_controller is None:
            raise RuntimeError("no player controller is set")
        game = self.game_instance
        save_manager = getattr(game, "save_manager", None) if game is not None else None
        if save_manager is not None:
            loaded = save_manager.load_slot(slot_name, slot_index)
            if loaded is not None:
                return LoadSlotInfo(saved_time=loaded.saved_time, chapter_name=loaded.chapter_name)
        return LoadSlotInfo()

    def save_to_slot(self, slot_name: str, slot_index: int) -> bool:
        """Write the current progress to a slot; False if there is nothing to save with."""
        if self.player_controller is None:
            raise RuntimeError("no player controller is set")
        state = self.player_state
        game = self.game_instance
        if state is None or game is None:
            return False
        save_manager = getattr(game, "save_manager", None)
        if save_manager is None:
            return False
        params = SaveGameDataParams(
            chapter_name=self.chapter_name,
            node_name=self.last_dialogue_id,
            saved_time=self.current_time_text(),
            character_affection_map=dict(state.affection_map),
            selected_node_ids=set(state.selected_node_ids),
        )
        save_manager.save_slot(slot_name, slot_index, params)
        return True

    def is_condition_satisfied(
        self, related_character_id: str, required_affection: int, required_nodes: Iterable[str]
    ) -> bool:
        state = self.player_state
        if state is None:
            log.error("No player state to check the condition against")
            return False
        if required_affection != 0 and state.affection(related_character_id) < required_affection:
            return False
        return all(node in state.selected_node_ids for node in required_nodes)

    def add_to_back_log(self, node_type: NodeType, character_name: str, text: str) -> None:
        entry = BackLogEntry(node_type, character_name, text)
        if len(self._back_log) < self.back_log_size:
            self._back_log.append(entry)
        else:
            self._back_log[self._back_log_head] = entry
            self._back_log_head = (self._back_log_head + 1) % self.back_log_size

    def current_time_text(self, now: datetime | None = None) -> str:
        now = now if now is not None else datetime.now()
        return (
            f"{now.year}년 {now.month:02d}월 {now.day:02d}일 "
            f"{now.hour:02d}시 {now.minute:02d}분 {now.second:02d}초"
        )

    def _handle_text(self, manager: DialogueManager) -> None:
        info: TextDialogueInfo = manager.text_dialogue_info(self.dialogue_id)
        self.add_to_back_log(NodeType.DIALOGUE, info.speaker_name, info.dialogue_text)
        if info.is_valid:
            self.dialogue_id = info.next_node_id
            self.text_dialogue_received.broadcast(info)
            self.last_dialogue_id = self.dialogue_id
            self.chapter_name = info.chapter_name

        if info.play_bgm:
            self._play_bgm(info.bgm)
        else:
            self._sound_call("stop_bgm")
        if info.play_sfx:
            self._play_sfx(info.sound_effect)
        else:
            self._sound_call("stop_sfx")

        if info.cut_scene_enum is not DialogueCutScene.NONE:
            state = self.player_state
            if state is None:
                log.error("No player state to record the cut scene in")
                return
            state.add_seen_cut_scene(info.cut_scene_enum)

    def _handle_choice(self, manager: DialogueManager) -> None:
        choices: list[ChoiceNodeInfo] = manager.choice_infos(self.dialogue_id)
        if not choices:
            return
        for choice in choices:
            choice.is_condition_met = self.is_condition_satisfied(
                choice.related_character_id, choice.required_affection, choice.required_nodes
            )
        self.choice_received.broadcast(choices)

    def _follow_condition(self, manager: DialogueManager) -> bool:
        condition = manager.condition_info(self.dialogue_id)
        if not condition.is_valid:
            return False
        satisfied = self.is_condition_satisfied(
            condition.related_character_id, condition.required_affection, condition.required_nodes
        )
        self.dialogue_id = condition.true_node_id if satisfied else condition.false_node_id
        return True

    def _handle_minigame(self, manager: DialogueManager) -> None:
        info: MiniGameNodeInfo = manager.minigame_info(self.dialogue_id)
        if info.is_valid:
            self.minigame_received.broadcast(info)

    def _sound_manager(self) -> Any:
        return getattr(self._require_game(), "sound_manager", None)

    def _play_bgm(self, sound: Any) -> None:
        if not sound:
            return
        self._sound_call("play_bgm", sound)

    def _play_sfx(self, sound: Any) -> None:
        if not sound:
            return
        self._sound_call("play_sfx", sound)

    def _sound_call(self, method: str, *args: Any) -> None:
        sound_manager = self._sound_manager()
        if sound_manager is not None:
            getattr(sound_manager, method)(*args)