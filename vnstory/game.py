"""The game instance, the dialogue HUD and its widget."""

from __future__ import annotations

from typing import Any

from .dialogue_controller import DialogueController, Event
from .manager import DialogueManager
from .save import SaveManager
from .settings_controller import SettingsController
from .sound import SoundManager
from .widget_controller import PlayerController


class GameInstance:
    """Owns the managers that live for the whole session."""

    def __init__(
        self,
        dialogue_manager: DialogueManager | None,
        sound_manager: SoundManager | None,
        save_manager: SaveManager | None,
    ) -> None:
        self.dialogue_manager = dialogue_manager
        self.sound_manager = sound_manager
        self.save_manager = save_manager
        self.mix: dict[str, float] = {}

    def init(self) -> None:
        """Load the dialogue scripts and the meta save."""
        if self.dialogue_manager is None or self.sound_manager is None:
            raise RuntimeError("dialogue and sound managers must be provided")
        if self.save_manager is None:
            raise RuntimeError("a save manager must be provided")
        self.dialogue_manager.init()
        self.save_manager.init()

    def on_start(self) -> dict[str, float]:
        """Apply the saved volumes as the base sound mix."""
        self.mix = self.sound_mix()
        return self.mix

    def sound_mix(self) -> dict[str, float]:
        """Volume of each sound class as stored in the meta save."""
        if self.save_manager is None:
            raise RuntimeError("a save manager must be provided")
        meta = self.save_manager.meta_save_game
        if meta is None:
            meta = self.save_manager.load_meta_data()
        return {
            "master": meta.master_volume,
            "bgm": meta.bgm_volume,
            "sfx": meta.sfx_volume,
            "ui": meta.ui_volume,
        }


class DialogueWidget:
    """The on-screen dialogue view, bound to one controller."""

    def __init__(self) -> None:
        self.widget_controller: Any = None
        self.controller_set = Event()

    def set_widget_controller(self, controller: Any) -> None:
        if controller is None:
            raise ValueError("a widget controller is required")
        self.widget_controller = controller
        self.controller_set.broadcast(controller)


class DialogueHUD:
    """Creates the dialogue widget and the controllers that feed it."""

    def __init__(self, player_controller: PlayerController) -> None:
        self.player_controller = player_controller
        self.widget: DialogueWidget | None = None
        self.viewport: list[DialogueWidget] = []
        self._dialogue_controller: DialogueController | None = None
        self._settings_controller: SettingsController | None = None
        if player_controller is not None and player_controller.hud is None:
            player_controller.hud = self

    def begin_play(self) -> None:
        """Show the dialogue widget bound to the dialogue controller."""
        if self.widget is None:
            self.widget = DialogueWidget()
        controller = self.dialogue_controller()
        self.widget.set_widget_controller(controller)
        if self.widget not in self.viewport:
            self.viewport.append(self.widget)

    def dialogue_controller(self) -> DialogueController:
        if self._dialogue_controller is None:
            controller = DialogueController()
            controller.set_player_controller(self.player_controller)
            controller.init()
            self._dialogue_controller = controller
        return self._dialogue_controller

    def settings_controller(self) -> SettingsController:
        if self._settings_controller is None:
            controller = SettingsController()
            controller.set_player_controller(self.player_controller)
            self._settings_controller = controller
        return self._settings_controller


def _resolve_hud(hud: Any) -> DialogueHUD | None:
    if isinstance(hud, PlayerController):
        hud = hud.hud
    return hud if isinstance(hud, DialogueHUD) else None


def get_settings_controller(hud: Any) -> SettingsController | None:
    """The settings controller of a HUD (or a player controller's HUD), else None."""
    resolved = _resolve_hud(hud)
    return resolved.settings_controller() if resolved is not None else None


def get_dialogue_controller(hud: Any) -> DialogueController | None:
    """The dialogue controller of a HUD (or a player controller's HUD), else None."""
    resolved = _resolve_hud(hud)
    return resolved.dialogue_controller() if resolved is not None else None