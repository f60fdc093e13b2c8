"""Base of the controllers that feed game state to widgets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .player_state import PlayerState


@dataclass
class PlayerController:
    """The local player's handles on the game, its progress and its HUD."""

    game_instance: Any = None
    player_state: PlayerState | None = None
    hud: Any = None


class WidgetController:
    """Connects widgets to a player controller."""

    def __init__(self, player_controller: PlayerController | None = None) -> None:
        self.player_controller = player_controller

    def set_player_controller(self, player_controller: PlayerController) -> None:
        self.player_controller = player_controller

    def init(self) -> None:
        """Prepare the controller; a player controller must be set first."""
        if self.player_controller is None:
            raise RuntimeError("set_player_controller must be called before init")

    @property
    def game_instance(self) -> Any:
        return None if self.player_controller is None else self.player_controller.game_instance

    @property
    def player_state(self) -> PlayerState | None:
        return None if self.player_controller is None else self.player_controller.player_state

    def _require_game(self) -> Any:
        game = self.game_instance
        if game is None:
            raise RuntimeError("no game instance is available to this controller")
        return game