"""Controller behind the sound settings screen."""

from __future__ import annotations

from .widget_controller import PlayerController, WidgetController


class SettingsController(WidgetController):
    """Holds the volume sliders' values and keeps them in the meta save."""

    def __init__(self, player_controller: PlayerController | None = None) -> None:
        super().__init__(player_controller)
        self.master_volume = 1.0
        self.bgm_volume = 1.0
        self.sfx_volume = 1.0
        self.ui_volume = 1.0

    def load_sound_data(self) -> None:
        """Reload the meta save and take the stored volumes from it."""
        save_manager = self._require_game().save_manager
        meta = save_manager.load_meta_data()
        if meta is not None:
            self.master_volume = meta.master_volume
            self.bgm_volume = meta.bgm_volume
            self.sfx_volume = meta.sfx_volume
            self.ui_volume = meta.ui_volume

    def save_sound_data(self) -> None:
        """Write the current volumes to the meta save."""
        save_manager = getattr(self._require_game(), "save_manager", None)
        if save_manager is not None:
            save_manager.save_sound_volume(
                self.master_volume, self.sfx_volume, self.bgm_volume, self.ui_volume
            )