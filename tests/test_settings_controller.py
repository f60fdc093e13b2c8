import pytest

from vnstory.save import SaveManager
from vnstory.settings_controller import SettingsController
from vnstory.widget_controller import PlayerController


class _Game:
    def __init__(self, save_manager):
        self.save_manager = save_manager


def _controller(tmp_path):
    manager = SaveManager(tmp_path)
    manager.init()
    pc = PlayerController(game_instance=_Game(manager))
    return SettingsController(pc), manager


def test_defaults_are_full_volume():
    controller = SettingsController()
    assert (
        controller.master_volume,
        controller.bgm_volume,
        controller.sfx_volume,
        controller.ui_volume,
    ) == (1.0, 1.0, 1.0, 1.0)


def test_save_then_load_round_trip(tmp_path):
    controller, manager = _controller(tmp_path)
    controller.master_volume = 0.5
    controller.bgm_volume = 0.25
    controller.sfx_volume = 0.75
    controller.ui_volume = 0.1
    controller.save_sound_data()

    fresh_manager = SaveManager(tmp_path)
    fresh = SettingsController(PlayerController(game_instance=_Game(fresh_manager)))
    fresh.load_sound_data()
    assert fresh.master_volume == 0.5
    assert fresh.bgm_volume == 0.25
    assert fresh.sfx_volume == 0.75
    assert fresh.ui_volume == 0.1


def test_save_writes_meta_values(tmp_path):
    controller, manager = _controller(tmp_path)
    controller.sfx_volume = 0.3
    controller.bgm_volume = 0.6
    controller.save_sound_data()
    meta = manager.load_meta_data()
    assert meta.sfx_volume == 0.3
    assert meta.bgm_volume == 0.6


def test_load_without_saved_data_keeps_defaults(tmp_path):
    controller, _ = _controller(tmp_path)
    controller.master_volume = 0.2
    controller.load_sound_data()
    assert controller.master_volume == 1.0


def test_requires_game_instance():
    controller = SettingsController(PlayerController())
    with pytest.raises(RuntimeError):
        controller.load_sound_data()
    with pytest.raises(RuntimeError):
        controller.save_sound_data()