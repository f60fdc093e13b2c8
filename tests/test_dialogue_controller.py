from dataclasses import dataclass
from datetime import datetime

import pytest

from vnstory.dialogue_controller import (
    BackLogEntry,
    DialogueController,
    Event,
    LoadSlotInfo,
    NodeType,
)
from vnstory.dialogue_info import CharacterVisual, DialogueInfo, MiniGameMapInfo
from vnstory.graph import DialogueGraph
from vnstory.manager import DialogueManager
from vnstory.player_state import PlayerState
from vnstory.save import SaveManager
from vnstory.sound import SoundManager
from vnstory.types import (
    DialogueBGM,
    DialogueCutScene,
    DialogueExpression,
    DialogueSpeed,
    MiniGameType,
)
from vnstory.widget_controller import PlayerController

SCRIPT = {
    "meta": {"chapterName": "Chapter 1"},
    "nodes": [
        {
            "id": "n1",
            "type": "dialogue",
            "speakerId": "alice",
            "dialogue": "Hello",
            "nextNodeId": "c1",
            "BGImage": "None",
            "BGM": "Stop",
            "soundEffect": "Stop",
            "cutScene": "None",
            "characterSettings": [
                {"characterId": "alice", "expression": "Happy", "position": "Left"}
            ],
        },
        {
            "id": "c1",
            "type": "choice",
            "choices": [
                {
                    "requiredNodes": [],
                    "requiredAffection": 0,
                    "choiceText": "Hi",
                    "affectionGain": 5,
                    "relatedCharacterId": "alice",
                    "nextNodeId": "n2",
                },
                {
                    "requiredNodes": ["hidden"],
                    "requiredAffection": 10,
                    "choiceText": "Psst",
                    "affectionGain": 1,
                    "relatedCharacterId": "alice",
                    "nextNodeId": "n3",
                },
            ],
        },
        {
            "id": "cond",
            "type": "condition",
            "requiredNodes": [],
            "requiredAffection": 5,
            "relatedCharacterId": "alice",
            "trueNodeId": "n2",
            "falseNodeId": "n3",
        },
        {
            "id": "n2",
            "type": "dialogue",
            "speakerId": "alice",
            "dialogue": "Welcome back",
            "nextNodeId": "end",
            "BGImage": "None",
            "BGM": "Main",
            "soundEffect": "Stop",
            "cutScene": "Test",
            "characterSettings": [
                {"characterId": "alice", "expression": "Sad", "position": "Center"}
            ],
        },
        {
            "id": "n3",
            "type": "dialogue",
            "speakerId": "alice",
            "dialogue": "Maybe later",
            "nextNodeId": "end",
            "BGImage": "None",
            "BGM": "Stop",
            "soundEffect": "Stop",
            "cutScene": "None",
            "characterSettings": [],
        },
        {
            "id": "mg",
            "type": "miniGame",
            "miniGameType": "Combat",
            "level": 2,
            "nodeIdAfterClear": "n2",
        },
    ],
}


@dataclass
class Game:
    dialogue_manager: DialogueManager
    sound_manager: SoundManager
    save_manager: SaveManager


@pytest.fixture
def game(tmp_path):
    info = DialogueInfo(
        visuals=[
            CharacterVisual(
                "alice",
                "Alice",
                {DialogueExpression.HAPPY: "alice_happy.png", DialogueExpression.SAD: "alice_sad.png"},
            )
        ],
        bgm={DialogueBGM.MAIN: "main.ogg"},
        cut_scenes={DialogueCutScene.TEST: "cut.png"},
        minigames=[MiniGameMapInfo(MiniGameType.COMBAT, 2, "arena")],
    )
    manager = DialogueManager(info=info)
    manager.graph = DialogueGraph()
    manager.graph.load_data(SCRIPT)
    save_manager = SaveManager(tmp_path)
    save_manager.init()
    return Game(manager, SoundManager(), save_manager)


def make_controller(game, dialogue_id="n1", state=None, **kwargs):
    pc = PlayerController(game_instance=game, player_state=state if state is not None else PlayerState())
    controller = DialogueController(pc, dialogue_id=dialogue_id, **kwargs)
    controller.init()
    return controller


def test_event_calls_handlers_in_order():
    event = Event()
    calls = []
    event.subscribe(lambda x: calls.append(("a", x)))
    event.subscribe(lambda x: calls.append(("b", x)))
    event.broadcast(7)
    assert calls == [("a", 7), ("b", 7)]


def test_text_node_is_broadcast_and_advances(game):
    controller = make_controller(game)
    received = []
    controller.text_dialogue_received.subscribe(received.append)
    controller.broadcast_dialogue()
    assert len(received) == 1
    assert received[0].dialogue_text == "Hello"
    assert received[0].speaker_name == "Alice"
    assert received[0].character_settings[0].is_speaking
    assert controller.dialogue_id == "c1"
    assert controller.last_dialogue_id == "c1"
    assert controller.chapter_name == "Chapter 1"
    assert controller.back_log == [BackLogEntry(NodeType.DIALOGUE, "Alice", "Hello")]


def test_choice_conditions_are_evaluated(game):
    controller = make_controller(game, "c1")
    received = []
    controller.choice_received.subscribe(received.append)
    controller.broadcast_dialogue()
    choices = received[0]
    assert [c.choice_text for c in choices] == ["Hi", "Psst"]
    assert [c.is_condition_met for c in choices] == [True, False]


@pytest.mark.parametrize("affection, expected", [(5, "Welcome back"), (4, "Maybe later")])
def test_condition_node_branches(game, affection, expected):
    state = PlayerState()
    state.set_affection("alice", affection)
    controller = make_controller(game, "cond", state)
    received = []
    controller.text_dialogue_received.subscribe(received.append)
    controller.broadcast_dialogue()
    assert [info.dialogue_text for info in received] == [expected]


def test_choice_click_records_progress(game):
    state = PlayerState()
    controller = make_controller(game, "c1", state)
    controller.on_choice_clicked("n2", "Hi", "alice", 5)
    assert state.affection("alice") == 5
    assert state.selected_node_ids == {"n2"}
    assert controller.dialogue_id == "end"
    assert controller.back_log[0] == BackLogEntry(NodeType.CHOICE, "", "Hi")
    assert controller.back_log[1].log == "Welcome back"


def test_choice_click_without_character_keeps_affection(game):
    state = PlayerState()
    controller = make_controller(game, "c1", state)
    controller.on_choice_clicked("n3", "Later", "", 5)
    assert state.affection_map == {}
    assert state.selected_node_ids == {"n3"}


def test_choice_click_without_player_state_does_nothing(game):
    controller = DialogueController(PlayerController(game_instance=game), dialogue_id="c1")
    controller.on_choice_clicked("n2", "Hi", "alice", 5)
    assert controller.dialogue_id == "c1"
    assert controller.back_log == []


def test_cut_scene_is_recorded_and_music_starts(game):
    state = PlayerState()
    controller = make_controller(game, "n2", state)
    controller.broadcast_dialogue()
    assert state.seen_cut_scenes == {DialogueCutScene.TEST}
    game.sound_manager.backend.advance(game.sound_manager.fade_out_time)
    assert game.sound_manager.bgm_channel.sound == "main.ogg"


def test_minigame_node_is_broadcast(game):
    controller = make_controller(game, "mg")
    received = []
    controller.minigame_received.subscribe(received.append)
    controller.broadcast_dialogue()
    assert received[0].minigame_map == "arena"
    assert received[0].node_id_after_clear == "n2"


def test_unknown_node_broadcasts_nothing(game):
    controller = make_controller(game, "nowhere")
    received = []
    controller.text_dialogue_received.subscribe(received.append)
    controller.choice_received.subscribe(received.append)
    controller.broadcast_dialogue()
    assert received == []
    assert controller.dialogue_id == "nowhere"


def test_back_log_overwrites_oldest_when_full(game):
    controller = make_controller(game, back_log_size=3)
    for text in ["a", "b", "c", "d", "e"]:
        controller.add_to_back_log(NodeType.DIALOGUE, "x", text)
    assert [entry.log for entry in controller.back_log] == ["d", "e", "c"]


def test_is_condition_satisfied(game):
    state = PlayerState()
    controller = make_controller(game, state=state)
    assert controller.is_condition_satisfied("alice", 0, set())
    assert not controller.is_condition_satisfied("alice", 3, set())
    state.set_affection("alice", 3)
    assert controller.is_condition_satisfied("alice", 3, set())
    assert not controller.is_condition_satisfied("alice", 3, {"n2"})
    state.add_selected_node("n2")
    assert controller.is_condition_satisfied("alice", 3, {"n2"})


def test_current_time_text_format(game):
    controller = make_controller(game)
    text = controller.current_time_text(datetime(2025, 3, 7, 9, 5, 1))
    assert text == "2025년 03월 07일 09시 05분 01초"


def test_save_and_read_slot(game):
    state = PlayerState()
    state.set_affection("alice", 2)
    controller = make_controller(game, state=state)
    controller.broadcast_dialogue()
    assert controller.save_to_slot("Slot", 1)
    info = controller.slot_ui_info("Slot", 1)
    assert info.chapter_name == "Chapter 1"
    assert info.saved_time.endswith("초")
    saved = game.save_manager.load_slot("Slot", 1)
    assert saved.node_name == "c1"
    assert saved.character_affection_map == {"alice": 2}


def test_empty_slot_shows_no_record(game):
    controller = make_controller(game)
    assert controller.slot_ui_info("Empty", 0) == LoadSlotInfo(saved_time="", chapter_name="기록 없음")


def test_save_without_player_state_fails(game):
    controller = DialogueController(PlayerController(game_instance=game))
    assert controller.save_to_slot("Slot", 0) is False
    assert game.save_manager.load_slot("Slot", 0) is None


def test_speed_settings_round_trip(game):
    controller = make_controller(game)
    controller.dialogue_play_speed = DialogueSpeed.FAST
    controller.skip_dialogue_speed = DialogueSpeed.NORMAL
    controller.save_speed_data()
    fresh = DialogueController(PlayerController(game_instance=game, player_state=PlayerState()))
    assert fresh.dialogue_play_speed is DialogueSpeed.NORMAL
    fresh.init()
    assert fresh.dialogue_play_speed is DialogueSpeed.FAST
    assert fresh.skip_dialogue_speed is DialogueSpeed.NORMAL
    assert fresh.auto_mode_play_speed is DialogueSpeed.NORMAL


def test_init_without_game_instance_raises():
    controller = DialogueController(PlayerController())
    with pytest.raises(RuntimeError):
        controller.init()