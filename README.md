# vnstory

This package is the engine-independent core of a visual novel. It provides:

- **`vnstory.graph.DialogueGraph`**: loads dialogue scripts from JSON into text, choice, condition and mini-game nodes.
- **`vnstory.dialogue_info.DialogueInfo`**: tables that map character ids and enum values to assets. The enum values cover backgrounds, BGM, sound effects, cut scenes, expressions and mini-game maps.
- **`vnstory.manager.DialogueManager`**: resolves a node id into the record a UI needs to present that node.
- **`vnstory.player_state.PlayerState`**: holds character affection, the nodes the player selected and the cut scenes already seen.
- **`vnstory.save.SaveManager`**: keeps a meta save (volumes, dialogue speeds) and numbered save slots as JSON files.
- **`vnstory.sound.SoundManager`**: plays one sound effect and one cross-faded music track through an `AudioBackend`.
- **`vnstory.dialogue_controller.DialogueController`** and **`vnstory.settings_controller.SettingsController`**: drive the story and the volume settings.
- **`vnstory.game`**: wires the managers, the HUD and the dialogue widget together.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Dialogue files

`DialogueGraph(base_dir).load_json(name)` reads `<base_dir>/Dialogue/<name>.json`. `load_data(data)` takes a script that has already been parsed.

A script holds a `meta` object and a list of `nodes`. Each node's `type` is one of:

- `dialogue`
- `choice`
- `condition`
- `miniGame`

Nodes of any other type are ignored. A node with the same `id` as an earlier one replaces it.

```json
{
  "meta": {"chapterName": "Chapter 1"},
  "nodes": [
    {
      "id": "start", "type": "dialogue", "nextNodeId": "pick",
      "speakerId": "hero", "dialogue": "Good morning.",
      "BGImage": "School", "BGM": "Main", "soundEffect": "None", "cutScene": "None",
      "characterSettings": [
        {"characterId": "hero", "expression": "Happy", "position": "Center"}
      ]
    },
    {
      "id": "pick", "type": "choice",
      "choices": [
        {"choiceText": "Wave", "requiredNodes": [], "requiredAffection": 0,
         "affectionGain": 5, "relatedCharacterId": "hero", "nextNodeId": "gate"}
      ]
    },
    {
      "id": "gate", "type": "condition", "requiredNodes": ["gate"],
      "requiredAffection": 5, "relatedCharacterId": "hero",
      "trueNodeId": "good", "falseNodeId": "bad"
    },
    {
      "id": "race", "type": "miniGame", "miniGameType": "RoadCrossing",
      "level": 1, "nodeIdAfterClear": "start"
    }
  ]
}
```

Enum names are matched without regard to case, and a `Type::` prefix is allowed. An unknown name is logged as a warning and becomes the enum's first member, which is usually `None`. `vnstory.types.enum_from_name` does this conversion.

## Usage

```python
from vnstory.dialogue_info import CharacterVisual, DialogueInfo
from vnstory.manager import DialogueManager
from vnstory.types import DialogueBGImage, DialogueBGM, DialogueExpression, DialogueType

info = DialogueInfo(
    visuals=[CharacterVisual("hero", "Hero", {DialogueExpression.HAPPY: "hero_happy.png"})],
    bgm={DialogueBGM.MAIN: "main_theme.ogg"},
    background_images={DialogueBGImage.SCHOOL: "school.png"},
)

manager = DialogueManager(["chapter1"], info, base_dir=".")   # reads ./Dialogue/chapter1.json
manager.init()

if manager.dialogue_type("start") is DialogueType.DIALOGUE:
    line = manager.text_dialogue_info("start")
    print(line.speaker_name, line.dialogue_text, line.next_node_id)
```

The `DialogueInfo` lookups raise `KeyError` when a script names an asset the tables lack. The exception is the `None` member, which always resolves to `None`. A character id with no visual also gives no name and no image.

### Manager results when a node is missing

- `text_dialogue_info`, `condition_info` and `minigame_info` return a record with `is_valid=False`.
- `choice_infos` returns an empty list.
- Asking for a node of the wrong kind raises `TypeError`.

### Music and sound effects

The `play_bgm` and `play_sfx` flags are set unless the node's music or effect is `Stop`.

### Driving a story

`DialogueController.broadcast_dialogue()` presents the node at `dialogue_id`.

- **Text nodes** are sent to `text_dialogue_received` subscribers and added to the back log. The controller then starts or stops music and effects, and records any cut scene in the player state.
- **Choice nodes** are sent to `choice_received`. Each choice has its `is_condition_met` filled in.
- **Condition nodes** are followed at once to their true or false target.
- **Mini-game nodes** are sent to `minigame_received`.

`on_choice_clicked(...)` records a choice and moves on:

1. It adds affection to the related character.
2. It marks the next node as selected.
3. It continues from that node.

The back log holds `back_log_size` entries (50 by default). Once it is full, the oldest slot is overwritten in place.

### Saving

`SaveManager(save_dir)` keeps one file per slot at `<save_dir>/<slot_name>_<index>.json`. The meta save is slot `MetaSlot`, index 0.

`DialogueController.save_to_slot` saves:

- the chapter
- the last node reached
- a timestamp such as `2025년 01월 02일 03시 04분 05초`
- the affection map
- the selected nodes

`slot_ui_info` reports a slot's chapter and saved time. An empty slot shows `기록 없음`.

### Putting it together

`vnstory.game.GameInstance` owns the dialogue, sound and save managers. `sound_mix()` reports the saved volume of each sound class.

`DialogueHUD(player_controller).begin_play()` does two things:

- it creates the dialogue controller and binds it to a `DialogueWidget`;
- it adds the widget to the HUD's `viewport` list.

`get_dialogue_controller` and `get_settings_controller` accept a HUD or a `PlayerController` whose `hud` is set.

## What it does not do

vnstory draws nothing and plays no real audio.

- **No display.** The widget, the HUD and its viewport are plain objects for a UI layer to read.
- **No real audio.** `AudioBackend` is a headless stand-in with a manual clock: fades and delayed starts happen only when `advance()` is called. Plug in a backend with the same methods to make sound.
- **No mini-game maps.** Mini-game nodes are announced, but no map is loaded.
- **No command-line program.**