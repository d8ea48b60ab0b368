import json

import pytest

from tmap_lib import schema
from tmap_lib import value_tree as vt
from tmap_lib.assembler import MapAssembler
from tmap_lib.errors import OutOfOrderExtension


@pytest.fixture
def map_data(make_grid, colors):
    c = colors
    rows = [
        [c["GRAVITY_REGION"], c["RESPAWN_REGION"], c["BLIMP"], c["GRAVITY_REGION"]],
        [c["DIG_REGION"], c["GEM_BANK"], c["TROPHY"], c["WALL"]],
        [c["DIG_REGION"], c["DIG_REGION"], c["METAL_WALL"], c["IGNORE"]],
    ]
    return MapAssembler().assemble(make_grid(rows), 7, 8, 9)


def test_top_level_keys_are_emitted_alphabetically(map_data):
    text = schema.dumps(map_data)
    keys = list(json.loads(text))
    assert keys == sorted(keys)
    assert set(keys) == {
        "width",
        "height",
        "numRoundRocks",
        "numSquareRocks",
        "numGems",
        "gravRegion",
        "digRegion",
        "spawnPoints",
        "items",
    }


def test_generic_parser_recovers_structure(map_data):
    parsed = json.loads(schema.dumps(map_data))
    assert parsed == vt.to_python(map_data.to_value_tree())
    assert parsed["numRoundRocks"] == 7
    assert parsed["numSquareRocks"] == 8
    assert parsed["numGems"] == 9
    assert parsed["spawnPoints"] == [{"x": 64, "y": 0}]
    assert [i["type"] for i in parsed["items"]] == [
        "BLIMP",
        "GEM_BANK",
        "TROPHY",
        "WALL",
        "METAL_WALL",
    ]


def test_loads_restores_map_data(map_data):
    assert schema.loads(schema.dumps(map_data)) == map_data


def test_save_and_load_json(tmp_path, map_data):
    path = tmp_path / "level.json"
    schema.save_json(map_data, str(path))
    assert path.read_text(encoding="utf-8").endswith("\n")
    assert schema.load_json(str(path)) == map_data


def test_loads_validates_regions(map_data):
    data = json.loads(schema.dumps(map_data))
    data["digRegion"] = [[{"a": 2, "b": 3}, {"a": 0, "b": 1}]]
    with pytest.raises(OutOfOrderExtension):
        schema.loads(json.dumps(data))


def test_item_record_value_tree():
    record = schema.ItemRecord(type="WALL", x=128, y=64)
    assert vt.serialize(record.to_value_tree()) == '{"type":"WALL","x":128,"y":64}'
