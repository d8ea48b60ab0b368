import json

import pytest

from tmap_lib import value_tree as vt
from tmap_lib.errors import DuplicateKey


def test_object_keys_serialize_sorted():
    obj = vt.Object()
    obj.add("width", vt.Number(2))
    obj.add("b", vt.Number(1))
    obj.add("a", vt.String("x"))
    assert vt.serialize(obj) == '{"a":"x","b":1,"width":2}'


def test_array_preserves_insertion_order():
    arr = vt.Array()
    for n in (3, 1, 2):
        arr.append(vt.Number(n))
    assert vt.serialize(arr) == "[3,1,2]"


def test_empty_containers():
    assert vt.serialize(vt.Object()) == "{}"
    assert vt.serialize(vt.Array()) == "[]"


@pytest.mark.parametrize(
    "value, expected",
    [(0, "0"), (64, "64"), (-3, "-3"), (2.0, "2"), (0.5, "0.5")],
)
def test_number_rendering(value, expected):
    assert vt.serialize(vt.Number(value)) == expected


@pytest.mark.parametrize("value", [True, "1", None])
def test_number_rejects_non_numbers(value):
    with pytest.raises(TypeError):
        vt.Number(value)


def test_string_rendering():
    assert vt.serialize(vt.String("GEM_BANK")) == '"GEM_BANK"'
    assert json.loads(vt.serialize(vt.String('say "hi"'))) == 'say "hi"'


def test_duplicate_key_is_rejected():
    obj = vt.Object().add("a", vt.Number(1))
    with pytest.raises(DuplicateKey) as exc:
        obj.add("a", vt.Number(2))
    assert exc.value.key == "a"
    assert vt.serialize(obj) == '{"a":1}'


def test_node_cannot_join_two_parents():
    leaf = vt.Number(1)
    vt.Array().append(leaf)
    with pytest.raises(ValueError):
        vt.Object().add("x", leaf)


def test_nested_tree_parses_back():
    row = vt.Array().append(vt.Object().add("b", vt.Number(4)).add("a", vt.Number(2)))
    root = vt.Object().add("rows", vt.Array().append(row)).add("name", vt.String("m"))
    text = vt.serialize(root)
    assert text == '{"name":"m","rows":[[{"a":2,"b":4}]]}'
    assert json.loads(text) == vt.to_python(root)

