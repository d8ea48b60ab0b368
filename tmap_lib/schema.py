# --- tmap_lib/schema.py ---
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from . import value_tree as vt
from .span import Span2d


@dataclass
class ClearSpace:
    """A block of cells a downstream consumer must keep free of other placements."""

    x: int  # grid column of the top-left reserved cell
    y: int  # grid row of the top-left reserved cell
    w: int
    h: int
    region: Span2d

    def to_value_tree(self) -> vt.Object:
        obj = vt.Object()
        obj.add("x", vt.Number(self.x))
        obj.add("y", vt.Number(self.y))
        obj.add("w", vt.Number(self.w))
        obj.add("h", vt.Number(self.h))
        obj.add("region", self.region.to_value_tree())
        return obj


@dataclass
class ItemRecord:
    """A placed item, positioned in world coordinates."""

    type: str  # an ItemKind value, e.g. "WALL"
    x: int
    y: int
    clearSpace: Optional[ClearSpace] = None

    def to_value_tree(self) -> vt.Object:
        obj = vt.Object()
        obj.add("type", vt.String(self.type))
        obj.add("x", vt.Number(self.x))
        obj.add("y", vt.Number(self.y))
        if self.clearSpace is not None:
            obj.add("clearSpace", self.clearSpace.to_value_tree())
        return obj


@dataclass
class SpawnPoint:
    """A player spawn location in world coordinates."""

    x: int
    y: int

    def to_value_tree(self) -> vt.Object:
        return vt.Object().add("x", vt.Number(self.x)).add("y", vt.Number(self.y))


@dataclass
class MapData:
    """The root object of a built level."""

    width: int
    height: int
    numRoundRocks: int
    numSquareRocks: int
    numGems: int
    gravRegion: Span2d = field(default_factory=Span2d)
    digRegion: Span2d = field(default_factory=Span2d)
    spawnPoints: List[SpawnPoint] = field(default_factory=list)
    items: List[ItemRecord] = field(default_factory=list)

    def to_value_tree(self) -> vt.Object:
        spawn_points = vt.Array()
        for spawn in self.spawnPoints:
            spawn_points.append(spawn.to_value_tree())
        items = vt.Array()
        for item in self.items:
            items.append(item.to_value_tree())

        root = vt.Object()
        root.add("width", vt.Number(self.width))
        root.add("height", vt.Number(self.height))
        root.add("numRoundRocks", vt.Number(self.numRoundRocks))
        root.add("numSquareRocks", vt.Number(self.numSquareRocks))
        root.add("numGems", vt.Number(self.numGems))
        root.add("gravRegion", self.gravRegion.to_value_tree())
        root.add("digRegion", self.digRegion.to_value_tree())
        root.add("spawnPoints", spawn_points)
        root.add("items", items)
        return root


def dumps(map_data: MapData) -> str:
    """Serializes a MapData object to compact JSON with sorted keys."""
    return vt.serialize(map_data.to_value_tree())


def _item_from_dict(data: Dict[str, Any]) -> ItemRecord:
    clear_space = None
    if data.get("clearSpace"):
        cs = data["clearSpace"]
        clear_space = ClearSpace(
            x=cs["x"], y=cs["y"], w=cs["w"], h=cs["h"], region=Span2d.from_desc(cs["region"])
        )
    return ItemRecord(type=data["type"], x=data["x"], y=data["y"], clearSpace=clear_space)


def loads(text: str) -> MapData:
    """Deserializes JSON text produced by `dumps` into a MapData object."""
    data = json.loads(text)
    return MapData(
        width=data["width"],
        height=data["height"],
        numRoundRocks=data["numRoundRocks"],
        numSquareRocks=data["numSquareRocks"],
        numGems=data["numGems"],
        gravRegion=Span2d.from_desc(data["gravRegion"]),
        digRegion=Span2d.from_desc(data["digRegion"]),
        spawnPoints=[SpawnPoint(**s) for s in data.get("spawnPoints", [])],
        items=[_item_from_dict(i) for i in data.get("items", [])],
    )


def save_json(map_data: MapData, output_path: str) -> None:
    """
    Serializes a MapData object to a JSON file.

    Args:
        map_data: The MapData object to serialize.
        output_path: The path to the output .json file.
    """
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(dumps(map_data))
        f.write("\n")


def load_json(input_path: str) -> MapData:
    """
    Deserializes a JSON file into a MapData object.

    Args:
        input_path: The path to the input .json file.

    Returns:
        A MapData object representing the content of the JSON file.
    """
    with open(input_path, "r", encoding="utf-8") as f:
        return loads(f.read())
