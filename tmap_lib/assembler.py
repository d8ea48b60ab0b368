# --- tmap_lib/assembler.py ---
import logging
from typing import Dict, Mapping, Optional, Tuple

import numpy as np

from . import schema
from .bitmap import load_bitmap
from .errors import UnclassifiedRegionMembership
from .palette import (
    ColorClassifier,
    Ignorable,
    Item,
    ItemKind,
    RegionOnly,
    RegionTag,
    SpawnPoint,
    pack_colors,
)
from .span import SpanBuilder, rect_span2d

log = logging.getLogger("tmap.assemble")

BLOCK_SIZE = 64

# Cells (w, h) reserved around items, starting at the item's own cell.
DEFAULT_CLEAR_SPACES: Dict[ItemKind, Tuple[int, int]] = {
    ItemKind.GEM_BANK: (3, 3),
    ItemKind.BLIMP: (6, 3),
    ItemKind.TROPHY: (1, 1),
}


class MapAssembler:
    """Scans a decoded pixel grid and assembles the level description."""

    def __init__(
        self,
        classifier: Optional[ColorClassifier] = None,
        block_size: int = BLOCK_SIZE,
        clear_spaces: Optional[Mapping[ItemKind, Tuple[int, int]]] = None,
    ):
        self.classifier = classifier or ColorClassifier()
        self.block_size = block_size
        self.clear_spaces = dict(DEFAULT_CLEAR_SPACES if clear_spaces is None else clear_spaces)

    def _item_record(self, kind: ItemKind, x: int, y: int) -> schema.ItemRecord:
        record = schema.ItemRecord(
            type=kind.value, x=x * self.block_size, y=y * self.block_size
        )
        if kind in self.clear_spaces:
            w, h = self.clear_spaces[kind]
            record.clearSpace = schema.ClearSpace(
                x=x, y=y, w=w, h=h, region=rect_span2d(x, y, w, h)
            )
        return record

    def assemble(
        self, grid: np.ndarray, round_rocks: int, square_rocks: int, gems: int
    ) -> schema.MapData:
        """
        Classifies every pixel of `grid` and builds the MapData.

        `grid` is (height, width, 3) with row 0 at the bottom of the image.
        Output coordinates are top-down. Any classification or span error is
        raised as-is and no partial result is returned.
        """
        grid = np.asarray(grid)
        if grid.ndim != 3 or grid.shape[2] != 3:
            raise ValueError(f"Expected a (height, width, 3) grid, got shape {grid.shape}")
        for name, count in (
            ("round_rocks", round_rocks),
            ("square_rocks", square_rocks),
            ("gems", gems),
        ):
            if count < 0:
                raise ValueError(f"{name} must not be negative, got {count}")

        height, width, _ = grid.shape
        log.info("Assembling %dx%d map...", width, height)
        colors = pack_colors(grid)

        trackers = {RegionTag.DIG: SpanBuilder(), RegionTag.GRAVITY: SpanBuilder()}
        items, spawn_points = [], []

        for y in range(height):
            for tracker in trackers.values():
                tracker.start_row()
            row = colors[height - 1 - y]

            for x in range(width):
                color = int(row[x])
                cls = self.classifier.classify(color, x, y)

                if isinstance(cls, Ignorable):
                    continue
                if cls.region not in trackers:
                    raise UnclassifiedRegionMembership(x, y, color)

                if isinstance(cls, SpawnPoint):
                    spawn_points.append(
                        schema.SpawnPoint(x=x * self.block_size, y=y * self.block_size)
                    )
                elif isinstance(cls, Item):
                    items.append(self._item_record(cls.kind, x, y))
                elif not isinstance(cls, RegionOnly):
                    raise TypeError(f"Unexpected classification {cls!r}")

                trackers[cls.region].extend(x)

        log.info(
            "Found %d items and %d spawn points.", len(items), len(spawn_points)
        )
        return schema.MapData(
            width=width,
            height=height,
            numRoundRocks=round_rocks,
            numSquareRocks=square_rocks,
            numGems=gems,
            gravRegion=trackers[RegionTag.GRAVITY].span2d,
            digRegion=trackers[RegionTag.DIG].span2d,
            spawnPoints=spawn_points,
            items=items,
        )


def build_map_from_file(
    image_path: str, round_rocks: int, square_rocks: int, gems: int, config=None
) -> schema.MapData:
    """Loads a map image and assembles it, using `config` when given."""
    log.info("Starting build of map image: '%s'", image_path)
    grid = load_bitmap(image_path)
    if config is None:
        assembler = MapAssembler()
    else:
        assembler = MapAssembler(
            ColorClassifier(config.palette()),
            block_size=config.block_size,
            clear_spaces=config.clear_spaces,
        )
    return assembler.assemble(grid, round_rocks, square_rocks, gems)
