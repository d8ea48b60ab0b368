# --- tmap_lib/palette.py ---
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

import numpy as np

from .errors import PaletteError, UnclassifiedRegionMembership, UnrecognizedColor

log = logging.getLogger("tmap.classify")


class ItemKind(Enum):
    """Standalone tiles and items that produce a record in the output."""

    WALL = "WALL"
    METAL_WALL = "METAL_WALL"
    TROPHY = "TROPHY"
    GEM_BANK = "GEM_BANK"
    BLIMP = "BLIMP"
    SPAWN_POINT = "SPAWN_POINT"


class RegionTag(Enum):
    """The two disjoint regions every non-ignorable cell belongs to."""

    DIG = "digRegion"
    GRAVITY = "gravRegion"


# --- Classification outcomes ---
@dataclass(frozen=True)
class Item:
    kind: ItemKind
    region: Optional[RegionTag]


@dataclass(frozen=True)
class SpawnPoint:
    region: Optional[RegionTag] = RegionTag.GRAVITY


@dataclass(frozen=True)
class RegionOnly:
    region: Optional[RegionTag]


@dataclass(frozen=True)
class Ignorable:
    region: Optional[RegionTag] = None


Classification = Union[Item, SpawnPoint, RegionOnly, Ignorable]


@dataclass(frozen=True)
class PaletteEntry:
    """One row of the color table."""

    name: str
    color: int
    kind: Optional[ItemKind] = None
    region: Optional[RegionTag] = None
    ignorable: bool = False

    def classification(self) -> Classification:
        if self.ignorable:
            return Ignorable()
        if self.kind is ItemKind.SPAWN_POINT:
            return SpawnPoint(self.region)
        if self.kind is not None:
            return Item(self.kind, self.region)
        return RegionOnly(self.region)


DEFAULT_ENTRIES: Tuple[PaletteEntry, ...] = (
    PaletteEntry("DIG_REGION", 0x920092, region=RegionTag.DIG),
    PaletteEntry("GRAVITY_REGION", 0x000000, region=RegionTag.GRAVITY),
    PaletteEntry("WALL", 0xDBDBDB, ItemKind.WALL, RegionTag.DIG),
    PaletteEntry("METAL_WALL", 0x494949, ItemKind.METAL_WALL, RegionTag.DIG),
    PaletteEntry("RESPAWN_REGION", 0x009200, ItemKind.SPAWN_POINT, RegionTag.GRAVITY),
    PaletteEntry("GEM_BANK", 0x0000DB, ItemKind.GEM_BANK, RegionTag.GRAVITY),
    PaletteEntry("TROPHY", 0xDBDB00, ItemKind.TROPHY, RegionTag.GRAVITY),
    PaletteEntry("BLIMP", 0x00DBDB, ItemKind.BLIMP, RegionTag.GRAVITY),
    PaletteEntry("IGNORE", 0xFFFFFF, ignorable=True),
)


class Palette:
    """
    Immutable color table mapping packed colors to classifications.

    The table is checked when the palette is built: colors must be unique,
    every non-ignorable entry must belong to exactly one region, and the
    spawn-point marker must lie in the gravity region. A palette that exists
    is therefore always total over its own colors.
    """

    def __init__(self, entries: Iterable[PaletteEntry]):
        self._entries: Tuple[PaletteEntry, ...] = tuple(entries)
        lookup: Dict[int, Classification] = {}
        names = set()

        for entry in self._entries:
            if not 0 <= entry.color <= 0xFFFFFF:
                raise PaletteError(f"Color for '{entry.name}' is not a 24-bit value")
            if entry.color in lookup:
                raise PaletteError(
                    f"Color 0x{entry.color:06x} of '{entry.name}' is already in the palette"
                )
            if entry.name in names:
                raise PaletteError(f"Palette entry '{entry.name}' is defined twice")
            if entry.ignorable and (entry.region is not None or entry.kind is not None):
                raise UnclassifiedRegionMembership(color=entry.color)
            if not entry.ignorable and entry.region not in (RegionTag.DIG, RegionTag.GRAVITY):
                raise UnclassifiedRegionMembership(color=entry.color)
            if entry.kind is ItemKind.SPAWN_POINT and entry.region is not RegionTag.GRAVITY:
                raise PaletteError("The spawn point marker must be in the gravity region")

            lookup[entry.color] = entry.classification()
            names.add(entry.name)

        self._lookup: Mapping[int, Classification] = MappingProxyType(lookup)

    @property
    def entries(self) -> Tuple[PaletteEntry, ...]:
        return self._entries

    def entry(self, name: str) -> PaletteEntry:
        for entry in self._entries:
            if entry.name == name:
                return entry
        raise PaletteError(f"No palette entry named '{name}'")

    def with_colors(self, overrides: Mapping[str, int]) -> "Palette":
        """Returns a new palette with the colors of the named entries replaced."""
        known = {entry.name for entry in self._entries}
        unknown = set(overrides) - known
        if unknown:
            raise PaletteError(f"Unknown palette entries: {', '.join(sorted(unknown))}")
        return Palette(
            PaletteEntry(e.name, overrides.get(e.name, e.color), e.kind, e.region, e.ignorable)
            for e in self._entries
        )

    def lookup(self, color: int) -> Optional[Classification]:
        return self._lookup.get(color)

    def __len__(self) -> int:
        return len(self._entries)


DEFAULT_PALETTE = Palette(DEFAULT_ENTRIES)


def pack_color(pixel) -> int:
    """Packs the three bytes of a pixel as (c2 << 16) | (c1 << 8) | c0."""
    return (int(pixel[2]) << 16) | (int(pixel[1]) << 8) | int(pixel[0])


def pack_colors(grid: np.ndarray) -> np.ndarray:
    """Vectorized pack_color over an (h, w, 3) grid, returning an (h, w) array."""
    grid = grid.astype(np.uint32)
    return (grid[..., 2] << 16) | (grid[..., 1] << 8) | grid[..., 0]


@dataclass
class ColorClassifier:
    """Maps packed colors to classifications using a fixed palette."""

    palette: Palette = field(default=DEFAULT_PALETTE)

    def __post_init__(self):
        log.debug("--- Palette (%d entries) ---", len(self.palette))
        for entry in self.palette.entries:
            log.debug(
                "0x%06x -> %-14s region=%s",
                entry.color,
                entry.name,
                entry.region.value if entry.region else "-",
            )

    def classify(
        self, color: int, x: Optional[int] = None, y: Optional[int] = None
    ) -> Classification:
        """Returns the classification for a color, or raises UnrecognizedColor."""
        result = self.palette.lookup(color)
        if result is None:
            raise UnrecognizedColor(color, x, y)
        return result
