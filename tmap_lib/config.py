# --- tmap_lib/config.py ---
import configparser
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .assembler import BLOCK_SIZE, DEFAULT_CLEAR_SPACES
from .errors import PaletteError
from .palette import DEFAULT_PALETTE, ItemKind, Palette

log = logging.getLogger("tmap.config")

DEFAULTS = {
    "Map": {"block_size": str(BLOCK_SIZE)},
    "Colors": {e.name: f"0x{e.color:06x}" for e in DEFAULT_PALETTE.entries},
    "ClearSpace": {k.value: f"{w}x{h}" for k, (w, h) in DEFAULT_CLEAR_SPACES.items()},
}


@dataclass(frozen=True)
class BuilderConfig:
    """Settings for one map build, read from an INI file over built-in defaults."""

    block_size: int = BLOCK_SIZE
    colors: Dict[str, int] = field(default_factory=dict)
    clear_spaces: Dict[ItemKind, Tuple[int, int]] = field(
        default_factory=lambda: dict(DEFAULT_CLEAR_SPACES)
    )

    def palette(self) -> Palette:
        """Builds the validated palette, applying any color overrides."""
        return DEFAULT_PALETTE.with_colors(self.colors)


def _parse_color(name: str, value: str) -> int:
    try:
        color = int(value.strip().lstrip("#"), 16)
    except ValueError:
        raise PaletteError(f"Invalid color for '{name}': {value!r}") from None
    if not 0 <= color <= 0xFFFFFF:
        raise PaletteError(f"Color for '{name}' is out of range: {value!r}")
    return color


def _parse_size(name: str, value: str) -> Tuple[int, int]:
    try:
        w, h = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise PaletteError(f"Invalid clear space for '{name}': {value!r}") from None
    if w <= 0 or h <= 0:
        raise PaletteError(f"Clear space for '{name}' must be positive: {value!r}")
    return w, h


def _parse_kind(name: str) -> ItemKind:
    try:
        return ItemKind[name.upper()]
    except KeyError:
        raise PaletteError(f"Unknown item kind in [ClearSpace]: '{name}'") from None


def load_config(config_path: Optional[str] = None) -> BuilderConfig:
    """Reads settings from an INI file, applying defaults for anything missing."""
    config = configparser.ConfigParser()
    # Keep entry names as written; they are matched against palette names.
    config.optionxform = str
    config.read_dict(DEFAULTS)

    if config_path:
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Config file not found: {config_path}")
        try:
            config.read(config_path, encoding="utf-8")
        except configparser.Error as e:
            raise PaletteError(f"Invalid config file {config_path}: {e}") from None
        log.info("Loaded config from %s", config_path)
    else:
        log.debug("No config file given; using built-in defaults.")

    try:
        block_size = config.getint("Map", "block_size")
    except ValueError:
        raise PaletteError(
            f"Invalid block_size: {config.get('Map', 'block_size')!r}"
        ) from None
    if block_size <= 0:
        raise PaletteError(f"block_size must be positive, got {block_size}")

    colors = {name: _parse_color(name, value) for name, value in config.items("Colors")}
    clear_spaces = {}
    for name, value in config.items("ClearSpace"):
        kind = _parse_kind(name)
        if value.strip().lower() == "none":
            clear_spaces.pop(kind, None)
        else:
            clear_spaces[kind] = _parse_size(name, value)
    log.debug(
        "Config: block_size=%d, %d colors, %d clear spaces",
        block_size,
        len(colors),
        len(clear_spaces),
    )

    return BuilderConfig(block_size=block_size, colors=colors, clear_spaces=clear_spaces)
