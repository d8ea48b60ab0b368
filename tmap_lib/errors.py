# --- tmap_lib/errors.py ---
from typing import Optional


def _fmt_color(color: Optional[int]) -> str:
    return "unknown" if color is None else f"0x{color:06x}"


def _fmt_coords(x: Optional[int], y: Optional[int]) -> str:
    if x is None or y is None:
        return ""
    return f" at ({x}, {y})"


class MapBuilderError(Exception):
    """Base class for every error raised while building a map."""


class InvalidSpan(MapBuilderError):
    """Raised when an interval is constructed with a > b."""

    def __init__(self, a: int, b: int):
        self.a = a
        self.b = b
        super().__init__(f"InvalidSpan: b ({b}) must not be less than a ({a})")


class OutOfOrderExtension(MapBuilderError):
    """Raised when a span row is extended with a column that is not past its end."""

    def __init__(self, x: int, last_b: int):
        self.x = x
        self.last_b = last_b
        super().__init__(
            f"OutOfOrderExtension: column {x} does not follow span end {last_b}"
        )


class UnrecognizedColor(MapBuilderError):
    """Raised when a pixel color is not in the palette."""

    def __init__(self, color: int, x: Optional[int] = None, y: Optional[int] = None):
        self.color = color
        self.x = x
        self.y = y
        super().__init__(
            f"UnrecognizedColor: {_fmt_color(color)}{_fmt_coords(x, y)}"
        )


class UnclassifiedRegionMembership(MapBuilderError):
    """Raised when a color does not belong to exactly one region."""

    def __init__(
        self, x: Optional[int] = None, y: Optional[int] = None, color: Optional[int] = None
    ):
        self.x = x
        self.y = y
        self.color = color
        super().__init__(
            "UnclassifiedRegionMembership: "
            f"{_fmt_color(color)}{_fmt_coords(x, y)} is in no single region"
        )


class DuplicateKey(MapBuilderError):
    """Raised when a key is added twice to a value-tree Object."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"DuplicateKey: '{key}' is already present in object")


class PaletteError(MapBuilderError):
    """Raised for a malformed palette table or configuration value."""
