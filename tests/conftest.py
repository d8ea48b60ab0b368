import numpy as np
import pytest

from tmap_lib.palette import DEFAULT_PALETTE


def _make_grid(rows):
    """
    Builds a decoded pixel grid from rows of 0xRRGGBB colors listed top-down.

    The result is stored bottom-up in BGR order, as load_bitmap returns it.
    """
    height, width = len(rows), len(rows[0])
    grid = np.zeros((height, width, 3), dtype=np.uint8)
    for y, row in enumerate(rows):
        for x, color in enumerate(row):
            grid[height - 1 - y, x] = (color & 0xFF, (color >> 8) & 0xFF, color >> 16)
    return grid


@pytest.fixture
def make_grid():
    return _make_grid


@pytest.fixture
def colors():
    """Default palette colors by entry name."""
    return {entry.name: entry.color for entry in DEFAULT_PALETTE.entries}
