# --- tmap_lib/bitmap.py ---
import logging

import cv2
import numpy as np

log = logging.getLogger("tmap.bitmap")


def load_bitmap(path: str) -> np.ndarray:
    """
    Loads a map image as a (height, width, 3) uint8 array.

    Channels are in BGR order and rows are stored bottom-up, the way a 24-bit
    BMP lays out its pixel data, so row 0 is the bottom row of the picture.
    """
    img = cv2.imread(path, cv2.IMREAD_COLOR)
    if img is None:
        raise FileNotFoundError(f"Could not read image at {path}")

    h, w, _ = img.shape
    log.info("Loaded %dx%d image from '%s'", w, h, path)
    return np.ascontiguousarray(img[::-1])


def save_bitmap(grid: np.ndarray, path: str) -> None:
    """Writes a bottom-up BGR grid back out as an image file."""
    if not cv2.imwrite(path, np.ascontiguousarray(grid[::-1])):
        raise IOError(f"Could not write image to {path}")
    log.debug("Saved %dx%d image to '%s'", grid.shape[1], grid.shape[0], path)
