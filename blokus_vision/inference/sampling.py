"""
Board Sampling – Pixelated Board Image → Tile Samples
=====================================================

Input is a board photo that has already been cropped to the board and
downscaled so that each pixel corresponds to one tile (the filtering
and downscaling happen in external tools).  If the image is not yet
exactly ``cols × rows`` pixels it is resized with nearest-neighbour
interpolation, which only picks pixels and never blends tile colours.

Samples come out in row-major order (top row first, left to right),
as normalised RGB triples in [0, 1].
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

import cv2
import numpy as np

from blokus_vision.errors import InvalidInputError
from blokus_vision.models.colorspace import Color

log = logging.getLogger(__name__)

GRID_SIZE: int = 20  # A Blokus board is 20×20 tiles


def read_board_image(path: str | Path) -> np.ndarray:
    """Read an image from disk (BGR, OpenCV convention)."""
    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise InvalidInputError(f"Could not read image: {path}")
    return image


def sample_board(
    image: np.ndarray,
    rows: int = GRID_SIZE,
    cols: int = GRID_SIZE,
) -> Tuple[List[Color], int]:
    """Extract one RGB sample per tile.

    Parameters
    ----------
    image : np.ndarray
        BGR, BGRA or grayscale image; integer or float in [0, 1].
    rows, cols : int
        Board dimensions in tiles.

    Returns
    -------
    (samples, width)
        ``rows * cols`` row-major RGB triples and the row width ``cols``.
    """
    if rows <= 0 or cols <= 0:
        raise InvalidInputError(f"Board size must be positive, got {rows}x{cols}")
    if image is None or image.size == 0:
        raise InvalidInputError("Cannot sample an empty image")

    # Channel shuffling in numpy: cvtColor rejects float64 input
    if image.ndim == 2:
        rgb = np.repeat(image[:, :, np.newaxis], 3, axis=2)
    elif image.ndim == 3 and image.shape[2] in (3, 4):
        rgb = np.ascontiguousarray(image[:, :, 2::-1])  # BGR(A) → RGB
    else:
        raise InvalidInputError(f"Unsupported image shape {image.shape}")

    h, w = rgb.shape[:2]
    if (h, w) != (rows, cols):
        log.debug("Resizing %dx%d image to %dx%d tiles", w, h, cols, rows)
        rgb = cv2.resize(rgb, (cols, rows), interpolation=cv2.INTER_NEAREST)

    if np.issubdtype(rgb.dtype, np.integer):
        pixels = rgb.astype(np.float64) / np.iinfo(rgb.dtype).max
    else:
        pixels = rgb.astype(np.float64)

    samples: List[Color] = [tuple(px) for px in pixels.reshape(-1, 3).tolist()]
    return samples, cols
