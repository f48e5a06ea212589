"""Pytest configuration and fixtures."""

import cv2
import numpy as np
import pytest

from blokus_vision.models.palette import TAGS, SeedCenters, default_seed_centers


def tile_bgr(rgb):
    """Convert an RGB triple in [0, 1] to a uint8 BGR pixel."""
    return [int(round(min(max(c, 0.0), 1.0) * 255)) for c in reversed(rgb)]


@pytest.fixture
def seeds():
    """The built-in seed centres."""
    return default_seed_centers()


@pytest.fixture
def grid_seeds():
    """Hand-made, well separated centres on integer coordinates."""
    return SeedCenters((
        (0.0, 0.0, 0.0),
        (10.0, 0.0, 0.0),
        (0.0, 10.0, 0.0),
        (0.0, 0.0, 10.0),
        (10.0, 10.0, 10.0),
    ))


@pytest.fixture
def striped_board(seeds):
    """20×20 BGR image whose row *i* is painted in the seed colour of TAGS[i % 5]."""
    rgb = seeds.as_rgb()
    image = np.zeros((20, 20, 3), dtype=np.uint8)
    for row in range(20):
        image[row, :] = tile_bgr(rgb[TAGS[row % 5]])
    return image


@pytest.fixture
def striped_board_file(striped_board, tmp_path):
    """Path to ``striped_board`` written as PNG."""
    path = tmp_path / "board.png"
    cv2.imwrite(str(path), striped_board)
    return path
