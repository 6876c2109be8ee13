"""
conftest.py — Shared pytest fixtures for the equistitch test suite
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest

from equistitch.cube import FACES, Cube


def make_coordinate_image(width, height):
    """RGBA image whose red/green channels hold each pixel's own x/y."""
    img = np.zeros((height, width, 4), dtype=np.uint8)
    img[..., 0] = np.arange(width, dtype=np.uint8)[np.newaxis, :]
    img[..., 1] = np.arange(height, dtype=np.uint8)[:, np.newaxis]
    img[..., 3] = 255
    return img


@pytest.fixture
def coordinate_image():
    """Factory for images that encode their own pixel coordinates."""
    return make_coordinate_image


@pytest.fixture
def labelled_cube():
    """
    Factory for a cube whose pixels encode (face id, row, col).

    Channel 0 holds 10 × (position in FACES + 1), channel 1 the row,
    channel 2 the column, alpha is opaque.
    """
    def _make(size=2):
        faces = {}
        rows, cols = np.mgrid[0:size, 0:size]
        for i, face in enumerate(FACES):
            img = np.zeros((size, size, 4), dtype=np.uint8)
            img[..., 0] = 10 * (i + 1)
            img[..., 1] = rows
            img[..., 2] = cols
            img[..., 3] = 255
            faces[face] = img
        return Cube.from_faces(faces)
    return _make
