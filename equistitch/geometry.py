"""
geometry.py — Ray / pixel conversions shared by both projection directions.

Coordinate system (right-handed):
    +Y = front   +X = right   +Z = up

Every function works on a single vector of shape (3,) or on a whole batch of
shape (..., 3), so a full face or panorama is converted in one numpy pass.
"""

import math
from enum import Enum

import numpy as np


# ── Face normals ──────────────────────────────────────────────────────────────

def _axis(x: float, y: float, z: float) -> np.ndarray:
    v = np.array([x, y, z], dtype=np.float64)
    v.setflags(write=False)
    return v


FRONT = _axis(0.0, 1.0, 0.0)
BACK = _axis(0.0, -1.0, 0.0)
LEFT = _axis(-1.0, 0.0, 0.0)
RIGHT = _axis(1.0, 0.0, 0.0)
UP = _axis(0.0, 0.0, 1.0)
DOWN = _axis(0.0, 0.0, -1.0)


class Face(Enum):
    FRONT = 'front'
    BACK = 'back'
    LEFT = 'left'
    RIGHT = 'right'
    UP = 'up'
    DOWN = 'down'


# Face → (normal, down basis, right basis).  The bases are picked so that
# neighbouring faces share seams in the stored images; changing any of them
# mirrors or rotates the output.
FACE_FRAMES: dict[Face, tuple[np.ndarray, np.ndarray, np.ndarray]] = {
    Face.FRONT: (FRONT, DOWN, RIGHT),
    Face.LEFT:  (LEFT, DOWN, FRONT),
    Face.RIGHT: (RIGHT, DOWN, BACK),
    Face.BACK:  (BACK, DOWN, LEFT),
    Face.UP:    (UP, BACK, LEFT),
    Face.DOWN:  (DOWN, BACK, RIGHT),
}


# ── Vector helpers ────────────────────────────────────────────────────────────

def normalize(v: np.ndarray) -> np.ndarray:
    """Scale vector(s) along the last axis to unit length."""
    v = np.asarray(v, dtype=np.float64)
    norm = np.sqrt(np.sum(v * v, axis=-1, keepdims=True))
    return v / norm


def spherical_to_cartesian(radius, inclination, azimuth) -> np.ndarray:
    """
    Physics convention: inclination from the +Z pole, azimuth in the XY plane.

    Scalars give a (3,) vector; arrays give (..., 3).
    """
    sin_inc = np.sin(inclination)
    x = radius * np.cos(azimuth) * sin_inc
    y = radius * np.sin(azimuth) * sin_inc
    z = radius * np.cos(inclination)
    return np.stack(np.broadcast_arrays(x, y, z), axis=-1)


# ── Face space ↔ ray space ────────────────────────────────────────────────────

def face_pixel_to_ray(center: np.ndarray, down: np.ndarray, right: np.ndarray,
                      pixel: tuple, dimensions: tuple[int, int]) -> np.ndarray:
    """
    Map a face pixel to the unit ray leaving the cube centre through it.

    Args:
        center:     face normal
        down:       face-local basis pointing towards the bottom row
        right:      face-local basis pointing towards the last column
        pixel:      (x, y), scalars or equally shaped integer arrays
        dimensions: face (width, height)

    Pixel (0, 0) maps to the upper-left corner of the face and
    (width/2, height/2) maps exactly onto ``center``.
    """
    x, y = pixel
    width, height = dimensions
    x_scaled = np.asarray(x, dtype=np.float64)[..., np.newaxis] / width
    y_scaled = np.asarray(y, dtype=np.float64)[..., np.newaxis] / height

    origin = center - right - down          # upper-left corner
    point = origin + right * (x_scaled * 2.0) + down * (y_scaled * 2.0)
    return normalize(point)


def ray_to_equirectangular_pixel(dimensions: tuple[int, int], ray: np.ndarray):
    """
    Nearest-neighbour equirectangular pixel hit by ``ray``.

    Longitude is ``pi + atan2(x, y)`` and latitude (colatitude) is
    ``acos(z)``; both are scaled linearly onto the image and truncated.
    The ray is used as given, without normalising; a z component outside
    [-1, 1] is clamped, so such rays land on the top or bottom row.

    Returns:
        (px, py) as numpy integers, or integer arrays for a batch of rays
    """
    width, height = dimensions
    ray = np.asarray(ray, dtype=np.float64)
    x, y, z = ray[..., 0], ray[..., 1], ray[..., 2]

    # pi + atan2 spans [0, 2pi]; 0.5 + atan2/2pi is the same fraction of a turn
    lon_frac = 0.5 + np.arctan2(x, y) / (2.0 * math.pi)
    lat_frac = np.arccos(np.clip(z, -1.0, 1.0)) / math.pi

    # lon = 2pi and lat = pi close the intervals; they belong to the last column/row
    px = np.minimum((lon_frac * width).astype(np.int64), width - 1)
    py = np.minimum((lat_frac * height).astype(np.int64), height - 1)
    return px, py
