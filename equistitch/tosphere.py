"""
tosphere.py — Stitch six cube faces back into an equirectangular panorama.

Output dimensions:
    width  = 4 × face width
    height = 2 × face height

Every output pixel is turned into a unit ray, the ray is assigned to the face
of its dominant axis, and the two remaining components (scaled to [-1, 1])
pick the face pixel.  Rays that sit exactly on an edge between faces (two
components tied for the largest magnitude) are left transparent.
"""

import math

import numpy as np

from .cube import FACES, Cube
from .geometry import Face, normalize, spherical_to_cartesian

UNRESOLVED = -1

# (dominant axis, positive?) → face
_DOMINANT_FACE: dict[tuple[int, bool], Face] = {
    (0, True): Face.RIGHT,
    (0, False): Face.LEFT,
    (1, True): Face.BACK,
    (1, False): Face.FRONT,
    (2, True): Face.UP,
    (2, False): Face.DOWN,
}

# face → (mirror columns, mirror rows) applied to the scaled (a, b) coordinates.
# These match the stored orientation of the faces written by tocubemap.
_FACE_FLIPS: dict[Face, tuple[bool, bool]] = {
    Face.RIGHT: (False, True),
    Face.LEFT:  (True, True),
    Face.BACK:  (True, True),
    Face.FRONT: (False, True),
    Face.UP:    (True, False),
    Face.DOWN:  (False, False),
}


# ── Face selection ────────────────────────────────────────────────────────────

def select_face(rays: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Assign ray(s) to cube faces.

    Returns:
        (face_idx, a, b)
        face_idx: index into FACES, or UNRESOLVED for tied / degenerate rays
        a, b:     the two non-dominant components in axis order, divided by
                  the dominant magnitude, so both lie in [-1, 1]
    """
    rays = np.asarray(rays, dtype=np.float64)
    mags = np.abs(rays)
    dominant = np.argmax(mags, axis=-1)
    peak = np.max(mags, axis=-1)

    tied = np.sum(mags == peak[..., np.newaxis], axis=-1) > 1
    resolved = ~tied & np.isfinite(peak) & (peak > 0)
    positive = np.take_along_axis(rays, dominant[..., np.newaxis], axis=-1)[..., 0] > 0

    face_idx = np.full(dominant.shape, UNRESOLVED, dtype=np.int8)
    for (axis, sign), face in _DOMINANT_FACE.items():
        face_idx[resolved & (dominant == axis) & (positive == sign)] = FACES.index(face)

    with np.errstate(divide='ignore', invalid='ignore'):
        scaled = rays / peak[..., np.newaxis]
    a = np.where(dominant == 0, scaled[..., 1], scaled[..., 0])
    b = np.where(dominant == 2, scaled[..., 1], scaled[..., 2])
    return face_idx, a, b


def face_for_ray(ray) -> Face | None:
    """
    Face a single ray exits through, or None when it lies on an edge.

    Convenience wrapper around select_face() for inspecting one ray at a time;
    the projection itself works on whole batches.
    """
    face_idx, _, _ = select_face(ray)
    idx = int(face_idx)
    return None if idx == UNRESOLVED else FACES[idx]


# ── Inverse projection ────────────────────────────────────────────────────────

def equirect_rays(width: int, height: int) -> np.ndarray:
    """Unit rays for every pixel of a width × height panorama, shape (H, W, 3)."""
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    longitude = xs / width * 2.0 * math.pi + math.pi / 2.0
    latitude = ys / height * math.pi
    del xs, ys
    return normalize(spherical_to_cartesian(1.0, latitude, longitude))


def cube_to_equirect(cube: Cube) -> np.ndarray:
    """
    Reconstruct an equirectangular image from a cube.

    Faces are assumed square and equally sized; the output size is derived
    from the front face.  Returns an (2h, 4w, C) array in the faces' dtype.
    """
    face_h, face_w = cube.front.shape[:2]
    out_w, out_h = face_w * 4, face_h * 2

    rays = equirect_rays(out_w, out_h)
    face_idx, a, b = select_face(rays)
    del rays

    result = np.zeros((out_h, out_w) + cube.front.shape[2:], dtype=cube.front.dtype)

    for fi, face in enumerate(FACES):
        mask = face_idx == fi
        if not np.any(mask):
            continue

        face_np = cube[face]
        h, w = face_np.shape[:2]
        col = ((a[mask] + 1.0) / 2.0 * (w - 1)).astype(np.int64)
        row = ((b[mask] + 1.0) / 2.0 * (h - 1)).astype(np.int64)

        flip_col, flip_row = _FACE_FLIPS[face]
        if flip_col:
            col = w - 1 - col
        if flip_row:
            row = h - 1 - row

        result[mask] = face_np[row, col]

    # UNRESOLVED pixels keep the zero fill: transparent black
    return result
