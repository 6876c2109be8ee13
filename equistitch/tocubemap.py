"""
tocubemap.py — Project an equirectangular panorama onto six cube faces.

For every pixel of a face the ray through it is built from that face's
(normal, down, right) frame, the ray is mapped to an equirectangular pixel,
and that pixel is copied (nearest neighbour, no interpolation).

Memory note: each face is generated independently, so peak memory is one
face worth of ray arrays on top of the source image.
"""

import numpy as np

from .cube import FACES, Cube
from .geometry import FACE_FRAMES, Face, face_pixel_to_ray, ray_to_equirectangular_pixel


def default_face_size(width: int) -> int:
    """Face edge for a 2:1 panorama, four faces around the horizon."""
    return width // 4


def equirect_to_face(img_np: np.ndarray, face: Face, size: int) -> np.ndarray:
    """
    Project an equirectangular image onto one cube face.

    Args:
        img_np: (H, W, C) source array
        face:   which face to render
        size:   output face side length in pixels

    Returns:
        (size, size, C) array of the same dtype
    """
    H, W = img_np.shape[:2]
    center, down, right = FACE_FRAMES[face]

    ys, xs = np.mgrid[0:size, 0:size]
    rays = face_pixel_to_ray(center, down, right, (xs, ys), (size, size))
    del xs, ys

    px, py = ray_to_equirectangular_pixel((W, H), rays)
    del rays

    return img_np[py, px]


def equirect_to_cube(img_np: np.ndarray, face_size: int | None = None,
                     verbose: bool = False) -> Cube:
    """Render all six faces; face_size defaults to a quarter of the width."""
    if face_size is None:
        face_size = default_face_size(img_np.shape[1])
    if face_size <= 0:
        raise ValueError(f"Face size must be positive, got {face_size} "
                         f"(source is {img_np.shape[1]} × {img_np.shape[0]} px)")

    faces = {}
    for face in FACES:
        if verbose:
            print(f"  [{face.value}] projecting at {face_size} px … ", end='', flush=True)
        faces[face] = equirect_to_face(img_np, face, face_size)
        if verbose:
            print("done")
    return Cube.from_faces(faces)
