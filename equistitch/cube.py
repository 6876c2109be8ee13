"""
cube.py — Six-face cube container plus reading/writing it to disk.

On-disk layouts:
    faces   {dir}/front.jpg, back.jpg, left.jpg, right.jpg, up.jpg, down.jpg
    tiles   {dir}/{face}_p{x_pieces}_{index}.jpg

All pixel data is kept as (H, W, 4) uint8 RGBA numpy arrays.
"""

import os
import re
from dataclasses import dataclass

import numpy as np
from PIL import Image

from .geometry import Face
from .tiles import split_image, stitch_image

Image.MAX_IMAGE_PIXELS = None   # allow very large panoramas

DEFAULT_EXTENSION = 'jpg'

# Order faces are written and loaded in
FACES = [Face.FRONT, Face.BACK, Face.LEFT, Face.RIGHT, Face.UP, Face.DOWN]

# Formats that cannot store an alpha channel
_OPAQUE_FORMATS = {'.jpg', '.jpeg', '.bmp'}

_TILE_NAME = re.compile(r'^(?P<face>[a-z]+)_p(?P<pieces>\d+)_(?P<index>\d+)\.')


# ── Image I/O ─────────────────────────────────────────────────────────────────

def read_image(path: str) -> np.ndarray:
    """Decode any Pillow-readable image into an (H, W, 4) uint8 RGBA array."""
    with Image.open(path) as img:
        return np.array(img.convert('RGBA'))


def write_image(path: str, img_np: np.ndarray) -> None:
    """Encode an RGBA array; alpha is dropped for formats without one."""
    img = Image.fromarray(img_np)
    if os.path.splitext(path)[1].lower() in _OPAQUE_FORMATS:
        img = img.convert('RGB')
    img.save(path)


def _face_path(directory: str, face: Face, extension: str) -> str:
    return os.path.join(directory, f"{face.value}.{extension}")


# ── Cube ──────────────────────────────────────────────────────────────────────

@dataclass
class Cube:
    front: np.ndarray
    back: np.ndarray
    left: np.ndarray
    right: np.ndarray
    up: np.ndarray
    down: np.ndarray

    def __getitem__(self, face: Face) -> np.ndarray:
        return getattr(self, face.value)

    @classmethod
    def from_faces(cls, faces: dict[Face, np.ndarray]) -> 'Cube':
        return cls(**{face.value: faces[face] for face in FACES})

    @classmethod
    def from_directory(cls, directory: str, extension: str = DEFAULT_EXTENSION) -> 'Cube':
        """Load the six face images ``{face}.{extension}`` from *directory*."""
        faces = {}
        for face in FACES:
            path = _face_path(directory, face, extension)
            if not os.path.isfile(path):
                raise FileNotFoundError(f"Missing cube face: {path}")
            faces[face] = read_image(path)
        return cls.from_faces(faces)

    @classmethod
    def from_directory_of_patches(cls, directory: str,
                                  extension: str = DEFAULT_EXTENSION) -> 'Cube':
        """
        Rebuild a cube from the tiles written by save_patches().

        Any file whose lowercase name contains ``.{extension}`` is considered.
        The tile column count is read from the front tiles' names and used
        for every face.
        """
        ext = f".{extension.lower()}"
        grouped: dict[str, list[tuple[int, str]]] = {face.value: [] for face in FACES}
        x_pieces = None

        for filename in sorted(os.listdir(directory)):
            if ext not in filename.lower():
                continue
            match = _TILE_NAME.match(filename)
            if match is None or match['face'] not in grouped:
                continue
            grouped[match['face']].append((int(match['index']), filename))
            if match['face'] == Face.FRONT.value and x_pieces is None:
                x_pieces = int(match['pieces'])

        if not grouped[Face.FRONT.value]:
            raise ValueError(f"Front patches missing in {directory}")
        if x_pieces is None:
            raise ValueError("Failed to parse tile count")

        faces = {}
        for face in FACES:
            tiles = [read_image(os.path.join(directory, name))
                     for _, name in sorted(grouped[face.value])]
            try:
                faces[face] = stitch_image(tiles, x_pieces)
            except ValueError as exc:
                raise ValueError(f"{face.value}: {exc}") from exc
        return cls.from_faces(faces)

    def save(self, directory: str, extension: str = DEFAULT_EXTENSION) -> None:
        os.makedirs(directory, exist_ok=True)
        for face in FACES:
            write_image(_face_path(directory, face, extension), self[face])

    def save_patches(self, directory: str, patch_size: int,
                     extension: str = DEFAULT_EXTENSION) -> None:
        """Write every face as patch_size × patch_size tiles."""
        os.makedirs(directory, exist_ok=True)
        for face in FACES:
            patches, x_pieces = split_image(self[face], patch_size)
            for i, patch in enumerate(patches):
                fname = f"{face.value}_p{x_pieces}_{i}.{extension}"
                write_image(os.path.join(directory, fname), patch)
