"""
tiles.py — Cut cube faces into square tiles and glue them back together.

Tile order is column-major: for every x index, all y indices top to bottom.
Only whole tiles are produced; pixels beyond the last full tile are dropped.
"""

import numpy as np


def split_image(img_np: np.ndarray, patch_size: int) -> tuple[list[np.ndarray], int]:
    """
    Cut an (H, W, C) image into patch_size × patch_size tiles.

    Returns:
        (tiles, x_pieces) where x_pieces is the number of tile columns,
        needed later by stitch_image()
    """
    if patch_size <= 0:
        raise ValueError(f"Patch size must be positive, got {patch_size}")

    H, W = img_np.shape[:2]
    x_pieces = W // patch_size
    y_pieces = H // patch_size

    patches = []
    for px in range(x_pieces):
        for py in range(y_pieces):
            tile = img_np[py * patch_size:(py + 1) * patch_size,
                          px * patch_size:(px + 1) * patch_size]
            patches.append(tile.copy())
    return patches, x_pieces


def stitch_image(patches: list[np.ndarray], x_pieces: int) -> np.ndarray:
    """Inverse of split_image(): rebuild one image from its tiles."""
    if not patches:
        raise ValueError("No patches to stitch")
    if x_pieces <= 0:
        raise ValueError(f"Tile column count must be positive, got {x_pieces}")
    if len(patches) % x_pieces:
        raise ValueError(f"{len(patches)} patches cannot fill a grid "
                         f"{x_pieces} tiles wide")

    first = patches[0]
    h, w = first.shape[:2]
    for i, patch in enumerate(patches):
        if patch.shape != first.shape:
            raise ValueError(f"Patch {i} has shape {patch.shape}, "
                             f"expected {first.shape}")

    y_pieces = len(patches) // x_pieces
    full = np.zeros((h * y_pieces, w * x_pieces) + first.shape[2:], dtype=first.dtype)

    tiles = iter(patches)
    for px in range(x_pieces):
        for py in range(y_pieces):
            full[py * h:(py + 1) * h, px * w:(px + 1) * w] = next(tiles)
    return full
