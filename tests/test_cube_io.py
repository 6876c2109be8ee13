"""
test_cube_io.py — Cube container and on-disk face / tile layouts
"""

import os

import numpy as np
import pytest
from PIL import Image

from equistitch.cube import FACES, Cube, read_image, write_image
from equistitch.geometry import Face


def assert_same_cube(a, b):
    for face in FACES:
        assert np.array_equal(a[face], b[face]), face


class TestCube:

    def test_indexing_by_face(self, labelled_cube):
        cube = labelled_cube(2)
        assert cube[Face.UP] is cube.up
        assert cube[Face.FRONT] is cube.front

    def test_save_and_load_faces(self, labelled_cube, tmp_path):
        cube = labelled_cube(4)
        out = tmp_path / 'faces'
        cube.save(str(out), 'png')
        assert sorted(os.listdir(out)) == sorted(f"{f.value}.png" for f in FACES)
        assert_same_cube(Cube.from_directory(str(out), 'png'), cube)

    def test_jpeg_drops_alpha_on_write(self, labelled_cube, tmp_path):
        cube = labelled_cube(4)
        cube.save(str(tmp_path))
        with Image.open(tmp_path / 'front.jpg') as img:
            assert img.mode == 'RGB'
        loaded = Cube.from_directory(str(tmp_path))
        assert loaded.front.shape == (4, 4, 4)
        assert np.all(loaded.front[..., 3] == 255)

    def test_missing_face(self, labelled_cube, tmp_path):
        labelled_cube(2).save(str(tmp_path), 'png')
        os.remove(tmp_path / 'down.png')
        with pytest.raises(FileNotFoundError, match="down"):
            Cube.from_directory(str(tmp_path), 'png')


class TestPatches:

    def test_round_trip(self, labelled_cube, tmp_path):
        cube = labelled_cube(8)
        cube.save_patches(str(tmp_path), 2, 'png')
        # 4 × 4 tiles per face, indices past 9 must sort numerically
        assert (tmp_path / 'front_p4_15.png').is_file()
        assert len(os.listdir(tmp_path)) == 6 * 16
        assert_same_cube(Cube.from_directory_of_patches(str(tmp_path), 'png'), cube)

    def test_ignores_other_extensions(self, labelled_cube, tmp_path):
        cube = labelled_cube(4)
        cube.save_patches(str(tmp_path), 2, 'png')
        (tmp_path / 'notes.txt').write_text('not a tile')
        assert_same_cube(Cube.from_directory_of_patches(str(tmp_path), 'PNG'), cube)

    def test_front_tiles_required(self, tmp_path):
        with pytest.raises(ValueError, match="Front patches missing"):
            Cube.from_directory_of_patches(str(tmp_path), 'png')

    def test_missing_face_tiles(self, labelled_cube, tmp_path):
        labelled_cube(4).save_patches(str(tmp_path), 2, 'png')
        for name in os.listdir(tmp_path):
            if name.startswith('left_'):
                os.remove(tmp_path / name)
        with pytest.raises(ValueError, match="left"):
            Cube.from_directory_of_patches(str(tmp_path), 'png')


class TestImageIO:

    def test_grayscale_is_promoted_to_rgba(self, tmp_path):
        path = tmp_path / 'gray.png'
        Image.new('L', (3, 2), 77).save(path)
        img = read_image(str(path))
        assert img.shape == (2, 3, 4)
        assert tuple(img[0, 0]) == (77, 77, 77, 255)

    def test_png_keeps_alpha(self, coordinate_image, tmp_path):
        img = coordinate_image(5, 3)
        img[0, 0, 3] = 0
        path = str(tmp_path / 'alpha.png')
        write_image(path, img)
        assert np.array_equal(read_image(path), img)
