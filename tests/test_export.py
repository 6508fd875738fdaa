"""Tests for grayscale conversion and file output."""

import json

import numpy as np
from PIL import Image

from terrain_eroder import export
from terrain_eroder.heightfield import HeightField


def make_field():
    return HeightField(4, 3, np.array([
        -2.0, 0.0, 2.0, 4.0,
        6.0, 8.0, 10.0, 12.0,
        14.0, 16.0, 18.0, 30.0,
    ]))


def test_to_grayscale_normalizes_full_range():
    gray = export.to_grayscale(make_field())

    assert gray.dtype == np.uint8
    assert gray.shape == (3, 4)
    assert gray[0, 0] == 0
    assert gray[2, 3] == 255
    # (6 - -2) / 32 * 255 = 63.75, truncated.
    assert gray[1, 0] == 63


def test_to_grayscale_of_flat_field_is_black():
    gray = export.to_grayscale(HeightField(5, 2, np.full(10, 7.0)))

    assert not gray.any()


def test_save_png_writes_grayscale_image(tmp_path):
    path = export.save_png(make_field(), str(tmp_path / "out" / "terrain.png"))

    with Image.open(path) as img:
        assert img.mode == 'L'
        assert img.size == (4, 3)
        np.testing.assert_array_equal(np.array(img), export.to_grayscale(make_field()))


def test_save_heights_round_trips_raw_values(tmp_path):
    field = make_field()
    path = export.save_heights(field, str(tmp_path / "terrain.npy"))

    np.testing.assert_array_equal(np.load(path), field.as_array())


def test_save_settings_writes_json(tmp_path):
    path = export.save_settings({'seed': 4, 'grid_size': 8}, str(tmp_path / "generation_config.json"))

    with open(path) as f:
        assert json.load(f) == {'seed': 4, 'grid_size': 8}
