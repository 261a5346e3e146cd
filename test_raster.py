"""Test raster buffers and pixel transforms."""

import cv2
import numpy as np
import pytest

from pagewords.color import ClassificationParams, Color
from pagewords.raster import (RasterBuffer, apply_pixel_transform, compress_dynamic_range,
                              compress_dynamic_range_array, negate, negate_array, save_image)

PARAMS = ClassificationParams(foreground=Color(40, 40, 40), background=Color(200, 200, 200))


def test_from_bytes_checks_length():
    with pytest.raises(ValueError):
        RasterBuffer.from_bytes(bytes(4 * 10 * 10 - 1), 10, 10)


def test_from_bytes_is_read_only():
    raster = RasterBuffer.from_bytes(bytes(range(16)), 2, 2)
    assert (raster.width, raster.height) == (2, 2)
    assert tuple(raster.pixels[0, 1]) == (4, 5, 6, 7)
    with pytest.raises(ValueError):
        raster.pixels[0, 0, 0] = 1


def test_from_array_adds_alpha():
    rgb = np.full((3, 4, 3), 7, dtype=np.uint8)
    raster = RasterBuffer.from_array(rgb)
    assert raster.pixels.shape == (3, 4, 4)
    assert np.all(raster.pixels[..., 3] == 255)

    gray = np.full((3, 4), 9, dtype=np.uint8)
    assert tuple(RasterBuffer.from_array(gray).pixels[1, 1]) == (9, 9, 9, 255)


def test_from_array_rejects_bad_input():
    with pytest.raises(ValueError):
        RasterBuffer.from_array(np.zeros((3, 3, 4), dtype=np.float32))
    with pytest.raises(ValueError):
        RasterBuffer.from_array(np.zeros((3, 3, 2), dtype=np.uint8))


def test_from_image_converts_to_rgba(tmp_path):
    bgr = np.zeros((5, 6, 3), dtype=np.uint8)
    bgr[2, 3] = (0, 0, 255)
    path = str(tmp_path / "page.png")
    cv2.imwrite(path, bgr)

    raster = RasterBuffer.from_image(path)
    assert (raster.width, raster.height) == (6, 5)
    assert tuple(raster.pixels[2, 3]) == (255, 0, 0, 255)


def test_from_image_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        RasterBuffer.from_image(str(tmp_path / "missing.png"))


def test_from_image_unreadable(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(ValueError):
        RasterBuffer.from_image(str(path))


def test_save_image_round_trip(tmp_path):
    pixels = np.zeros((4, 4, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    pixels[1, 2, :3] = (10, 20, 30)
    path = str(tmp_path / "out.png")
    save_image(RasterBuffer(pixels), path)
    assert tuple(RasterBuffer.from_image(path).pixels[1, 2]) == (10, 20, 30, 255)


def test_negate_keeps_alpha():
    assert negate(0, 100, 255, 17) == (255, 155, 0, 17)


def test_compress_dynamic_range():
    assert compress_dynamic_range(200, 150, 100, 9, PARAMS) == (255, 105, 0, 9)
    # brighter than the background clamps to white
    assert compress_dynamic_range(250, 250, 250, 255, PARAMS)[:3] == (255, 255, 255)


def test_vectorized_transforms_match_per_pixel():
    rng = np.random.default_rng(1)
    pixels = rng.integers(0, 256, size=(6, 7, 4), dtype=np.uint8)
    neg = negate_array(pixels)
    comp = compress_dynamic_range_array(pixels, PARAMS)
    for y in range(6):
        for x in range(7):
            px = tuple(int(v) for v in pixels[y, x])
            assert tuple(neg[y, x]) == negate(*px)
            assert tuple(comp[y, x]) == compress_dynamic_range(*px, PARAMS)


def test_apply_pixel_transform_leaves_source_untouched():
    pixels = np.zeros((2, 3, 4), dtype=np.uint8)
    raster = RasterBuffer(pixels)
    negated = apply_pixel_transform(raster, negate)
    assert np.all(raster.pixels[..., :3] == 0)
    assert np.all(negated.pixels[..., :3] == 255)


def test_apply_pixel_transform_custom_function():
    raster = RasterBuffer(np.zeros((2, 2, 4), dtype=np.uint8))

    def red(r, g, b, a, params):
        return 255, 0, 0, a

    out = apply_pixel_transform(raster, red)
    assert tuple(out.pixels[1, 1]) == (255, 0, 0, 0)
