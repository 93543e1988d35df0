"""Tests for image decoding and tile sampling."""

import pytest
from PIL import Image

from teletext.errors import ImageDecodeFailure
from teletext.raster import RasterImage, TileSampler, cell_bounds, decode_image
from tests.conftest import png_bytes, solid_raster


def gradient_raster(width, height):
    """Red channel equals 10 * column index, green equals 10 * row index."""
    pixels = bytearray()
    for y in range(height):
        for x in range(width):
            pixels += bytes((10 * x, 10 * y, 0, 255))
    return RasterImage(width, height, bytes(pixels))


@pytest.mark.parametrize("extent,cells", [(400, 40), (400, 25), (7, 3), (5, 2), (13, 13)])
def test_windows_partition_large_images(extent, cells):
    """When the image is at least as large as the grid, windows tile it exactly."""
    bounds = [cell_bounds(i, cells, extent) for i in range(cells)]
    assert bounds[0][0] == 0
    assert bounds[-1][1] == extent
    for (_, stop), (start, _) in zip(bounds, bounds[1:]):
        assert stop == start
    assert all(stop > start for start, stop in bounds)


def test_non_integer_window_rule():
    """A 5 pixel row over 2 cells splits as [0, 2) and [2, 5)."""
    assert cell_bounds(0, 2, 5) == (0, 2)
    assert cell_bounds(1, 2, 5) == (2, 5)
    # 400 / 25 = 16 exactly, 400 / 3 = 133.33
    assert cell_bounds(24, 25, 400) == (384, 400)
    assert cell_bounds(1, 3, 400) == (133, 266)


def test_small_image_windows_hold_one_pixel():
    """A 2 pixel image over 5 cells: each cell gets exactly one valid pixel."""
    bounds = [cell_bounds(i, 5, 2) for i in range(5)]
    assert bounds == [(0, 1), (0, 1), (0, 1), (1, 2), (1, 2)]
    assert cell_bounds(0, 40, 1) == (0, 1)
    assert cell_bounds(39, 40, 1) == (0, 1)


@pytest.mark.parametrize("image_size", [(400, 400), (13, 7), (3, 2), (1, 1), (1000, 30)])
def test_grid_dimensions_independent_of_image(image_size):
    sampler = TileSampler(40, 25)
    rows = sampler.sample(solid_raster(*image_size))
    assert len(rows) == 25
    assert all(len(row) == 40 for row in rows)
    assert [(c.x, c.y) for c in rows[3][:2]] == [(0, 3), (1, 3)]


def test_channel_means_and_brightness():
    pixels = bytes((255, 0, 0, 255, 0, 0, 255, 0))
    image = RasterImage(2, 1, pixels)
    (cell,), = TileSampler(1, 1).sample(image)
    assert cell.r == pytest.approx(127.5)
    assert cell.g == 0
    assert cell.b == pytest.approx(127.5)
    assert cell.brightness == pytest.approx(85.0)


def test_alpha_is_ignored():
    opaque = TileSampler(2, 2).sample(solid_raster(4, 4, (90, 60, 30, 255)))
    clear = TileSampler(2, 2).sample(solid_raster(4, 4, (90, 60, 30, 0)))
    assert opaque == clear
    assert opaque[0][0].brightness == pytest.approx(60.0)


def test_uneven_windows_average_their_own_pixels():
    rows = TileSampler(2, 1).sample(gradient_raster(5, 1))
    left, right = rows[0]
    assert left.r == pytest.approx(5.0)     # columns 0, 1
    assert right.r == pytest.approx(30.0)   # columns 2, 3, 4


def test_rows_follow_image_rows():
    rows = TileSampler(1, 2).sample(gradient_raster(1, 4))
    assert rows[0][0].g == pytest.approx(5.0)
    assert rows[1][0].g == pytest.approx(25.0)


def test_brightness_stays_in_range():
    for rgba in [(0, 0, 0, 0), (255, 255, 255, 255)]:
        cell = TileSampler(3, 3).sample(solid_raster(7, 5, rgba))[2][2]
        assert 0 <= cell.brightness <= 255


def test_sampler_rejects_empty_grid():
    with pytest.raises(ValueError):
        TileSampler(0, 10)


def test_raster_image_validates_buffer():
    with pytest.raises(ImageDecodeFailure):
        RasterImage(2, 2, bytes(15))
    with pytest.raises(ImageDecodeFailure):
        RasterImage(0, 2, b"")


def test_raster_image_stride():
    assert solid_raster(10, 3).stride == 40


def test_decode_png():
    image = decode_image(png_bytes(12, 8, (0, 0, 200)))
    assert (image.width, image.height) == (12, 8)
    assert image.pixels[:4] == bytes((0, 0, 200, 255))


def test_decode_jpeg():
    image = decode_image(png_bytes(16, 16, (128, 128, 128), fmt="JPEG"))
    assert (image.width, image.height) == (16, 16)


@pytest.mark.parametrize("data", [b"", b"not an image", b"\x89PNG\r\n\x1a\n" + b"\x00" * 16])
def test_decode_failure(data):
    with pytest.raises(ImageDecodeFailure):
        decode_image(data)


def test_decompression_bomb_is_a_decode_failure(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(ImageDecodeFailure):
        decode_image(png_bytes(30, 30))
