#!/usr/bin/env python3
"""
Raster side of the renderer: decoded pixel buffers and the tile sampler.

A tile is split into a fixed W x H grid of cells and each cell is reduced
to its mean red, green and blue values plus a brightness figure.

Pixel window rule
-----------------
For a grid of ``cells`` columns over an image ``extent`` pixels wide, cell
``i`` samples the half-open pixel range::

    start = floor(i * extent / cells)
    stop  = floor((i + 1) * extent / cells)

computed with integer arithmetic. If that range is empty (the image is
narrower than the grid) it is widened to the single pixel at ``start``.
When the image is at least as large as the grid the windows tile it
exactly, with no gaps and no overlap. When it is smaller, every cell
samples one pixel and neighbours may share it. Rows use the same rule.
"""

import io
import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Tuple

from PIL import Image, UnidentifiedImageError

from .errors import ImageDecodeFailure

logger = logging.getLogger(__name__)

CHANNELS = 4  # RGBA


@dataclass(frozen=True)
class RasterImage:
    """A decoded image: RGBA bytes in row-major order."""

    width: int
    height: int
    pixels: bytes

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ImageDecodeFailure(
                f"Image has no pixels ({self.width}x{self.height})")
        expected = self.width * self.height * CHANNELS
        if len(self.pixels) != expected:
            raise ImageDecodeFailure(
                f"Pixel buffer holds {len(self.pixels)} bytes, "
                f"expected {expected} for {self.width}x{self.height} RGBA")

    @property
    def stride(self) -> int:
        """Bytes per image row."""
        return self.width * CHANNELS

    @classmethod
    def from_pil(cls, image: Image.Image) -> 'RasterImage':
        rgba = image.convert('RGBA')
        return cls(rgba.width, rgba.height, rgba.tobytes())


def decode_image(data: bytes) -> RasterImage:
    """Decode encoded image bytes (PNG, JPEG, ...) into a :class:`RasterImage`.

    Raises:
        ImageDecodeFailure: if Pillow cannot read the data.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            raster = RasterImage.from_pil(image)
    except (UnidentifiedImageError, Image.DecompressionBombError,
            OSError, ValueError, SyntaxError) as e:
        raise ImageDecodeFailure(f"Could not decode image: {e}") from e
    logger.debug("Decoded %dx%d image", raster.width, raster.height)
    return raster


class SampleCell(NamedTuple):
    x: int
    y: int
    r: float
    g: float
    b: float
    brightness: float


def cell_bounds(index: int, cells: int, extent: int) -> Tuple[int, int]:
    """Return the half-open pixel range ``(start, stop)`` sampled by a cell.

    See the module docstring for the rule. The range always holds at least
    one pixel and never leaves ``[0, extent)``.
    """
    start = min(index * extent // cells, extent - 1)
    stop = min((index + 1) * extent // cells, extent)
    if stop <= start:
        stop = start + 1
    return start, stop


class TileSampler:
    """Reduces a :class:`RasterImage` to a fixed grid of :class:`SampleCell`."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height

    def sample(self, image: RasterImage) -> List[List[SampleCell]]:
        """Sample ``image`` into ``height`` rows of ``width`` cells."""
        columns = [cell_bounds(x, self.width, image.width) for x in range(self.width)]
        rows = []

        for y in range(self.height):
            y0, y1 = cell_bounds(y, self.height, image.height)
            row = []
            for x, (x0, x1) in enumerate(columns):
                row.append(self._sample_window(image, x, y, x0, x1, y0, y1))
            rows.append(row)

        logger.debug("Sampled %dx%d image into %dx%d cells",
                     image.width, image.height, self.width, self.height)
        return rows

    @staticmethod
    def _sample_window(image: RasterImage, x: int, y: int,
                       x0: int, x1: int, y0: int, y1: int) -> SampleCell:
        pixels = image.pixels
        stride = image.stride
        total_r = total_g = total_b = 0

        for row in range(y0, y1):
            start = row * stride + x0 * CHANNELS
            span = pixels[start:start + (x1 - x0) * CHANNELS]
            total_r += sum(span[0::CHANNELS])
            total_g += sum(span[1::CHANNELS])
            total_b += sum(span[2::CHANNELS])

        count = (x1 - x0) * (y1 - y0)
        r = total_r / count
        g = total_g / count
        b = total_b / count
        return SampleCell(x, y, r, g, b, (r + g + b) / 3)
