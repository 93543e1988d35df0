"""Pytest configuration and shared fixtures for teletext tests."""

import io
import json
import re
import tempfile
from pathlib import Path

import pytest
from PIL import Image

from teletext.raster import RasterImage


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def solid_raster(width, height, rgba=(10, 10, 10, 255)):
    """Build a RasterImage where every pixel has the same RGBA value."""
    return RasterImage(width, height, bytes(rgba) * (width * height))


def png_bytes(width, height, rgb=(10, 10, 10), fmt="PNG"):
    """Encode a solid color image and return the file bytes."""
    image = Image.new("RGB", (width, height), rgb)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_raster():
    return solid_raster


@pytest.fixture
def make_png():
    return png_bytes


@pytest.fixture
def sample_png_file(temp_dir):
    """A 400x400 uniform dark tile on disk."""
    path = temp_dir / "tile.png"
    path.write_bytes(png_bytes(400, 400))
    return str(path)


@pytest.fixture
def overpass_data():
    """A small Overpass response: an L-shaped street plus a relation."""
    return {
        "version": 0.6,
        "elements": [
            {"type": "node", "id": 1, "lat": 41.000, "lon": 28.990},
            {"type": "node", "id": 2, "lat": 41.000, "lon": 29.000},
            {"type": "node", "id": 3, "lat": 41.010, "lon": 29.000},
            {"type": "way", "id": 100, "nodes": [1, 2, 3], "tags": {"highway": "residential"}},
            {"type": "relation", "id": 500, "members": []},
        ],
    }


@pytest.fixture
def overpass_file(temp_dir, overpass_data):
    path = temp_dir / "streets.json"
    path.write_text(json.dumps(overpass_data))
    return str(path)


def strip_ansi_codes(text):
    """Remove ANSI escape codes from text for testing."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')
    return ansi_escape.sub('', text)
