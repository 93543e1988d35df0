"""Brightness to glyph mapping using an ordered character ramp."""

from typing import Sequence

# Darkest to brightest
DEFAULT_RAMP = ' .:=+*#%@'


def validate_ramp(ramp: Sequence[str]) -> str:
    """Check a ramp once at configuration time and return it as a string.

    Each glyph must be a single character so every output row has the
    same width as the grid.
    """
    if isinstance(ramp, str):
        glyphs = ramp
    else:
        if not all(isinstance(g, str) and len(g) == 1 for g in ramp):
            raise ValueError("Ramp glyphs must be single characters")
        glyphs = ''.join(ramp)
    if not glyphs:
        raise ValueError("Character ramp must contain at least one glyph")
    return glyphs


def glyph_index(brightness: float, length: int) -> int:
    """Return the ramp index for a brightness value.

    ``floor(brightness / 256 * length)``, clamped to ``[0, length - 1]`` so
    values outside 0..255 still land on the first or last glyph.
    """
    index = int(brightness / 256 * length)
    return max(0, min(index, length - 1))


def map_brightness(brightness: float, ramp: str = DEFAULT_RAMP) -> str:
    """Map a brightness in 0..255 to a glyph from ``ramp``."""
    return ramp[glyph_index(brightness, len(ramp))]
