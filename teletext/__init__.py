"""Teletext - render map tiles and vector data as character grids"""

__version__ = "0.1.0"
__author__ = "Teletext Map Team"
__description__ = "Render map tiles and geographic vector data as teletext-style character grids"

from .colors import TerrainColor, classify
from .glyphs import DEFAULT_RAMP, map_brightness
from .renderer import TeletextCell, TeletextRenderer, render_tile, render_ways

__all__ = [
    'DEFAULT_RAMP',
    'TeletextCell',
    'TeletextRenderer',
    'TerrainColor',
    'classify',
    'map_brightness',
    'render_tile',
    'render_ways',
]
