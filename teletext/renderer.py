#!/usr/bin/env python3
"""
Teletext renderer: turns map tiles and node/way graphs into character grids.

Raster tiles go through ``sample -> classify -> map-to-glyph`` and produce
rows of :class:`TeletextCell`. Vector graphs are normalized onto a square
grid and drawn as lines, producing an :class:`OccupancyGrid`.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence

from rich.text import Text

from .colors import TerrainColor, classify
from .config import RenderSettings
from .geo import GeoNode, GeoWay, parse_overpass
from .glyphs import map_brightness
from .raster import RasterImage, TileSampler, decode_image
from .vector import OccupancyGrid, RasterizeResult, VectorRasterizer

logger = logging.getLogger(__name__)


class TeletextCell(NamedTuple):
    glyph: str
    color: TerrainColor


CellGrid = List[List[TeletextCell]]


class TeletextRenderer:
    """Composes the sampler, glyph mapper, classifier and rasterizer."""

    def __init__(self, settings: Optional[RenderSettings] = None):
        self.settings = settings or RenderSettings()
        self.sampler = TileSampler(self.settings.width, self.settings.height)
        self.rasterizer = VectorRasterizer(self.settings.vector_size)

    def render_raster(self, image: RasterImage) -> CellGrid:
        """Render a decoded tile into ``height`` rows of ``width`` cells."""
        ramp = self.settings.ramp
        thresholds = self.settings.thresholds
        grid = []
        for row in self.sampler.sample(image):
            grid.append([
                TeletextCell(map_brightness(cell.brightness, ramp),
                             classify(cell.r, cell.g, cell.b, thresholds))
                for cell in row
            ])
        return grid

    def render_image_bytes(self, data: bytes) -> CellGrid:
        """Decode and render an encoded tile.

        Raises:
            ImageDecodeFailure: if the bytes are not a readable image.
        """
        return self.render_raster(decode_image(data))

    def render_vector(self, nodes: Any, ways: Iterable[GeoWay]) -> RasterizeResult:
        """Rasterize ways over the bounding box of ``nodes``.

        Raises:
            EmptyNodeSet: if ``nodes`` is empty.
        """
        return self.rasterizer.rasterize(nodes, ways)

    def render_overpass(self, data: Mapping[str, Any]) -> RasterizeResult:
        """Rasterize an Overpass API JSON response."""
        nodes, ways = parse_overpass(data)
        return self.render_vector(nodes, ways)

    def vector_lines(self, grid: OccupancyGrid) -> List[str]:
        return vector_lines(grid, self.settings.occupied, self.settings.empty)


def raster_lines(cells: CellGrid) -> List[str]:
    """Plain glyph rows, dropping colors."""
    return [''.join(cell.glyph for cell in row) for row in cells]


def vector_lines(grid: OccupancyGrid, occupied: str = '#', empty: str = '.') -> List[str]:
    return [''.join(occupied if cell else empty for cell in row) for row in grid.rows]


def to_rich_text(cells: CellGrid) -> Text:
    """Build a rich :class:`Text` with each glyph styled by its terrain color."""
    text = Text()
    for y, row in enumerate(cells):
        if y:
            text.append('\n')
        for cell in row:
            text.append(cell.glyph, style=cell.color.style)
    return text


def to_payload(lines: Sequence[str], cells: Optional[CellGrid] = None,
               dangling: Optional[Iterable[Any]] = None) -> Dict[str, Any]:
    """JSON-ready payload, ``{"map": [...]}`` plus colors or dangling refs when present."""
    payload: Dict[str, Any] = {"map": list(lines)}
    if cells is not None:
        payload["colors"] = [[cell.color.label for cell in row] for row in cells]
    if dangling:
        payload["dangling"] = [{"way": ref.way_id, "node": ref.node_id} for ref in dangling]
    return payload


def render_tile(data: bytes, width: int = 40, height: int = 25,
                ramp: Optional[str] = None) -> CellGrid:
    """Convenience function to render an encoded tile.

    Args:
        data: Encoded image bytes (PNG, JPEG, ...)
        width: Grid width in characters
        height: Grid height in characters
        ramp: Glyph ramp, darkest first. Defaults to the standard ramp.
    """
    settings = RenderSettings.from_config(
        {"raster": {"width": width, "height": height, **({"ramp": ramp} if ramp is not None else {})}})
    return TeletextRenderer(settings).render_image_bytes(data)


def render_ways(nodes: Mapping[Any, GeoNode], ways: Iterable[GeoWay],
                size: int = 20, occupied: str = '#', empty: str = '.') -> List[str]:
    """Convenience function to draw a node/way graph as text rows."""
    result = VectorRasterizer(size).rasterize(nodes, ways)
    return vector_lines(result.grid, occupied, empty)
