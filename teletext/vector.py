#!/usr/bin/env python3
"""
Vector side of the renderer: draws node/way graphs onto a binary grid.

Every consecutive pair of nodes within a way becomes an integer Bresenham
line between their normalized grid coordinates.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Mapping, Tuple, Union

from .errors import DanglingWayReference
from .geo import BoundingBox, GeoNode, GeoWay

logger = logging.getLogger(__name__)


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> Iterator[Tuple[int, int]]:
    """Yield every cell on the discrete line from ``(x0, y0)`` to ``(x1, y1)``.

    Both endpoints are included and consecutive cells are 8-connected.
    """
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    x, y = x0, y0

    while True:
        yield x, y
        if x == x1 and y == y1:
            return
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


@dataclass(frozen=True)
class OccupancyGrid:
    """Immutable binary grid, ``rows[y][x]``."""

    width: int
    height: int
    rows: Tuple[Tuple[bool, ...], ...]

    def __getitem__(self, xy: Tuple[int, int]) -> bool:
        x, y = xy
        return self.rows[y][x]

    def occupied(self) -> List[Tuple[int, int]]:
        """All set cells as ``(x, y)``, row by row."""
        return [(x, y) for y, row in enumerate(self.rows) for x, cell in enumerate(row) if cell]


class NormalizedGrid:
    """Mutable binary grid written during a single draw pass."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._cells = bytearray(width * height)

    def mark(self, x: int, y: int) -> bool:
        """Set a cell. Coordinates outside the grid are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self._cells[y * self.width + x] = 1
            return True
        return False

    def is_set(self, x: int, y: int) -> bool:
        return bool(self._cells[y * self.width + x])

    def draw_line(self, x0: int, y0: int, x1: int, y1: int) -> None:
        for x, y in bresenham_line(x0, y0, x1, y1):
            self.mark(x, y)

    def freeze(self) -> OccupancyGrid:
        rows = tuple(
            tuple(bool(c) for c in self._cells[y * self.width:(y + 1) * self.width])
            for y in range(self.height)
        )
        return OccupancyGrid(self.width, self.height, rows)


@dataclass
class RasterizeResult:
    grid: OccupancyGrid
    dangling: List[DanglingWayReference] = field(default_factory=list)


NodeSet = Union[Mapping[Any, GeoNode], Iterable[GeoNode]]


class VectorRasterizer:
    """Draws ways onto a ``width`` x ``height`` occupancy grid."""

    def __init__(self, width: int, height: int = None):
        self.width = width
        self.height = width if height is None else height
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Grid dimensions must be positive, got {self.width}x{self.height}")

    def rasterize(self, nodes: NodeSet, ways: Iterable[GeoWay]) -> RasterizeResult:
        """Rasterize ``ways`` using the bounding box of ``nodes``.

        Segments touching an unknown node id are skipped and reported in
        :attr:`RasterizeResult.dangling`.

        Raises:
            EmptyNodeSet: if ``nodes`` is empty.
        """
        if not isinstance(nodes, Mapping):
            nodes = {n.id: n for n in nodes}

        bbox = BoundingBox.from_nodes(nodes.values())
        if bbox.is_degenerate:
            logger.debug("Degenerate bounding box %s, using grid midpoint on flat axis", bbox)

        coords = {
            node_id: bbox.normalize(node.lat, node.lon, self.width, self.height)
            for node_id, node in nodes.items()
        }

        grid = NormalizedGrid(self.width, self.height)
        dangling: List[DanglingWayReference] = []
        segments = 0

        for way in ways:
            for node_id in way.nodes:
                if node_id not in coords:
                    ref = DanglingWayReference(way.id, node_id)
                    logger.warning("Skipping segment: %s", ref)
                    dangling.append(ref)

            for prev_id, curr_id in zip(way.nodes, way.nodes[1:]):
                if prev_id not in coords or curr_id not in coords:
                    continue
                x0, y0 = coords[prev_id]
                x1, y1 = coords[curr_id]
                grid.draw_line(x0, y0, x1, y1)
                segments += 1

        logger.debug("Drew %d segments on %dx%d grid (%d dangling references)",
                     segments, self.width, self.height, len(dangling))
        return RasterizeResult(grid.freeze(), dangling)
