#!/usr/bin/env python3
"""
Geographic node/way model, bounding boxes and grid normalization.

Coordinates are mapped linearly from the bounding box of the node set onto
grid indices; no map projection is applied.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .errors import EmptyNodeSet, GeoDataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoNode:
    id: Any
    lat: float
    lon: float


@dataclass(frozen=True)
class GeoWay:
    """An ordered sequence of node ids."""

    id: Any
    nodes: Tuple[Any, ...]


def _axis_index(value: float, low: float, high: float, extent: int) -> int:
    """Map ``value`` in ``[low, high]`` onto ``0..extent-1``.

    A zero-width axis has no meaningful position, so it maps to the
    midpoint ``extent // 2`` instead of dividing by zero.
    """
    if high == low:
        return extent // 2
    index = math.floor((value - low) / (high - low) * (extent - 1))
    return max(0, min(index, extent - 1))


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @classmethod
    def from_nodes(cls, nodes: Iterable[GeoNode]) -> 'BoundingBox':
        """Compute the lat/lon extent of ``nodes``.

        Raises:
            EmptyNodeSet: if there are no nodes.
        """
        nodes = list(nodes)
        if not nodes:
            raise EmptyNodeSet("Cannot compute a bounding box without nodes")

        lats = [n.lat for n in nodes]
        lons = [n.lon for n in nodes]
        bbox = cls(min(lats), max(lats), min(lons), max(lons))
        logger.debug("Bounding box of %d nodes: lat %.6f..%.6f lon %.6f..%.6f",
                     len(nodes), bbox.min_lat, bbox.max_lat, bbox.min_lon, bbox.max_lon)
        return bbox

    @property
    def is_degenerate(self) -> bool:
        """True when all nodes share a latitude or a longitude."""
        return self.min_lat == self.max_lat or self.min_lon == self.max_lon

    def normalize(self, lat: float, lon: float, width: int, height: int = None) -> Tuple[int, int]:
        """Map a coordinate to ``(gx, gy)`` on a ``width`` x ``height`` grid.

        ``gx`` follows longitude and ``gy`` follows latitude, both measured
        from the minimum corner. ``height`` defaults to ``width`` (square grid).
        """
        if height is None:
            height = width
        gx = _axis_index(lon, self.min_lon, self.max_lon, width)
        gy = _axis_index(lat, self.min_lat, self.max_lat, height)
        return gx, gy


def parse_overpass(data: Mapping[str, Any]) -> Tuple[Dict[Any, GeoNode], List[GeoWay]]:
    """Split an Overpass API JSON response into nodes and ways.

    Elements of other types (relations, areas) are ignored, as are nodes
    that carry no coordinates.

    Returns:
        ``(nodes, ways)`` where ``nodes`` maps node id to :class:`GeoNode`.

    Raises:
        GeoDataError: if ``data`` has no ``elements`` list.
    """
    if not isinstance(data, Mapping):
        raise GeoDataError(f"Expected a JSON object, got {type(data).__name__}")
    elements = data.get('elements')
    if not isinstance(elements, list):
        raise GeoDataError("Vector data has no 'elements' list")

    nodes: Dict[Any, GeoNode] = {}
    ways: List[GeoWay] = []
    skipped = 0

    for element in elements:
        if not isinstance(element, Mapping):
            skipped += 1
            continue
        kind = element.get('type')
        if kind == 'node':
            if 'lat' not in element or 'lon' not in element:
                skipped += 1
                continue
            try:
                node = GeoNode(element['id'], float(element['lat']), float(element['lon']))
            except (KeyError, TypeError, ValueError):
                skipped += 1
                continue
            if not (math.isfinite(node.lat) and math.isfinite(node.lon)):
                skipped += 1
                continue
            nodes[node.id] = node
        elif kind == 'way':
            ways.append(GeoWay(element.get('id'), tuple(element.get('nodes') or ())))

    if skipped:
        logger.warning("Skipped %d malformed elements", skipped)
    logger.debug("Parsed %d nodes and %d ways", len(nodes), len(ways))
    return nodes, ways


def ways_from_lists(ways: Iterable[Iterable[Any]]) -> List[GeoWay]:
    """Build :class:`GeoWay` objects from bare node-id lists, numbering them."""
    return [GeoWay(i, tuple(node_ids)) for i, node_ids in enumerate(ways)]
