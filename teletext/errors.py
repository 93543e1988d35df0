"""Exception types raised by the teletext rendering core."""

from dataclasses import dataclass
from typing import Any


class TeletextError(Exception):
    """Base class for all teletext errors."""


class ImageDecodeFailure(TeletextError):
    """Input bytes could not be interpreted as a pixel buffer."""


class EmptyNodeSet(TeletextError, ValueError):
    """A bounding box was requested for an empty collection of nodes."""


class GeoDataError(TeletextError, ValueError):
    """A vector payload is malformed (not an Overpass-style element list)."""


class ConfigError(TeletextError, ValueError):
    """A configuration value is missing or out of range."""


@dataclass(frozen=True)
class DanglingWayReference:
    """A way points at a node id that is absent from the node set.

    This is recorded rather than raised: the offending segment is skipped
    and the rest of the graph is still drawn.
    """

    way_id: Any
    node_id: Any

    def __str__(self) -> str:
        return f"way {self.way_id} references unknown node {self.node_id}"
