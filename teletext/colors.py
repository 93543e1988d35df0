"""Coarse terrain classification of averaged cell colors.

The rules are a fixed heuristic over mean RGB values, evaluated in order
with the first match winning:

1. blue dominates red and green by more than the margin -> water
2. green dominates red and blue by more than the margin -> vegetation
3. channels within the grey tolerance of each other -> light surface if
   red is above the light level, otherwise dark surface
4. anything else -> default
"""

from dataclasses import dataclass
from enum import Enum


class TerrainColor(Enum):
    """Terrain classes, each carrying the rich style used when printing."""

    WATER = 'bright_blue'
    VEGETATION = 'bright_green'
    LIGHT_SURFACE = 'bright_white'
    DARK_SURFACE = 'grey50'
    DEFAULT = 'yellow'

    @property
    def style(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class ClassifierThresholds:
    """Thresholds for :func:`classify`."""

    dominance_margin: float = 20
    grey_tolerance: float = 20
    light_level: float = 200


DEFAULT_THRESHOLDS = ClassifierThresholds()


def classify(r: float, g: float, b: float,
             thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS) -> TerrainColor:
    """Classify an averaged RGB triple into a :class:`TerrainColor`."""
    margin = thresholds.dominance_margin
    if b > r + margin and b > g + margin:
        return TerrainColor.WATER
    if g > r + margin and g > b + margin:
        return TerrainColor.VEGETATION

    tolerance = thresholds.grey_tolerance
    if abs(r - g) < tolerance and abs(g - b) < tolerance:
        if r > thresholds.light_level:
            return TerrainColor.LIGHT_SURFACE
        return TerrainColor.DARK_SURFACE

    return TerrainColor.DEFAULT
