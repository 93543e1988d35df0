"""Configuration loading for teletext.

Settings come from a YAML file (``teletext.yaml`` by default). Any section
or key missing from the file falls back to the built-in defaults below.
"""

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .colors import ClassifierThresholds
from .errors import ConfigError
from .glyphs import DEFAULT_RAMP, validate_ramp

DEFAULT_CONFIG_FILE = "teletext.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "raster": {
        "width": 40,
        "height": 25,
        "ramp": DEFAULT_RAMP,
    },
    "vector": {
        "size": 20,
        "occupied": "#",
        "empty": ".",
    },
    "classifier": {
        "dominance_margin": 20,
        "grey_tolerance": 20,
        "light_level": 200,
    },
    "output": {
        "color": True,
        "format": "text",
    },
}

OUTPUT_FORMATS = ("text", "json")


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` onto a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if value is None and isinstance(merged.get(key), dict):
            # An empty YAML section keeps its defaults
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: str = DEFAULT_CONFIG_FILE) -> Dict[str, Any]:
    """Load configuration from YAML file, merged onto the defaults."""
    config_file = Path(config_path)
    if not config_file.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_file, 'r') as f:
            user_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(user_config, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")
    return merge_config(DEFAULT_CONFIG, user_config)


def _positive_int(section: Dict[str, Any], key: str, name: str) -> int:
    value = section.get(key)
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ConfigError(f"{name}.{key} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ConfigError(f"{name}.{key} must be an integer, got {value!r}")
    if number <= 0:
        raise ConfigError(f"{name}.{key} must be positive, got {number}")
    return number


def _single_char(section: Dict[str, Any], key: str, name: str) -> str:
    value = section.get(key)
    if not isinstance(value, str) or len(value) != 1:
        raise ConfigError(f"{name}.{key} must be a single character, got {value!r}")
    return value


@dataclass(frozen=True)
class RenderSettings:
    """Validated settings shared by every render call."""

    width: int = 40
    height: int = 25
    ramp: str = DEFAULT_RAMP
    vector_size: int = 20
    occupied: str = "#"
    empty: str = "."
    thresholds: ClassifierThresholds = ClassifierThresholds()
    color: bool = True
    output_format: str = "text"

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> 'RenderSettings':
        config = merge_config(DEFAULT_CONFIG, config or {})
        for section in ("raster", "vector", "classifier", "output"):
            if not isinstance(config[section], dict):
                raise ConfigError(
                    f"{section} must be a mapping, got {type(config[section]).__name__}")
        raster = config["raster"]
        vector = config["vector"]
        classifier = config["classifier"]
        output = config["output"]

        try:
            ramp = validate_ramp(raster.get("ramp"))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"raster.ramp: {e}") from e

        try:
            thresholds = ClassifierThresholds(
                dominance_margin=float(classifier["dominance_margin"]),
                grey_tolerance=float(classifier["grey_tolerance"]),
                light_level=float(classifier["light_level"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid classifier thresholds: {e}") from e

        output_format = output.get("format", "text")
        if output_format not in OUTPUT_FORMATS:
            raise ConfigError(
                f"output.format must be one of {', '.join(OUTPUT_FORMATS)}, got {output_format!r}")

        return cls(
            width=_positive_int(raster, "width", "raster"),
            height=_positive_int(raster, "height", "raster"),
            ramp=ramp,
            vector_size=_positive_int(vector, "size", "vector"),
            occupied=_single_char(vector, "occupied", "vector"),
            empty=_single_char(vector, "empty", "vector"),
            thresholds=thresholds,
            color=bool(output.get("color", True)),
            output_format=output_format,
        )
