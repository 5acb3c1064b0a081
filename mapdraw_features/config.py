"""
Configuration schema for the MapDraw field.

Defines the defaults applied to new field records and how payload errors
are handled. Loaded from YAML and validated at construction.

Example YAML:

    default_zoom: 10
    strict: false
    log_level: INFO
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from mapdraw_features.schemas.bounds import DEFAULT_ZOOM

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class MapDrawConfig:
    """
    Field configuration.

    Attributes:
        default_zoom: Zoom of a record that has never been saved
        strict: Re-raise ParseError on invalid feature payloads instead of
            logging it and storing an empty collection
        log_level: Level name for the structured loggers
    """

    default_zoom: float = DEFAULT_ZOOM
    strict: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration."""
        try:
            zoom = float(self.default_zoom)
        except (TypeError, ValueError):
            raise ValueError(f"default_zoom must be a number, got {self.default_zoom!r}")
        if not 0.0 <= zoom <= 24.0:
            raise ValueError(
                f"default_zoom must be in [0, 24], got {zoom}"
            )
        object.__setattr__(self, 'default_zoom', zoom)

        if not isinstance(self.strict, bool):
            raise ValueError(f"strict must be a boolean, got {self.strict!r}")

        level = str(self.log_level).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. "
                f"Must be one of {sorted(VALID_LOG_LEVELS)}"
            )
        object.__setattr__(self, 'log_level', level)

    @property
    def logging_level(self) -> int:
        """Numeric level for logging.setLevel()."""
        return getattr(logging, self.log_level)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MapDrawConfig':
        """
        Build from a mapping, rejecting unknown keys.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**data)


def load_config(config_path: Union[str, Path]) -> MapDrawConfig:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to YAML file

    Returns:
        Validated MapDrawConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If YAML is invalid or values fail validation
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")

    if data is None:
        return MapDrawConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping in {config_path}")
    return MapDrawConfig.from_dict(data)
