"""
Bounds Schema
=============

Bounded Context: Map Viewport

Immutable bounding box plus zoom level, as synchronized by the map widget.

Invariants:
- All five values are finite floats
- 0.0 means "unset": bounds are only present when south, west, north and
  east are all non-zero, so the equator and prime meridian cannot be used
  as a bound
"""

import json
import math
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, List, Optional

from mapdraw_features.schemas.feature import FeatureCollection

DEFAULT_ZOOM = 12.0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_ordinate(value: float) -> str:
    return str(int(value)) if value.is_integer() else repr(value)


@dataclass(frozen=True)
class BoundsRecord:
    """
    Immutable south/west/north/east bounds with a zoom level.

    Attributes:
        south: Southern latitude
        west: Western longitude
        north: Northern latitude
        east: Eastern longitude
        zoom: Map zoom level

    Example:
        >>> record = BoundsRecord().with_bounds([1.0, 2.0, 3.0, 4.0])
        >>> record.bounds
        [[1.0, 2.0], [3.0, 4.0]]
        >>> record.center
        [2.0, 3.0]
    """
    south: float = 0.0
    west: float = 0.0
    north: float = 0.0
    east: float = 0.0
    zoom: float = DEFAULT_ZOOM

    def __post_init__(self):
        """Coerce to float and validate."""
        for name in ('south', 'west', 'north', 'east', 'zoom'):
            try:
                value = float(getattr(self, name))
            except (TypeError, ValueError):
                raise ValueError(f"{name} must be a number, got {getattr(self, name)!r}")
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, value)

    @classmethod
    def parse(cls, value: Any, zoom: float = DEFAULT_ZOOM) -> Optional['BoundsRecord']:
        """
        Build a record from bounds input.

        Accepts a flat [west, south, east, north] list or a nested
        [[west, south], [east, north]] list, JSON-decoded first when given
        as a string.

        Returns:
            BoundsRecord, or None when the input is partial or invalid
            (including any of the four values being zero)
        """
        if isinstance(value, (str, bytes, bytearray)):
            try:
                value = json.loads(value)
            except (ValueError, UnicodeDecodeError):
                return None

        if not isinstance(value, (list, tuple)) or not value:
            return None

        start = value[0]
        try:
            if isinstance(start, (list, tuple)):
                (west, south), (east, north) = value[0], value[1]
            elif _is_number(start):
                west, south, east, north = value
            else:
                return None
        except (TypeError, ValueError, IndexError):
            return None

        values = (west, south, east, north)
        if not all(_is_number(v) and math.isfinite(v) for v in values):
            return None
        if not all(values):
            return None

        return cls(south=south, west=west, north=north, east=east, zoom=zoom)

    @classmethod
    def from_features(
        cls,
        collection: FeatureCollection,
        zoom: float = DEFAULT_ZOOM
    ) -> Optional['BoundsRecord']:
        """
        Extent of every position in the collection.

        Returns:
            BoundsRecord, or None when the collection has no positions
        """
        positions = collection.positions()
        if len(positions) == 0:
            return None

        west, south = positions.min(axis=0).tolist()
        east, north = positions.max(axis=0).tolist()
        return cls(south=south, west=west, north=north, east=east, zoom=zoom)

    def with_bounds(self, value: Any) -> 'BoundsRecord':
        """New record with the given bounds; self when the input is invalid."""
        parsed = self.parse(value, zoom=self.zoom)
        return parsed if parsed is not None else self

    def with_zoom(self, zoom: Any) -> 'BoundsRecord':
        return replace(self, zoom=zoom)

    @property
    def bounds(self) -> List[List[float]]:
        """[[west, south], [east, north]]"""
        return [[self.west, self.south], [self.east, self.north]]

    @property
    def center(self) -> List[float]:
        """[lng, lat] midpoint of the bounds."""
        return [(self.west + self.east) / 2, (self.south + self.north) / 2]

    @property
    def lnglat(self) -> str:
        """Center as a "lng,lat" string."""
        return ",".join(_format_ordinate(v) for v in self.center)

    def has_bounds(self) -> bool:
        return bool(self.south and self.west and self.north and self.east)

    def to_dict(self) -> Dict[str, float]:
        """Serialize to JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BoundsRecord':
        """Deserialize from dict; missing values take their defaults.

        Raises:
            ValueError: If a value is not a finite number
        """
        return cls(
            south=data.get('south', 0.0),
            west=data.get('west', 0.0),
            north=data.get('north', 0.0),
            east=data.get('east', 0.0),
            zoom=data.get('zoom', DEFAULT_ZOOM),
        )
