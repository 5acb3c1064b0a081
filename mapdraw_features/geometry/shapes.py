"""
Geometric Shapes Module
========================

Pure GeoJSON geometry representations - NO state, NO side effects.

Design:
- One immutable dataclass per GeoJSON geometry type (tagged union)
- Positions stored as read-only float64 arrays in (lng, lat) order
- Nesting validated once at construction, never re-inspected by predicates
- Unknown or malformed geometry objects kept verbatim as UnknownGeometry
- Members other than type/coordinates (e.g. bbox) carried in 'extra'
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np


class GeometryType(str, Enum):
    """GeoJSON geometry type tags handled by the query engine."""
    POINT = "Point"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"
    MULTI_POINT = "MultiPoint"
    MULTI_LINE_STRING = "MultiLineString"
    MULTI_POLYGON = "MultiPolygon"

    @classmethod
    def from_name(cls, name: Any) -> Optional['GeometryType']:
        """Case-insensitive lookup; None for anything unknown."""
        if isinstance(name, GeometryType):
            return name
        if not isinstance(name, str):
            return None
        wanted = name.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return None


def _positions(value: Any) -> np.ndarray:
    """
    Convert a list of GeoJSON positions into an (n, k) read-only array.

    Raises:
        ValueError: If the value is not a homogeneous list of numeric
            positions with at least 2 finite ordinates each
    """
    if isinstance(value, np.ndarray):
        array = np.array(value, dtype=np.float64)
    else:
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"positions must be a list, got {type(value).__name__}")
        if len(value) == 0:
            array = np.empty((0, 2), dtype=np.float64)
        else:
            for position in value:
                _check_position(position)
            try:
                array = np.array(value, dtype=np.float64)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid positions: {e}")

    if array.ndim != 2 or array.shape[1] < 2:
        raise ValueError(f"positions must be an Nx2 (or wider) array, got shape {array.shape}")
    if not np.all(np.isfinite(array)):
        raise ValueError("positions must be finite")

    array.flags.writeable = False
    return array


def _check_position(value: Any) -> None:
    if not isinstance(value, (list, tuple, np.ndarray)):
        raise ValueError(f"position must be a list, got {type(value).__name__}")
    for ordinate in value:
        if isinstance(ordinate, bool) or not isinstance(ordinate, (int, float, np.number)):
            raise ValueError(f"position ordinates must be numbers, got {ordinate!r}")


def _position(value: Any) -> np.ndarray:
    """Single position as a read-only (k,) array."""
    if not isinstance(value, np.ndarray):
        _check_position(value)
    array = _positions([value])[0].copy()
    array.flags.writeable = False
    return array


def _nested(value: Any, name: str) -> list:
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{name} must be a list, got {type(value).__name__}")
    return list(value)


class _Shape:
    """Shared behaviour of the tagged geometry variants."""

    type: ClassVar[GeometryType]

    @property
    def type_name(self) -> str:
        return self.type.value

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a GeoJSON geometry object, foreign members last."""
        result = {'type': self.type.value, 'coordinates': self._coordinates_list()}
        result.update(self.extra)
        return result

    def _coordinates_list(self) -> Any:
        raise NotImplementedError

    def positions(self) -> np.ndarray:
        """All positions of the geometry as one (n, k) array."""
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Shape):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._coordinates_list()!r})"


@dataclass(frozen=True, eq=False, repr=False)
class Point(_Shape):
    """A single (lng, lat[, alt]) position."""

    coordinates: np.ndarray
    extra: Dict[str, Any] = field(default_factory=dict)
    type: ClassVar[GeometryType] = GeometryType.POINT

    def __post_init__(self):
        object.__setattr__(self, 'coordinates', _position(self.coordinates))

    def _coordinates_list(self) -> Any:
        return self.coordinates.tolist()

    def positions(self) -> np.ndarray:
        return self.coordinates.reshape(1, -1)


@dataclass(frozen=True, eq=False, repr=False)
class LineString(_Shape):
    """Ordered vertices of a line."""

    coordinates: np.ndarray
    extra: Dict[str, Any] = field(default_factory=dict)
    type: ClassVar[GeometryType] = GeometryType.LINE_STRING

    def __post_init__(self):
        object.__setattr__(self, 'coordinates', _positions(self.coordinates))

    def _coordinates_list(self) -> Any:
        return self.coordinates.tolist()

    def positions(self) -> np.ndarray:
        return self.coordinates


@dataclass(frozen=True, eq=False, repr=False)
class MultiPoint(_Shape):
    """Unordered set of points stored as one position array."""

    coordinates: np.ndarray
    extra: Dict[str, Any] = field(default_factory=dict)
    type: ClassVar[GeometryType] = GeometryType.MULTI_POINT

    def __post_init__(self):
        object.__setattr__(self, 'coordinates', _positions(self.coordinates))

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(Point(position) for position in self.coordinates)

    def _coordinates_list(self) -> Any:
        return self.coordinates.tolist()

    def positions(self) -> np.ndarray:
        return self.coordinates


@dataclass(frozen=True, eq=False, repr=False)
class Polygon(_Shape):
    """
    Polygon as a tuple of rings.

    The first ring is the outer boundary; any further rings are holes.
    Rings are kept as given (closing vertex included when present).
    """

    coordinates: Tuple[np.ndarray, ...]
    extra: Dict[str, Any] = field(default_factory=dict)
    type: ClassVar[GeometryType] = GeometryType.POLYGON

    def __post_init__(self):
        rings = tuple(_positions(ring) for ring in _nested(self.coordinates, "Polygon rings"))
        object.__setattr__(self, 'coordinates', rings)

    @property
    def outer_ring(self) -> Optional[np.ndarray]:
        return self.coordinates[0] if self.coordinates else None

    def _coordinates_list(self) -> Any:
        return [ring.tolist() for ring in self.coordinates]

    def positions(self) -> np.ndarray:
        if not self.coordinates:
            return np.empty((0, 2), dtype=np.float64)
        return _stack(self.coordinates)


@dataclass(frozen=True, eq=False, repr=False)
class MultiLineString(_Shape):
    """Tuple of independent lines."""

    coordinates: Tuple[np.ndarray, ...]
    extra: Dict[str, Any] = field(default_factory=dict)
    type: ClassVar[GeometryType] = GeometryType.MULTI_LINE_STRING

    def __post_init__(self):
        lines = tuple(_positions(line) for line in _nested(self.coordinates, "MultiLineString lines"))
        object.__setattr__(self, 'coordinates', lines)

    @property
    def lines(self) -> Tuple[LineString, ...]:
        return tuple(LineString(line) for line in self.coordinates)

    def _coordinates_list(self) -> Any:
        return [line.tolist() for line in self.coordinates]

    def positions(self) -> np.ndarray:
        if not self.coordinates:
            return np.empty((0, 2), dtype=np.float64)
        return _stack(self.coordinates)


@dataclass(frozen=True, eq=False, repr=False)
class MultiPolygon(_Shape):
    """Tuple of independent polygons."""

    coordinates: Tuple[Polygon, ...]
    extra: Dict[str, Any] = field(default_factory=dict)
    type: ClassVar[GeometryType] = GeometryType.MULTI_POLYGON

    def __post_init__(self):
        polygons = tuple(
            polygon if isinstance(polygon, Polygon) else Polygon(polygon)
            for polygon in _nested(self.coordinates, "MultiPolygon polygons")
        )
        object.__setattr__(self, 'coordinates', polygons)

    @property
    def polygons(self) -> Tuple[Polygon, ...]:
        return self.coordinates

    def _coordinates_list(self) -> Any:
        return [polygon._coordinates_list() for polygon in self.coordinates]

    def positions(self) -> np.ndarray:
        parts = [polygon.positions() for polygon in self.coordinates]
        parts = [part for part in parts if len(part)]
        if not parts:
            return np.empty((0, 2), dtype=np.float64)
        return _stack(parts)


@dataclass(frozen=True)
class UnknownGeometry:
    """
    Geometry object that is not one of the six supported variants.

    Covers unknown types (e.g. GeometryCollection), coordinates that do not
    nest the way their tag requires, the empty geometry object ``{}`` and
    geometry members that are not objects at all. The payload is re-emitted
    verbatim.
    """

    type_name: str
    payload: Any

    def to_dict(self) -> Any:
        if isinstance(self.payload, Mapping):
            return dict(self.payload)
        return self.payload

    def positions(self) -> np.ndarray:
        return np.empty((0, 2), dtype=np.float64)

    @property
    def is_empty(self) -> bool:
        return not self.payload


Geometry = Union[Point, LineString, Polygon, MultiPoint, MultiLineString, MultiPolygon]
AnyGeometry = Union[Geometry, UnknownGeometry]
Coordinate = Tuple[float, float]

GEOMETRY_CLASSES = {
    GeometryType.POINT: Point,
    GeometryType.LINE_STRING: LineString,
    GeometryType.POLYGON: Polygon,
    GeometryType.MULTI_POINT: MultiPoint,
    GeometryType.MULTI_LINE_STRING: MultiLineString,
    GeometryType.MULTI_POLYGON: MultiPolygon,
}


_GEOMETRY_MEMBERS = {'type', 'coordinates'}


def _stack(arrays: Sequence[np.ndarray]) -> np.ndarray:
    # Positions of mixed dimension are truncated to (lng, lat)
    widths = {array.shape[1] for array in arrays}
    if len(widths) > 1:
        arrays = [array[:, :2] for array in arrays]
    return np.concatenate(arrays, axis=0)


def geometry_from_dict(data: Mapping[str, Any]) -> Geometry:
    """
    Build the tagged geometry for a GeoJSON geometry object.

    Args:
        data: Mapping with 'type' and 'coordinates'; other members
            (e.g. bbox) are kept in the variant's extra

    Returns:
        One of the six geometry variants

    Raises:
        ValueError: If the type is unsupported or coordinates malformed
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"geometry must be an object, got {type(data).__name__}")

    geometry_type = GeometryType.from_name(data.get('type'))
    if geometry_type is None:
        raise ValueError(f"Unsupported geometry type: {data.get('type')!r}")
    if 'coordinates' not in data:
        raise ValueError(f"{geometry_type.value} geometry has no coordinates")

    extra = {k: v for k, v in data.items() if k not in _GEOMETRY_MEMBERS}
    try:
        return GEOMETRY_CLASSES[geometry_type](data['coordinates'], extra=extra)
    except TypeError as e:
        raise ValueError(f"Invalid {geometry_type.value} coordinates: {e}")


def coerce_geometry(value: Any) -> AnyGeometry:
    """Accept an existing geometry or build one from a GeoJSON mapping."""
    if isinstance(value, (_Shape, UnknownGeometry)):
        return value
    return geometry_from_dict(value)
