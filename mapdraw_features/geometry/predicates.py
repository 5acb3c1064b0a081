"""
Geometry Predicates Module
==========================

Stateless spatial predicates - match a (lng, lat) candidate against geometry.

Design:
- Pure functions (static methods, no instance state)
- Dispatch on the geometry variant, never on nested list shapes
- Multi* variants are the logical OR of their constituents
- Never raise on bad geometry: report it and answer False

Numeric semantics:
- Two positions are equal when both ordinates differ by at most 1e-6
  (6 decimal places).
- Polygon containment is the even-odd ray-casting rule over the outer ring.
"""

from typing import Any, Optional

import numpy as np

from mapdraw_features.geometry.shapes import (
    AnyGeometry,
    GeometryType,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    UnknownGeometry,
)
from mapdraw_features.logging import LogEvent, create_logger

PRECISION = 6
TOLERANCE = 10.0 ** -PRECISION

# Absorbs the binary representation error of the difference
_SLACK = 1e-12

_logger = create_logger("predicates")


def as_candidate(candidate: Any) -> Optional[np.ndarray]:
    """Candidate as a (2,) float array, or None if it is not a 2-ordinate position."""
    try:
        array = np.asarray(candidate, dtype=np.float64)
    except (TypeError, ValueError):
        return None
    if array.shape != (2,) or not np.all(np.isfinite(array)):
        return None
    return array


def _matches_any(candidate: np.ndarray, positions: np.ndarray) -> bool:
    """True if candidate equals any row of an (n, k) position array."""
    if len(positions) == 0 or positions.shape[1] != 2:
        return False
    diff = np.abs(positions - candidate)
    return bool(np.any(np.all(diff <= TOLERANCE + _SLACK, axis=1)))


def _ray_cast(candidate: np.ndarray, ring: np.ndarray) -> bool:
    """
    Even-odd crossing test of one ring.

    Runs on swapped (lat, lng) pairs: x is latitude, y is longitude. Edge
    (i, j) pairs each vertex with its predecessor, the first vertex with
    the last one.
    """
    x, y = candidate[1], candidate[0]
    xi, yi = ring[:, 1], ring[:, 0]
    xj, yj = np.roll(xi, 1), np.roll(yi, 1)

    straddles = (yi > y) != (yj > y)
    if not straddles.any():
        return False

    with np.errstate(divide='ignore', invalid='ignore'):
        x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi

    crossings = np.count_nonzero(straddles & (x < x_cross))
    return bool(crossings % 2)


def _report_invalid_polygon(polygon: Any) -> None:
    payload = polygon.to_dict() if hasattr(polygon, 'to_dict') else repr(polygon)
    _logger.warning(
        event=LogEvent.GEOMETRY_INVALID,
        message="Invalid polygon",
        metadata={'geometry': payload}
    )


class GeometryPredicates:
    """
    Point predicates over GeoJSON geometry.

    All methods are static and side-effect free apart from logging
    malformed polygons.
    """

    @staticmethod
    def is_point(candidate: Any, point: AnyGeometry) -> bool:
        """
        Is the candidate the Point (or any point of a MultiPoint)?

        Args:
            candidate: (lng, lat) position
            point: Point or MultiPoint

        Returns:
            True on a 6-decimal match; False when either position does not
            have exactly 2 ordinates
        """
        lnglat = as_candidate(candidate)
        if lnglat is None:
            return False

        if isinstance(point, Point):
            return _matches_any(lnglat, point.positions())
        if isinstance(point, MultiPoint):
            return any(
                GeometryPredicates.is_point(lnglat, p) for p in point.points
            )
        return False

    @staticmethod
    def on_line_string(candidate: Any, line: AnyGeometry) -> bool:
        """
        Is the candidate on the LineString (or any line of a MultiLineString)?

        Only vertex coincidence is tested: a candidate lying on a segment
        between two vertices does not match.

        Args:
            candidate: (lng, lat) position
            line: LineString or MultiLineString

        Returns:
            True if the candidate equals any vertex under the is_point rule
        """
        lnglat = as_candidate(candidate)
        if lnglat is None:
            return False

        if isinstance(line, LineString):
            return _matches_any(lnglat, line.coordinates)
        if isinstance(line, MultiLineString):
            return any(
                GeometryPredicates.on_line_string(lnglat, ls) for ls in line.lines
            )
        return False

    @staticmethod
    def in_polygon(candidate: Any, polygon: AnyGeometry) -> bool:
        """
        Is the candidate inside the Polygon (or any polygon of a MultiPolygon)?

        Only the outer ring is tested; holes are ignored. Points on an edge
        follow the ray-casting boundary convention.

        Args:
            candidate: (lng, lat) position
            polygon: Polygon or MultiPolygon

        Returns:
            True if inside; False (and a logged warning) for malformed input
        """
        lnglat = as_candidate(candidate)
        if lnglat is None:
            return False

        if isinstance(polygon, MultiPolygon):
            return any(
                GeometryPredicates.in_polygon(lnglat, p) for p in polygon.polygons
            )

        if not isinstance(polygon, Polygon):
            _report_invalid_polygon(polygon)
            return False

        ring = polygon.outer_ring
        if ring is None or len(ring) == 0:
            _report_invalid_polygon(polygon)
            return False

        return _ray_cast(lnglat, ring)

    @staticmethod
    def matches(candidate: Any, geometry: AnyGeometry) -> bool:
        """
        Apply the predicate that belongs to the geometry's own type.

        Unknown geometry only reaches a predicate when its declared type
        names one, so a malformed polygon is still reported.
        """
        if isinstance(geometry, UnknownGeometry):
            geometry_type = GeometryType.from_name(geometry.type_name)
        else:
            geometry_type = geometry.type

        predicate = _PREDICATES.get(geometry_type)
        if predicate is None:
            return False
        return predicate(candidate, geometry)


_PREDICATES = {
    GeometryType.POINT: GeometryPredicates.is_point,
    GeometryType.MULTI_POINT: GeometryPredicates.is_point,
    GeometryType.LINE_STRING: GeometryPredicates.on_line_string,
    GeometryType.MULTI_LINE_STRING: GeometryPredicates.on_line_string,
    GeometryType.POLYGON: GeometryPredicates.in_polygon,
    GeometryType.MULTI_POLYGON: GeometryPredicates.in_polygon,
}
