"""
Geometry Layer
==============

Bounded Context: GeoJSON geometry and point predicates.

Responsibilities:
- Geometry representation (immutable tagged union)
- Point equality, point-on-line and point-in-polygon tests
- NO parsing of feature payloads, NO filtering, NO persistence
"""

from mapdraw_features.geometry.shapes import (
    AnyGeometry,
    Coordinate,
    Geometry,
    GeometryType,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    UnknownGeometry,
    coerce_geometry,
    geometry_from_dict,
)
from mapdraw_features.geometry.predicates import GeometryPredicates

__all__ = [
    "AnyGeometry",
    "Coordinate",
    "Geometry",
    "GeometryType",
    "Point",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "UnknownGeometry",
    "coerce_geometry",
    "geometry_from_dict",
    "GeometryPredicates",
]
