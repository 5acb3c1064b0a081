"""
MapDraw Features v1.0
=====================

Bounded Context: Geographic features drawn on a map field.

Design Philosophy:
- Separation of Concerns: Geometry, Schemas, Query, Record separated
- Geometry parsed once into a tagged union, queried many times
- Pure, immutable values; the field record only swaps whole values

Architecture:

    mapdraw_features/
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── shapes.py      # Point, LineString, Polygon, Multi*
    │   └── predicates.py  # GeometryPredicates (is_point, on_line_string, in_polygon)
    │
    ├── schemas/           # Stored values
    │   ├── feature.py     # Feature, FeatureCollection, normalize()
    │   └── bounds.py      # BoundsRecord
    │
    ├── query.py           # FeatureQuery (type / coordinate filtering)
    ├── record.py          # MapDrawFeatures (the field value)
    ├── config.py          # MapDrawConfig (YAML)
    └── logging/           # Structured JSON logging

Usage:

    from mapdraw_features import MapDrawFeatures

    record = MapDrawFeatures()
    record.features = stored_json
    record.bounds = [west, south, east, north]

    polygons = record.get_polygons([10.0, 50.0])
    first_point = record.get_point(0)
    print(record.feature_collection)
"""

# Geometry Layer (immutable, stateless)
from mapdraw_features.geometry import (
    GeometryPredicates,
    GeometryType,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    UnknownGeometry,
)

# Schemas
from mapdraw_features.schemas import (
    BoundsRecord,
    Feature,
    FeatureCollection,
    ParseError,
    normalize,
    serialize,
)

# Query Engine
from mapdraw_features.query import FeatureQuery, query_features

# Field Record
from mapdraw_features.config import MapDrawConfig, load_config
from mapdraw_features.record import MapDrawFeatures

__all__ = [
    # Geometry
    "GeometryPredicates",
    "GeometryType",
    "Point",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "UnknownGeometry",
    # Schemas
    "BoundsRecord",
    "Feature",
    "FeatureCollection",
    "ParseError",
    "normalize",
    "serialize",
    # Query
    "FeatureQuery",
    "query_features",
    # Record
    "MapDrawConfig",
    "load_config",
    "MapDrawFeatures",
]

__version__ = "1.0.0"
