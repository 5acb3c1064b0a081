"""
Feature Query Module
====================

Filter a FeatureCollection by geometry type and/or a candidate coordinate.

Design:
- Read-only: the collection is never mutated, results are new collections
- Type filter is case-insensitive against each feature's declared type
- The predicate is chosen by the feature's own geometry type
- Index lookups return None when out of range
"""

import json
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

from mapdraw_features.geometry.predicates import GeometryPredicates
from mapdraw_features.geometry.shapes import GeometryType
from mapdraw_features.logging import LogEvent, create_logger
from mapdraw_features.schemas.feature import Feature, FeatureCollection, normalize

_logger = create_logger("query")

TypeFilter = Union[None, str, GeometryType, Iterable[Union[str, GeometryType]]]

POINT_TYPES = (GeometryType.POINT, GeometryType.MULTI_POINT)
LINE_STRING_TYPES = (GeometryType.LINE_STRING, GeometryType.MULTI_LINE_STRING)
POLYGON_TYPES = (GeometryType.POLYGON, GeometryType.MULTI_POLYGON)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _looks_like_coordinate(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and all(_is_number(v) for v in value)
    )


def parse_type_filter(value: TypeFilter) -> FrozenSet[GeometryType]:
    """
    Normalize a type filter to a set of GeometryType.

    Accepts a GeometryType, a name, a "Point|MultiPoint" string, or an
    iterable of those. Unknown names are ignored.
    """
    if value is None:
        return frozenset()
    if isinstance(value, (str, GeometryType)):
        value = [value]

    types = set()
    for item in value:
        names = item.split('|') if isinstance(item, str) and not isinstance(item, GeometryType) else [item]
        for name in names:
            geometry_type = GeometryType.from_name(name)
            if geometry_type is not None:
                types.add(geometry_type)
    return frozenset(types)


def parse_lnglat(value: Any) -> Optional[Tuple[float, float]]:
    """
    Normalize a candidate coordinate to a (lng, lat) tuple.

    Accepts a 2-sequence, a mapping with 'lng' and 'lat', a "lng,lat"
    string, or a JSON string {"lng": .., "lat": ..}.

    Returns:
        (lng, lat), or None for None / empty input

    Raises:
        ValueError: If the value cannot be read as a coordinate
    """
    if value is None:
        return None
    if isinstance(value, (str, list, tuple, Mapping)) and len(value) == 0:
        return None

    if isinstance(value, str):
        if 'lng' in value:
            try:
                value = json.loads(value)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid lnglat: {value!r}") from e
        else:
            value = value.replace(' ', '').split(',')

    try:
        if isinstance(value, Mapping):
            lng, lat = value['lng'], value['lat']
        else:
            lng, lat = value
        return float(lng), float(lat)
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid lnglat: {value!r}") from e


class FeatureQuery:
    """
    Query engine over one FeatureCollection snapshot.

    Usage:
        query = FeatureQuery(collection)
        polygons = query.get_polygons()
        hits = query.query_features("Polygon", candidate=(10.0, 50.0))
        first = query.get_feature("Point", 0)
    """

    def __init__(self, collection: Any):
        """
        Args:
            collection: FeatureCollection, or any payload accepted by normalize()
        """
        self.collection = normalize(collection)

    def query_features(
        self,
        type_filter: TypeFilter = None,
        candidate: Any = None
    ) -> FeatureCollection:
        """
        Features matching a type filter and/or a candidate coordinate.

        A coordinate passed in place of the type filter is used as the
        candidate.

        Args:
            type_filter: Geometry types to keep (empty = all types)
            candidate: (lng, lat) the feature must contain / coincide with

        Returns:
            The collection itself when neither filter is given, otherwise a
            new collection in the original order
        """
        if candidate is None and _looks_like_coordinate(type_filter):
            type_filter, candidate = None, type_filter

        types = parse_type_filter(type_filter)
        lnglat = parse_lnglat(candidate)

        if not types and lnglat is None:
            return self.collection

        results = []
        for feature in self.collection:
            if not feature.has_geometry:
                continue
            if types and feature.geometry_type not in types:
                continue
            if lnglat is not None and not GeometryPredicates.matches(lnglat, feature.geometry):
                continue
            results.append(feature)

        _logger.debug(
            event=LogEvent.QUERY_EXECUTED,
            message=f"Matched {len(results)} of {len(self.collection)} features",
            metadata={
                'types': sorted(t.value for t in types),
                'lnglat': list(lnglat) if lnglat is not None else None,
                'matched': len(results),
            }
        )
        return FeatureCollection(features=tuple(results))

    def get_feature(
        self,
        type_filter: TypeFilter = None,
        index: int = 0,
        candidate: Any = None
    ) -> Optional[Feature]:
        """N-th (0-based) matching feature, or None when out of range."""
        if index < 0:
            return None
        matches = self.query_features(type_filter, candidate)
        return matches[index] if index < len(matches) else None

    def get_points(self, candidate: Any = None) -> FeatureCollection:
        return self.query_features(POINT_TYPES, candidate)

    def get_line_strings(self, candidate: Any = None) -> FeatureCollection:
        return self.query_features(LINE_STRING_TYPES, candidate)

    def get_polygons(self, candidate: Any = None) -> FeatureCollection:
        return self.query_features(POLYGON_TYPES, candidate)

    def get_point(self, index: int = 0, candidate: Any = None) -> Optional[Feature]:
        return self.get_feature(POINT_TYPES, index, candidate)

    def get_line_string(self, index: int = 0, candidate: Any = None) -> Optional[Feature]:
        return self.get_feature(LINE_STRING_TYPES, index, candidate)

    def get_polygon(self, index: int = 0, candidate: Any = None) -> Optional[Feature]:
        return self.get_feature(POLYGON_TYPES, index, candidate)


def query_features(
    collection: Any,
    type_filter: TypeFilter = None,
    candidate: Any = None
) -> FeatureCollection:
    """Functional shorthand for FeatureQuery(collection).query_features(...)."""
    return FeatureQuery(collection).query_features(type_filter, candidate)
