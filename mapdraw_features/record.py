"""
MapDraw Field Record
====================

The value a CMS field stores: drawn features plus the map viewport.

Design:
- Explicit attributes (south, west, north, east, zoom, features), no
  dynamic property bag
- Features are replaced wholesale; the normalized collection is kept next
  to its JSON string form
- Derived views (bounds, center, feature_collection, points, ...) are plain
  read-only properties
- Invalid payloads degrade to an empty collection; invalid bounds are
  ignored

String form:
    str(record) -> {"bounds": [[w, s], [e, n]], "features": [...], "zoom": 12.0}
"""

import json
from dataclasses import replace
from typing import Any, Dict, Optional

from mapdraw_features.config import MapDrawConfig
from mapdraw_features.geometry.predicates import GeometryPredicates
from mapdraw_features.geometry.shapes import coerce_geometry
from mapdraw_features.logging import LogEvent, StructuredLogger, configure_logging, create_logger
from mapdraw_features.query import FeatureQuery, TypeFilter
from mapdraw_features.schemas.bounds import BoundsRecord
from mapdraw_features.schemas.feature import (
    Feature,
    FeatureCollection,
    ParseError,
    normalize,
)


class MapDrawFeatures:
    """
    Field value: features drawn on a map, with bounds and zoom.

    An explicit config also sets the package log level; logging is
    process-wide, so the most recently applied config wins.

    Attributes:
        config: Field configuration
        logger: Structured logger for payload and bounds events

    Example:
        >>> record = MapDrawFeatures()
        >>> record.features = '[{"type": "Feature", "geometry": {"type": "Point", "coordinates": [10.0, 50.0]}, "properties": []}]'
        >>> record.bounds = [9.0, 49.0, 11.0, 51.0]
        >>> len(record.get_points([10.000001, 50.0]))
        1
    """

    def __init__(
        self,
        config: Optional[MapDrawConfig] = None,
        logger: Optional[StructuredLogger] = None
    ):
        if config is not None:
            configure_logging(config.logging_level)
        self.config = config or MapDrawConfig()
        self.logger = logger or create_logger("record")
        self._viewport = BoundsRecord(zoom=self.config.default_zoom)
        self._query = FeatureQuery(FeatureCollection())

    # ========== Stored values ==========

    @property
    def south(self) -> float:
        return self._viewport.south

    @south.setter
    def south(self, value: Any) -> None:
        self._viewport = replace(self._viewport, south=value)

    @property
    def west(self) -> float:
        return self._viewport.west

    @west.setter
    def west(self, value: Any) -> None:
        self._viewport = replace(self._viewport, west=value)

    @property
    def north(self) -> float:
        return self._viewport.north

    @north.setter
    def north(self, value: Any) -> None:
        self._viewport = replace(self._viewport, north=value)

    @property
    def east(self) -> float:
        return self._viewport.east

    @east.setter
    def east(self, value: Any) -> None:
        self._viewport = replace(self._viewport, east=value)

    @property
    def zoom(self) -> float:
        return self._viewport.zoom

    @zoom.setter
    def zoom(self, value: Any) -> None:
        self._viewport = self._viewport.with_zoom(value)

    @property
    def features(self) -> str:
        """Normalized feature list as a JSON string."""
        return self.collection.to_json()

    @features.setter
    def features(self, value: Any) -> None:
        self.set_features(value)

    def set_features(self, raw: Any) -> 'MapDrawFeatures':
        """
        Replace all features.

        Args:
            raw: JSON string, decoded list/dict, FeatureCollection or None

        Raises:
            ParseError: Only when config.strict is set
        """
        try:
            collection = normalize(raw)
        except ParseError as e:
            if self.config.strict:
                raise
            self.logger.error(
                event=LogEvent.GEOJSON_PARSE_ERROR,
                message="Invalid features payload, storing an empty collection",
                exc_info=e
            )
            collection = FeatureCollection()

        self._query = FeatureQuery(collection)
        return self

    def set_bounds(self, value: Any) -> 'MapDrawFeatures':
        """
        Replace the bounds from [w, s, e, n] or [[w, s], [e, n]] (or JSON).

        Partial or invalid input leaves the current bounds untouched.
        """
        viewport = self._viewport.with_bounds(value)
        if viewport is not self._viewport:
            self._viewport = viewport
            self.logger.debug(
                event=LogEvent.BOUNDS_UPDATED,
                message="Bounds updated",
                metadata={'bounds': viewport.bounds}
            )
        return self

    def fit_bounds(self) -> 'MapDrawFeatures':
        """Set the bounds to the extent of the stored features."""
        extent = BoundsRecord.from_features(self.collection, zoom=self.zoom)
        if extent is None:
            return self

        viewport = self._viewport.with_bounds(extent.bounds)
        if viewport is not self._viewport:
            self._viewport = viewport
            self.logger.debug(
                event=LogEvent.BOUNDS_FITTED,
                message="Bounds fitted to features",
                metadata={'bounds': viewport.bounds, 'feature_count': len(self.collection)}
            )
        return self

    # ========== Derived views ==========

    @property
    def viewport(self) -> BoundsRecord:
        return self._viewport

    @property
    def bounds(self):
        return self._viewport.bounds

    @bounds.setter
    def bounds(self, value: Any) -> None:
        self.set_bounds(value)

    @property
    def center(self):
        return self._viewport.center

    @property
    def lnglat(self) -> str:
        return self._viewport.lnglat

    def has_bounds(self) -> bool:
        return self._viewport.has_bounds()

    @property
    def collection(self) -> FeatureCollection:
        return self._query.collection

    @property
    def feature_collection(self) -> str:
        """Features wrapped as a GeoJSON FeatureCollection string."""
        return json.dumps(self.collection.to_dict())

    @property
    def points(self) -> FeatureCollection:
        return self.get_points()

    @property
    def line_strings(self) -> FeatureCollection:
        return self.get_line_strings()

    @property
    def polygons(self) -> FeatureCollection:
        return self.get_polygons()

    # ========== Queries ==========

    def get_features(self, type_filter: TypeFilter = None, candidate: Any = None) -> FeatureCollection:
        return self._query.query_features(type_filter, candidate)

    def get_feature(
        self,
        type_filter: TypeFilter = None,
        index: int = 0,
        candidate: Any = None
    ) -> Optional[Feature]:
        return self._query.get_feature(type_filter, index, candidate)

    def get_points(self, candidate: Any = None) -> FeatureCollection:
        return self._query.get_points(candidate)

    def get_line_strings(self, candidate: Any = None) -> FeatureCollection:
        return self._query.get_line_strings(candidate)

    def get_polygons(self, candidate: Any = None) -> FeatureCollection:
        return self._query.get_polygons(candidate)

    def get_point(self, index: int = 0, candidate: Any = None) -> Optional[Feature]:
        return self._query.get_point(index, candidate)

    def get_line_string(self, index: int = 0, candidate: Any = None) -> Optional[Feature]:
        return self._query.get_line_string(index, candidate)

    def get_polygon(self, index: int = 0, candidate: Any = None) -> Optional[Feature]:
        return self._query.get_polygon(index, candidate)

    # ========== Predicates ==========
    # Geometry may be given as a GeoJSON mapping instead of a shape.

    def is_point(self, lnglat: Any, point: Any) -> bool:
        try:
            return GeometryPredicates.is_point(lnglat, coerce_geometry(point))
        except ValueError:
            return False

    def on_line_string(self, lnglat: Any, line: Any) -> bool:
        try:
            return GeometryPredicates.on_line_string(lnglat, coerce_geometry(line))
        except ValueError:
            return False

    def in_polygon(self, lnglat: Any, polygon: Any) -> bool:
        try:
            geometry = coerce_geometry(polygon)
        except ValueError as e:
            self.logger.warning(
                event=LogEvent.GEOMETRY_INVALID,
                message="Invalid polygon",
                metadata={'reason': str(e)}
            )
            return False
        return GeometryPredicates.in_polygon(lnglat, geometry)

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON-compatible string view."""
        return {
            'bounds': self.bounds,
            'features': self.collection.to_list(),
            'zoom': self.zoom,
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict())

    def __repr__(self) -> str:
        return (
            f"MapDrawFeatures(features={len(self.collection)}, "
            f"bounds={self.bounds}, zoom={self.zoom})"
        )

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        config: Optional[MapDrawConfig] = None
    ) -> 'MapDrawFeatures':
        """
        Rebuild a record from its string view (or stored field values).

        Accepts 'bounds' or separate south/west/north/east keys.
        """
        record = cls(config=config)
        record.set_features(data.get('features'))
        if 'bounds' in data:
            record.set_bounds(data['bounds'])
        else:
            record.set_bounds([
                data.get('west', 0.0),
                data.get('south', 0.0),
                data.get('east', 0.0),
                data.get('north', 0.0),
            ])
        if data.get('zoom') is not None:
            record.zoom = data['zoom']
        return record

    @classmethod
    def from_json(cls, text: str, config: Optional[MapDrawConfig] = None) -> 'MapDrawFeatures':
        """
        Rebuild a record from str(record).

        Raises:
            ParseError: If text is not a JSON object
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid record JSON: {e}") from e
        if not isinstance(data, dict):
            raise ParseError("Record JSON must be an object")
        return cls.from_dict(data, config=config)
