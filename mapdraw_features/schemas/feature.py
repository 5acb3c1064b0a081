"""
Feature Schema
==============

Bounded Context: GeoJSON Feature Data Structures

Normalizes raw feature payloads into immutable Feature / FeatureCollection
values and serializes them back to GeoJSON.

Design Principles:
- Immutability: frozen dataclasses, tuple of features
- Geometry parsed once into the tagged union (see geometry.shapes)
- Serialization: empty 'properties' / 'geometry' are always emitted as {}
- Ordering: features keep their input order

Accepted payloads:
- A JSON list of Feature objects (the stored form)
- A FeatureCollection object
- A single Feature object
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from mapdraw_features.geometry.shapes import (
    AnyGeometry,
    GeometryType,
    UnknownGeometry,
    geometry_from_dict,
)
from mapdraw_features.logging import LogEvent, create_logger

_logger = create_logger("normalizer")

# Members handled explicitly; anything else is a foreign member kept as-is
_FEATURE_MEMBERS = {'type', 'id', 'geometry', 'properties'}


class ParseError(ValueError):
    """Raised when a feature payload is not usable GeoJSON."""


def _parse_geometry(value: Any, index: int) -> Optional[AnyGeometry]:
    if value is None:
        return None
    if isinstance(value, (Mapping, list)) and len(value) == 0:
        return UnknownGeometry(type_name="", payload={})
    if not isinstance(value, Mapping):
        _logger.warning(
            event=LogEvent.GEOMETRY_UNRECOGNIZED,
            message="Geometry kept as-is",
            metadata={'index': index, 'reason': f"not an object: {type(value).__name__}"}
        )
        return UnknownGeometry(type_name="", payload=value)

    try:
        return geometry_from_dict(value)
    except ValueError as e:
        _logger.warning(
            event=LogEvent.GEOMETRY_UNRECOGNIZED,
            message="Geometry kept as-is",
            metadata={'index': index, 'type': value.get('type'), 'reason': str(e)}
        )
        return UnknownGeometry(type_name=str(value.get('type') or ""), payload=dict(value))


def _parse_properties(value: Any) -> Any:
    # Null and [] become {}; any other non-object is kept verbatim
    if value is None:
        return {}
    if isinstance(value, list) and not value:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    return value


@dataclass(frozen=True)
class Feature:
    """
    Immutable GeoJSON Feature.

    Attributes:
        geometry: Tagged geometry, UnknownGeometry, or None for "geometry": null
        properties: Feature properties (possibly empty); a non-object value
            is kept verbatim
        id: Optional feature identifier
        extra: Foreign members, re-emitted unchanged

    Example:
        >>> feature = Feature.from_dict({
        ...     'type': 'Feature',
        ...     'geometry': {'type': 'Point', 'coordinates': [10.0, 50.0]},
        ...     'properties': {},
        ... })
        >>> feature.to_dict()['properties']
        {}
    """
    geometry: Optional[AnyGeometry]
    properties: Any = field(default_factory=dict)
    id: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def geometry_type(self) -> Optional[GeometryType]:
        """Declared geometry type, matched case-insensitively."""
        if self.geometry is None:
            return None
        if isinstance(self.geometry, UnknownGeometry):
            return GeometryType.from_name(self.geometry.type_name)
        return self.geometry.type

    @property
    def has_geometry(self) -> bool:
        """False for a null or empty geometry object."""
        if self.geometry is None:
            return False
        if isinstance(self.geometry, UnknownGeometry):
            return not self.geometry.is_empty
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a GeoJSON Feature object."""
        result: Dict[str, Any] = {'type': 'Feature'}
        if self.id is not None:
            result['id'] = self.id
        result.update(self.extra)
        result['geometry'] = None if self.geometry is None else self.geometry.to_dict()
        if isinstance(self.properties, Mapping):
            result['properties'] = dict(self.properties)
        else:
            result['properties'] = self.properties
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], index: int = 0) -> 'Feature':
        """Deserialize from a GeoJSON Feature object.

        Args:
            data: Feature mapping
            index: Position in the source list (for log context)

        Returns:
            Feature instance

        Raises:
            ValueError: If data is not an object
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Feature must be an object, got {type(data).__name__}")

        return cls(
            geometry=_parse_geometry(data.get('geometry'), index),
            properties=_parse_properties(data.get('properties')),
            id=data.get('id'),
            extra={k: v for k, v in data.items() if k not in _FEATURE_MEMBERS},
        )


@dataclass(frozen=True)
class FeatureCollection:
    """
    Immutable, ordered collection of features.

    Example:
        >>> collection = normalize('[{"type": "Feature", "geometry": {}, "properties": []}]')
        >>> collection.to_json()
        '[{"type": "Feature", "geometry": {}, "properties": {}}]'
    """
    features: Tuple[Feature, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'features', tuple(self.features))

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def __getitem__(self, index: int) -> Feature:
        return self.features[index]

    def to_list(self) -> List[Dict[str, Any]]:
        """Feature list, the form stored by the field."""
        return [feature.to_dict() for feature in self.features]

    def to_dict(self) -> Dict[str, Any]:
        """Wrap as a GeoJSON FeatureCollection object."""
        return {'type': 'FeatureCollection', 'features': self.to_list()}

    def to_json(self) -> str:
        """Serialize the feature list to a JSON string."""
        return json.dumps(self.to_list())

    def positions(self) -> np.ndarray:
        """All (lng, lat) positions of every feature as one (n, 2) array."""
        parts = [
            feature.geometry.positions()[:, :2]
            for feature in self.features
            if feature.geometry is not None
        ]
        parts = [part for part in parts if len(part)]
        if not parts:
            return np.empty((0, 2), dtype=np.float64)
        return np.concatenate(parts, axis=0)


def _decode(raw: Any) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ParseError(f"GeoJSON payload is not UTF-8: {e}") from e

    if not isinstance(raw, str):
        return raw
    if not raw.strip():
        return None

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid GeoJSON: {e}") from e


def _feature_entries(data: Any) -> List[Any]:
    if data is None:
        return []
    if isinstance(data, list):
        return data
    if isinstance(data, Mapping):
        if not data:
            return []
        kind = data.get('type')
        if kind == 'FeatureCollection':
            features = data.get('features') or []
            if not isinstance(features, list):
                raise ParseError("FeatureCollection 'features' must be a list")
            return features
        if kind == 'Feature':
            return [data]
        raise ParseError(f"Expected a Feature or FeatureCollection, got type {kind!r}")
    raise ParseError(f"Expected a list of features, got {type(data).__name__}")


def normalize(raw: Any) -> FeatureCollection:
    """
    Parse a raw feature payload into a FeatureCollection.

    Args:
        raw: JSON string or bytes, decoded list/dict, FeatureCollection, or None

    Returns:
        FeatureCollection in input order (empty for None / blank input)

    Raises:
        ParseError: If the payload is not JSON or not a feature container
    """
    if isinstance(raw, FeatureCollection):
        return raw

    entries = _feature_entries(_decode(raw))

    features = []
    for index, entry in enumerate(entries):
        try:
            features.append(Feature.from_dict(entry, index=index))
        except ValueError as e:
            _logger.warning(
                event=LogEvent.GEOJSON_FEATURE_SKIPPED,
                message="Skipped invalid feature",
                metadata={'index': index, 'reason': str(e)}
            )

    _logger.debug(
        event=LogEvent.GEOJSON_NORMALIZED,
        message=f"Normalized {len(features)} features",
        metadata={'feature_count': len(features), 'skipped': len(entries) - len(features)}
    )
    return FeatureCollection(features=tuple(features))


def serialize(collection: FeatureCollection) -> str:
    """Serialize a collection to the stored JSON feature list."""
    return collection.to_json()
