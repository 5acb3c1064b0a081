"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for the structured logger.

Event Naming Convention:
    <component>.<category>.<action>

    component: geojson, geometry, bounds, query, error
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - geojson.*: Normalizing and serializing feature payloads
    - geometry.*: Geometry construction and predicates
    - bounds.*: Bounding box / viewport changes
    - query.*: Feature queries
    - error.*: Error conditions
    """

    # ========== GeoJSON Events ==========
    GEOJSON_NORMALIZED = "geojson.normalized"
    """Raw payload normalized into a FeatureCollection."""

    GEOJSON_FEATURE_SKIPPED = "geojson.feature.skipped"
    """Entry in the feature list was not a JSON object."""

    # ========== Geometry Events ==========
    GEOMETRY_UNRECOGNIZED = "geometry.unrecognized"
    """Geometry kept verbatim because its type or nesting is unknown."""

    GEOMETRY_INVALID = "geometry.invalid"
    """Geometry could not be evaluated by a predicate."""

    # ========== Bounds Events ==========
    BOUNDS_UPDATED = "bounds.updated"
    """Bounds replaced on a field record."""

    BOUNDS_FITTED = "bounds.fitted"
    """Bounds derived from the extent of the stored features."""

    # ========== Query Events ==========
    QUERY_EXECUTED = "query.executed"
    """Feature query evaluated."""

    # ========== Error Events ==========
    GEOJSON_PARSE_ERROR = "error.geojson_parse"
    """Feature payload could not be parsed."""

