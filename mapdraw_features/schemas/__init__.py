"""
MapDraw Schemas
===============

Bounded Context: Data Structures

Immutable, typed values for the stored field data.

Public API
----------
Feature Types:
    Feature: Single GeoJSON feature
    FeatureCollection: Ordered feature list
    ParseError: Invalid feature payload
    normalize: Raw payload -> FeatureCollection
    serialize: FeatureCollection -> stored JSON string

Viewport Types:
    BoundsRecord: Bounds + zoom with derived views
"""

from .feature import Feature, FeatureCollection, ParseError, normalize, serialize
from .bounds import BoundsRecord, DEFAULT_ZOOM

__all__ = [
    'Feature',
    'FeatureCollection',
    'ParseError',
    'normalize',
    'serialize',
    'BoundsRecord',
    'DEFAULT_ZOOM',
]
