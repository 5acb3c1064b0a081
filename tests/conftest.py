"""Shared fixtures for the MapDraw feature tests."""

import json
import logging

import pytest

from mapdraw_features import normalize


SQUARE = [[0.5, 0.5], [2.5, 0.5], [2.5, 2.5], [0.5, 2.5], [0.5, 0.5]]
FAR_SQUARE = [[20.0, 20.0], [22.0, 20.0], [22.0, 22.0], [20.0, 22.0], [20.0, 20.0]]


def feature(geometry, properties=None, **extra):
    data = {"type": "Feature", "geometry": geometry, "properties": properties if properties is not None else {}}
    data.update(extra)
    return data


@pytest.fixture
def package_logger():
    """The package logger, with its level restored afterwards."""
    logger = logging.getLogger("mapdraw_features")
    level = logger.level
    yield logger
    logger.setLevel(level)

@pytest.fixture
def point_payload():
    return json.dumps([feature({"type": "Point", "coordinates": [10.0, 50.0]})])


@pytest.fixture
def mixed_features():
    return [
        feature({"type": "Point", "coordinates": [10.0, 50.0]}, {"name": "marker"}),
        feature({"type": "LineString", "coordinates": [[1.0, 1.0], [2.0, 2.0], [3.0, 1.0]]}),
        feature({"type": "Polygon", "coordinates": [SQUARE]}, {"name": "square"}),
        feature({"type": "MultiPoint", "coordinates": [[5.0, 5.0], [6.0, 6.0]]}),
        feature({"type": "MultiLineString", "coordinates": [[[7.0, 7.0], [8.0, 8.0]], [[9.0, 9.0], [9.5, 9.5]]]}),
        feature({"type": "MultiPolygon", "coordinates": [[SQUARE], [FAR_SQUARE]]}),
    ]


@pytest.fixture
def mixed_collection(mixed_features):
    return normalize(mixed_features)
