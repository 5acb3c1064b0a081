import json

import pytest

from mapdraw_features.geometry import GeometryType
from mapdraw_features.query import FeatureQuery, parse_lnglat, parse_type_filter, query_features
from mapdraw_features.schemas import normalize


def types_of(collection):
    return [feature.geometry_type.value for feature in collection]


class TestParsing:

    def test_type_filter_forms(self):
        expected = {GeometryType.POINT, GeometryType.MULTI_POINT}
        assert parse_type_filter("Point|MultiPoint") == expected
        assert parse_type_filter(["point", "MULTIPOINT"]) == expected
        assert parse_type_filter((GeometryType.POINT, GeometryType.MULTI_POINT)) == expected
        assert parse_type_filter(GeometryType.POINT) == {GeometryType.POINT}

    def test_unknown_type_names_are_ignored(self):
        assert parse_type_filter("Circle|Polygon") == {GeometryType.POLYGON}
        assert parse_type_filter(None) == frozenset()
        assert parse_type_filter("") == frozenset()

    @pytest.mark.parametrize("value, expected", [
        ([10, 50], (10.0, 50.0)),
        ((10.5, 50.5), (10.5, 50.5)),
        ("10.5, 50.5", (10.5, 50.5)),
        ('{"lng": 10.5, "lat": 50.5}', (10.5, 50.5)),
        ({"lng": 1, "lat": 2}, (1.0, 2.0)),
    ])
    def test_lnglat_forms(self, value, expected):
        assert parse_lnglat(value) == expected

    @pytest.mark.parametrize("value", [None, "", [], {}])
    def test_empty_lnglat(self, value):
        assert parse_lnglat(value) is None

    @pytest.mark.parametrize("value", ["10", "a,b", [1, 2, 3], '{"lng": 1}', "{lng"])
    def test_invalid_lnglat(self, value):
        with pytest.raises(ValueError):
            parse_lnglat(value)


class TestQueryFeatures:

    def test_identity_without_filters(self, mixed_collection):
        assert query_features(mixed_collection) is mixed_collection
        assert FeatureQuery(mixed_collection).query_features(set(), None) == mixed_collection

    def test_point_scenario(self):
        raw = '[{"type":"Feature","geometry":{"type":"Point","coordinates":[10.0,50.0]},"properties":{}}]'
        collection = normalize(raw)

        hits = query_features(collection, {GeometryType.POINT}, [10.000001, 50.0])
        assert len(hits) == 1
        assert hits[0] == collection[0]

        assert len(query_features(collection, {GeometryType.POINT}, [10.5, 50.0])) == 0

    def test_type_filter_only(self, mixed_collection):
        query = FeatureQuery(mixed_collection)
        assert types_of(query.query_features("Polygon|MultiPolygon")) == ["Polygon", "MultiPolygon"]
        assert types_of(query.query_features(["linestring"])) == ["LineString"]

    def test_type_matching_is_case_insensitive_on_declared_tag(self):
        raw = [{"type": "Feature", "geometry": {"type": "point", "coordinates": [1, 2]}, "properties": {}}]
        assert len(query_features(raw, "Point")) == 1

    def test_candidate_uses_features_own_predicate(self, mixed_collection):
        query = FeatureQuery(mixed_collection)
        # Inside the square polygon and the first part of the multipolygon
        assert types_of(query.query_features(candidate=[1.0, 1.0])) == ["LineString", "Polygon", "MultiPolygon"]

    def test_candidate_is_scoped_to_requested_types(self, mixed_collection):
        query = FeatureQuery(mixed_collection)
        assert types_of(query.query_features("Polygon", [1.0, 1.0])) == ["Polygon"]
        assert types_of(query.query_features("LineString", [1.0, 1.0])) == ["LineString"]
        assert types_of(query.query_features("Point", [1.0, 1.0])) == []

    def test_multi_geometries(self, mixed_collection):
        query = FeatureQuery(mixed_collection)
        assert types_of(query.query_features(candidate=[6.0, 6.0])) == ["MultiPoint"]
        assert types_of(query.query_features(candidate=[9.5, 9.5])) == ["MultiLineString"]
        assert types_of(query.query_features(candidate=[21.0, 21.0])) == ["MultiPolygon"]

    def test_coordinate_in_type_slot(self, mixed_collection):
        query = FeatureQuery(mixed_collection)
        assert query.query_features([10.0, 50.0]) == query.query_features(candidate=[10.0, 50.0])
        assert types_of(query.query_features([10.0, 50.0])) == ["Point"]

    def test_string_candidate(self, mixed_collection):
        query = FeatureQuery(mixed_collection)
        assert types_of(query.query_features("Point", "10, 50")) == ["Point"]
        assert types_of(query.query_features("Point", json.dumps({"lng": 10, "lat": 50}))) == ["Point"]

    def test_features_without_geometry_are_excluded_from_filtered_queries(self):
        raw = [
            {"type": "Feature", "geometry": None, "properties": {}},
            {"type": "Feature", "geometry": {}, "properties": {}},
            {"type": "Feature", "geometry": {"type": "Point", "coordinates": [1, 1]}, "properties": {}},
        ]
        collection = normalize(raw)
        assert len(query_features(collection)) == 3
        assert len(query_features(collection, candidate=[1, 1])) == 1
        assert len(query_features(collection, "Point")) == 1

    def test_malformed_polygon_does_not_abort_query(self):
        raw = [
            {"type": "Feature", "geometry": {"type": "Polygon", "coordinates": [1, 2]}, "properties": {}},
            {"type": "Feature", "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [2, 0], [2, 2], [0, 2], [0, 0]]]}, "properties": {}},
        ]
        hits = query_features(raw, "Polygon", [1.0, 1.0])
        assert len(hits) == 1
        assert hits[0].geometry.to_dict()["coordinates"][0][1] == [2.0, 0.0]

    def test_results_keep_original_order(self, mixed_collection):
        hits = FeatureQuery(mixed_collection).query_features(
            ["MultiPolygon", "Point", "Polygon"]
        )
        assert types_of(hits) == ["Point", "Polygon", "MultiPolygon"]


class TestSingleResults:

    def test_get_feature(self, mixed_collection):
        query = FeatureQuery(mixed_collection)
        assert query.get_feature("Polygon|MultiPolygon", 1).geometry_type is GeometryType.MULTI_POLYGON
        assert query.get_feature(None, 0) == mixed_collection[0]

    def test_out_of_range(self, mixed_collection):
        query = FeatureQuery(mixed_collection)
        assert query.get_feature("Polygon", 5) is None
        assert query.get_feature("Polygon", -1) is None
        assert query.get_feature("Point", 0, [0.0, 89.0]) is None

    def test_shorthands(self, mixed_collection):
        query = FeatureQuery(mixed_collection)
        assert types_of(query.get_points()) == ["Point", "MultiPoint"]
        assert types_of(query.get_line_strings()) == ["LineString", "MultiLineString"]
        assert types_of(query.get_polygons()) == ["Polygon", "MultiPolygon"]
        assert types_of(query.get_polygons([21.0, 21.0])) == ["MultiPolygon"]

        assert query.get_point().geometry_type is GeometryType.POINT
        assert query.get_point(1).geometry_type is GeometryType.MULTI_POINT
        assert query.get_line_string(0, [8.0, 8.0]).geometry_type is GeometryType.MULTI_LINE_STRING
        assert query.get_polygon(2) is None

    def test_query_accepts_raw_payload(self, mixed_features):
        assert len(FeatureQuery(json.dumps(mixed_features)).get_points()) == 2
