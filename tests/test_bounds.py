import pytest

from mapdraw_features.schemas import BoundsRecord, normalize


class TestBoundsRecord:

    def test_defaults(self):
        record = BoundsRecord()
        assert record.bounds == [[0.0, 0.0], [0.0, 0.0]]
        assert record.zoom == 12.0
        assert not record.has_bounds()

    def test_flat_bounds(self):
        record = BoundsRecord().with_bounds([1.0, 2.0, 3.0, 4.0])
        assert record.bounds == [[1.0, 2.0], [3.0, 4.0]]
        assert record.center == [2.0, 3.0]
        assert record.has_bounds()

    def test_nested_bounds(self):
        record = BoundsRecord().with_bounds([[1.0, 2.0], [3.0, 4.0]])
        assert (record.west, record.south, record.east, record.north) == (1.0, 2.0, 3.0, 4.0)

    def test_json_string_bounds(self):
        record = BoundsRecord().with_bounds("[[-1.5, 50.1], [1.5, 52.3]]")
        assert record.bounds == [[-1.5, 50.1], [1.5, 52.3]]

    def test_integer_values_are_accepted(self):
        assert BoundsRecord().with_bounds([1, 2, 3, 4]).bounds == [[1.0, 2.0], [3.0, 4.0]]

    @pytest.mark.parametrize("value", [
        [0, 2.0, 3.0, 4.0],
        [1.0, 2.0, 3.0, 0.0],
        [[1.0, 2.0], [0.0, 4.0]],
        [1.0, 2.0, 3.0],
        [[1.0, 2.0]],
        [],
        None,
        "not json",
        "[1.0, 2.0]",
        ["1", "2", "3", "4"],
        [1.0, 2.0, 3.0, float("nan")],
        {"west": 1.0},
    ])
    def test_invalid_input_keeps_previous_bounds(self, value):
        previous = BoundsRecord().with_bounds([5.0, 6.0, 7.0, 8.0])
        assert previous.with_bounds(value) is previous
        assert BoundsRecord.parse(value) is None

    def test_zoom_is_carried_over(self):
        record = BoundsRecord(zoom=5.0).with_bounds([1.0, 2.0, 3.0, 4.0])
        assert record.zoom == 5.0
        assert record.with_zoom("7.5").zoom == 7.5

    def test_lnglat(self):
        assert BoundsRecord().with_bounds([1.0, 2.0, 3.0, 4.0]).lnglat == "2,3"
        assert BoundsRecord().with_bounds([1.0, 2.0, 2.0, 4.0]).lnglat == "1.5,3"

    def test_values_are_coerced_to_float(self):
        record = BoundsRecord(south="1", west=2, north=3, east=4, zoom="10")
        assert record.south == 1.0
        assert isinstance(record.west, float)
        assert record.zoom == 10.0

    def test_invalid_values_raise(self):
        with pytest.raises(ValueError):
            BoundsRecord(south="north")
        with pytest.raises(ValueError):
            BoundsRecord(zoom=float("inf"))

    def test_dict_round_trip(self):
        record = BoundsRecord(south=1.0, west=2.0, north=3.0, east=4.0, zoom=9.0)
        assert BoundsRecord.from_dict(record.to_dict()) == record
        assert BoundsRecord.from_dict({}) == BoundsRecord()


class TestExtent:

    def test_from_features(self, mixed_collection):
        extent = BoundsRecord.from_features(mixed_collection, zoom=8.0)
        assert extent.bounds == [[0.5, 0.5], [22.0, 50.0]]
        assert extent.zoom == 8.0

    def test_empty_collection(self):
        assert BoundsRecord.from_features(normalize(None)) is None

    def test_single_point(self, point_payload):
        extent = BoundsRecord.from_features(normalize(point_payload))
        assert extent.bounds == [[10.0, 50.0], [10.0, 50.0]]
        assert extent.center == [10.0, 50.0]
