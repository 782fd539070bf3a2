"""Tests for KRIC grid to WGS84 conversion."""

import pytest

from subway_locator.geo.projection import (
    INVALID_COORDINATE,
    is_valid_coordinate,
    kric_to_wgs84,
)


class TestKricToWgs84:
    """Tests for kric_to_wgs84."""

    @pytest.mark.parametrize(
        "x, y",
        [
            ("abc", "500000"),
            ("200000", "xyz"),
            ("", "500000"),
            ("200000", "   "),
            (None, "500000"),
            ("200000", None),
            ("nan", "500000"),
            ("inf", "500000"),
            ([], {}),
            ("0", "0"),
            ("200000", 0),
        ],
    )
    def test_malformed_input_returns_sentinel(self, x, y):
        assert kric_to_wgs84(x, y) == INVALID_COORDINATE

    @pytest.mark.parametrize("x, y", [("-500000", "500000"), ("200000", "2000000")])
    def test_projection_outside_korea_returns_sentinel(self, x, y):
        assert kric_to_wgs84(x, y) == INVALID_COORDINATE

    def test_false_origin(self):
        # x_0/y_0 of the grid sit exactly on lat_0/lon_0
        lat, lng = kric_to_wgs84("200000", "500000")
        assert lat == pytest.approx(38.0, abs=1e-6)
        assert lng == pytest.approx(127.0, abs=1e-6)

    def test_seoul_city_hall(self):
        lat, lng = kric_to_wgs84("198056", "451648")
        assert 37.50 < lat < 37.65
        assert 126.90 < lng < 127.05

    def test_accepts_numbers_and_padded_strings(self):
        assert kric_to_wgs84(200000, 500000) == kric_to_wgs84(" 200000 ", "500000")

    def test_deterministic(self):
        first = kric_to_wgs84("203456.78", "447123.45")
        for _ in range(5):
            assert kric_to_wgs84("203456.78", "447123.45") == first

    def test_east_of_origin_has_larger_longitude(self):
        _, west = kric_to_wgs84("190000", "450000")
        _, east = kric_to_wgs84("210000", "450000")
        assert west < 127.0 < east

    def test_degrees_pass_through(self):
        assert kric_to_wgs84("126.9780", "37.5665") == (37.5665, 126.978)

    def test_swapped_degrees_are_fixed(self):
        assert kric_to_wgs84("37.5665", "126.9780") == (37.5665, 126.978)


class TestIsValidCoordinate:
    """Tests for the sentinel check."""

    def test_valid(self):
        assert is_valid_coordinate(37.5, 127.0)
        assert is_valid_coordinate("37.5", "127.0")

    @pytest.mark.parametrize(
        "lat, lng",
        [
            (0.0, 0.0),
            (0, 127.0),
            (37.5, 0),
            (None, 127.0),
            (37.5, None),
            (float("nan"), 127.0),
            ("abc", 127.0),
        ],
    )
    def test_invalid(self, lat, lng):
        assert not is_valid_coordinate(lat, lng)
