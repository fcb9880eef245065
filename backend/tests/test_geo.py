"""Tests for great-circle helpers (utils/geo.py)."""
from __future__ import annotations

import pytest

from mda.utils.geo import (
    circular_mean_deg,
    destination_point,
    haversine_km,
    haversine_nm,
    initial_bearing_deg,
)

_POINTS = [
    (0.0, 0.0),
    (51.5074, -0.1278),
    (-33.87, 151.21),
    (89.9, 45.0),
    (-89.9, -120.0),
    (10.0, 179.9),
    (10.0, -179.9),
]

_KM_PER_DEG = 111.19492664455873  # 6371 km * pi / 180


def _angle_diff(a: float, b: float) -> float:
    diff = abs(a - b) % 360.0
    return min(diff, 360.0 - diff)


class TestHaversine:
    @pytest.mark.parametrize("lat,lon", _POINTS)
    def test_same_point_is_zero(self, lat, lon):
        assert haversine_km(lat, lon, lat, lon) == 0.0

    @pytest.mark.parametrize("a", _POINTS)
    @pytest.mark.parametrize("b", _POINTS)
    def test_symmetric(self, a, b):
        assert haversine_km(*a, *b) == pytest.approx(haversine_km(*b, *a), abs=1e-9)

    def test_distinct_points_positive(self):
        assert haversine_km(0.0, 0.0, 0.0, 0.001) > 0

    def test_one_degree_latitude(self):
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(_KM_PER_DEG, rel=1e-9)

    def test_london_paris(self):
        """London -> Paris is about 343.5 km on a spherical Earth."""
        d = haversine_km(51.5074, -0.1278, 48.8566, 2.3522)
        assert d == pytest.approx(343.5, abs=1.0)

    def test_across_antimeridian_is_short(self):
        assert haversine_km(0.0, 179.5, 0.0, -179.5) == pytest.approx(_KM_PER_DEG, rel=1e-6)

    def test_antipodal_does_not_raise(self):
        d = haversine_km(0.0, 0.0, 0.0, 180.0)
        assert d == pytest.approx(6371.0 * 3.141592653589793, rel=1e-9)

    def test_nautical_miles_ratio(self):
        km = haversine_km(10.0, 10.0, 12.0, 13.0)
        nm = haversine_nm(10.0, 10.0, 12.0, 13.0)
        assert nm == pytest.approx(km / 1.852, rel=1e-3)


class TestInitialBearing:
    @pytest.mark.parametrize(
        "lat2,lon2,expected",
        [(1.0, 0.0, 0.0), (0.0, 1.0, 90.0), (-1.0, 0.0, 180.0), (0.0, -1.0, 270.0)],
    )
    def test_cardinal_directions(self, lat2, lon2, expected):
        assert _angle_diff(initial_bearing_deg(0.0, 0.0, lat2, lon2), expected) < 1e-9

    @pytest.mark.parametrize("a", _POINTS)
    @pytest.mark.parametrize("b", _POINTS)
    def test_range(self, a, b):
        if a == b:
            pytest.skip("bearing undefined for identical points")
        brg = initial_bearing_deg(*a, *b)
        assert 0.0 <= brg < 360.0

    def test_northeast(self):
        brg = initial_bearing_deg(0.0, 0.0, 1.0, 1.0)
        assert 44.0 < brg < 46.0


class TestDestinationPoint:
    def test_zero_distance_returns_origin(self):
        assert destination_point(12.5, -45.25, 123.0, 0.0) == (12.5, -45.25)

    def test_due_east_one_degree(self):
        lat, lon = destination_point(0.0, 0.0, 90.0, _KM_PER_DEG)
        assert lat == pytest.approx(0.0, abs=1e-9)
        assert lon == pytest.approx(1.0, abs=1e-9)

    def test_due_north_one_degree(self):
        lat, lon = destination_point(10.0, 20.0, 0.0, _KM_PER_DEG)
        assert lat == pytest.approx(11.0, abs=1e-9)
        assert lon == pytest.approx(20.0, abs=1e-9)

    def test_wraps_antimeridian(self):
        lat, lon = destination_point(0.0, 179.5, 90.0, _KM_PER_DEG)
        assert lon == pytest.approx(-179.5, abs=1e-6)
        assert -180.0 <= lon < 180.0

    @pytest.mark.parametrize("bearing", [0.0, 37.0, 90.0, 181.0, 270.0, 333.3])
    def test_consistent_with_haversine_and_bearing(self, bearing):
        origin = (35.0, 139.7)
        dest = destination_point(*origin, bearing, 250.0)
        assert haversine_km(*origin, *dest) == pytest.approx(250.0, rel=1e-9)
        assert _angle_diff(initial_bearing_deg(*origin, *dest), bearing) < 1e-6


class TestCircularMean:
    def test_empty_is_none(self):
        assert circular_mean_deg([]) is None

    def test_single_value(self):
        assert circular_mean_deg([90.0]) == pytest.approx(90.0)

    def test_wraparound(self):
        """Mean of 350 and 10 is north, not 180."""
        mean = circular_mean_deg([350.0, 10.0])
        assert _angle_diff(mean, 0.0) < 1e-9
        assert 0.0 <= mean < 360.0

    def test_opposite_headings_undefined(self):
        assert circular_mean_deg([0.0, 180.0]) is None

    def test_plain_average_when_no_wrap(self):
        assert circular_mean_deg([80.0, 100.0]) == pytest.approx(90.0)

    def test_accepts_generator(self):
        assert circular_mean_deg(h for h in (270.0, 270.0)) == pytest.approx(270.0)
