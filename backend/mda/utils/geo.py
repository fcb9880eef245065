"""Shared great-circle utilities.

Canonical implementations of haversine distance, initial bearing, and
destination-point computation on a spherical Earth, used by the threat scorer,
formation detector, path predictor, and proximity alerts.
"""
from __future__ import annotations

import math
from typing import Iterable, Optional

_EARTH_RADIUS_KM: float = 6371.0      # Earth mean radius in kilometres
_EARTH_RADIUS_NM: float = 3440.065    # Earth mean radius in nautical miles


def _normalize_deg(deg: float) -> float:
    """Wrap an angle into [0, 360)."""
    deg = deg % 360.0
    # Tiny negatives wrap to exactly 360.0 in float arithmetic.
    return 0.0 if deg >= 360.0 else deg


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres between two WGS-84 coordinates."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlam = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    # Rounding can push a a hair past 1.0 for antipodal points.
    a = min(1.0, max(0.0, a))
    return _EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_nm(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in nautical miles between two WGS-84 coordinates."""
    return haversine_km(lat1, lon1, lat2, lon2) * (_EARTH_RADIUS_NM / _EARTH_RADIUS_KM)


def initial_bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial bearing from (lat1, lon1) toward (lat2, lon2), in [0, 360).

    Meaningless when the two points coincide; callers must avoid that case.
    """
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlon = math.radians(lon2 - lon1)
    y = math.sin(dlon) * math.cos(lat2_r)
    x = math.cos(lat1_r) * math.sin(lat2_r) - math.sin(lat1_r) * math.cos(lat2_r) * math.cos(dlon)
    return _normalize_deg(math.degrees(math.atan2(y, x)))


def destination_point(
    lat: float, lon: float, bearing_deg: float, distance_km: float,
) -> tuple[float, float]:
    """Point reached travelling *distance_km* along a great circle on *bearing_deg*.

    Longitude of the result is normalised to [-180, 180).
    """
    if distance_km == 0:
        return lat, lon
    d = distance_km / _EARTH_RADIUS_KM
    brg = math.radians(bearing_deg)
    lat_r = math.radians(lat)
    lon_r = math.radians(lon)

    lat2 = math.asin(
        math.sin(lat_r) * math.cos(d) + math.cos(lat_r) * math.sin(d) * math.cos(brg)
    )
    lon2 = lon_r + math.atan2(
        math.sin(brg) * math.sin(d) * math.cos(lat_r),
        math.cos(d) - math.sin(lat_r) * math.sin(lat2),
    )
    lon2_deg = (math.degrees(lon2) + 540.0) % 360.0 - 180.0
    return math.degrees(lat2), lon2_deg


def circular_mean_deg(angles: Iterable[float]) -> Optional[float]:
    """Circular mean of compass angles in [0, 360).

    Returns None for an empty input, or when the unit vectors cancel out
    (e.g. 0° and 180°) and no direction dominates.
    """
    sin_sum = 0.0
    cos_sum = 0.0
    n = 0
    for a in angles:
        r = math.radians(a)
        sin_sum += math.sin(r)
        cos_sum += math.cos(r)
        n += 1
    if n == 0:
        return None
    if math.hypot(sin_sum, cos_sum) / n < 1e-9:
        return None
    return _normalize_deg(math.degrees(math.atan2(sin_sum, cos_sum)))
