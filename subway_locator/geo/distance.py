"""Distance calculation utilities using Haversine formula."""

import math

import numpy as np

# Earth's radius in meters
EARTH_RADIUS_M = 6_371_000.0


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        lat1: Latitude of first point (degrees)
        lng1: Longitude of first point (degrees)
        lat2: Latitude of second point (degrees)
        lng2: Longitude of second point (degrees)

    Returns:
        Distance in meters
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lng = math.radians(lng2 - lng1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def to_unit_vectors(lats, lngs) -> np.ndarray:
    """
    Project lat/lng degrees onto the unit sphere as (x, y, z) rows.

    Euclidean distance between two rows is the chord length, which grows
    monotonically with great-circle distance.
    """
    lat_rad = np.radians(np.asarray(lats, dtype=float))
    lng_rad = np.radians(np.asarray(lngs, dtype=float))
    cos_lat = np.cos(lat_rad)
    return np.column_stack(
        (cos_lat * np.cos(lng_rad), cos_lat * np.sin(lng_rad), np.sin(lat_rad))
    )


def chord_for_arc_m(distance_m: float) -> float:
    """Chord length on the unit sphere subtending a surface arc of distance_m."""
    return 2.0 * math.sin(min(distance_m / EARTH_RADIUS_M, math.pi) / 2.0)
