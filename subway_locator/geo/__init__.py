"""Geolocation module for finding nearby subway stations."""

from .address import extract_district, extract_neighborhood, parse_locality
from .distance import haversine_m
from .nearest_station import (
    NearestResult,
    NearestStationFinder,
    Station,
    find_nearby_station,
)
from .projection import INVALID_COORDINATE, is_valid_coordinate, kric_to_wgs84
from .station_search import find_station_by_name, search_stations

__all__ = [
    "INVALID_COORDINATE",
    "NearestResult",
    "NearestStationFinder",
    "Station",
    "extract_district",
    "extract_neighborhood",
    "find_nearby_station",
    "find_station_by_name",
    "haversine_m",
    "is_valid_coordinate",
    "kric_to_wgs84",
    "parse_locality",
    "search_stations",
]
