"""Shared fixtures."""

import pytest

from subway_locator.geo import Station

# Meters per degree of latitude on the haversine sphere
M_PER_DEG_LAT = 111_194.93


def north_of(lat: float, meters: float) -> float:
    """Latitude `meters` north (negative: south) of `lat`."""
    return lat + meters / M_PER_DEG_LAT


class StaticSource:
    """In-memory station source for catalog tests."""

    def __init__(self, stations, name="static", fail=False):
        self.stations = list(stations)
        self.name = name
        self.fail = fail
        self.calls = 0

    def load(self):
        from subway_locator.errors import CatalogUnavailableError

        self.calls += 1
        if self.fail:
            raise CatalogUnavailableError(f"{self.name} is down")
        return list(self.stations)


@pytest.fixture
def gangnam_stations() -> list[Station]:
    return [
        Station(
            "강남",
            37.497952,
            127.027619,
            ("2", "S"),
            "서울특별시 강남구 강남대로 지하 396 (역삼동)",
        ),
        Station(
            "역삼",
            37.500622,
            127.036456,
            ("2",),
            "서울특별시 강남구 테헤란로 지하 156 (역삼동)",
        ),
        Station(
            "교대",
            37.493415,
            127.014080,
            ("2", "3"),
            "서울특별시 서초구 서초대로 지하 294 (서초동)",
        ),
        Station(
            "신사",
            37.516334,
            127.020114,
            ("3", "S"),
            "서울특별시 강남구 도산대로 지하 102 (신사동)",
        ),
    ]
