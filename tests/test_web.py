"""Tests for the FastAPI interface."""

import pytest
from fastapi.testclient import TestClient

from subway_locator.catalog import StationCatalog
from subway_locator.web import create_app

from conftest import StaticSource


@pytest.fixture
def catalog(gangnam_stations):
    return StationCatalog([StaticSource(gangnam_stations)])


@pytest.fixture
def client(catalog):
    with TestClient(create_app(catalog)) as test_client:
        yield test_client


@pytest.fixture
def down_client():
    catalog = StationCatalog([StaticSource([], fail=True)])
    with TestClient(create_app(catalog)) as test_client:
        yield test_client


class TestNearestStation:
    def test_found(self, client):
        resp = client.get("/api/nearest-station", params={"lat": 37.4985, "lng": 127.0280})
        assert resp.status_code == 200

        data = resp.json()
        assert data["found"] is True
        assert data["station"]["name"] == "강남"
        assert data["station"]["lines"] == ["2", "S"]
        assert 0 < data["distance_m"] < 200

    def test_address_changes_winner(self, client):
        params = {"lat": 37.4957, "lng": 127.0210}
        plain = client.get("/api/nearest-station", params=params).json()
        weighted = client.get(
            "/api/nearest-station", params={**params, "address": "서울 서초구 서초동 1321"}
        ).json()
        assert plain["station"]["name"] == "강남"
        assert weighted["station"]["name"] == "교대"

    def test_nothing_in_radius(self, client):
        # Busan
        resp = client.get("/api/nearest-station", params={"lat": 35.1151, "lng": 129.0422})
        assert resp.status_code == 200
        assert resp.json() == {"found": False, "station": None, "distance_m": None}

    @pytest.mark.parametrize(
        "params",
        [
            {"lat": 37.5},  # missing lng
            {"lng": 127.0},  # missing lat
            {"lat": 100.0, "lng": 127.0},
            {"lat": 37.5, "lng": 200.0},
            {"lat": "north", "lng": 127.0},
        ],
    )
    def test_validates_query_params(self, client, params):
        resp = client.get("/api/nearest-station", params=params)
        assert resp.status_code == 422

    def test_catalog_unavailable(self, down_client):
        resp = down_client.get("/api/nearest-station", params={"lat": 37.5, "lng": 127.0})
        assert resp.status_code == 503


class TestConvert:
    def test_valid(self, client):
        resp = client.get("/api/convert", params={"x": "200000", "y": "500000"})
        data = resp.json()
        assert data["valid"] is True
        assert data["lat"] == pytest.approx(38.0, abs=1e-6)
        assert data["lng"] == pytest.approx(127.0, abs=1e-6)

    @pytest.mark.parametrize("x, y", [("abc", "500000"), ("0", "0")])
    def test_invalid_is_sentinel(self, client, x, y):
        resp = client.get("/api/convert", params={"x": x, "y": y})
        assert resp.status_code == 200
        assert resp.json() == {"lat": 0.0, "lng": 0.0, "valid": False}


class TestStations:
    def test_list(self, client, gangnam_stations):
        data = client.get("/api/stations").json()
        assert [s["name"] for s in data] == [s.name for s in gangnam_stations]

    def test_limit(self, client):
        assert len(client.get("/api/stations", params={"limit": 2}).json()) == 2

    def test_search(self, client):
        data = client.get("/api/stations", params={"q": "강남역"}).json()
        assert data[0]["name"] == "강남"
        assert data[0]["match_score"] == 100

    def test_refresh(self, client, gangnam_stations):
        resp = client.post("/api/stations/refresh")
        assert resp.status_code == 200
        data = resp.json()
        assert data["loaded"] is True
        assert data["source"] == "static"
        assert data["station_count"] == len(gangnam_stations)

    def test_refresh_unavailable(self, down_client):
        assert down_client.post("/api/stations/refresh").status_code == 503


class TestHealth:
    def test_ok(self, client):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert data["catalog"]["loaded"] is True

    def test_degraded(self, down_client):
        data = down_client.get("/health").json()
        assert data["status"] == "degraded"
        assert data["catalog"]["station_count"] == 0
