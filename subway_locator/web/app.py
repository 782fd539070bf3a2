"""
FastAPI interface for the subway station locator.

JSON endpoints for nearest-station lookup, KRIC coordinate conversion and
station search. The station catalog lives on app.state.catalog.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Request
from pydantic import BaseModel

from subway_locator import __version__
from subway_locator.catalog import StationCatalog, build_catalog
from subway_locator.config import Settings
from subway_locator.errors import CatalogUnavailableError
from subway_locator.geo import Station, is_valid_coordinate, kric_to_wgs84, search_stations
from subway_locator.logging import setup_logging

logger = logging.getLogger(__name__)


class StationInfo(BaseModel):
    """Station as exposed by the API."""

    name: str
    lat: float
    lng: float
    lines: list[str]
    address: str | None = None
    code: str = ""
    phone: str = ""
    match_score: int | None = None  # Fuzzy search score (0-100)

    @classmethod
    def from_station(cls, station: Station, match_score: int | None = None) -> "StationInfo":
        return cls(
            name=station.name,
            lat=station.lat,
            lng=station.lng,
            lines=list(station.lines),
            address=station.address,
            code=station.code,
            phone=station.phone,
            match_score=match_score,
        )


class NearestStationResponse(BaseModel):
    found: bool
    station: StationInfo | None = None
    distance_m: float | None = None  # Physical distance, never the weighted score


class ConvertResponse(BaseModel):
    lat: float
    lng: float
    valid: bool


class CatalogStatusResponse(BaseModel):
    loaded: bool
    source: str | None
    station_count: int
    last_update: float | None
    age_seconds: float | None
    stale: bool


def _catalog(request: Request) -> StationCatalog:
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        raise HTTPException(status_code=500, detail="Station catalog not initialized")
    return catalog


def _status_response(catalog: StationCatalog) -> CatalogStatusResponse:
    status = catalog.status()
    return CatalogStatusResponse(
        loaded=status.loaded,
        source=status.source,
        station_count=status.station_count,
        last_update=status.last_update,
        age_seconds=status.age_seconds,
        stale=status.stale,
    )


def create_app(catalog: StationCatalog | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        catalog: Catalog to serve; built from the environment on startup
                 when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if catalog is not None:
            app.state.catalog = catalog
        else:
            app.state.catalog = build_catalog(Settings.from_env())
        try:
            app.state.catalog.get_stations()
        except CatalogUnavailableError as exc:
            # Served as 503 per request until a source recovers
            logger.error("Station catalog unavailable at startup: %s", exc)
        yield
        logger.info("Application shutting down")

    app = FastAPI(
        title="Subway Station Locator",
        description="Nearest subway station lookup for Seoul metropolitan addresses",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/api/nearest-station", response_model=NearestStationResponse)
    def api_nearest_station(
        request: Request,
        lat: float = Query(..., ge=-90.0, le=90.0),
        lng: float = Query(..., ge=-180.0, le=180.0),
        address: str | None = Query(default=None, max_length=500),
    ) -> NearestStationResponse:
        """Best station within the search radius of a point."""
        try:
            finder = _catalog(request).finder()
        except CatalogUnavailableError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc

        result = finder.find_nearby_station(lat, lng, address)
        if result is None:
            return NearestStationResponse(found=False)
        return NearestStationResponse(
            found=True,
            station=StationInfo.from_station(result.station),
            distance_m=result.distance_m,
        )

    @app.get("/api/convert", response_model=ConvertResponse)
    def api_convert(
        x: str = Query(..., description="KRIC easting"),
        y: str = Query(..., description="KRIC northing"),
    ) -> ConvertResponse:
        """Convert a KRIC grid coordinate to WGS84."""
        lat, lng = kric_to_wgs84(x, y)
        return ConvertResponse(lat=lat, lng=lng, valid=is_valid_coordinate(lat, lng))

    @app.get("/api/stations", response_model=list[StationInfo])
    def api_stations(
        request: Request,
        q: str | None = Query(default=None, max_length=100),
        limit: int = Query(default=20, ge=1, le=500),
    ) -> list[StationInfo]:
        """List stations, fuzzy-filtered by name when q is given."""
        try:
            stations = _catalog(request).get_stations()
        except CatalogUnavailableError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc

        if q:
            return [
                StationInfo.from_station(station, score)
                for station, score in search_stations(stations, q, limit=limit)
            ]
        return [StationInfo.from_station(station) for station in stations[:limit]]

    @app.post("/api/stations/refresh", response_model=CatalogStatusResponse)
    def api_refresh(request: Request) -> CatalogStatusResponse:
        """Reload the catalog from its sources."""
        catalog = _catalog(request)
        try:
            catalog.get_stations(force_refresh=True)
        except CatalogUnavailableError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return _status_response(catalog)

    @app.get("/health")
    def health(request: Request):
        """Health check endpoint."""
        catalog = getattr(request.app.state, "catalog", None)
        if catalog is None:
            return {"status": "starting", "catalog": None}
        status = _status_response(catalog)
        return {
            "status": "ok" if status.loaded else "degraded",
            "catalog": status.model_dump(),
        }

    return app


def build_app() -> FastAPI:
    """Entry point for `uvicorn --factory subway_locator.web.app:build_app`."""
    setup_logging()
    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("subway_locator.web.app:build_app", factory=True, host="127.0.0.1", port=8000)
