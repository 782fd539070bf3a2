"""
Station catalog with tiered data sources.

Sources are tried in order (live KRIC API, then the bundled CSV snapshot).
The first non-empty snapshot is cached for a TTL. When every source fails
the last snapshot is served stale; with nothing cached the catalog raises
CatalogUnavailableError.
"""

import csv
import logging
import threading
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from ..config import CATALOG_TTL_SECONDS, ResolverConfig, Settings
from ..errors import CatalogUnavailableError, SubwayLocatorError
from ..geo.nearest_station import NearestStationFinder, Station
from .convert import stations_from_kric
from .kric_client import KricClient
from .lines import CAPITAL_REGION_LINE_CODES

logger = logging.getLogger(__name__)

CSV_FIELDS = ["name", "lat", "lng", "lines", "address", "code", "phone"]
LINES_SEPARATOR = "|"


def load_stations_csv(path: str | Path) -> list[Station]:
    """
    Load a station snapshot from CSV.

    Expected columns: name, lat, lng, lines, address, code, phone
    Rows that fail to parse are skipped with a warning.
    """
    path = Path(path)
    stations: list[Station] = []

    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row_num, row in enumerate(reader, start=2):  # 2 = header + 1
            try:
                name = row["name"].strip()
                if not name:
                    logger.warning("Row %d: missing name, skipping", row_num)
                    continue
                lines = row.get("lines") or ""
                stations.append(
                    Station(
                        name=name,
                        lat=float(row["lat"]),
                        lng=float(row["lng"]),
                        lines=tuple(line for line in lines.split(LINES_SEPARATOR) if line),
                        address=(row.get("address") or "").strip() or None,
                        code=(row.get("code") or "").strip(),
                        phone=(row.get("phone") or "").strip(),
                    )
                )
            except (ValueError, KeyError, AttributeError) as e:
                logger.warning("Row %d: parse error (%s), skipping", row_num, e)
                continue

    logger.info("Loaded %d stations from %s", len(stations), path)
    return stations


def save_stations_csv(stations: Iterable[Station], path: str | Path) -> int:
    """Write a station snapshot; returns the number of rows written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for station in stations:
            writer.writerow(
                {
                    "name": station.name,
                    "lat": station.lat,
                    "lng": station.lng,
                    "lines": LINES_SEPARATOR.join(station.lines),
                    "address": station.address or "",
                    "code": station.code,
                    "phone": station.phone,
                }
            )
            count += 1
    return count


class StationSource(Protocol):
    """Something that can produce a full station snapshot."""

    name: str

    def load(self) -> list[Station]: ...


class CsvStationSource:
    """Static snapshot bundled with the package (last-resort fallback)."""

    def __init__(self, path: str | Path, name: str = "csv"):
        self.path = Path(path)
        self.name = name

    def load(self) -> list[Station]:
        if not self.path.exists():
            raise CatalogUnavailableError(f"Stations file not found: {self.path}")
        try:
            return load_stations_csv(self.path)
        except (UnicodeDecodeError, csv.Error) as exc:
            raise CatalogUnavailableError(
                f"Stations file {self.path} is unreadable: {exc}"
            ) from exc


class KricApiSource:
    """Live snapshot from the KRIC route and station-info endpoints."""

    name = "kric"

    def __init__(
        self,
        client: KricClient,
        line_codes: Sequence[str] = CAPITAL_REGION_LINE_CODES,
    ):
        self.client = client
        self.line_codes = tuple(line_codes)

    def load(self) -> list[Station]:
        routes = self.client.fetch_all_lines(self.line_codes)
        details = self.client.fetch_all_lines(self.line_codes, include_info=True)
        return stations_from_kric(routes, details)


@dataclass(frozen=True)
class CatalogStatus:
    loaded: bool
    source: str | None
    station_count: int
    last_update: float | None  # wall-clock epoch seconds
    age_seconds: float | None
    stale: bool


class StationCatalog:
    """
    TTL-cached station snapshot fed by an ordered list of sources.

    Snapshots are immutable tuples; callers resolve against whatever
    snapshot they were handed.
    """

    def __init__(
        self,
        sources: Sequence[StationSource],
        ttl_seconds: float = CATALOG_TTL_SECONDS,
        resolver_config: ResolverConfig | None = None,
        use_index: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        if not sources:
            raise ValueError("StationCatalog needs at least one source")
        self.sources = tuple(sources)
        self.ttl_seconds = ttl_seconds
        self.resolver_config = resolver_config or ResolverConfig()
        self.use_index = use_index
        self._clock = clock
        self._lock = threading.Lock()

        self._stations: tuple[Station, ...] | None = None
        self._finder: NearestStationFinder | None = None
        self._source_name: str | None = None
        self._loaded_at: float | None = None
        self._last_update: float | None = None

    def _is_fresh(self) -> bool:
        if self._stations is None or self._loaded_at is None:
            return False
        return self._clock() - self._loaded_at <= self.ttl_seconds

    def _refresh(self) -> None:
        for source in self.sources:
            try:
                stations = source.load()
            except (SubwayLocatorError, OSError) as exc:
                logger.warning("Station source %s failed: %s", source.name, exc)
                continue
            if not stations:
                logger.warning("Station source %s returned no stations", source.name)
                continue

            self._stations = tuple(stations)
            self._finder = None
            self._source_name = source.name
            self._loaded_at = self._clock()
            self._last_update = time.time()
            logger.info(
                "Loaded %d stations from source %s", len(self._stations), source.name
            )
            return

        if self._stations is not None:
            logger.warning(
                "All station sources failed, serving stale snapshot from %s",
                self._source_name,
            )
            return
        raise CatalogUnavailableError("No station source could provide data")

    def get_stations(self, force_refresh: bool = False) -> tuple[Station, ...]:
        """Current snapshot, refreshed when expired or forced."""
        with self._lock:
            if force_refresh or not self._is_fresh():
                self._refresh()
            return self._stations

    def finder(self, force_refresh: bool = False) -> NearestStationFinder:
        """Resolver over the current snapshot (index rebuilt per snapshot)."""
        stations = self.get_stations(force_refresh)
        with self._lock:
            if self._finder is None or self._finder.stations is not stations:
                self._finder = NearestStationFinder(
                    stations, self.resolver_config, use_index=self.use_index
                )
            return self._finder

    def status(self) -> CatalogStatus:
        with self._lock:
            age = None
            if self._loaded_at is not None:
                age = self._clock() - self._loaded_at
            return CatalogStatus(
                loaded=self._stations is not None,
                source=self._source_name,
                station_count=len(self._stations or ()),
                last_update=self._last_update,
                age_seconds=age,
                stale=self._stations is not None and not self._is_fresh(),
            )

    def clear_cache(self) -> None:
        with self._lock:
            self._stations = None
            self._finder = None
            self._source_name = None
            self._loaded_at = None
            self._last_update = None
        logger.info("Station cache cleared")


def build_catalog(settings: Settings, live: bool | None = None) -> StationCatalog:
    """
    Catalog for the given settings.

    The KRIC source is prepended when live is True, or when live is None
    and an API key is configured. The CSV snapshot is always the last tier.
    """
    sources: list[StationSource] = []
    if live is None:
        live = bool(settings.kric_api_key)
    if live:
        sources.append(KricApiSource(KricClient.from_settings(settings)))
    sources.append(CsvStationSource(settings.stations_file))
    return StationCatalog(
        sources,
        ttl_seconds=settings.catalog_ttl_seconds,
        resolver_config=settings.resolver,
        use_index=settings.use_index,
    )
