"""Station catalog: KRIC data access, conversion and tiered caching."""

from .convert import (
    LineRoute,
    line_routes,
    merge_station_data,
    stations_from_info_records,
    stations_from_kric,
    stations_from_route_records,
    tag_line_codes,
)
from .kric_client import KricClient
from .sources import (
    CatalogStatus,
    CsvStationSource,
    KricApiSource,
    StationCatalog,
    build_catalog,
    load_stations_csv,
    save_stations_csv,
)

__all__ = [
    "CatalogStatus",
    "CsvStationSource",
    "KricApiSource",
    "KricClient",
    "LineRoute",
    "StationCatalog",
    "build_catalog",
    "line_routes",
    "load_stations_csv",
    "merge_station_data",
    "save_stations_csv",
    "stations_from_info_records",
    "stations_from_kric",
    "stations_from_route_records",
    "tag_line_codes",
]
