"""Turn raw KRIC records into Station snapshots and line routes."""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace

from ..geo.nearest_station import Station
from ..geo.projection import INVALID_COORDINATE, is_valid_coordinate, kric_to_wgs84
from .lines import line_color, line_display_name

logger = logging.getLogger(__name__)

# KRIC field names differ between endpoints and API revisions
NAME_FIELDS = ("stinNm",)
CODE_FIELDS = ("stinCd",)
LINE_FIELDS = ("lnCd",)
X_FIELDS = ("xcrd", "mapCordX")
Y_FIELDS = ("ycrd", "mapCordY")
LAT_FIELDS = ("stinLocLat", "lat")
LNG_FIELDS = ("stinLocLon", "lot", "lng")
ADDRESS_FIELDS = ("roadNmAdr", "stinAdres", "lonmAdr", "addr")
PHONE_FIELDS = ("stinTelno", "telNo")
ORDER_FIELDS = ("ordrNo", "stinConsOrdr")


@dataclass(frozen=True)
class LineRoute:
    """Polyline of one subway line."""

    line_code: str
    color: str
    coords: tuple[tuple[float, float], ...]


def _field(record: Mapping, names: tuple[str, ...]) -> str:
    for name in names:
        value = record.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def record_coordinates(record: Mapping) -> tuple[float, float]:
    """
    WGS84 position of a record.

    Degrees supplied by the API win over the projected grid coordinates.
    """
    lat_raw, lng_raw = _field(record, LAT_FIELDS), _field(record, LNG_FIELDS)
    if lat_raw and lng_raw:
        try:
            lat, lng = float(lat_raw), float(lng_raw)
        except ValueError:
            lat, lng = INVALID_COORDINATE
        if is_valid_coordinate(lat, lng):
            return lat, lng
    return kric_to_wgs84(_field(record, X_FIELDS), _field(record, Y_FIELDS))


class _StationBuilder:
    """Accumulates records sharing a station name."""

    def __init__(self, name: str, lat: float, lng: float):
        self.name = name
        self.lat = lat
        self.lng = lng
        self.lines: list[str] = []
        self.address: str | None = None
        self.code = ""
        self.phone = ""

    def add_line(self, line: str) -> None:
        if line and line not in self.lines:
            self.lines.append(line)

    def build(self) -> Station:
        return Station(
            name=self.name,
            lat=self.lat,
            lng=self.lng,
            lines=tuple(self.lines),
            address=self.address,
            code=self.code,
            phone=self.phone,
        )


def _merge_records(records: Iterable[Mapping], with_details: bool) -> list[Station]:
    builders: dict[str, _StationBuilder] = {}
    invalid = 0

    for record in records:
        name = _field(record, NAME_FIELDS)
        if not name:
            continue

        builder = builders.get(name)
        if builder is None:
            lat, lng = record_coordinates(record)
            if not is_valid_coordinate(lat, lng):
                # Kept for name search; the resolver skips it
                invalid += 1
            builder = _StationBuilder(name, lat, lng)
            builder.code = _field(record, CODE_FIELDS)
            builders[name] = builder

        builder.add_line(line_display_name(_field(record, LINE_FIELDS)))

        if with_details:
            builder.address = _field(record, ADDRESS_FIELDS) or builder.address
            builder.phone = _field(record, PHONE_FIELDS) or builder.phone

    if invalid:
        logger.info("%d stations have no convertible coordinates", invalid)
    return [builder.build() for builder in builders.values()]


def stations_from_route_records(records: Iterable[Mapping]) -> list[Station]:
    """One Station per name from subwayRouteInfo records, lines merged."""
    return _merge_records(records, with_details=False)


def stations_from_info_records(records: Iterable[Mapping]) -> list[Station]:
    """Like stations_from_route_records, also carrying address and phone."""
    return _merge_records(records, with_details=True)


def merge_station_data(
    basic: Iterable[Station], detailed: Iterable[Station]
) -> list[Station]:
    """
    Merge route-derived stations with detail-derived stations by name.

    Details override coordinates only when valid, fill in address and
    phone, and add lines. Detail-only stations are appended.
    """
    merged: dict[str, Station] = {station.name: station for station in basic}

    for detail in detailed:
        existing = merged.get(detail.name)
        if existing is None:
            merged[detail.name] = detail
            continue

        lat, lng = existing.lat, existing.lng
        if detail.has_valid_coordinates:
            lat, lng = detail.lat, detail.lng

        lines = list(existing.lines)
        lines.extend(line for line in detail.lines if line not in lines)

        merged[detail.name] = replace(
            existing,
            lat=lat,
            lng=lng,
            lines=tuple(lines),
            address=detail.address or existing.address,
            phone=detail.phone or existing.phone,
            code=existing.code or detail.code,
        )

    return list(merged.values())


def tag_line_codes(records_by_line: Mapping[str, list[Mapping]]) -> Iterator[dict]:
    """Flatten per-line records, stamping each with the line code it was fetched for."""
    # The API answers with its own short line ids (e.g. "2" for 1002)
    for code, records in records_by_line.items():
        for record in records:
            yield {**record, "lnCd": code}


def stations_from_kric(
    routes_by_line: Mapping[str, list[Mapping]],
    details_by_line: Mapping[str, list[Mapping]],
) -> list[Station]:
    """Stations from per-line route and station-info records, merged."""
    return merge_station_data(
        stations_from_route_records(tag_line_codes(routes_by_line)),
        stations_from_info_records(tag_line_codes(details_by_line)),
    )


def _order_key(record: Mapping) -> int:
    try:
        return int(_field(record, ORDER_FIELDS))
    except ValueError:
        return 0


def line_routes(records_by_line: Mapping[str, list[Mapping]]) -> dict[str, LineRoute]:
    """Build a polyline per line from route records sorted by stop order."""
    routes: dict[str, LineRoute] = {}
    for code, records in records_by_line.items():
        if not records:
            continue
        coords = []
        for record in sorted(records, key=_order_key):
            lat, lng = record_coordinates(record)
            if is_valid_coordinate(lat, lng):
                coords.append((lat, lng))
        routes[code] = LineRoute(line_code=code, color=line_color(code), coords=tuple(coords))
    return routes
