"""
Subway Station Locator - batch entry point.

Reads business locations as CSV rows `id,lat,lng[,address]` and prints
the best nearby station for each.

Usage:
    cat businesses.csv | python -m subway_locator.main
    python -m subway_locator.main businesses.csv --radius 1500
    python -m subway_locator.main --help
"""

import argparse
import csv
import logging
import math
import sys
from dataclasses import replace
from pathlib import Path

from subway_locator.catalog import build_catalog
from subway_locator.config import ResolverConfig, Settings
from subway_locator.errors import CatalogUnavailableError, KricApiError
from subway_locator.geo import NearestStationFinder
from subway_locator.logging import setup_logging

logger = logging.getLogger(__name__)


def process_row(row: list[str], finder: NearestStationFinder) -> str | None:
    """
    Resolve one input row and return the formatted output line.

    Returns None for blank rows and the header row.
    """
    if not row or not row[0].strip():
        return None

    row_id = row[0].strip()
    if row_id.lower() == "id":
        return None

    try:
        lat = float(row[1])
        lng = float(row[2])
    except (IndexError, ValueError):
        return f"{row_id},INVALID"
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return f"{row_id},INVALID"

    address = row[3].strip() if len(row) > 3 and row[3].strip() else None

    result = finder.find_nearby_station(lat, lng, address)
    if result is None:
        return f"{row_id},NO_STATION"

    lines = "|".join(result.station.lines)
    return f"{row_id},{result.station.name},{result.distance_m:.0f},{lines}"


def main():
    parser = argparse.ArgumentParser(
        description="Subway Station Locator - find the best nearby station for locations"
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="Input CSV file with id,lat,lng[,address] rows (default: stdin)",
    )
    parser.add_argument(
        "--stations",
        type=Path,
        default=None,
        help="Path to stations CSV snapshot",
    )
    parser.add_argument(
        "--radius",
        type=float,
        default=None,
        help="Maximum search radius in meters (default: 3000)",
    )
    parser.add_argument(
        "--no-index",
        action="store_true",
        help="Disable the KD-Tree prefilter and scan every station",
    )
    parser.add_argument(
        "--live",
        action="store_true",
        help="Load stations from the KRIC API first (needs KRIC_API_KEY)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level (default: WARNING)",
    )

    args = parser.parse_args()
    setup_logging(args.log_level, stream=sys.stderr)

    settings = Settings.from_env()
    resolver_config = settings.resolver
    if args.radius is not None:
        try:
            resolver_config = replace(resolver_config, max_radius_m=args.radius)
        except ValueError as e:
            parser.error(str(e))
    settings = replace(
        settings,
        stations_file=args.stations or settings.stations_file,
        use_index=settings.use_index and not args.no_index,
        resolver=resolver_config,
    )

    try:
        catalog = build_catalog(settings, live=args.live)
        finder = catalog.finder()
    except (CatalogUnavailableError, KricApiError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("Resolving against %d stations", len(finder))

    if args.input:
        input_file = open(args.input, encoding="utf-8", newline="")
    else:
        input_file = sys.stdin

    try:
        for row in csv.reader(input_file):
            output = process_row(row, finder)
            if output is not None:
                print(output)
    finally:
        if args.input:
            input_file.close()


if __name__ == "__main__":
    main()
