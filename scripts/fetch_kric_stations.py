#!/usr/bin/env python3
"""
Fetch capital-region subway stations from the KRIC open-data API.

Writes data/stations.csv, the static snapshot the catalog falls back to
when the live API is unavailable. Needs KRIC_API_KEY in the environment.
"""

import argparse
import sys
from pathlib import Path

from tqdm import tqdm

from subway_locator.catalog import KricClient, save_stations_csv, stations_from_kric
from subway_locator.catalog.lines import CAPITAL_REGION_LINE_CODES, LINES_BY_CODE
from subway_locator.config import STATIONS_FILE
from subway_locator.errors import KricApiError


def fetch_records(
    client: KricClient, line_codes: list[str]
) -> tuple[dict[str, list[dict]], dict[str, list[dict]]]:
    """Fetch route and station-info records per line (failed lines map to [])."""
    routes: dict[str, list[dict]] = {}
    infos: dict[str, list[dict]] = {}

    for code in tqdm(line_codes, desc="Lines"):
        label = LINES_BY_CODE[code].name if code in LINES_BY_CODE else code
        routes.update(client.fetch_all_lines([code]))
        infos.update(client.fetch_all_lines([code], include_info=True))
        tqdm.write(f"  {label}: {len(routes[code])} route records, {len(infos[code])} info records")

    return routes, infos


def main():
    parser = argparse.ArgumentParser(description="Fetch KRIC stations into a CSV snapshot")
    parser.add_argument("--output", type=Path, default=STATIONS_FILE)
    parser.add_argument(
        "--lines",
        nargs="*",
        default=list(CAPITAL_REGION_LINE_CODES),
        help="KRIC line codes to fetch (default: all capital-region lines)",
    )
    args = parser.parse_args()

    print("=" * 60)
    print("KRIC Stations Fetcher")
    print("=" * 60)

    try:
        client = KricClient.from_env()
    except KricApiError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if not client.validate_service_key():
        print("Error: KRIC API key rejected or no data for line 1", file=sys.stderr)
        sys.exit(1)

    routes, infos = fetch_records(client, args.lines)
    stations = stations_from_kric(routes, infos)
    valid = [s for s in stations if s.has_valid_coordinates]
    print(f"\nMerged {len(stations)} stations ({len(stations) - len(valid)} without coordinates)")

    # Stations without coordinates are useless as a fallback snapshot
    count = save_stations_csv(sorted(valid, key=lambda s: s.name), args.output)
    print(f"Saved {count} stations to {args.output}")
    print("\nDone!")


if __name__ == "__main__":
    main()
