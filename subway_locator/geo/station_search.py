"""Look up stations by name, exactly or with fuzzy matching."""

from collections.abc import Iterable

from rapidfuzz import fuzz, process

from .nearest_station import Station

STATION_SUFFIX = "역"


def normalize_station_name(name: str) -> str:
    """
    Normalize a station name for matching.

    Examples:
        " 강남역 " -> "강남"
        "Seoul  Station" -> "seoul station"
    """
    name = " ".join(name.split()).casefold()
    if name.endswith(STATION_SUFFIX) and len(name) > len(STATION_SUFFIX):
        name = name[: -len(STATION_SUFFIX)]
    return name


def find_station_by_name(stations: Iterable[Station], name: str) -> Station | None:
    """First station whose normalized name equals the query, or None."""
    wanted = normalize_station_name(name)
    for station in stations:
        if normalize_station_name(station.name) == wanted:
            return station
    return None


def search_stations(
    stations: Iterable[Station],
    query: str,
    limit: int = 5,
    threshold: int = 70,
) -> list[tuple[Station, int]]:
    """
    Find stations whose names resemble the query.

    Useful for typos and partial names ("강남구청" -> "강남구청", "강남").

    Args:
        stations: Stations to search
        query: Free-text station name
        limit: Maximum number of matches to return
        threshold: Minimum similarity score (0-100)

    Returns:
        List of (station, score) sorted by score descending
    """
    if not query or not query.strip():
        return []

    candidates = list(stations)
    if not candidates:
        return []

    names = [normalize_station_name(s.name) for s in candidates]
    results = process.extract(
        normalize_station_name(query),
        names,
        scorer=fuzz.WRatio,
        limit=limit,
        score_cutoff=threshold,
    )
    return [(candidates[idx], int(score)) for _name, score, idx in results]
