"""
Find the best nearby subway station for a point and an optional address.

Stations are ranked by physical distance discounted when the station's
registered address shares the query's neighborhood (strong signal) or
district (weak signal). The discount only decides the winner; the distance
reported for the winner is always its real haversine distance.

Ties on the weighted distance go to the station that comes first in
catalog order.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from scipy.spatial import cKDTree

from ..config import ResolverConfig
from .address import EMPTY_LOCALITY, LocalityTokens, parse_locality
from .distance import chord_for_arc_m, haversine_m, to_unit_vectors
from .projection import is_valid_coordinate

DEFAULT_CONFIG = ResolverConfig()

# Slack on the index radius so float rounding never drops an edge station
_INDEX_RADIUS_SLACK = 1.0 + 1e-6


@dataclass(frozen=True)
class Station:
    """Subway station snapshot."""

    name: str
    lat: float
    lng: float
    lines: tuple[str, ...] = ()
    address: str | None = None
    code: str = ""
    phone: str = ""
    locality: LocalityTokens = field(
        default=EMPTY_LOCALITY, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(self.lines))
        # Parsed once per snapshot instead of once per query
        object.__setattr__(self, "locality", parse_locality(self.address))

    @property
    def has_valid_coordinates(self) -> bool:
        return is_valid_coordinate(self.lat, self.lng)


@dataclass(frozen=True)
class NearestResult:
    """Result of nearest station search."""

    station: Station
    distance_m: float


def locality_discount(
    query: LocalityTokens, station: LocalityTokens, config: ResolverConfig
) -> float:
    """
    Discount factor for a station given the query's locality tokens.

    Neighborhood and district matches are exclusive: a neighborhood match
    gets only the neighborhood factor.
    """
    if query.neighborhood and station.neighborhood == query.neighborhood:
        return config.neighborhood_discount
    if query.district and station.district == query.district:
        return config.district_discount
    return 1.0


def find_nearby_station(
    stations: Iterable[Station],
    lat: float,
    lng: float,
    address: str | None = None,
    config: ResolverConfig = DEFAULT_CONFIG,
) -> NearestResult | None:
    """
    Linear scan for the best station within config.max_radius_m.

    Args:
        stations: Station snapshot, iterated once in order
        lat: Query latitude (degrees)
        lng: Query longitude (degrees)
        address: Optional free-text address of the query point
        config: Radius and discount factors

    Returns:
        NearestResult with the winner's physical distance, or None (also
        for a non-finite query point)
    """
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None

    query = parse_locality(address) if address else EMPTY_LOCALITY

    best: Station | None = None
    best_distance = 0.0
    best_score = 0.0

    for station in stations:
        if not station.has_valid_coordinates:
            continue

        distance = haversine_m(lat, lng, station.lat, station.lng)
        if distance > config.max_radius_m:
            continue

        score = distance
        if not query.is_empty:
            score *= locality_discount(query, station.locality, config)

        if best is None or score < best_score:
            best, best_distance, best_score = station, distance, score

    if best is None:
        return None
    return NearestResult(station=best, distance_m=best_distance)


class NearestStationFinder:
    """
    Nearest-station lookup over one immutable station snapshot.

    A KD-Tree on unit-sphere coordinates prefilters candidates inside the
    search radius; the survivors are scored in catalog order, so results
    are identical to the linear scan of find_nearby_station().
    """

    def __init__(
        self,
        stations: Iterable[Station],
        config: ResolverConfig = DEFAULT_CONFIG,
        use_index: bool = True,
    ):
        """
        Args:
            stations: Station snapshot (copied into a tuple)
            config: Radius and discount factors
            use_index: Build a KD-Tree prefilter
        """
        self.stations: tuple[Station, ...] = tuple(stations)
        self.config = config
        self._indexed: list[int] = [
            i for i, s in enumerate(self.stations) if s.has_valid_coordinates
        ]
        self.tree: cKDTree | None = None

        if use_index and self._indexed:
            coords = to_unit_vectors(
                [self.stations[i].lat for i in self._indexed],
                [self.stations[i].lng for i in self._indexed],
            )
            self.tree = cKDTree(coords)

    def __len__(self) -> int:
        return len(self.stations)

    def _candidates(self, lat: float, lng: float) -> Sequence[Station]:
        if not (math.isfinite(lat) and math.isfinite(lng)):
            return ()
        if self.tree is None:
            return self.stations

        point = to_unit_vectors([lat], [lng])[0]
        radius = chord_for_arc_m(self.config.max_radius_m) * _INDEX_RADIUS_SLACK
        hits = self.tree.query_ball_point(point, r=radius)
        # Back to catalog order for the tie-break
        return [self.stations[self._indexed[i]] for i in sorted(hits)]

    def find_nearby_station(
        self, lat: float, lng: float, address: str | None = None
    ) -> NearestResult | None:
        """
        Find the best station for a point and optional address.

        Returns:
            NearestResult, or None if no valid station is within the radius
        """
        return find_nearby_station(
            self._candidates(lat, lng), lat, lng, address, self.config
        )

    def find_nearest(self, lat: float, lng: float) -> NearestResult | None:
        """Physically nearest station within the radius, ignoring addresses."""
        return self.find_nearby_station(lat, lng)
