"""
KRIC grid to WGS84 conversion.

The railway open-data API reports station positions in the Korean central
belt Transverse Mercator grid (GRS80). Conversion is fail-soft: anything
that cannot be converted comes back as INVALID_COORDINATE, which callers
filter out instead of handling exceptions per station.
"""

import logging
import math

from pyproj import Transformer
from pyproj.exceptions import ProjError

logger = logging.getLogger(__name__)

KRIC_TM_PROJ4 = (
    "+proj=tmerc +lat_0=38 +lon_0=127 +k=1 +x_0=200000 +y_0=500000 "
    "+ellps=GRS80 +units=m +no_defs"
)
WGS84 = "EPSG:4326"

INVALID_COORDINATE = (0.0, 0.0)

# WGS84 envelope of South Korea, used to detect pre-converted values
KOREA_LAT_RANGE = (33.0, 39.0)
KOREA_LNG_RANGE = (124.0, 132.0)
# Plausible range for projected results; the grid also covers the north
PROJECTED_LAT_RANGE = (33.0, 43.0)

# always_xy: input (easting, northing), output (lng, lat)
_TRANSFORMER = Transformer.from_crs(KRIC_TM_PROJ4, WGS84, always_xy=True)


def _parse(value) -> float | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _in_korea(lat: float, lng: float) -> bool:
    return (
        KOREA_LAT_RANGE[0] < lat < KOREA_LAT_RANGE[1]
        and KOREA_LNG_RANGE[0] < lng < KOREA_LNG_RANGE[1]
    )


def kric_to_wgs84(x, y) -> tuple[float, float]:
    """
    Convert a KRIC grid coordinate to WGS84.

    Args:
        x: Easting in meters (string or number, as delivered by the API)
        y: Northing in meters

    Returns:
        (lat, lng) in decimal degrees, or INVALID_COORDINATE if the input
        is missing, zero, unparseable, or the projection fails or lands
        outside Korea.
    """
    easting = _parse(x)
    northing = _parse(y)
    if easting is None or northing is None or easting == 0.0 or northing == 0.0:
        return INVALID_COORDINATE

    # Some API records already carry degrees, occasionally swapped
    if _in_korea(northing, easting):
        return northing, easting
    if _in_korea(easting, northing):
        return easting, northing

    try:
        lng, lat = _TRANSFORMER.transform(easting, northing)
    except ProjError as exc:
        logger.debug("Projection failed for (%s, %s): %s", x, y, exc)
        return INVALID_COORDINATE

    if not (
        math.isfinite(lat)
        and math.isfinite(lng)
        and PROJECTED_LAT_RANGE[0] <= lat <= PROJECTED_LAT_RANGE[1]
        and KOREA_LNG_RANGE[0] <= lng <= KOREA_LNG_RANGE[1]
    ):
        logger.debug("Projected point (%s, %s) outside Korea for (%s, %s)", lat, lng, x, y)
        return INVALID_COORDINATE
    return lat, lng


def is_valid_coordinate(lat, lng) -> bool:
    """False for missing, non-finite or zero components (the sentinel)."""
    if lat is None or lng is None:
        return False
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return lat != 0.0 and lng != 0.0
