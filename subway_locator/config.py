"""Runtime configuration: data paths, resolver tuning and service settings."""

import os
from dataclasses import dataclass, field
from pathlib import Path

# Default data paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
STATIONS_FILE = DATA_DIR / "stations.csv"

KRIC_BASE_URL = "https://openapi.kric.go.kr/openapi"

# Business tuning constants, no derivation behind them
MAX_RADIUS_METERS = 3000.0
NEIGHBORHOOD_DISCOUNT = 0.75
DISTRICT_DISCOUNT = 0.90

CATALOG_TTL_SECONDS = 30 * 60


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ResolverConfig:
    """Tunable parameters of the nearest-station search."""

    max_radius_m: float = MAX_RADIUS_METERS
    neighborhood_discount: float = NEIGHBORHOOD_DISCOUNT
    district_discount: float = DISTRICT_DISCOUNT

    def __post_init__(self) -> None:
        if self.max_radius_m <= 0:
            raise ValueError("max_radius_m must be positive")
        for name in ("neighborhood_discount", "district_discount"):
            value = getattr(self, name)
            if not (0.0 < value <= 1.0):
                raise ValueError(f"{name} must be in (0, 1], got {value}")

    @classmethod
    def from_env(cls) -> "ResolverConfig":
        """Build a config from SUBWAY_* environment variables."""
        return cls(
            max_radius_m=_env_float("SUBWAY_MAX_RADIUS_M", MAX_RADIUS_METERS),
            neighborhood_discount=_env_float(
                "SUBWAY_NEIGHBORHOOD_DISCOUNT", NEIGHBORHOOD_DISCOUNT
            ),
            district_discount=_env_float("SUBWAY_DISTRICT_DISCOUNT", DISTRICT_DISCOUNT),
        )


@dataclass(frozen=True)
class Settings:
    """Service-level settings for the catalog, the web app and the CLI."""

    kric_api_key: str | None = None
    kric_base_url: str = KRIC_BASE_URL
    kric_timeout: float = 10.0
    catalog_ttl_seconds: float = CATALOG_TTL_SECONDS
    stations_file: Path = STATIONS_FILE
    use_index: bool = True
    resolver: ResolverConfig = field(default_factory=ResolverConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Read settings from the environment.

        KRIC_API_KEY is preferred; NEXT_PUBLIC_KRIC_API_KEY is accepted for
        deployments that share the key with the browser bundle.
        """
        api_key = os.getenv("KRIC_API_KEY") or os.getenv("NEXT_PUBLIC_KRIC_API_KEY")
        stations_file = os.getenv("SUBWAY_STATIONS_FILE")
        return cls(
            kric_api_key=api_key or None,
            kric_base_url=os.getenv("KRIC_BASE_URL", KRIC_BASE_URL),
            kric_timeout=_env_float("KRIC_TIMEOUT", 10.0),
            catalog_ttl_seconds=_env_float("SUBWAY_CATALOG_TTL", CATALOG_TTL_SECONDS),
            stations_file=Path(stations_file) if stations_file else STATIONS_FILE,
            use_index=_env_bool("SUBWAY_USE_INDEX", True),
            resolver=ResolverConfig.from_env(),
        )
