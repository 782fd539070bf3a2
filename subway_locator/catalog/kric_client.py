"""Client for the KRIC (Korea Rail Information Center) open-data API."""

import logging

import requests

from ..config import KRIC_BASE_URL, Settings
from ..errors import KricApiError
from .lines import line_query_params

logger = logging.getLogger(__name__)

ROUTE_INFO_PATH = "trainUseInfo/subwayRouteInfo"
STATION_INFO_PATH = "convenientInfo/stationInfo"
RESULT_OK = "00"


class KricClient:
    """
    Thin wrapper around the two KRIC endpoints the catalog needs.

    Every response is an envelope {"header": {...}, "body": [...]}; the
    client unwraps it and raises KricApiError on any failure.
    """

    def __init__(
        self,
        service_key: str,
        base_url: str = KRIC_BASE_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        if not service_key:
            raise KricApiError("KRIC service key is empty")
        self.service_key = service_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "KricClient":
        if not settings.kric_api_key:
            raise KricApiError(
                "KRIC API key not found. Set KRIC_API_KEY or NEXT_PUBLIC_KRIC_API_KEY."
            )
        return cls(
            settings.kric_api_key,
            base_url=settings.kric_base_url,
            timeout=settings.kric_timeout,
        )

    @classmethod
    def from_env(cls) -> "KricClient":
        return cls.from_settings(Settings.from_env())

    def _get(self, path: str, params: dict[str, str]) -> list[dict]:
        url = f"{self.base_url}/{path}"
        query = {"serviceKey": self.service_key, "format": "JSON", **params}
        try:
            response = self.session.get(
                url,
                params=query,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise KricApiError(f"KRIC request to {path} failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise KricApiError(f"KRIC response from {path} is not JSON") from exc

        if not isinstance(data, dict):
            raise KricApiError(f"Unexpected KRIC response from {path}")

        header = data.get("header") or {}
        result_code = header.get("resultCode", RESULT_OK)
        if result_code != RESULT_OK:
            raise KricApiError(
                f"KRIC error {result_code}: {header.get('resultMsg', '')}",
                result_code=result_code,
            )

        body = data.get("body") or []
        if isinstance(body, dict):
            body = [body]
        return [item for item in body if isinstance(item, dict)]

    def fetch_route_stations(self, line_code: str) -> list[dict]:
        """Stations of one line, in route order fields (subwayRouteInfo)."""
        return self._get(ROUTE_INFO_PATH, line_query_params(line_code))

    def fetch_station_info(
        self, line_code: str, station_name: str | None = None
    ) -> list[dict]:
        """Station details with addresses and coordinates (stationInfo)."""
        params = line_query_params(line_code)
        if station_name:
            params["stinNm"] = station_name
        return self._get(STATION_INFO_PATH, params)

    def fetch_all_lines(
        self, line_codes, include_info: bool = False
    ) -> dict[str, list[dict]]:
        """
        Fetch route records (or station info records) for many lines.

        A failing line is logged and maps to an empty list so the other
        lines still load.
        """
        fetch = self.fetch_station_info if include_info else self.fetch_route_stations
        results: dict[str, list[dict]] = {}
        for code in line_codes:
            try:
                results[code] = fetch(code)
            except KricApiError as exc:
                logger.warning("Line %s could not be loaded: %s", code, exc)
                results[code] = []
            else:
                logger.debug("Line %s: %d records", code, len(results[code]))
        return results

    def validate_service_key(self) -> bool:
        """True if the key returns data for line 1."""
        try:
            return len(self.fetch_route_stations("1001")) > 0
        except KricApiError:
            return False
