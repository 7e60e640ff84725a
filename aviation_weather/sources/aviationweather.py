"""Aviation Weather (aviationweather.gov) API source for live weather data."""

import logging
from math import ceil, floor
from typing import Any, Iterable, List, Optional, Union

import requests

from aviation_weather import config
from aviation_weather.errors import FetchError, FetchTimeoutError, InvalidResponseError
from aviation_weather.mapper import ReportMapper
from aviation_weather.models import (
    AreaHazard,
    HazardKind,
    PilotReport,
    StationInfo,
    StationObservation,
    TerminalForecast,
)
from aviation_weather.segmenter import parse_bounds_response

logger = logging.getLogger(__name__)

Stations = Union[str, Iterable[str]]


class AviationWeatherSource:
    """
    Fetch live METAR, TAF, PIREP and advisory data from aviationweather.gov.

    This class only moves bytes: payloads are handed to ReportMapper (JSON)
    or the raw text segmenter (bounds queries answered in text).

    Example:
        source = AviationWeatherSource()
        for obs in source.fetch_metars("KDEN,KLAS"):
            print(obs.station, obs.flight_category)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = config.REQUEST_TIMEOUT,
        base_url: str = config.BASE_URL,
    ):
        """
        Args:
            session: Optional requests.Session for dependency injection (testing).
            timeout: HTTP request timeout in seconds.
            base_url: API root, without trailing slash.
        """
        self._session = session or requests.Session()
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")
        self._session.headers.setdefault("User-Agent", config.USER_AGENT)

    def fetch_metars(self, stations: Stations, hours: float = config.DEFAULT_METAR_HOURS) -> List[StationObservation]:
        """
        Fetch METARs for one or more stations.

        Args:
            stations: ICAO code, comma-separated codes, or a list of codes.
            hours: Number of hours of history to fetch.

        Returns:
            List of StationObservation.
        """
        data = self._fetch_json("metar", {
            "ids": self.station_list(stations),
            "format": "json",
            "hours": str(hours),
        })
        return ReportMapper.parse_observations(data)

    def fetch_tafs(self, stations: Stations) -> List[TerminalForecast]:
        data = self._fetch_json("taf", {
            "ids": self.station_list(stations),
            "format": "json",
        })
        return ReportMapper.parse_forecasts(data)

    def fetch_pireps(
        self,
        min_lat: Optional[float] = None,
        max_lat: Optional[float] = None,
        min_lon: Optional[float] = None,
        max_lon: Optional[float] = None,
        hours: float = config.DEFAULT_PIREP_HOURS,
    ) -> List[PilotReport]:
        """
        Fetch PIREPs, optionally restricted to a bounding box.

        The box is only sent when all four bounds are given.
        """
        params = {"format": "json", "hours": str(hours)}
        bounds = (min_lat, max_lat, min_lon, max_lon)
        if all(b is not None for b in bounds):
            params.update({
                "minLat": str(min_lat),
                "maxLat": str(max_lat),
                "minLon": str(min_lon),
                "maxLon": str(max_lon),
            })
        return ReportMapper.parse_pilot_reports(self._fetch_json("pirep", params))

    def fetch_airmets(self) -> List[AreaHazard]:
        data = self._fetch_json("gairmet", {"format": "json"})
        return ReportMapper.parse_area_hazards(data, HazardKind.AIRMET)

    def fetch_sigmets(self) -> List[AreaHazard]:
        data = self._fetch_json("airsigmet", {"format": "json"})
        return ReportMapper.parse_area_hazards(data, HazardKind.SIGMET)

    def fetch_metars_by_bounds(
        self,
        min_lat: float,
        max_lat: float,
        min_lon: float,
        max_lon: float,
    ) -> List[StationObservation]:
        """
        Fetch METARs inside a bounding box.

        The endpoint may answer in raw text; those reports come back with
        only station and raw_text set.
        """
        return self._fetch_bounds("metar", min_lat, max_lat, min_lon, max_lon)

    def fetch_tafs_by_bounds(
        self,
        min_lat: float,
        max_lat: float,
        min_lon: float,
        max_lon: float,
    ) -> List[TerminalForecast]:
        return self._fetch_bounds("taf", min_lat, max_lat, min_lon, max_lon)

    def fetch_station_info(self, station: str) -> StationInfo:
        """
        Fetch station details from the station's latest METAR.

        Raises:
            StationNotFoundError: if the station returned no data.
        """
        clean = station.strip().upper()
        data = self._fetch_json("metar", {
            "ids": clean,
            "format": "json",
            "hours": str(config.STATION_INFO_HOURS),
        })
        return ReportMapper.lookup_station(data, clean)

    # --- Transport ---

    @staticmethod
    def station_list(stations: Stations) -> str:
        """Normalize station ids to an uppercase comma-separated list."""
        if isinstance(stations, str):
            stations = stations.split(",")
        return ",".join(s.strip().upper() for s in stations if s.strip())

    @staticmethod
    def bbox(min_lat: float, max_lat: float, min_lon: float, max_lon: float) -> str:
        """Build the API bbox parameter (lat0,lon0,lat1,lon1), widened to whole degrees."""
        return f"{floor(min_lat)},{floor(min_lon)},{ceil(max_lat)},{ceil(max_lon)}"

    def _fetch_bounds(self, endpoint: str, min_lat, max_lat, min_lon, max_lon) -> list:
        response = self._get(
            endpoint,
            {"bbox": self.bbox(min_lat, max_lat, min_lon, max_lon)},
            accept=config.TEXT_ACCEPT,
        )
        if response is None:
            return []
        content_type = response.headers.get("Content-Type", "")
        return parse_bounds_response(response.text, content_type, kind=endpoint)

    def _fetch_json(self, endpoint: str, params: dict) -> Any:
        """GET an endpoint and decode its JSON body; 204 yields an empty list."""
        response = self._get(endpoint, params, accept=config.JSON_ACCEPT)
        if response is None:
            return []
        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseError(
                f"Malformed JSON from {endpoint}",
                details={'endpoint': endpoint, 'error': str(e)},
            )

    def _get(self, endpoint: str, params: dict, accept: str) -> Optional[requests.Response]:
        """
        Make HTTP GET request.

        Returns:
            The response, or None for 204 (no data)

        Raises:
            FetchTimeoutError: if the request timed out
            FetchError: on connection or HTTP errors
        """
        url = f"{self._base_url}/{endpoint}"
        try:
            response = self._session.get(
                url,
                params=params,
                headers={"Accept": accept},
                timeout=self._timeout,
            )
            if response.status_code == 204:
                return None
            response.raise_for_status()
            return response
        except requests.exceptions.Timeout as e:
            logger.warning("Aviation weather request timed out for %s: %s", endpoint, e)
            raise FetchTimeoutError(
                "Request timed out",
                details={'url': url, 'timeout': self._timeout},
            )
        except requests.exceptions.RequestException as e:
            logger.warning("Aviation weather fetch failed for %s: %s", endpoint, e)
            raise FetchError(str(e), details={'url': url, 'error': repr(e)})
