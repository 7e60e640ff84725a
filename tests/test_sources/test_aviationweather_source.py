"""Tests for AviationWeatherSource, the aviationweather.gov API fetcher."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from aviation_weather.errors import (
    FetchError,
    FetchTimeoutError,
    InvalidResponseError,
    StationNotFoundError,
)
from aviation_weather.models import AirmetHazard, FlightCategory, HazardKind
from aviation_weather.sources import AviationWeatherSource


class MockResponse:
    """Minimal mock for requests.Response."""

    def __init__(self, text="", status_code=200, content_type="application/json"):
        self.text = text
        self.status_code = status_code
        self.headers = {"Content-Type": content_type}

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}")


def make_session(payload="", status_code=200, content_type="application/json"):
    """Create a mock session returning a fixed response."""
    if not isinstance(payload, str):
        payload = json.dumps(payload)
    session = MagicMock()
    session.headers = {}
    session.get.return_value = MockResponse(payload, status_code, content_type)
    return session


class TestFetchMetars:
    """Test METAR fetching and mapping."""

    def test_single_metar(self, kden_metar_record):
        session = make_session([kden_metar_record])
        source = AviationWeatherSource(session=session)

        reports = source.fetch_metars(["KDEN"])

        assert len(reports) == 1
        assert reports[0].station == "KDEN"
        assert reports[0].flight_category == FlightCategory.VFR

    def test_request_parameters(self):
        session = make_session([])
        source = AviationWeatherSource(session=session, timeout=5, base_url="https://example.test/api/")

        source.fetch_metars(" kden, klas ", hours=4)

        args, kwargs = session.get.call_args
        assert args[0] == "https://example.test/api/metar"
        assert kwargs["params"] == {"ids": "KDEN,KLAS", "format": "json", "hours": "4"}
        assert kwargs["timeout"] == 5
        assert kwargs["headers"]["Accept"] == "application/json"

    def test_user_agent_set(self):
        session = make_session([])
        AviationWeatherSource(session=session)
        assert "User-Agent" in session.headers

    def test_204_no_content(self):
        session = make_session("", status_code=204)
        source = AviationWeatherSource(session=session)

        assert source.fetch_metars(["XXXX"]) == []

    def test_malformed_json(self):
        session = make_session("<html>maintenance</html>")
        source = AviationWeatherSource(session=session)

        with pytest.raises(InvalidResponseError):
            source.fetch_metars(["KDEN"])

    def test_not_an_array(self):
        session = make_session({"error": "bad ids"})
        source = AviationWeatherSource(session=session)

        with pytest.raises(InvalidResponseError):
            source.fetch_metars(["KDEN"])


class TestFetchErrors:
    """Test transport failures."""

    def test_http_error(self):
        session = make_session("", status_code=500)
        source = AviationWeatherSource(session=session)

        with pytest.raises(FetchError) as exc_info:
            source.fetch_tafs(["KDEN"])
        assert exc_info.value.code == "FETCH_ERROR"

    def test_connection_error(self):
        session = MagicMock()
        session.headers = {}
        session.get.side_effect = requests.exceptions.ConnectionError("Network down")
        source = AviationWeatherSource(session=session)

        with pytest.raises(FetchError):
            source.fetch_metars(["KDEN"])

    def test_timeout(self):
        session = MagicMock()
        session.headers = {}
        session.get.side_effect = requests.exceptions.Timeout("slow")
        source = AviationWeatherSource(session=session)

        with pytest.raises(FetchTimeoutError) as exc_info:
            source.fetch_metars(["KDEN"])
        assert exc_info.value.code == "TIMEOUT"
        assert str(exc_info.value) == "Request timed out"


class TestFetchForecasts:

    def test_tafs(self, kden_taf_record):
        session = make_session([kden_taf_record])
        source = AviationWeatherSource(session=session)

        tafs = source.fetch_tafs("KDEN")

        assert tafs[0].station == "KDEN"
        assert len(tafs[0].periods) == 2
        assert session.get.call_args[1]["params"]["ids"] == "KDEN"


class TestFetchPireps:

    def test_without_bounds(self):
        session = make_session([{'rawOb': 'DEN UA /OV DEN', 'turbulence': 'MOD'}])
        source = AviationWeatherSource(session=session)

        pireps = source.fetch_pireps()

        assert len(pireps) == 1
        assert "minLat" not in session.get.call_args[1]["params"]

    def test_with_bounds(self):
        session = make_session([])
        source = AviationWeatherSource(session=session)

        source.fetch_pireps(39.0, 41.0, -106.0, -104.0)

        params = session.get.call_args[1]["params"]
        assert params["minLat"] == "39.0"
        assert params["maxLon"] == "-104.0"

    def test_partial_bounds_ignored(self):
        session = make_session([])
        source = AviationWeatherSource(session=session)

        source.fetch_pireps(min_lat=39.0)

        assert "minLat" not in session.get.call_args[1]["params"]


class TestFetchAdvisories:

    def test_airmets(self):
        session = make_session([{'hazard': 'TURB', 'region': 'SLC'}])
        source = AviationWeatherSource(session=session)

        hazards = source.fetch_airmets()

        assert hazards[0].kind == HazardKind.AIRMET
        assert hazards[0].hazard_type == AirmetHazard.TURBULENCE
        assert session.get.call_args[0][0].endswith("/gairmet")

    def test_sigmets(self):
        session = make_session([{'hazard': 'CONVECTIVE'}])
        source = AviationWeatherSource(session=session)

        hazards = source.fetch_sigmets()

        assert hazards[0].kind == HazardKind.SIGMET
        assert hazards[0].hazard_type == "CONVECTIVE"
        assert session.get.call_args[0][0].endswith("/airsigmet")


class TestFetchByBounds:
    """Test bounds queries answered in text or JSON."""

    def test_text_metars(self, raw_metar_text):
        session = make_session(raw_metar_text, content_type="text/plain")
        source = AviationWeatherSource(session=session)

        reports = source.fetch_metars_by_bounds(39.5, 40.2, -105.3, -104.1)

        assert [r.station for r in reports] == ["KDEN", "KLAS"]
        assert session.get.call_args[1]["params"] == {"bbox": "39,-106,41,-104"}

    def test_json_metars(self, kden_metar_record):
        session = make_session([kden_metar_record])
        source = AviationWeatherSource(session=session)

        reports = source.fetch_metars_by_bounds(39, 40, -105, -104)

        assert reports[0].flight_category == FlightCategory.VFR

    def test_text_tafs(self, raw_taf_text):
        session = make_session(raw_taf_text, content_type="text/plain")
        source = AviationWeatherSource(session=session)

        tafs = source.fetch_tafs_by_bounds(39.5, 40.2, -105.3, -104.1)

        assert [t.station for t in tafs] == ["KDEN", "KLAS"]
        assert session.get.call_args[0][0].endswith("/taf")

    def test_204(self):
        session = make_session("", status_code=204)
        source = AviationWeatherSource(session=session)

        assert source.fetch_tafs_by_bounds(39, 40, -105, -104) == []


class TestFetchStationInfo:

    def test_found(self):
        session = make_session([{'icaoId': 'KDEN', 'name': 'Denver Intl', 'lat': 39.85, 'lon': -104.66, 'elev': 1656}])
        source = AviationWeatherSource(session=session)

        info = source.fetch_station_info(" kden ")

        assert info.icao == "KDEN"
        assert info.elevation_m == 1656
        assert session.get.call_args[1]["params"]["hours"] == "1"

    def test_not_found(self):
        session = make_session([])
        source = AviationWeatherSource(session=session)

        with pytest.raises(StationNotFoundError):
            source.fetch_station_info("KXYZ")


class TestHelpers:

    def test_station_list(self):
        assert AviationWeatherSource.station_list(["kden", " klas", ""]) == "KDEN,KLAS"

    def test_bbox_widened(self):
        assert AviationWeatherSource.bbox(39.5, 40.2, -105.3, -104.1) == "39,-106,41,-104"
