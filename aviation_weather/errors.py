"""Error types raised by the weather normalization layer."""

from typing import Any, Optional


class WeatherError(Exception):
    """
    Base class for all aviation weather errors.

    Every error carries a stable ``code`` so the orchestration layer can
    report failures without inspecting exception classes.
    """

    code = "WEATHER_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        """
        Initialize the error.

        Args:
            message: Human-readable error message
            details: Optional structured context (station, url, payload...)
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            'code': self.code,
            'message': self.message,
            'details': self.details,
        }


class InvalidResponseError(WeatherError):
    """Response payload was not the expected sequence of records."""

    code = "INVALID_RESPONSE"


class StationNotFoundError(WeatherError):
    """A lookup by station identifier matched no record."""

    code = "STATION_NOT_FOUND"


class DecodeError(WeatherError):
    """The METAR decoder was given unusable input."""

    code = "DECODE_ERROR"


class FetchError(WeatherError):
    """Transport or HTTP failure while fetching from the remote source."""

    code = "FETCH_ERROR"


class FetchTimeoutError(FetchError):
    """The remote source did not answer within the configured timeout."""

    code = "TIMEOUT"
