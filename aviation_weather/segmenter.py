"""
Fallback segmentation of raw fixed-format report text.

Geographic-bounds queries may be answered with newline-delimited raw
reports instead of JSON records. The segmenter splits such text into
per-station records carrying only the station id and the raw report.
"""

import json
import logging
import re
from typing import Any, List, Union

from aviation_weather.errors import InvalidResponseError
from aviation_weather.mapper import ReportMapper
from aviation_weather.models import StationObservation, TerminalForecast

logger = logging.getLogger(__name__)

STATION_PATTERN = re.compile(r'^[A-Z]{4}$')

# "TAF KDEN 121720Z", "TAF AMD KDEN 121720Z" or "KDEN 121720Z"
TAF_START_PATTERN = re.compile(r'^(TAF\s+)?((AMD|COR)\s+)?[A-Z]{4}\s+\d{6}Z')
TAF_STATION_PATTERN = re.compile(r'^(TAF\s+)?((AMD|COR)\s+)?([A-Z]{4})')


class RawTextSegmenter:
    """
    Split raw METAR/TAF text into per-station records.

    Example:
        records = RawTextSegmenter.segment_observations(
            "KDEN 121652Z 27015KT 10SM FEW050 22/10 A2992\\n"
            "KLAS 121653Z 18008KT 10SM SKC 30/02 A2985\\n"
        )
        print([r.station for r in records])  # ['KDEN', 'KLAS']
    """

    @classmethod
    def segment_observations(cls, text: str) -> List[StationObservation]:
        """
        Segment single-line METAR text.

        Each non-blank line is one report whose first token is the station
        id; lines not starting with a 4-letter identifier are dropped.

        Args:
            text: Newline-delimited raw METARs

        Returns:
            StationObservation list with only station and raw_text set
        """
        results = []
        for line in (text or "").splitlines():
            stripped = line.strip()
            if not stripped:
                continue
            first = stripped.split()[0]
            if not STATION_PATTERN.match(first):
                logger.debug("Dropping line without station id: %s", stripped[:80])
                continue
            results.append(StationObservation(raw_text=stripped, station=first))
        return results

    @classmethod
    def segment_forecasts(cls, text: str) -> List[TerminalForecast]:
        """
        Segment multi-line TAF text.

        A line matching the TAF header starts a new report; other lines
        continue the current one. Lines are joined with single spaces, so
        the original line structure is not preserved.

        Args:
            text: Raw TAF text, possibly with indented continuation lines

        Returns:
            TerminalForecast list with only station and raw_text set
        """
        results = []
        current: List[str] = []

        for line in (text or "").splitlines():
            stripped = line.strip()
            if not stripped:
                continue
            if TAF_START_PATTERN.match(stripped):
                cls._flush_forecast(current, results)
                current = [stripped]
            elif current:
                current.append(stripped)
            else:
                logger.debug("Dropping line outside any TAF: %s", stripped[:80])

        cls._flush_forecast(current, results)
        return results

    @staticmethod
    def _flush_forecast(lines: List[str], results: List[TerminalForecast]) -> None:
        if not lines:
            return
        raw_text = " ".join(lines)
        match = TAF_STATION_PATTERN.match(raw_text)
        if match:
            results.append(TerminalForecast(raw_text=raw_text, station=match.group(4)))


def is_json_content(content_type: str) -> bool:
    return 'json' in (content_type or "").lower()


def parse_bounds_response(
    payload: Any,
    content_type: str,
    kind: str = "metar",
) -> Union[List[StationObservation], List[TerminalForecast]]:
    """
    Turn a bounds-query response into entities.

    The path is chosen once from the declared content type: JSON goes
    through ReportMapper, anything else through the text segmenter.

    Args:
        payload: Decoded records, or the response body as str/bytes
        content_type: Declared Content-Type of the response
        kind: "metar" or "taf"

    Returns:
        List of StationObservation or TerminalForecast

    Raises:
        InvalidResponseError: if a JSON body is malformed or not an array
    """
    if kind not in ("metar", "taf"):
        raise ValueError(f"Unsupported report kind: {kind}")

    if is_json_content(content_type):
        records = payload
        if isinstance(records, (bytes, str)):
            try:
                records = json.loads(records)
            except ValueError as e:
                raise InvalidResponseError("Malformed JSON response", details={'error': str(e)})
        if kind == "metar":
            return ReportMapper.parse_observations(records)
        return ReportMapper.parse_forecasts(records)

    if isinstance(payload, bytes):
        payload = payload.decode('utf-8', errors='replace')
    if not isinstance(payload, str):
        raise InvalidResponseError(
            "Expected text response",
            details={'type': type(payload).__name__, 'content_type': content_type},
        )
    if kind == "metar":
        return RawTextSegmenter.segment_observations(payload)
    return RawTextSegmenter.segment_forecasts(payload)


def segment_raw_observation_text(text: str) -> List[StationObservation]:
    return RawTextSegmenter.segment_observations(text)


def segment_raw_forecast_text(text: str) -> List[TerminalForecast]:
    return RawTextSegmenter.segment_forecasts(text)
