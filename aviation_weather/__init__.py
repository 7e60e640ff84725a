"""
Aviation weather normalization and classification library.

Turns loosely-typed METAR, TAF, PIREP and AIRMET/SIGMET data (JSON records
with shifting field names, or raw fixed-format text) into canonical,
immutable models, and derives the FAA flight category.

The main public API includes:
- parse_observations / parse_forecasts / parse_pilot_reports / parse_area_hazards
- segment_raw_observation_text / segment_raw_forecast_text
- classify_flight_category
- decode_raw_metar
- lookup_station

Example:
    from aviation_weather import parse_observations, decode_raw_metar

    obs = parse_observations([{"icaoId": "KDEN", "visib": "10+",
                               "clouds": [{"cover": "OVC", "base": 800}]}])
    print(obs[0].flight_category)  # FlightCategory.IFR

    print(decode_raw_metar("METAR KDEN 121652Z 27015G25KT 10SM FEW050 22/10 A2992"))
"""

from aviation_weather.analysis import WeatherAnalyzer, classify_flight_category, ceiling_from_layers
from aviation_weather.decoder import MetarDecoder, decode_raw_metar
from aviation_weather.errors import (
    WeatherError,
    InvalidResponseError,
    StationNotFoundError,
    DecodeError,
    FetchError,
    FetchTimeoutError,
)
from aviation_weather.mapper import (
    ReportMapper,
    parse_observations,
    parse_forecasts,
    parse_pilot_reports,
    parse_area_hazards,
    lookup_station,
)
from aviation_weather.models import (
    FlightCategory,
    CloudCover,
    CloudLayer,
    StationObservation,
    ForecastPeriod,
    TerminalForecast,
    PilotReport,
    TurbulenceReport,
    IcingReport,
    AreaHazard,
    AirmetHazard,
    HazardKind,
    StationInfo,
)
from aviation_weather.segmenter import (
    RawTextSegmenter,
    parse_bounds_response,
    segment_raw_observation_text,
    segment_raw_forecast_text,
)

__version__ = '0.1.0'
__all__ = [
    'WeatherAnalyzer',
    'classify_flight_category',
    'ceiling_from_layers',
    'MetarDecoder',
    'decode_raw_metar',
    'WeatherError',
    'InvalidResponseError',
    'StationNotFoundError',
    'DecodeError',
    'FetchError',
    'FetchTimeoutError',
    'ReportMapper',
    'parse_observations',
    'parse_forecasts',
    'parse_pilot_reports',
    'parse_area_hazards',
    'lookup_station',
    'FlightCategory',
    'CloudCover',
    'CloudLayer',
    'StationObservation',
    'ForecastPeriod',
    'TerminalForecast',
    'PilotReport',
    'TurbulenceReport',
    'IcingReport',
    'AreaHazard',
    'AirmetHazard',
    'HazardKind',
    'StationInfo',
    'RawTextSegmenter',
    'parse_bounds_response',
    'segment_raw_observation_text',
    'segment_raw_forecast_text',
]
