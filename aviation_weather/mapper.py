"""
Mapping of loosely-typed feed records to canonical weather entities.

The upstream feed has renamed its fields over time, so every logical field
is read from an ordered list of alternative keys; the first key holding a
value wins.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

from aviation_weather.analysis import WeatherAnalyzer
from aviation_weather.clouds import parse_cloud_layers
from aviation_weather.errors import InvalidResponseError, StationNotFoundError
from aviation_weather.models import (
    AreaHazard,
    ChangeType,
    ForecastPeriod,
    HazardKind,
    IcingIntensity,
    IcingReport,
    PilotReport,
    PirepUrgency,
    StationInfo,
    StationObservation,
    TerminalForecast,
    TurbulenceIntensity,
    TurbulenceReport,
)
from aviation_weather.normalize import (
    HAZARD_SEVERITIES,
    ICING_INTENSITIES,
    ICING_TYPES,
    TURBULENCE_INTENSITIES,
    TURBULENCE_TYPES,
    coerce_float,
    coerce_int,
    coerce_text,
    normalize_hazard_type,
    normalize_intensity,
    normalize_visibility,
    normalize_weather,
    parse_timestamp,
)

logger = logging.getLogger(__name__)


class Fields:
    """Alternative source keys per logical field, in priority order."""

    # Shared
    STATION = ('icaoId', 'station', 'station_id', 'icao')
    WIND_DIRECTION = ('wdir', 'wind_dir_degrees')
    WIND_SPEED = ('wspd', 'wind_speed_kt')
    WIND_GUST = ('wgst', 'wind_gust_kt')
    VISIBILITY = ('visib', 'visibility_statute_mi')
    CLOUDS = ('clouds', 'skyCondition', 'sky_condition')
    WEATHER = ('wxString', 'wx_string')
    REMARKS = ('remarks', 'rmk')
    VALID_FROM = ('validTimeFrom', 'valid_time_from')
    VALID_TO = ('validTimeTo', 'valid_time_to')

    # METAR
    METAR_RAW = ('rawOb', 'raw_text', 'raw')
    OBSERVATION_TIME = ('obsTime', 'observation_time', 'reportTime')
    TEMPERATURE = ('temp', 'temp_c')
    DEWPOINT = ('dewp', 'dewpoint_c')
    ALTIMETER = ('altim', 'altim_in_hg')
    LATITUDE = ('lat', 'latitude')
    LONGITUDE = ('lon', 'longitude')

    # TAF
    TAF_RAW = ('rawTaf', 'raw_text', 'raw')
    ISSUE_TIME = ('issueTime', 'issue_time')
    PERIODS = ('fcsts', 'forecast', 'forecasts')
    PERIOD_FROM = ('timeFrom', 'fcstTimeFrom', 'fcst_time_from')
    PERIOD_TO = ('timeTo', 'fcstTimeTo', 'fcst_time_to')
    CHANGE_TYPE = ('fcstChange', 'changeIndicator', 'change_indicator')
    PROBABILITY = ('probability', 'prob')

    # PIREP
    PIREP_RAW = ('rawOb', 'raw_text', 'raw')
    URGENCY = ('urgency', 'pirepType', 'report_type')
    AIRCRAFT = ('acType', 'aircraft_ref', 'aircraft')
    LOCATION = ('location', 'loc')
    ALTITUDE = ('altitude', 'altitude_ft_msl')
    TURBULENCE = ('turbulence', 'tbInt1', 'turbulence_intensity')
    TURBULENCE_TYPE = ('tbType1', 'turbulence_type')
    ICING = ('icing', 'icgInt1', 'icing_intensity')
    ICING_TYPE = ('icgType1', 'icing_type')

    # AIRMET / SIGMET
    HAZARD_RAW = ('rawAirmet', 'rawAirSigmet', 'rawSigmet', 'raw_text')
    HAZARD = ('hazard', 'hazardType')
    SEVERITY = ('severity', 'qualifier')
    AREA = ('region', 'area', 'firId')
    DESCRIPTION = ('text', 'description', 'due_to')

    # Station
    NAME = ('name', 'site')
    IATA = ('iataId', 'iata')
    CITY = ('city',)
    STATE = ('state',)
    COUNTRY = ('country',)
    ELEVATION = ('elev', 'elevation')
    TIMEZONE = ('timezone', 'tz')


_URGENT_CODES = ('URGENT', 'UUA')

_PROB_INDICATOR = re.compile(r'^PROB\s*(\d{1,3})')


def first_present(record: Mapping, keys: Sequence[str]) -> Any:
    """
    Return the value of the first key holding a value.

    A value is present when it is neither None nor a blank string.
    """
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


class ReportMapper:
    """
    Map raw feed records to canonical entities.

    Missing or malformed optional fields degrade to None; only a response
    that is not a sequence of records raises.

    Example:
        observations = ReportMapper.parse_observations([
            {"icaoId": "KDEN", "visib": "10+", "clouds": [{"cover": "BKN", "base": 2500}]}
        ])
        print(observations[0].flight_category)  # FlightCategory.MVFR
    """

    @classmethod
    def parse_observations(cls, records: Any) -> List[StationObservation]:
        """
        Map METAR records.

        Args:
            records: Sequence of METAR record mappings

        Returns:
            List of StationObservation, one per record

        Raises:
            InvalidResponseError: if records is not a sequence of mappings
        """
        return [cls.map_observation(r) for r in _require_records(records, "METAR")]

    @classmethod
    def parse_forecasts(cls, records: Any) -> List[TerminalForecast]:
        """Map TAF records. Raises InvalidResponseError on a non-sequence."""
        return [cls.map_forecast(r) for r in _require_records(records, "TAF")]

    @classmethod
    def parse_pilot_reports(cls, records: Any) -> List[PilotReport]:
        """Map PIREP records. Raises InvalidResponseError on a non-sequence."""
        return [cls.map_pilot_report(r) for r in _require_records(records, "PIREP")]

    @classmethod
    def parse_area_hazards(cls, records: Any, kind: HazardKind = HazardKind.AIRMET) -> List[AreaHazard]:
        """Map AIRMET or SIGMET records. Raises InvalidResponseError on a non-sequence."""
        return [cls.map_area_hazard(r, kind) for r in _require_records(records, kind.value)]

    @classmethod
    def lookup_station(cls, records: Any, station_id: str) -> StationInfo:
        """
        Find station details for an identifier.

        Args:
            records: Sequence of station-bearing records (METAR or station feed)
            station_id: ICAO identifier

        Returns:
            StationInfo for the first matching record

        Raises:
            InvalidResponseError: if records is not a sequence of mappings
            StationNotFoundError: if no record matches
        """
        wanted = (station_id or "").strip().upper()
        for record in _require_records(records, "station"):
            station = coerce_text(first_present(record, Fields.STATION))
            if station is not None and station.upper() == wanted:
                return cls.map_station(record, wanted)
        raise StationNotFoundError(f"Station {wanted} not found", details={'station': wanted})

    # --- Per-record mappers ---

    @classmethod
    def map_observation(cls, record: Mapping) -> StationObservation:
        raw_text = coerce_text(first_present(record, Fields.METAR_RAW)) or ""
        clouds = parse_cloud_layers(first_present(record, Fields.CLOUDS))
        visibility = normalize_visibility(first_present(record, Fields.VISIBILITY))

        remarks = coerce_text(first_present(record, Fields.REMARKS))
        if remarks is None:
            remarks = _remarks_from_raw(raw_text)

        return StationObservation(
            raw_text=raw_text,
            station=_station(record),
            observation_time=parse_timestamp(first_present(record, Fields.OBSERVATION_TIME)),
            temperature=coerce_float(first_present(record, Fields.TEMPERATURE)),
            dewpoint=coerce_float(first_present(record, Fields.DEWPOINT)),
            wind_direction=coerce_int(first_present(record, Fields.WIND_DIRECTION)),
            wind_speed=coerce_int(first_present(record, Fields.WIND_SPEED)),
            wind_gust=coerce_int(first_present(record, Fields.WIND_GUST)),
            visibility_sm=visibility,
            altimeter=coerce_float(first_present(record, Fields.ALTIMETER)),
            clouds=clouds,
            weather=normalize_weather(first_present(record, Fields.WEATHER)),
            remarks=remarks,
            latitude=coerce_float(first_present(record, Fields.LATITUDE)),
            longitude=coerce_float(first_present(record, Fields.LONGITUDE)),
            flight_category=WeatherAnalyzer.flight_category(WeatherAnalyzer.ceiling(clouds), visibility),
        )

    @classmethod
    def map_forecast(cls, record: Mapping) -> TerminalForecast:
        raw_periods = first_present(record, Fields.PERIODS)
        periods = ()
        if isinstance(raw_periods, (list, tuple)):
            periods = tuple(cls.map_period(p) for p in raw_periods if isinstance(p, Mapping))

        return TerminalForecast(
            raw_text=coerce_text(first_present(record, Fields.TAF_RAW)) or "",
            station=_station(record),
            issue_time=parse_timestamp(first_present(record, Fields.ISSUE_TIME)),
            valid_from=parse_timestamp(first_present(record, Fields.VALID_FROM)),
            valid_to=parse_timestamp(first_present(record, Fields.VALID_TO)),
            periods=periods,
        )

    @classmethod
    def map_period(cls, record: Mapping) -> ForecastPeriod:
        """
        Map one TAF change group.

        A group reporting neither visibility nor cloud layers only amends
        the forecast it modifies, so it gets no flight category of its own.
        """
        clouds = parse_cloud_layers(first_present(record, Fields.CLOUDS))
        visibility = normalize_visibility(first_present(record, Fields.VISIBILITY))
        raw_change = first_present(record, Fields.CHANGE_TYPE)

        probability = coerce_int(first_present(record, Fields.PROBABILITY))
        if probability is None:
            probability = _indicator_probability(raw_change)

        flight_category = None
        if visibility is not None or clouds:
            flight_category = WeatherAnalyzer.flight_category(WeatherAnalyzer.ceiling(clouds), visibility)

        return ForecastPeriod(
            time_from=parse_timestamp(first_present(record, Fields.PERIOD_FROM)),
            time_to=parse_timestamp(first_present(record, Fields.PERIOD_TO)),
            change_type=_change_type(raw_change),
            probability=probability,
            wind_direction=coerce_int(first_present(record, Fields.WIND_DIRECTION)),
            wind_speed=coerce_int(first_present(record, Fields.WIND_SPEED)),
            wind_gust=coerce_int(first_present(record, Fields.WIND_GUST)),
            visibility_sm=visibility,
            weather=normalize_weather(first_present(record, Fields.WEATHER)),
            clouds=clouds,
            flight_category=flight_category,
        )

    @classmethod
    def map_pilot_report(cls, record: Mapping) -> PilotReport:
        urgency = coerce_text(first_present(record, Fields.URGENCY))
        report_type = PirepUrgency.ROUTINE
        if urgency is not None and urgency.upper() in _URGENT_CODES:
            report_type = PirepUrgency.URGENT

        turbulence = None
        raw_turbulence = first_present(record, Fields.TURBULENCE)
        if raw_turbulence is not None:
            turbulence = TurbulenceReport(
                intensity=normalize_intensity(raw_turbulence, TURBULENCE_INTENSITIES, TurbulenceIntensity.LIGHT),
                type=normalize_intensity(first_present(record, Fields.TURBULENCE_TYPE), TURBULENCE_TYPES),
            )

        icing = None
        raw_icing = first_present(record, Fields.ICING)
        if raw_icing is not None:
            icing = IcingReport(
                intensity=normalize_intensity(raw_icing, ICING_INTENSITIES, IcingIntensity.LIGHT),
                type=normalize_intensity(first_present(record, Fields.ICING_TYPE), ICING_TYPES),
            )

        return PilotReport(
            raw_text=coerce_text(first_present(record, Fields.PIREP_RAW)) or "",
            observation_time=parse_timestamp(first_present(record, Fields.OBSERVATION_TIME)),
            report_type=report_type,
            aircraft=coerce_text(first_present(record, Fields.AIRCRAFT)),
            location=coerce_text(first_present(record, Fields.LOCATION)) or "",
            altitude_ft=coerce_int(first_present(record, Fields.ALTITUDE)),
            turbulence=turbulence,
            icing=icing,
            weather=normalize_weather(first_present(record, Fields.WEATHER)),
            remarks=coerce_text(first_present(record, Fields.REMARKS)),
        )

    @classmethod
    def map_area_hazard(cls, record: Mapping, kind: HazardKind = HazardKind.AIRMET) -> AreaHazard:
        raw_hazard = first_present(record, Fields.HAZARD)
        if kind == HazardKind.AIRMET:
            hazard_type = normalize_hazard_type(raw_hazard)
            severity = None
        else:
            hazard_type = (coerce_text(raw_hazard) or "").upper()
            severity = normalize_intensity(first_present(record, Fields.SEVERITY), HAZARD_SEVERITIES)

        return AreaHazard(
            kind=kind,
            raw_text=coerce_text(first_present(record, Fields.HAZARD_RAW)) or "",
            hazard_type=hazard_type,
            severity=severity,
            valid_from=parse_timestamp(first_present(record, Fields.VALID_FROM)),
            valid_to=parse_timestamp(first_present(record, Fields.VALID_TO)),
            area=coerce_text(first_present(record, Fields.AREA)) or "",
            description=coerce_text(first_present(record, Fields.DESCRIPTION)) or "",
        )

    @classmethod
    def map_station(cls, record: Mapping, station_id: str) -> StationInfo:
        icao = _station(record) or station_id
        return StationInfo(
            icao=icao,
            name=coerce_text(first_present(record, Fields.NAME)) or icao,
            iata=coerce_text(first_present(record, Fields.IATA)),
            city=coerce_text(first_present(record, Fields.CITY)),
            state=coerce_text(first_present(record, Fields.STATE)),
            country=coerce_text(first_present(record, Fields.COUNTRY)),
            latitude=coerce_float(first_present(record, Fields.LATITUDE)),
            longitude=coerce_float(first_present(record, Fields.LONGITUDE)),
            elevation_m=coerce_int(first_present(record, Fields.ELEVATION)),
            timezone=coerce_text(first_present(record, Fields.TIMEZONE)),
        )


# --- Module-level helpers ---

def _require_records(records: Any, label: str) -> Sequence[Mapping]:
    if not isinstance(records, (list, tuple)):
        raise InvalidResponseError(
            f"Expected array of {label} data",
            details={'type': type(records).__name__},
        )
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise InvalidResponseError(
                f"Expected {label} record at index {index} to be an object",
                details={'index': index, 'type': type(record).__name__},
            )
    return records


def _station(record: Mapping) -> str:
    station = coerce_text(first_present(record, Fields.STATION))
    return station.upper() if station else ""


def _change_type(raw: Any) -> Optional[ChangeType]:
    text = coerce_text(raw)
    if text is None:
        return None
    upper = text.upper()
    # PROB30 / PROB40 carry their percentage in the indicator
    if upper.startswith('PROB'):
        return ChangeType.PROB
    try:
        return ChangeType(upper)
    except ValueError:
        logger.debug("Unrecognized TAF change indicator %r", raw)
        return None


def _indicator_probability(raw: Any) -> Optional[int]:
    """Percentage carried by a PROB30 / PROB40 indicator."""
    text = coerce_text(raw)
    if text is None:
        return None
    match = _PROB_INDICATOR.match(text.upper())
    return int(match.group(1)) if match else None


def _remarks_from_raw(raw_text: str) -> Optional[str]:
    tokens = raw_text.split()
    if 'RMK' not in tokens:
        return None
    remarks = " ".join(tokens[tokens.index('RMK') + 1:])
    return remarks or None


def parse_observations(records: Any) -> List[StationObservation]:
    return ReportMapper.parse_observations(records)


def parse_forecasts(records: Any) -> List[TerminalForecast]:
    return ReportMapper.parse_forecasts(records)


def parse_pilot_reports(records: Any) -> List[PilotReport]:
    return ReportMapper.parse_pilot_reports(records)


def parse_area_hazards(records: Any, kind: HazardKind = HazardKind.AIRMET) -> List[AreaHazard]:
    return ReportMapper.parse_area_hazards(records, kind)


def lookup_station(records: Any, station_id: str) -> StationInfo:
    return ReportMapper.lookup_station(records, station_id)
