"""Canonical aviation weather data models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union


class FlightCategory(Enum):
    """
    FAA flight category based on ceiling and visibility.

    Ordered from worst to best: LIFR < IFR < MVFR < VFR.

    Thresholds (ceiling OR visibility, whichever is worse):
        LIFR:  visibility < 1 SM  or  ceiling < 500 ft
        IFR:   1 <= vis < 3 SM    or  500 <= ceiling < 1000 ft
        MVFR:  3 <= vis < 5 SM    or  1000 <= ceiling < 3000 ft
        VFR:   visibility >= 5 SM and ceiling >= 3000 ft
    """

    LIFR = "LIFR"
    IFR = "IFR"
    MVFR = "MVFR"
    VFR = "VFR"

    @property
    def order(self) -> int:
        """Numeric ordering from worst (0) to best (3)."""
        return _CATEGORY_ORDER[self]

    @property
    def description(self) -> str:
        return _CATEGORY_DESCRIPTIONS[self]

    @property
    def minimums(self) -> dict:
        """Ceiling and visibility bands defining this category."""
        return dict(_CATEGORY_MINIMUMS[self])

    def __lt__(self, other: 'FlightCategory') -> bool:
        if not isinstance(other, FlightCategory):
            return NotImplemented
        return self.order < other.order

    def __le__(self, other: 'FlightCategory') -> bool:
        if not isinstance(other, FlightCategory):
            return NotImplemented
        return self.order <= other.order

    def __gt__(self, other: 'FlightCategory') -> bool:
        if not isinstance(other, FlightCategory):
            return NotImplemented
        return self.order > other.order

    def __ge__(self, other: 'FlightCategory') -> bool:
        if not isinstance(other, FlightCategory):
            return NotImplemented
        return self.order >= other.order


_CATEGORY_ORDER = {
    FlightCategory.LIFR: 0,
    FlightCategory.IFR: 1,
    FlightCategory.MVFR: 2,
    FlightCategory.VFR: 3,
}

_CATEGORY_DESCRIPTIONS = {
    FlightCategory.VFR: "Visual Flight Rules - Good weather conditions for visual flight",
    FlightCategory.MVFR: "Marginal Visual Flight Rules - Marginal conditions for visual flight",
    FlightCategory.IFR: "Instrument Flight Rules - Instrument flight required",
    FlightCategory.LIFR: "Low Instrument Flight Rules - Very poor conditions, approach minimums may be a factor",
}

_CATEGORY_MINIMUMS = {
    FlightCategory.VFR: {'ceiling': '>= 3000 ft', 'visibility': '>= 5 SM'},
    FlightCategory.MVFR: {'ceiling': '1000-2999 ft', 'visibility': '3-4 SM'},
    FlightCategory.IFR: {'ceiling': '500-999 ft', 'visibility': '1-2 SM'},
    FlightCategory.LIFR: {'ceiling': '< 500 ft', 'visibility': '< 1 SM'},
}


class CloudCover(Enum):
    """Sky cover code of a cloud layer."""

    FEW = "FEW"
    SCT = "SCT"
    BKN = "BKN"
    OVC = "OVC"
    CLR = "CLR"
    SKC = "SKC"

    @property
    def is_ceiling(self) -> bool:
        """Broken and overcast layers constitute a ceiling."""
        return self in (CloudCover.BKN, CloudCover.OVC)

    @property
    def is_clear(self) -> bool:
        return self in (CloudCover.CLR, CloudCover.SKC)


class ChangeType(Enum):
    """TAF change group indicator."""

    FM = "FM"
    TEMPO = "TEMPO"
    BECMG = "BECMG"
    PROB = "PROB"


class PirepUrgency(Enum):
    ROUTINE = "ROUTINE"
    URGENT = "URGENT"


class TurbulenceIntensity(Enum):
    LIGHT = "LIGHT"
    MODERATE = "MODERATE"
    SEVERE = "SEVERE"
    EXTREME = "EXTREME"


class TurbulenceType(Enum):
    CAT = "CAT"
    CHOP = "CHOP"
    MECH = "MECH"


class IcingIntensity(Enum):
    TRACE = "TRACE"
    LIGHT = "LIGHT"
    MODERATE = "MODERATE"
    SEVERE = "SEVERE"


class IcingType(Enum):
    RIME = "RIME"
    CLEAR = "CLEAR"
    MIXED = "MIXED"


class HazardKind(Enum):
    """Advisory family of an area hazard."""

    AIRMET = "AIRMET"
    SIGMET = "SIGMET"


class AirmetHazard(Enum):
    """Closed set of AIRMET hazard types."""

    IFR = "IFR"
    MOUNTAIN_OBSCURATION = "MOUNTAIN_OBSCURATION"
    TURBULENCE = "TURBULENCE"
    ICING = "ICING"
    STRONG_SURFACE_WINDS = "STRONG_SURFACE_WINDS"
    LOW_LEVEL_WIND_SHEAR = "LOW_LEVEL_WIND_SHEAR"


class HazardSeverity(Enum):
    MODERATE = "MODERATE"
    SEVERE = "SEVERE"
    EXTREME = "EXTREME"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _value(member: Optional[Enum]) -> Optional[str]:
    return member.value if member is not None else None


@dataclass(frozen=True)
class CloudLayer:
    """
    A single cloud layer.

    Attributes:
        cover: Sky cover code
        base_ft: Base altitude in feet AGL (never set for CLR/SKC)
        cloud_type: Convective type (CB, TCU) when reported
    """

    cover: CloudCover = CloudCover.CLR
    base_ft: Optional[int] = None
    cloud_type: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'cover': self.cover.value,
            'base_ft': self.base_ft,
            'cloud_type': self.cloud_type,
        }


@dataclass(frozen=True)
class StationObservation:
    """
    Parsed METAR observation.

    Attributes:
        raw_text: Original report text
        station: Station ICAO identifier
        observation_time: Time of observation
        temperature: Temperature in Celsius
        dewpoint: Dewpoint in Celsius
        wind_direction: Wind direction in degrees (None if variable/calm)
        wind_speed: Wind speed in knots
        wind_gust: Gust speed in knots
        visibility_sm: Visibility in statute miles
        altimeter: Altimeter setting in inHg
        clouds: Cloud layers in reported order
        weather: Weather phenomenon codes
        remarks: Remarks section
        latitude: Station latitude
        longitude: Station longitude
        flight_category: Category derived from ceiling and visibility
    """

    raw_text: str = ""
    station: str = ""
    observation_time: Optional[datetime] = None
    temperature: Optional[float] = None
    dewpoint: Optional[float] = None
    wind_direction: Optional[int] = None
    wind_speed: Optional[int] = None
    wind_gust: Optional[int] = None
    visibility_sm: Optional[float] = None
    altimeter: Optional[float] = None
    clouds: Tuple[CloudLayer, ...] = ()
    weather: Tuple[str, ...] = ()
    remarks: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    flight_category: Optional[FlightCategory] = None

    @property
    def ceiling_ft(self) -> Optional[int]:
        """Lowest broken or overcast layer base."""
        from aviation_weather.analysis import ceiling_from_layers
        return ceiling_from_layers(self.clouds)

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        return {
            'raw_text': self.raw_text,
            'station': self.station,
            'observation_time': _iso(self.observation_time),
            'temperature': self.temperature,
            'dewpoint': self.dewpoint,
            'wind_direction': self.wind_direction,
            'wind_speed': self.wind_speed,
            'wind_gust': self.wind_gust,
            'visibility_sm': self.visibility_sm,
            'altimeter': self.altimeter,
            'clouds': [c.to_dict() for c in self.clouds],
            'weather': list(self.weather),
            'remarks': self.remarks,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'flight_category': _value(self.flight_category),
        }

    def __repr__(self) -> str:
        cat = f" {self.flight_category.value}" if self.flight_category else ""
        return f"StationObservation({self.station}{cat})"


@dataclass(frozen=True)
class ForecastPeriod:
    """One TAF change group (or the base forecast)."""

    time_from: Optional[datetime] = None
    time_to: Optional[datetime] = None
    change_type: Optional[ChangeType] = None
    probability: Optional[int] = None
    wind_direction: Optional[int] = None
    wind_speed: Optional[int] = None
    wind_gust: Optional[int] = None
    visibility_sm: Optional[float] = None
    weather: Tuple[str, ...] = ()
    clouds: Tuple[CloudLayer, ...] = ()
    flight_category: Optional[FlightCategory] = None

    def contains(self, when: datetime) -> bool:
        """True if ``when`` falls in [time_from, time_to)."""
        if self.time_from is None:
            return False
        if when < self.time_from:
            return False
        # FM groups run until superseded
        return self.time_to is None or when < self.time_to

    def to_dict(self) -> dict:
        return {
            'time_from': _iso(self.time_from),
            'time_to': _iso(self.time_to),
            'change_type': _value(self.change_type),
            'probability': self.probability,
            'wind_direction': self.wind_direction,
            'wind_speed': self.wind_speed,
            'wind_gust': self.wind_gust,
            'visibility_sm': self.visibility_sm,
            'weather': list(self.weather),
            'clouds': [c.to_dict() for c in self.clouds],
            'flight_category': _value(self.flight_category),
        }


@dataclass(frozen=True)
class TerminalForecast:
    """
    Parsed TAF.

    The validity window is half-open: [valid_from, valid_to).
    """

    raw_text: str = ""
    station: str = ""
    issue_time: Optional[datetime] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    periods: Tuple[ForecastPeriod, ...] = ()

    def periods_at(self, when: datetime) -> Tuple[ForecastPeriod, ...]:
        """
        Find all forecast periods valid at a given time.

        Args:
            when: Time to check (same timezone awareness as the periods)

        Returns:
            Matching periods, in forecast order
        """
        return tuple(p for p in self.periods if p.contains(when))

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        return {
            'raw_text': self.raw_text,
            'station': self.station,
            'issue_time': _iso(self.issue_time),
            'valid_from': _iso(self.valid_from),
            'valid_to': _iso(self.valid_to),
            'periods': [p.to_dict() for p in self.periods],
        }

    def __repr__(self) -> str:
        return f"TerminalForecast({self.station} {len(self.periods)} periods)"


@dataclass(frozen=True)
class TurbulenceReport:
    intensity: TurbulenceIntensity = TurbulenceIntensity.LIGHT
    type: Optional[TurbulenceType] = None

    def to_dict(self) -> dict:
        return {'intensity': self.intensity.value, 'type': _value(self.type)}


@dataclass(frozen=True)
class IcingReport:
    intensity: IcingIntensity = IcingIntensity.LIGHT
    type: Optional[IcingType] = None

    def to_dict(self) -> dict:
        return {'intensity': self.intensity.value, 'type': _value(self.type)}


@dataclass(frozen=True)
class PilotReport:
    """Parsed PIREP."""

    raw_text: str = ""
    observation_time: Optional[datetime] = None
    report_type: PirepUrgency = PirepUrgency.ROUTINE
    aircraft: Optional[str] = None
    location: str = ""
    altitude_ft: Optional[int] = None
    turbulence: Optional[TurbulenceReport] = None
    icing: Optional[IcingReport] = None
    weather: Tuple[str, ...] = ()
    remarks: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'raw_text': self.raw_text,
            'observation_time': _iso(self.observation_time),
            'report_type': self.report_type.value,
            'aircraft': self.aircraft,
            'location': self.location,
            'altitude_ft': self.altitude_ft,
            'turbulence': self.turbulence.to_dict() if self.turbulence else None,
            'icing': self.icing.to_dict() if self.icing else None,
            'weather': list(self.weather),
            'remarks': self.remarks,
        }


@dataclass(frozen=True)
class AreaHazard:
    """
    AIRMET or SIGMET advisory.

    AIRMET hazard types come from the closed ``AirmetHazard`` set; SIGMET
    hazard types are kept as the upstream string.
    """

    kind: HazardKind = HazardKind.AIRMET
    raw_text: str = ""
    hazard_type: Union[AirmetHazard, str] = AirmetHazard.IFR
    severity: Optional[HazardSeverity] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    area: str = ""
    description: str = ""

    def to_dict(self) -> dict:
        hazard = self.hazard_type.value if isinstance(self.hazard_type, Enum) else self.hazard_type
        return {
            'kind': self.kind.value,
            'raw_text': self.raw_text,
            'hazard_type': hazard,
            'severity': _value(self.severity),
            'valid_from': _iso(self.valid_from),
            'valid_to': _iso(self.valid_to),
            'area': self.area,
            'description': self.description,
        }

    def __repr__(self) -> str:
        hazard = self.hazard_type.value if isinstance(self.hazard_type, Enum) else self.hazard_type
        return f"AreaHazard({self.kind.value} {hazard} {self.area})"


@dataclass(frozen=True)
class StationInfo:
    """
    Airport or weather station details.

    Attributes:
        elevation_m: Field elevation in metres, as reported by the feed
    """

    icao: str
    name: str
    iata: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    elevation_m: Optional[int] = None
    timezone: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'icao': self.icao,
            'name': self.name,
            'iata': self.iata,
            'city': self.city,
            'state': self.state,
            'country': self.country,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'elevation_m': self.elevation_m,
            'timezone': self.timezone,
        }
