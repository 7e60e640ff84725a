"""
Scalar value normalization for loosely-typed weather feeds.

Every function here degrades to ``None`` (or a documented default) on
malformed input instead of raising: optional fields of a partial record
are reported as unknown, never as errors.
"""

import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Optional, Sequence, Tuple

from dateutil import parser as date_parser

from aviation_weather.models import (
    AirmetHazard,
    HazardSeverity,
    IcingIntensity,
    IcingType,
    TurbulenceIntensity,
    TurbulenceType,
)

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)')

# Shorter digit strings are compact dates ("20240112"), not epoch seconds
_EPOCH_MIN_DIGITS = 9

# Ordered tables, walked top to bottom, first match wins. Intensity tables
# list the worst level first so a mixed report ("LGT-SEV") classifies as
# the worse level.
TURBULENCE_INTENSITIES = (
    (TurbulenceIntensity.EXTREME, ('EXTREME', 'EXTRM')),
    (TurbulenceIntensity.SEVERE, ('SEVERE', 'SEV')),
    (TurbulenceIntensity.MODERATE, ('MODERATE', 'MOD')),
    (TurbulenceIntensity.LIGHT, ('LIGHT', 'LGT')),
)

ICING_INTENSITIES = (
    (IcingIntensity.SEVERE, ('SEVERE', 'SEV')),
    (IcingIntensity.MODERATE, ('MODERATE', 'MOD')),
    (IcingIntensity.LIGHT, ('LIGHT', 'LGT')),
    (IcingIntensity.TRACE, ('TRACE', 'TRC')),
)

HAZARD_SEVERITIES = (
    (HazardSeverity.EXTREME, ('EXTREME', 'EXTRM')),
    (HazardSeverity.SEVERE, ('SEVERE', 'SEV')),
    (HazardSeverity.MODERATE, ('MODERATE', 'MOD')),
)

TURBULENCE_TYPES = (
    (TurbulenceType.CAT, ('CAT', 'CLEAR AIR')),
    (TurbulenceType.CHOP, ('CHOP',)),
    (TurbulenceType.MECH, ('MECH',)),
)

ICING_TYPES = (
    (IcingType.MIXED, ('MIXED', 'MX')),
    (IcingType.RIME, ('RIME',)),
    (IcingType.CLEAR, ('CLEAR', 'CLR')),
)

# Each entry lists alternatives; every token of an alternative must appear.
HAZARD_TYPES = (
    (AirmetHazard.IFR, (('IFR',),)),
    (AirmetHazard.MOUNTAIN_OBSCURATION, (('MOUNTAIN',), ('MTN',), ('MT_OBSC',))),
    (AirmetHazard.TURBULENCE, (('TURB',),)),
    (AirmetHazard.ICING, (('ICE',), ('ICING',))),
    (AirmetHazard.LOW_LEVEL_WIND_SHEAR, (('WIND', 'SHEAR'), ('LLWS',))),
    (AirmetHazard.STRONG_SURFACE_WINDS, (('WIND',), ('SFC_WND',))),
)

# TODO: unrecognized AIRMET hazards fall back to IFR; revisit once the
# upstream hazard vocabulary (FZLVL, M_FZLVL) gets its own types.
DEFAULT_HAZARD_TYPE = AirmetHazard.IFR


def coerce_float(raw: Any) -> Optional[float]:
    """
    Coerce a number or numeric string to float.

    Tolerates a trailing unit suffix ("5431 ft" -> 5431.0).

    Returns:
        Float value or None if not numeric
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
        return value if math.isfinite(value) else None
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        match = _LEADING_NUMBER.match(text)
        if not match:
            return None
        value = float(match.group(0))
    return value if math.isfinite(value) else None


def coerce_int(raw: Any) -> Optional[int]:
    """Coerce to int, truncating any fractional part ("12.7" -> 12)."""
    value = coerce_float(raw)
    if value is None:
        return None
    return int(value)


def coerce_text(raw: Any) -> Optional[str]:
    """Return a stripped string, or None when empty or absent."""
    if raw is None or isinstance(raw, bool):
        return None
    text = str(raw).strip()
    return text or None


def normalize_visibility(raw: Any) -> Optional[float]:
    """
    Normalize a visibility value to statute miles.

    Handles: 10, "10", "10+", "P6SM", "2SM", "1/2", "1 1/2SM", "M1/4SM"

    Args:
        raw: Visibility as reported by the feed

    Returns:
        Visibility in statute miles, or None if unparseable
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return coerce_float(raw)
    if not isinstance(raw, str):
        return None

    text = raw.strip().upper()
    if text.endswith('+'):
        text = text[:-1].strip()
    if text.startswith('P') and text.endswith('SM'):
        text = text[1:-2].strip()
    elif text.endswith('SM'):
        text = text[:-2].strip()
    if not text:
        return None

    value = safe_parse_fraction(text)
    if value is None:
        logger.debug("Unparseable visibility: %r", raw)
    return value


def safe_parse_fraction(text: str) -> Optional[float]:
    """
    Safely parse a fractional number string.

    Handles: "1/2", "2 1/2", "1", "0.5", "M1/4" (M = less than), "P6"

    Args:
        text: String that may contain a fraction

    Returns:
        Float value or None if unparseable
    """
    text = text.strip()
    if not text:
        return None

    # Strip "M" (less than) or "P" (more than) prefix
    if text[0] in "MmPp":
        text = text[1:].strip()

    try:
        value = float(text)
        return value if math.isfinite(value) else None
    except ValueError:
        pass

    # Mixed number: "2 1/2"
    if " " in text and "/" in text:
        parts = text.split(None, 1)
        if len(parts) == 2:
            try:
                whole = float(parts[0])
            except ValueError:
                return None
            frac = _parse_simple_fraction(parts[1])
            if frac is not None:
                return whole + frac
            return None

    if "/" in text:
        return _parse_simple_fraction(text)

    return None


def _parse_simple_fraction(text: str) -> Optional[float]:
    """Parse a simple fraction like '1/2' or '3/4'."""
    parts = text.split("/")
    if len(parts) != 2:
        return None
    try:
        num = float(parts[0])
        den = float(parts[1])
    except ValueError:
        return None
    if den == 0:
        return None
    return num / den


def parse_timestamp(raw: Any) -> Optional[datetime]:
    """
    Parse an upstream timestamp.

    Accepts ISO-8601 strings (including the "T24:00" end-of-day form and
    compact "20240112" dates) and epoch seconds, as numbers or strings of
    at least nine digits. Epoch values are returned as UTC.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, (int, float)):
        return _from_epoch(raw)
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    if not text:
        return None
    if text.isdigit() and len(text) >= _EPOCH_MIN_DIGITS:
        return _from_epoch(int(text))

    try:
        return date_parser.isoparse(text)
    except (ValueError, OverflowError):
        pass
    try:
        return date_parser.parse(text)
    except (ValueError, OverflowError):
        logger.debug("Unparseable timestamp: %r", raw)
        return None


def _from_epoch(seconds: float) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        logger.debug("Epoch timestamp out of range: %r", seconds)
        return None


def normalize_intensity(raw: Any, table: Sequence[tuple], default: Any = None) -> Any:
    """
    Classify a free-text value against an ordered token table.

    Matching is a case-insensitive substring test; the table is walked in
    order and the first entry with a matching token wins.

    Args:
        raw: Upstream value (any type, stringified)
        table: Sequence of (member, tokens) pairs
        default: Returned when nothing matches or raw is absent

    Returns:
        The matching member, or default
    """
    text = coerce_text(raw)
    if text is None:
        return default
    upper = text.upper()
    for member, tokens in table:
        if any(token in upper for token in tokens):
            return member
    return default


def normalize_hazard_type(raw: Any) -> AirmetHazard:
    """
    Classify an AIRMET hazard string.

    Unrecognized or absent values default to IFR.
    """
    text = coerce_text(raw)
    if text is not None:
        upper = text.upper()
        for hazard, alternatives in HAZARD_TYPES:
            for tokens in alternatives:
                if all(token in upper for token in tokens):
                    return hazard
    logger.debug("Unrecognized hazard type %r, defaulting to %s", raw, DEFAULT_HAZARD_TYPE.value)
    return DEFAULT_HAZARD_TYPE


def normalize_weather(raw: Any) -> Tuple[str, ...]:
    """
    Normalize weather phenomena to a tuple of codes.

    Accepts a wx string ("-RA BR") or a list of strings.
    """
    if raw is None:
        return ()
    if isinstance(raw, str):
        return tuple(raw.split())
    if isinstance(raw, (list, tuple)):
        codes = []
        for item in raw:
            if isinstance(item, str):
                codes.extend(item.split())
        return tuple(codes)
    return ()
