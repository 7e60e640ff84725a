"""
Plain-language decoding of raw METAR reports.

The decoder walks the report tokens once, left to right, through a fixed
sequence of stages. A stage either consumes tokens at the cursor and emits
a line, or is skipped with the cursor left in place for the next stage.
"""

import logging
import re
from enum import Enum
from typing import List, NamedTuple, Optional

from aviation_weather.errors import DecodeError

logger = logging.getLogger(__name__)


class DecodeStage(Enum):
    """Decode stages, in scan order."""

    REPORT_TYPE = "report_type"
    STATION = "station"
    TIME = "time"
    MODIFIER = "modifier"
    WIND = "wind"
    VISIBILITY = "visibility"
    WEATHER = "weather"
    CLOUDS = "clouds"
    TEMPERATURE = "temperature"
    ALTIMETER = "altimeter"
    REMARKS = "remarks"


class StageResult(NamedTuple):
    """Outcome of one stage: tokens consumed and the emitted line, if any."""

    consumed: int
    line: Optional[str] = None


SKIPPED = StageResult(0)

REPORT_TYPES = {
    'METAR': "Routine observation",
    'SPECI': "Special observation",
}

MODIFIERS = {
    'AUTO': "Automated observation",
    'COR': "Corrected observation",
}

WEATHER_CODES = (
    ('RA', "Rain"),
    ('SN', "Snow"),
    ('BR', "Mist"),
    ('FG', "Fog"),
    ('HZ', "Haze"),
    ('TS', "Thunderstorm"),
    ('SH', "Showers"),
    ('FZ', "Freezing"),
    ('DZ', "Drizzle"),
)

CLOUD_COVERS = {
    'CLR': "Clear",
    'SKC': "Sky Clear",
    'FEW': "Few",
    'SCT': "Scattered",
    'BKN': "Broken",
    'OVC': "Overcast",
}

CLEAR_SKY_CODES = {
    'CLR': "Clear skies",
    'SKC': "Clear skies",
    'NCD': "No cloud detected",
    'NSC': "No significant cloud",
}

CLOUD_TYPES = {
    'CB': "Cumulonimbus",
    'TCU': "Towering Cumulus",
}

# Tokens that look like weather codes but belong to other groups
_NOT_WEATHER = {'RMK', 'CAVOK', 'AUTO', 'COR', 'NOSIG'} | set(CLEAR_SKY_CODES)

CAVOK_TEXT = "Ceiling and Visibility OK (>10SM, no clouds below 5000ft)"


class MetarDecoder:
    """
    Decode a raw METAR into a human-readable explanation.

    Example:
        print(MetarDecoder.decode(
            "METAR KDEN 121652Z 27015G25KT 10SM FEW050 22/10 A2992 RMK AO2"
        ))
    """

    STATION_PATTERN = re.compile(r'^[A-Z]{4}$')
    TIME_PATTERN = re.compile(r'^(\d{2})(\d{2})(\d{2})Z$')
    WIND_PATTERN = re.compile(r'^(\d{3}|VRB)(\d{2,3})(?:G(\d{2,3}))?KT$')
    WIND_VARIATION_PATTERN = re.compile(r'^(\d{3})V(\d{3})$')
    VISIBILITY_PATTERNS = (
        re.compile(r'^\d+SM$'),
        re.compile(r'^M?\d+/\d+SM$'),
    )
    WHOLE_MILES_PATTERN = re.compile(r'^\d$')
    FRACTION_SM_PATTERN = re.compile(r'^\d/\dSM$')
    WEATHER_PATTERN = re.compile(r'^([+-])?(VC)?([A-Z]{2,6})$')
    CLOUD_PATTERN = re.compile(r'^(CLR|SKC|FEW|SCT|BKN|OVC)(\d{3})(CB|TCU)?$')
    VERTICAL_VISIBILITY_PATTERN = re.compile(r'^VV(\d{3})$')
    TEMPERATURE_PATTERN = re.compile(r'^(M?\d{2})/(M?\d{2})$')
    ALTIMETER_PATTERN = re.compile(r'^([AQ])(\d{4})$')

    @classmethod
    def decode(cls, raw: str) -> str:
        """
        Decode a raw METAR string.

        Args:
            raw: Raw METAR text, with or without the METAR/SPECI keyword

        Returns:
            Multi-line explanation, one line per recognized group

        Raises:
            DecodeError: if the report is None or the empty string
        """
        # Whitespace-only text decodes to the bare header
        if raw is None or raw == "":
            raise DecodeError("Empty METAR", details={'raw': raw})

        tokens = raw.split()
        lines = cls.decode_lines(tokens)
        return "Decoded METAR:\n\n" + "".join(line + "\n" for line in lines)

    @classmethod
    def decode_lines(cls, tokens: List[str]) -> List[str]:
        """Run every stage over the tokens and collect the emitted lines."""
        lines = []
        cursor = 0
        for stage in DecodeStage:
            result = cls.run_stage(stage, tokens, cursor)
            cursor += result.consumed
            if result.line:
                lines.append(result.line)
        if cursor < len(tokens):
            logger.debug("Undecoded METAR tokens: %s", " ".join(tokens[cursor:]))
        return lines

    @classmethod
    def run_stage(cls, stage: DecodeStage, tokens: List[str], cursor: int) -> StageResult:
        """Apply a single stage at the cursor."""
        if stage == DecodeStage.REMARKS:
            return cls._remarks(tokens, cursor)
        if cursor >= len(tokens):
            return SKIPPED
        handler = getattr(cls, '_' + stage.value)
        return handler(tokens, cursor)

    # --- Stages ---

    @classmethod
    def _report_type(cls, tokens: List[str], cursor: int) -> StageResult:
        description = REPORT_TYPES.get(tokens[cursor])
        if description is None:
            return SKIPPED
        return StageResult(1, f"Type: {description}")

    @classmethod
    def _station(cls, tokens: List[str], cursor: int) -> StageResult:
        if not cls.STATION_PATTERN.match(tokens[cursor]):
            return SKIPPED
        return StageResult(1, f"Station: {tokens[cursor]}")

    @classmethod
    def _time(cls, tokens: List[str], cursor: int) -> StageResult:
        match = cls.TIME_PATTERN.match(tokens[cursor])
        if not match:
            return SKIPPED
        day, hour, minute = match.groups()
        return StageResult(1, f"Observation Time: Day {day}, {hour}:{minute} UTC")

    @classmethod
    def _modifier(cls, tokens: List[str], cursor: int) -> StageResult:
        description = MODIFIERS.get(tokens[cursor])
        if description is None:
            return SKIPPED
        return StageResult(1, f"Report Modifier: {description}")

    @classmethod
    def _wind(cls, tokens: List[str], cursor: int) -> StageResult:
        match = cls.WIND_PATTERN.match(tokens[cursor])
        if not match:
            return SKIPPED
        direction, speed, gust = match.groups()

        if direction == '000' and int(speed) == 0 and gust is None:
            text = "Wind: Calm"
        else:
            heading = "Variable" if direction == 'VRB' else f"{direction}°"
            text = f"Wind: {heading} at {int(speed)} knots"
            if gust is not None:
                text += f" gusting to {int(gust)} knots"

        consumed = 1
        if cursor + 1 < len(tokens):
            variation = cls.WIND_VARIATION_PATTERN.match(tokens[cursor + 1])
            if variation:
                text += f", variable between {variation.group(1)}° and {variation.group(2)}°"
                consumed = 2
        return StageResult(consumed, text)

    @classmethod
    def _visibility(cls, tokens: List[str], cursor: int) -> StageResult:
        # The first visibility group ahead of the remarks wins; tokens
        # in between are passed over.
        end = _remarks_index(tokens, cursor)
        for index in range(cursor, end):
            token = tokens[index]
            if token == 'CAVOK':
                return StageResult(index - cursor + 1, f"Visibility: {CAVOK_TEXT}")
            if (
                cls.WHOLE_MILES_PATTERN.match(token)
                and index + 1 < end
                and cls.FRACTION_SM_PATTERN.match(tokens[index + 1])
            ):
                return StageResult(index - cursor + 2, f"Visibility: {token} {tokens[index + 1]}")
            if any(p.match(token) for p in cls.VISIBILITY_PATTERNS):
                return StageResult(index - cursor + 1, f"Visibility: {token}")
        return SKIPPED

    @classmethod
    def _weather(cls, tokens: List[str], cursor: int) -> StageResult:
        descriptions = []
        index = cursor
        while index < len(tokens):
            description = cls.describe_weather(tokens[index])
            if description is None:
                break
            descriptions.append(description)
            index += 1
        if not descriptions:
            return SKIPPED
        return StageResult(index - cursor, "Weather: " + ", ".join(descriptions))

    @classmethod
    def _clouds(cls, tokens: List[str], cursor: int) -> StageResult:
        descriptions = []
        index = cursor
        while index < len(tokens):
            description = cls.describe_cloud(tokens[index])
            if description is None:
                break
            descriptions.append(description)
            index += 1
        if not descriptions:
            return SKIPPED
        return StageResult(index - cursor, "Clouds: " + ", ".join(descriptions))

    @classmethod
    def _temperature(cls, tokens: List[str], cursor: int) -> StageResult:
        match = cls.TEMPERATURE_PATTERN.match(tokens[cursor])
        if not match:
            return SKIPPED
        temperature, dewpoint = (_signed(v) for v in match.groups())
        return StageResult(1, f"Temperature/Dewpoint: {temperature}°C / {dewpoint}°C")

    @classmethod
    def _altimeter(cls, tokens: List[str], cursor: int) -> StageResult:
        match = cls.ALTIMETER_PATTERN.match(tokens[cursor])
        if not match:
            return SKIPPED
        unit, value = match.groups()
        if unit == 'A':
            return StageResult(1, f"Altimeter: {int(value) / 100:.2f} inHg")
        return StageResult(1, f"QNH: {int(value)} hPa")

    @classmethod
    def _remarks(cls, tokens: List[str], cursor: int) -> StageResult:
        index = _remarks_index(tokens, cursor)
        if index >= len(tokens):
            return SKIPPED
        remarks = " ".join(tokens[index + 1:])
        return StageResult(len(tokens) - cursor, f"Remarks: {remarks}" if remarks else None)

    # --- Group descriptions ---

    @classmethod
    def describe_weather(cls, token: str) -> Optional[str]:
        """
        Describe a present-weather group ("-SHRA", "+TSRA", "VCFG").

        Returns:
            Description, or None if the token is not a weather group
        """
        match = cls.WEATHER_PATTERN.match(token)
        if not match or token in _NOT_WEATHER:
            return None
        intensity, vicinity, code = match.groups()

        parts = []
        if intensity == '+':
            parts.append("Heavy")
        elif intensity == '-':
            parts.append("Light")
        if vicinity:
            parts.append("In vicinity")
        phenomena = [name for key, name in WEATHER_CODES if key in code]
        parts.extend(phenomena or [code])
        return " ".join(parts)

    @classmethod
    def describe_cloud(cls, token: str) -> Optional[str]:
        """Describe a sky condition group, or None if the token is not one."""
        if token in CLEAR_SKY_CODES:
            return CLEAR_SKY_CODES[token]
        vertical = cls.VERTICAL_VISIBILITY_PATTERN.match(token)
        if vertical:
            return f"Vertical visibility {int(vertical.group(1)) * 100} ft"
        match = cls.CLOUD_PATTERN.match(token)
        if not match:
            return None
        cover, height, cloud_type = match.groups()
        text = f"{CLOUD_COVERS[cover]} at {int(height) * 100} ft"
        if cloud_type:
            text += f" {CLOUD_TYPES[cloud_type]}"
        return text


def _remarks_index(tokens: List[str], start: int) -> int:
    """Index of the RMK token at or after start, or len(tokens)."""
    for index in range(start, len(tokens)):
        if tokens[index] == 'RMK':
            return index
    return len(tokens)


def _signed(value: str) -> int:
    if value.startswith('M'):
        return -int(value[1:])
    return int(value)


def decode_raw_metar(raw: str) -> str:
    return MetarDecoder.decode(raw)
