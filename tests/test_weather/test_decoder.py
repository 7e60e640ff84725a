"""Tests for plain-language METAR decoding."""

import pytest

from aviation_weather.decoder import DecodeStage, MetarDecoder, decode_raw_metar
from aviation_weather.errors import DecodeError


def decoded_lines(raw):
    text = decode_raw_metar(raw)
    assert text.startswith("Decoded METAR:\n\n")
    return text[len("Decoded METAR:\n\n"):].splitlines()


class TestDecodeFullReport:
    """Test decoding of a complete report."""

    def test_example_report(self):
        lines = decoded_lines("METAR KDEN 121652Z 27015G25KT 10SM FEW050 22/10 A2992 RMK AO2")
        assert lines == [
            "Type: Routine observation",
            "Station: KDEN",
            "Observation Time: Day 12, 16:52 UTC",
            "Wind: 270° at 15 knots gusting to 25 knots",
            "Visibility: 10SM",
            "Clouds: Few at 5000 ft",
            "Temperature/Dewpoint: 22°C / 10°C",
            "Altimeter: 29.92 inHg",
            "Remarks: AO2",
        ]

    def test_each_line_newline_terminated(self):
        text = decode_raw_metar("METAR KDEN 121652Z 27015KT 10SM CLR 22/10 A2992")
        assert text.endswith("Altimeter: 29.92 inHg\n")

    def test_without_keyword(self):
        lines = decoded_lines("KDEN 121652Z 27015KT 10SM CLR 22/10 A2992")
        assert lines[0] == "Station: KDEN"

    def test_special_observation(self):
        assert decoded_lines("SPECI KDEN 121652Z")[0] == "Type: Special observation"

    def test_weather_and_multiple_clouds(self):
        lines = decoded_lines("METAR KSEA 121653Z 18012KT 3SM -RA BR BKN008 OVC015 08/07 A2990")
        assert "Weather: Light Rain, Mist" in lines
        assert "Clouds: Broken at 800 ft, Overcast at 1500 ft" in lines

    def test_icao_altimeter(self):
        lines = decoded_lines("METAR EGLL 121650Z 24010KT CAVOK 12/05 Q1015")
        assert lines[-1] == "QNH: 1015 hPa"


class TestDecodeStages:
    """Test individual groups."""

    def test_calm_wind(self):
        assert "Wind: Calm" in decoded_lines("KDEN 121652Z 00000KT 10SM CLR")

    def test_variable_wind(self):
        assert "Wind: Variable at 3 knots" in decoded_lines("KDEN 121652Z VRB03KT 10SM CLR")

    def test_wind_variation(self):
        lines = decoded_lines("KDEN 121652Z 27015KT 240V300 10SM CLR")
        assert "Wind: 270° at 15 knots, variable between 240° and 300°" in lines
        assert "Visibility: 10SM" in lines

    def test_cavok(self):
        lines = decoded_lines("METAR EGLL 121650Z 24010KT CAVOK 12/05 Q1015")
        assert "Visibility: Ceiling and Visibility OK (>10SM, no clouds below 5000ft)" in lines

    def test_fractional_visibility(self):
        assert "Visibility: M1/4SM" in decoded_lines("KSFO 121656Z 00000KT M1/4SM FG VV001")

    def test_mixed_number_visibility(self):
        assert "Visibility: 1 1/2SM" in decoded_lines("KSFO 121656Z 00000KT 1 1/2SM BR OVC004")

    def test_visibility_found_after_unknown_group(self):
        lines = decoded_lines("KDEN 121652Z 27015KT 9999 10SM CLR 22/10 A2992")
        assert "Visibility: 10SM" in lines
        assert "Altimeter: 29.92 inHg" in lines

    def test_missing_visibility_keeps_cursor(self):
        lines = decoded_lines("KDEN 121652Z 27015KT FEW050 22/10 A2992")
        assert not any(l.startswith("Visibility") for l in lines)
        assert "Clouds: Few at 5000 ft" in lines
        assert "Altimeter: 29.92 inHg" in lines

    def test_visibility_not_taken_from_remarks(self):
        lines = decoded_lines("KDEN 121652Z 27015KT FEW050 22/10 A2992 RMK VIS 2SM")
        assert not any(l.startswith("Visibility") for l in lines)
        assert lines[-1] == "Remarks: VIS 2SM"

    def test_heavy_thunderstorm(self):
        assert "Weather: Heavy Rain Thunderstorm" in decoded_lines("KMIA 121653Z 10SM +TSRA")

    def test_vicinity(self):
        assert "Weather: In vicinity Showers" in decoded_lines("KMIA 121653Z 10SM VCSH")

    def test_unknown_weather_code_verbatim(self):
        assert "Weather: PL" in decoded_lines("KBOS 121654Z 2SM PL OVC010")

    def test_cumulonimbus(self):
        assert "Clouds: Broken at 3500 ft Cumulonimbus" in decoded_lines("KMIA 121653Z 10SM BKN035CB")

    def test_clear_skies(self):
        assert "Clouds: Clear skies" in decoded_lines("KLAS 121653Z 10SM SKC")

    def test_vertical_visibility(self):
        assert "Clouds: Vertical visibility 100 ft" in decoded_lines("KSFO 121656Z M1/4SM FG VV001")

    def test_negative_temperatures(self):
        lines = decoded_lines("CYYZ 121700Z 10SM OVC030 M05/M12 A3012")
        assert "Temperature/Dewpoint: -5°C / -12°C" in lines

    def test_auto_modifier(self):
        lines = decoded_lines("KDEN 121652Z AUTO 27015KT 10SM CLR")
        assert "Report Modifier: Automated observation" in lines
        assert "Wind: 270° at 15 knots" in lines

    def test_empty_remarks_omitted(self):
        lines = decoded_lines("KDEN 121652Z 10SM CLR A2992 RMK")
        assert lines[-1] == "Altimeter: 29.92 inHg"


class TestDecodeErrors:

    def test_empty(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_raw_metar("")
        assert exc_info.value.code == "DECODE_ERROR"

    def test_none(self):
        with pytest.raises(DecodeError):
            MetarDecoder.decode(None)

    def test_whitespace_decodes_to_header(self):
        assert MetarDecoder.decode("   \n ") == "Decoded METAR:\n\n"

    def test_unrecognized_report_decodes_to_header(self):
        assert decode_raw_metar("hello world") == "Decoded METAR:\n\n"


class TestStages:

    def test_stage_order(self):
        assert [s.name for s in DecodeStage][:3] == ["REPORT_TYPE", "STATION", "TIME"]
        assert list(DecodeStage)[-1] == DecodeStage.REMARKS

    def test_run_stage_skips_past_end(self):
        result = MetarDecoder.run_stage(DecodeStage.WIND, ["KDEN"], 1)
        assert result.consumed == 0
        assert result.line is None
