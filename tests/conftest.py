import pytest


@pytest.fixture
def kden_metar_record() -> dict:
    """METAR record as returned by the aviationweather.gov JSON feed."""
    return {
        'rawOb': 'METAR KDEN 121652Z 27015G25KT 10SM FEW050 SCT100 BKN200 22/10 A2992 RMK AO2',
        'icaoId': 'KDEN',
        'obsTime': '2024-01-12T16:52:00Z',
        'temp': '22',
        'dewp': '10',
        'wdir': '270',
        'wspd': '15',
        'wgst': '25',
        'visib': '10',
        'altim': '29.92',
        'clouds': [
            {'cover': 'FEW', 'base': '5000'},
            {'cover': 'SCT', 'base': '10000'},
            {'cover': 'BKN', 'base': '20000'},
        ],
    }


@pytest.fixture
def kden_taf_record() -> dict:
    return {
        'rawTaf': 'TAF KDEN 121652Z 1217/1318 27015G25KT P6SM FEW050',
        'icaoId': 'KDEN',
        'issueTime': '2024-01-12T16:52:00Z',
        'validTimeFrom': '2024-01-12T17:00:00Z',
        'validTimeTo': '2024-01-13T18:00:00Z',
        'forecast': [
            {
                'fcstTimeFrom': '2024-01-12T17:00:00Z',
                'fcstTimeTo': '2024-01-12T24:00:00Z',
                'wdir': '270',
                'wspd': '15',
                'visib': '6+',
            },
            {
                'fcstTimeFrom': '2024-01-12T20:00:00Z',
                'fcstTimeTo': '2024-01-12T23:00:00Z',
                'changeIndicator': 'TEMPO',
                'visib': '2',
                'wxString': '-SHRA BR',
                'clouds': [{'cover': 'OVC', 'base': '800'}],
            },
        ],
    }


@pytest.fixture
def raw_metar_text() -> str:
    return (
        "KDEN 121652Z 27015G25KT 10SM FEW050 22/10 A2992\n"
        "KLAS 121653Z 18008KT 10SM SKC 30/02 A2985\n"
    )


@pytest.fixture
def raw_taf_text() -> str:
    return (
        "TAF KDEN 121720Z 1218/1324 27015KT P6SM FEW050\n"
        "      FM130000 30010KT P6SM SCT080\n"
        "      TEMPO 1304/1308 BKN020\n"
        "KLAS 121720Z 1218/1324 18008KT P6SM SKC\n"
    )
