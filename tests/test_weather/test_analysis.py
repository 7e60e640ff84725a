"""Tests for flight category classification and ceiling extraction."""

import itertools

import pytest

from aviation_weather.analysis import WeatherAnalyzer, ceiling_from_layers, classify_flight_category
from aviation_weather.models import CloudCover, CloudLayer, FlightCategory


class TestFlightCategory:
    """Test FAA flight category thresholds."""

    def test_vfr(self):
        assert classify_flight_category(5000, 10) == FlightCategory.VFR

    def test_no_inputs_is_vfr(self):
        assert classify_flight_category(None, None) == FlightCategory.VFR

    def test_mvfr_ceiling(self):
        assert classify_flight_category(2000, 10) == FlightCategory.MVFR

    def test_mvfr_visibility(self):
        assert classify_flight_category(None, 4) == FlightCategory.MVFR

    def test_ifr_ceiling(self):
        assert classify_flight_category(800, 10) == FlightCategory.IFR

    def test_ifr_visibility(self):
        assert classify_flight_category(None, 2) == FlightCategory.IFR

    def test_lifr_ceiling(self):
        assert classify_flight_category(300, 10) == FlightCategory.LIFR

    def test_lifr_visibility(self):
        assert classify_flight_category(5000, 0.5) == FlightCategory.LIFR

    def test_worst_condition_wins(self):
        assert classify_flight_category(800, 4) == FlightCategory.IFR
        assert classify_flight_category(2500, 0.25) == FlightCategory.LIFR

    def test_zero_visibility_is_lifr(self):
        assert classify_flight_category(None, 0) == FlightCategory.LIFR


class TestFlightCategoryBoundaries:
    """Values exactly on a threshold belong to the better category."""

    @pytest.mark.parametrize("ceiling,visibility,expected", [
        (499, 10, FlightCategory.LIFR),
        (500, 10, FlightCategory.IFR),
        (999, 10, FlightCategory.IFR),
        (1000, 10, FlightCategory.MVFR),
        (2999, 10, FlightCategory.MVFR),
        (3000, 10, FlightCategory.VFR),
        (None, 0.99, FlightCategory.LIFR),
        (None, 1, FlightCategory.IFR),
        (None, 2.99, FlightCategory.IFR),
        (None, 3, FlightCategory.MVFR),
        (None, 4.99, FlightCategory.MVFR),
        (None, 5, FlightCategory.VFR),
    ])
    def test_boundary(self, ceiling, visibility, expected):
        assert classify_flight_category(ceiling, visibility) == expected


class TestFlightCategoryProperties:
    """Structural properties over a grid of inputs."""

    CEILINGS = [None, 0, 200, 499, 500, 800, 999, 1000, 2000, 2999, 3000, 12000]
    VISIBILITIES = [None, 0, 0.5, 0.99, 1, 2, 2.99, 3, 4, 4.99, 5, 10]

    def test_worse_of_the_two(self):
        for ceiling, visibility in itertools.product(self.CEILINGS, self.VISIBILITIES):
            combined = classify_flight_category(ceiling, visibility)
            by_ceiling = classify_flight_category(ceiling, None)
            by_visibility = classify_flight_category(None, visibility)
            assert combined == min(by_ceiling, by_visibility)

    def test_monotonic_in_ceiling(self):
        known = [c for c in self.CEILINGS if c is not None]
        for visibility in self.VISIBILITIES:
            results = [classify_flight_category(c, visibility) for c in known]
            assert results == sorted(results)

    def test_monotonic_in_visibility(self):
        known = [v for v in self.VISIBILITIES if v is not None]
        for ceiling in self.CEILINGS:
            results = [classify_flight_category(ceiling, v) for v in known]
            assert results == sorted(results)

    def test_missing_never_degrades(self):
        for ceiling, visibility in itertools.product(self.CEILINGS, self.VISIBILITIES):
            combined = classify_flight_category(ceiling, visibility)
            assert classify_flight_category(None, visibility) >= combined
            assert classify_flight_category(ceiling, None) >= combined


class TestCeiling:
    """Test ceiling extraction from cloud layers."""

    def test_lowest_broken_or_overcast(self):
        layers = [
            CloudLayer(cover=CloudCover.FEW, base_ft=800),
            CloudLayer(cover=CloudCover.OVC, base_ft=4000),
            CloudLayer(cover=CloudCover.BKN, base_ft=2500),
        ]
        assert WeatherAnalyzer.ceiling(layers) == 2500

    def test_few_and_scattered_are_not_ceilings(self):
        layers = [
            CloudLayer(cover=CloudCover.FEW, base_ft=500),
            CloudLayer(cover=CloudCover.SCT, base_ft=900),
        ]
        assert ceiling_from_layers(layers) is None

    def test_layer_without_base_ignored(self):
        layers = [
            CloudLayer(cover=CloudCover.OVC),
            CloudLayer(cover=CloudCover.BKN, base_ft=1200),
        ]
        assert ceiling_from_layers(layers) == 1200

    def test_no_layers(self):
        assert ceiling_from_layers([]) is None
