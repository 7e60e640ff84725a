"""Weather analysis: ceiling reduction, flight categories."""

from typing import Iterable, Optional

from aviation_weather.models import CloudLayer, FlightCategory

# (category, ceiling below ft, visibility below SM), worst first
CATEGORY_THRESHOLDS = (
    (FlightCategory.LIFR, 500, 1),
    (FlightCategory.IFR, 1000, 3),
    (FlightCategory.MVFR, 3000, 5),
)


class WeatherAnalyzer:
    """
    Aviation weather analysis functions.

    All methods are static - pure functions with no state.
    """

    @staticmethod
    def flight_category(
        ceiling_ft: Optional[float] = None,
        visibility_sm: Optional[float] = None,
    ) -> FlightCategory:
        """
        Determine flight category from ceiling and visibility.

        Uses FAA thresholds:
            LIFR:  ceiling < 500 ft   or  visibility < 1 SM
            IFR:   ceiling < 1000 ft  or  visibility < 3 SM
            MVFR:  ceiling < 3000 ft  or  visibility < 5 SM
            VFR:   otherwise

        Comparisons are strict, so a value exactly on a threshold belongs
        to the better category. The worse of the two conditions wins, and
        missing inputs never degrade the result.

        Args:
            ceiling_ft: Lowest BKN/OVC base in feet, None if no ceiling
            visibility_sm: Visibility in statute miles, None if unknown

        Returns:
            FlightCategory
        """
        for category, ceiling_limit, visibility_limit in CATEGORY_THRESHOLDS:
            if ceiling_ft is not None and ceiling_ft < ceiling_limit:
                return category
            if visibility_sm is not None and visibility_sm < visibility_limit:
                return category
        return FlightCategory.VFR

    @staticmethod
    def ceiling(layers: Iterable[CloudLayer]) -> Optional[int]:
        """
        Extract ceiling from cloud layers.

        Ceiling is the lowest BKN (broken) or OVC (overcast) layer.

        Returns:
            Ceiling in feet, or None if no ceiling
        """
        ceiling = None
        for layer in layers:
            if layer.cover.is_ceiling and layer.base_ft is not None:
                if ceiling is None or layer.base_ft < ceiling:
                    ceiling = layer.base_ft
        return ceiling


def classify_flight_category(
    ceiling_ft: Optional[float] = None,
    visibility_sm: Optional[float] = None,
) -> FlightCategory:
    """Classify a ceiling/visibility pair. See WeatherAnalyzer.flight_category."""
    return WeatherAnalyzer.flight_category(ceiling_ft, visibility_sm)


def ceiling_from_layers(layers: Iterable[CloudLayer]) -> Optional[int]:
    return WeatherAnalyzer.ceiling(layers)
