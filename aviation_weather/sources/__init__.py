"""Weather data sources."""

from aviation_weather.sources.aviationweather import AviationWeatherSource

__all__ = ['AviationWeatherSource']
