"""
Runtime configuration for the aviation weather source.

Values can be overridden through environment variables.
"""

import os

# Remote source
BASE_URL = os.getenv("AVIATION_WEATHER_BASE_URL", "https://aviationweather.gov/api/data")
USER_AGENT = os.getenv("AVIATION_WEATHER_USER_AGENT", "aviation-weather/0.1.0")

# Seconds
REQUEST_TIMEOUT = float(os.getenv("AVIATION_WEATHER_TIMEOUT", "10"))

# Look-back windows (hours)
DEFAULT_METAR_HOURS = 2
DEFAULT_PIREP_HOURS = 3
STATION_INFO_HOURS = 1

# Content types
JSON_ACCEPT = "application/json"
TEXT_ACCEPT = "text/plain, application/json"
