"""
Data collectors for fetching weather data from external sources.
"""

from skycast.collectors.openweather import WeatherClient

__all__ = [
    "WeatherClient",
]
