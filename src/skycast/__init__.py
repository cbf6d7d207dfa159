"""
skycast

Current-weather lookups against OpenWeatherMap with a short-lived cache,
retries with exponential backoff, and supersession of stale requests.

Quick Start:
    >>> import asyncio
    >>> from skycast import lookup
    >>> record = asyncio.run(lookup("London"))
    >>> print(record)
    London, GB: 12°C, Light Rain

    # Or keep one orchestrator around so repeated lookups share a cache:
    >>> from skycast import Settings, WeatherOrchestrator
    >>> async def main():
    ...     async with WeatherOrchestrator.from_settings(Settings.from_env()) as app:
    ...         await app.lookup("Paris")
    ...         await app.lookup("paris")  # served from cache
"""

__version__ = "0.1.0"

# High-level API (recommended for most users)
from skycast.api import lookup, lookup_sync

# Core components (for advanced usage)
from skycast.cache.memory import CacheEntry, CacheStore
from skycast.collectors.openweather import WeatherClient
from skycast.config import Settings

# Exceptions
from skycast.core.exceptions import (
    Cancelled,
    CityNotFoundError,
    ConfigurationError,
    HttpStatusError,
    InvalidCredentialError,
    MalformedResponse,
    RateLimitError,
    ServiceUnavailableError,
    SkycastError,
    TransportError,
    ValidationError,
)

# Data models
from skycast.core.models import ProviderResponse, WeatherRecord
from skycast.history import RecentSearches
from skycast.orchestrator import WeatherOrchestrator

__all__ = [
    # Version
    "__version__",
    # High-level API
    "lookup",
    "lookup_sync",
    # Models
    "ProviderResponse",
    "WeatherRecord",
    # Core
    "CacheEntry",
    "CacheStore",
    "RecentSearches",
    "Settings",
    "WeatherClient",
    "WeatherOrchestrator",
    # Exceptions
    "SkycastError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "HttpStatusError",
    "CityNotFoundError",
    "InvalidCredentialError",
    "RateLimitError",
    "ServiceUnavailableError",
    "MalformedResponse",
    "Cancelled",
]
