"""
High-level programmatic API for skycast.

This module provides simple functions for one-off lookups. For repeated
lookups that should share a cache, use WeatherOrchestrator directly.

Example:
    import asyncio
    from skycast import lookup

    async def main():
        record = await lookup("London", api_key="...")
        print(f"{record.display_name}: {record.temperature_display}")

    asyncio.run(main())
"""

import asyncio
from dataclasses import replace
from typing import Optional

from skycast.config import Settings
from skycast.core.models import WeatherRecord
from skycast.orchestrator import WeatherOrchestrator


async def lookup(
    city: str,
    *,
    api_key: str | None = None,
    use_cache: bool = True,
    settings: Settings | None = None,
) -> Optional[WeatherRecord]:
    """Look up current weather for a single city.

    Args:
        city: City name (e.g., "London", "São Paulo").
        api_key: OpenWeatherMap API key. Defaults to OPENWEATHER_API_KEY.
        use_cache: Whether a cached record may be used.
        settings: Full settings; api_key still overrides its key.

    Returns:
        WeatherRecord with current conditions.

    Raises:
        SkycastError: If validation, the network, or the provider fails.

    Example:
        >>> import asyncio
        >>> from skycast import lookup
        >>> record = asyncio.run(lookup("Paris"))
        >>> print(record.display_name)
        Paris, FR
    """
    if settings is None:
        settings = Settings.from_env(api_key=api_key)
    elif api_key:
        settings = replace(settings, api_key=api_key)

    async with WeatherOrchestrator.from_settings(settings) as orchestrator:
        return await orchestrator.lookup(city, use_cache=use_cache)


def lookup_sync(
    city: str,
    *,
    api_key: str | None = None,
    use_cache: bool = True,
    settings: Settings | None = None,
) -> Optional[WeatherRecord]:
    """Synchronous wrapper for lookup().

    For use in non-async contexts. Runs a new event loop.

    Example:
        >>> from skycast import lookup_sync
        >>> print(lookup_sync("Berlin").temperature_display)
    """
    return asyncio.run(
        lookup(city, api_key=api_key, use_cache=use_cache, settings=settings)
    )
