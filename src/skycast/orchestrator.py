"""
Lookup orchestration for current weather.

Provides the WeatherOrchestrator class that decides between the cache and
the network, keeps at most one request in flight, and guarantees that only
the most recently started lookup ever delivers a result.
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from skycast.cache.memory import CacheStore
from skycast.collectors.openweather import WeatherClient
from skycast.config import Settings
from skycast.core.exceptions import Cancelled, SkycastError
from skycast.core.models import WeatherRecord
from skycast.core.validation import normalize_city, validate_city

logger = logging.getLogger(__name__)


class WeatherOrchestrator:
    """Owns the single "current weather lookup" operation.

    Every lookup takes a new generation number. Starting a network lookup
    cancels the pending request, and a result whose generation is no longer
    current is discarded, so the last lookup started wins regardless of
    completion order.
    """

    def __init__(
        self,
        client: WeatherClient,
        cache: CacheStore | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            client: Weather client used for network lookups.
            cache: Cache store. A fresh one is created if not provided.
        """
        self.client = client
        self.cache = cache if cache is not None else CacheStore()

        self._generation = 0
        self._pending: Optional[asyncio.Task] = None
        self._last_record: Optional[WeatherRecord] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session: aiohttp.ClientSession | None = None,
    ) -> "WeatherOrchestrator":
        """Build an orchestrator, its client and its cache from settings."""
        client = WeatherClient(
            settings.require_api_key(),
            session=session,
            timeout=settings.timeout,
            max_retries=settings.max_retries,
            base_url=settings.base_url,
        )
        return cls(client, CacheStore(ttl_seconds=settings.cache_ttl))

    @property
    def has_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def lookup(self, city: str, use_cache: bool = True) -> Optional[WeatherRecord]:
        """Get current weather for a city.

        Args:
            city: City name as typed by the user.
            use_cache: Whether a valid cached record may be returned.

        Returns:
            WeatherRecord, or None if a newer lookup superseded this one.

        Raises:
            ValidationError: If the city name fails local checks.
            TransportError: If the provider could not be reached.
            HttpStatusError: If the provider answered with an error status.
            MalformedResponse: If the provider body is not weather data.
        """
        city = validate_city(city)
        key = normalize_city(city)

        if use_cache:
            cached = self.cache.get_valid(key)
            if cached is not None:
                # Newer than anything in flight, but the request is left running
                self._generation += 1
                logger.debug("Cache hit for %r", key)
                self._last_record = cached
                return cached

        try:
            return await self._fetch(city, key)
        except Cancelled as e:
            logger.info("%s", e)
            return None

    async def _fetch(self, city: str, key: str) -> WeatherRecord:
        """Run a network lookup as the new pending request.

        Raises:
            Cancelled: If a newer lookup started before this one finished.
        """
        self.cancel_pending()
        generation = self._generation

        task = asyncio.ensure_future(self.client.get_current_weather(city))
        self._pending = task

        try:
            record = await task
        except asyncio.CancelledError:
            if generation == self._generation or _current_task_cancelling():
                raise
            raise Cancelled(city) from None
        except SkycastError:
            if generation != self._generation:
                raise Cancelled(city) from None
            raise
        finally:
            if self._pending is task:
                self._pending = None

        if generation != self._generation:
            raise Cancelled(city)

        self.cache.put(key, record)
        self._last_record = record
        return record

    async def refresh_if_stale(self, city: str) -> Optional[WeatherRecord]:
        """Re-fetch a city when its cache entry is missing or stale.

        Returns:
            The cached record when still valid, otherwise the result of a
            lookup that bypasses the cache.
        """
        key = normalize_city(city)
        cached = self.cache.get_valid(key)
        if cached is not None:
            return cached
        return await self.lookup(city, use_cache=False)

    def cancel_pending(self) -> bool:
        """Cancel the in-flight request, if any.

        Returns:
            True if a live request was cancelled.
        """
        self._generation += 1
        if self.has_pending:
            self._pending.cancel()
            logger.debug("Cancelled pending request")
            return True
        return False

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_last_displayed_record(self) -> Optional[WeatherRecord]:
        """Return the record most recently delivered to a caller."""
        return self._last_record

    async def close(self) -> None:
        """Cancel pending work, drop cached data and close the client."""
        self.cancel_pending()
        self.clear_cache()
        await self.client.close()

    async def __aenter__(self) -> "WeatherOrchestrator":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def _current_task_cancelling() -> bool:
    """Return True if the running task itself has been asked to cancel."""
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0
