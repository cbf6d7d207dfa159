"""
OpenWeatherMap client for fetching current conditions.

Wraps the ``/weather`` endpoint with a per-attempt timeout, retries with
exponential backoff for transport failures, and classification of error
statuses into user-facing exceptions.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import quote, urlencode

import aiohttp

from skycast import __version__
from skycast.core.exceptions import (
    CityNotFoundError,
    HttpStatusError,
    InvalidCredentialError,
    MalformedResponse,
    RateLimitError,
    ServiceUnavailableError,
    TransportError,
)
from skycast.core.models import ProviderResponse, WeatherRecord
from skycast.core.validation import validate_weather_payload

logger = logging.getLogger(__name__)


class WeatherClient:
    """Async client for the OpenWeatherMap current weather API.

    A session passed in by the caller is borrowed and left open; a session
    created here is owned and closed by ``close``.
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5"

    DEFAULT_TIMEOUT = 10.0  # seconds, per attempt
    DEFAULT_MAX_RETRIES = 3

    def __init__(
        self,
        api_key: str,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_url: str | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize the weather client.

        Args:
            api_key: OpenWeatherMap API key.
            session: Optional aiohttp session.
            timeout: Per-attempt timeout in seconds.
            max_retries: Total number of attempts for transport failures.
            base_url: Override for the API base URL.
            sleep: Coroutine used for backoff delays.
        """
        self._session = session
        self._owns_session = session is None
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self._sleep = sleep

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "WeatherClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def get_current_weather(self, city: str) -> WeatherRecord:
        """Fetch and validate current conditions for a city.

        Args:
            city: City name as typed by the user.

        Returns:
            WeatherRecord built from the provider response.

        Raises:
            TransportError: If every attempt failed at the transport level.
            HttpStatusError: If the provider answered with an error status.
            MalformedResponse: If a successful body is not weather data.
        """
        url = self.build_url(city)
        response = await self.attempt_fetch(url, self.timeout, self.max_retries)

        if not response.ok:
            raise self.classify_error(response, city)

        try:
            data = response.json()
        except ValueError as e:
            # UnicodeDecodeError is a ValueError too
            raise MalformedResponse(f"body is not valid JSON ({e})")

        problems = validate_weather_payload(data)
        if problems:
            raise MalformedResponse("; ".join(problems))

        return WeatherRecord.from_api(data)

    def build_url(self, city: str) -> str:
        """Build the request URL for a city."""
        query = urlencode(
            {"q": city, "units": "metric", "appid": self.api_key},
            quote_via=quote,
        )
        return f"{self.base_url}/weather?{query}"

    async def attempt_fetch(
        self,
        url: str,
        timeout: float,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> ProviderResponse:
        """GET a URL, retrying transport failures with exponential backoff.

        Any HTTP response, whatever its status, ends the loop. Timeouts and
        connection errors are retried after ``2 ** attempt`` seconds.
        Cancellation propagates immediately and is never retried.

        Args:
            url: URL to fetch.
            timeout: Per-attempt timeout in seconds.
            max_retries: Total number of attempts.

        Returns:
            ProviderResponse snapshot.

        Raises:
            TransportError: If the final attempt failed at the transport level.
        """
        last_error: BaseException | None = None

        for attempt in range(1, max_retries + 1):
            try:
                return await self._get(url, timeout)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = e
                if attempt == max_retries:
                    break

                delay = 2 ** attempt
                logger.info(
                    "Attempt %d/%d for %s failed (%s); retrying in %ds",
                    attempt,
                    max_retries,
                    self._redact(url),
                    _describe(e),
                    delay,
                )
                await self._sleep(delay)

        logger.warning("Giving up on %s after %d attempts", self._redact(url), max_retries)
        raise TransportError(
            self._redact(url),
            details=_describe(last_error) if last_error else "no attempts were made",
        )

    async def _get(self, url: str, timeout: float) -> ProviderResponse:
        """Perform a single GET and read the body before the connection closes."""
        async with self.session.get(
            url,
            headers=self._build_headers(),
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as resp:
            body = await resp.read()
            return ProviderResponse(status=resp.status, reason=resp.reason or "", body=body)

    def _build_headers(self) -> dict[str, str]:
        return {
            "User-Agent": f"skycast/{__version__}",
            "Accept": "application/json",
        }

    def classify_error(self, response: ProviderResponse, city: str) -> HttpStatusError:
        """Map an error status to a user-facing exception.

        Args:
            response: Response with status >= 400.
            city: City that was requested.

        Returns:
            HttpStatusError (or subclass) to raise.
        """
        if response.status == 404:
            return CityNotFoundError(city)
        if response.status == 401:
            return InvalidCredentialError()
        if response.status == 429:
            return RateLimitError()
        if response.status == 500:
            return ServiceUnavailableError()

        message = None
        try:
            body = response.json()
            if isinstance(body, dict) and body.get("message"):
                message = str(body["message"])
        except ValueError:
            pass  # Non-JSON error body

        return HttpStatusError(
            response.status,
            message or f"Error: {response.status} - {response.reason}",
        )

    def _redact(self, url: str) -> str:
        """Hide the API key in URLs that end up in logs or messages."""
        if self.api_key:
            return url.replace(quote(self.api_key, safe=""), "***")
        return url


def _describe(error: BaseException) -> str:
    return str(error) or type(error).__name__
