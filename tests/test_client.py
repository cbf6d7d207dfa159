"""
Tests for the OpenWeatherMap client: retries, status classification and
response validation.
"""

import asyncio

import aiohttp
import pytest

from skycast.collectors.openweather import WeatherClient
from skycast.core.exceptions import (
    CityNotFoundError,
    HttpStatusError,
    InvalidCredentialError,
    MalformedResponse,
    RateLimitError,
    ServiceUnavailableError,
    TransportError,
)
from tests.fakes import FakeResponse, make_payload, wait_for_requests


class TestBuildUrl:
    """Tests for request URL construction."""

    def test_query_parameters(self, client):
        """Test city, units and key are sent as query parameters."""
        url = client.build_url("London")
        assert url == (
            "https://api.openweathermap.org/data/2.5/weather"
            "?q=London&units=metric&appid=test-key"
        )

    def test_city_is_encoded(self, client):
        """Test spaces and non-ASCII characters are percent-encoded."""
        url = client.build_url("São Paulo")
        assert "q=S%C3%A3o%20Paulo&" in url

    def test_custom_base_url(self, fake_session):
        """Test the base URL can be overridden."""
        client = WeatherClient("k", session=fake_session, base_url="http://localhost:8080/")
        assert client.build_url("Oslo").startswith("http://localhost:8080/weather?q=Oslo")


class TestGetCurrentWeather:
    """Tests for a complete weather fetch."""

    @pytest.mark.asyncio
    async def test_success(self, client, fake_session, sleeps):
        """Test a valid body becomes a WeatherRecord."""
        fake_session.queue(FakeResponse(body=make_payload()))

        record = await client.get_current_weather("London")

        assert record.display_name == "London, GB"
        assert record.temperature == 12.3
        assert len(fake_session.urls) == 1
        assert sleeps.delays == []

    @pytest.mark.asyncio
    async def test_per_attempt_timeout(self, client, fake_session):
        """Test every attempt carries the 10 second timeout."""
        fake_session.queue(asyncio.TimeoutError(), FakeResponse(body=make_payload()))

        await client.get_current_weather("London")

        assert [t.total for t in fake_session.timeouts] == [10.0, 10.0]

    @pytest.mark.asyncio
    async def test_malformed_body(self, client, fake_session):
        """Test a 2xx body without a weather list is rejected."""
        payload = make_payload()
        del payload["weather"]
        fake_session.queue(FakeResponse(body=payload))

        with pytest.raises(MalformedResponse) as exc_info:
            await client.get_current_weather("London")

        assert "weather" in exc_info.value.details
        assert exc_info.value.category == "malformed"

    @pytest.mark.asyncio
    async def test_non_json_body(self, client, fake_session):
        """Test a 2xx body that is not JSON is rejected."""
        fake_session.queue(FakeResponse(text="<html>maintenance</html>"))

        with pytest.raises(MalformedResponse):
            await client.get_current_weather("London")

    @pytest.mark.asyncio
    async def test_body_not_utf8(self, client, fake_session):
        """Test a 2xx body with invalid UTF-8 bytes is rejected as malformed."""
        fake_session.queue(FakeResponse(raw=b'{"name": "\xff\xfe"}'))

        with pytest.raises(MalformedResponse) as exc_info:
            await client.get_current_weather("London")

        assert "not valid JSON" in exc_info.value.details


class TestStatusClassification:
    """Tests for mapping error statuses to exceptions."""

    @pytest.mark.asyncio
    async def test_not_found_is_not_retried(self, client, fake_session, sleeps):
        """Test a 404 ends the attempt loop immediately."""
        fake_session.queue(FakeResponse(404, {"cod": "404", "message": "city not found"}, "Not Found"))

        with pytest.raises(CityNotFoundError) as exc_info:
            await client.get_current_weather("Atlantis")

        assert exc_info.value.status_code == 404
        assert 'City "Atlantis" not found' in exc_info.value.message
        assert exc_info.value.category == "not-found"
        assert len(fake_session.urls) == 1
        assert sleeps.delays == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,error_type,text",
        [
            (401, InvalidCredentialError, "API key is invalid"),
            (429, RateLimitError, "Too many requests"),
            (500, ServiceUnavailableError, "temporarily unavailable"),
        ],
    )
    async def test_known_statuses(self, client, fake_session, sleeps, status, error_type, text):
        """Test classified statuses map to their own exception types."""
        fake_session.queue(FakeResponse(status, {"message": "ignored"}, "Error"))

        with pytest.raises(error_type) as exc_info:
            await client.get_current_weather("London")

        assert isinstance(exc_info.value, HttpStatusError)
        assert exc_info.value.status_code == status
        assert text in exc_info.value.message
        assert sleeps.delays == []

    @pytest.mark.asyncio
    async def test_other_status_uses_provider_message(self, client, fake_session):
        """Test unclassified statuses surface the provider message."""
        fake_session.queue(FakeResponse(400, {"cod": "400", "message": "Nothing to geocode"}, "Bad Request"))

        with pytest.raises(HttpStatusError) as exc_info:
            await client.get_current_weather("London")

        assert type(exc_info.value) is HttpStatusError
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Nothing to geocode"

    @pytest.mark.asyncio
    async def test_other_status_without_message(self, client, fake_session):
        """Test the status line is used when the body has no message."""
        fake_session.queue(FakeResponse(503, reason="Service Unavailable", text="upstream down"))

        with pytest.raises(HttpStatusError) as exc_info:
            await client.get_current_weather("London")

        assert exc_info.value.message == "Error: 503 - Service Unavailable"

    @pytest.mark.asyncio
    async def test_error_body_not_utf8_still_classified(self, client, fake_session):
        """Test an undecodable error body does not hide the status."""
        fake_session.queue(FakeResponse(404, reason="Not Found", raw=b'{"message": "\xff\xfe"}'))

        with pytest.raises(CityNotFoundError):
            await client.get_current_weather("Atlantis")

    @pytest.mark.asyncio
    async def test_other_status_body_not_utf8(self, client, fake_session):
        """Test an undecodable body falls back to the status line."""
        fake_session.queue(FakeResponse(418, reason="I'm a teapot", raw=b"\xff\xfe"))

        with pytest.raises(HttpStatusError) as exc_info:
            await client.get_current_weather("London")

        assert exc_info.value.message == "Error: 418 - I'm a teapot"


class TestAttemptFetch:
    """Tests for the retry/backoff procedure."""

    @pytest.mark.asyncio
    async def test_timeouts_then_success(self, client, fake_session, sleeps):
        """Test two timeouts are retried after 2s and 4s."""
        fake_session.queue(
            asyncio.TimeoutError(),
            asyncio.TimeoutError(),
            FakeResponse(body=make_payload()),
        )

        record = await client.get_current_weather("London")

        assert record.name == "London"
        assert len(fake_session.urls) == 3
        assert sleeps.delays == [2, 4]

    @pytest.mark.asyncio
    async def test_connection_errors_are_retried(self, client, fake_session, sleeps):
        """Test connection failures count as transport failures."""
        fake_session.queue(
            aiohttp.ClientConnectionError("connection reset"),
            FakeResponse(body=make_payload()),
        )

        await client.get_current_weather("London")

        assert sleeps.delays == [2]

    @pytest.mark.asyncio
    async def test_exhausted_retries(self, client, fake_session, sleeps):
        """Test the final transport failure raises TransportError."""
        fake_session.queue(
            asyncio.TimeoutError(),
            aiohttp.ClientConnectionError("refused"),
            asyncio.TimeoutError(),
        )

        with pytest.raises(TransportError) as exc_info:
            await client.get_current_weather("London")

        assert len(fake_session.urls) == 3
        assert sleeps.delays == [2, 4]
        assert exc_info.value.details == "TimeoutError"
        assert exc_info.value.category == "network"

    @pytest.mark.asyncio
    async def test_transport_error_hides_api_key(self, client, fake_session):
        """Test the API key never appears in error text."""
        fake_session.queue(*[asyncio.TimeoutError()] * 3)

        with pytest.raises(TransportError) as exc_info:
            await client.get_current_weather("London")

        assert "test-key" not in exc_info.value.url
        assert "test-key" not in str(exc_info.value)
        assert "appid=***" in exc_info.value.url

    @pytest.mark.asyncio
    async def test_custom_retry_count(self, fake_session, sleeps):
        """Test a single-attempt client never sleeps."""
        client = WeatherClient("k", session=fake_session, max_retries=1, sleep=sleeps)
        fake_session.queue(asyncio.TimeoutError())

        with pytest.raises(TransportError):
            await client.get_current_weather("London")

        assert sleeps.delays == []

    @pytest.mark.asyncio
    async def test_zero_attempts_still_raises(self, client):
        """Test exhaustion never returns an empty result."""
        with pytest.raises(TransportError):
            await client.attempt_fetch(client.build_url("London"), 10.0, max_retries=0)

    @pytest.mark.asyncio
    async def test_cancellation_during_backoff_is_not_retried(self, fake_session):
        """Test cancelling while waiting to retry stops immediately."""
        backoff_started = asyncio.Event()

        async def slow_sleep(delay):
            backoff_started.set()
            await asyncio.Event().wait()

        client = WeatherClient("k", session=fake_session, sleep=slow_sleep)
        fake_session.queue(asyncio.TimeoutError(), FakeResponse(body=make_payload()))

        task = asyncio.create_task(client.get_current_weather("London"))
        await backoff_started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(fake_session.urls) == 1

    @pytest.mark.asyncio
    async def test_cancellation_during_request(self, client, fake_session, sleeps):
        """Test cancelling an in-flight request is not treated as a failure."""
        fake_session.queue(FakeResponse(body=make_payload(), gate=asyncio.Event()))

        task = asyncio.create_task(client.get_current_weather("London"))
        await wait_for_requests(fake_session, 1)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert sleeps.delays == []
        assert len(fake_session.urls) == 1


class TestSessionOwnership:
    """Tests for session lifecycle."""

    @pytest.mark.asyncio
    async def test_borrowed_session_left_open(self, client, fake_session):
        """Test a caller-provided session is not closed."""
        await client.close()
        assert not fake_session.closed

    @pytest.mark.asyncio
    async def test_owned_session_closed(self):
        """Test a session created by the client is closed with it."""
        async with WeatherClient("k") as client:
            session = client.session
        assert session.closed
