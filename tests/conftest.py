"""
Pytest fixtures and configuration for skycast tests.
"""

from typing import Any

import pytest

from skycast.cache.memory import CacheStore
from skycast.collectors.openweather import WeatherClient
from skycast.core.models import WeatherRecord
from skycast.orchestrator import WeatherOrchestrator
from tests.fakes import FakeSession, ManualClock, SleepRecorder, make_payload

# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def london_payload() -> dict[str, Any]:
    return make_payload()


@pytest.fixture
def london_record(london_payload: dict[str, Any]) -> WeatherRecord:
    return WeatherRecord.from_api(london_payload)


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def client(fake_session: FakeSession, sleeps: SleepRecorder) -> WeatherClient:
    return WeatherClient("test-key", session=fake_session, sleep=sleeps)


@pytest.fixture
def cache(clock: ManualClock) -> CacheStore:
    return CacheStore(clock=clock)


@pytest.fixture
def orchestrator(client: WeatherClient, cache: CacheStore) -> WeatherOrchestrator:
    return WeatherOrchestrator(client, cache)
