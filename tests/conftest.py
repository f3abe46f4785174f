"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.

Time-based components take an injected clock; the `fake_clock` fixture is
shared by every component built here, so advancing it moves the breaker,
cache, alert and rate-limiter time together.
"""

import os
import sys
from typing import Any

import pytest
import pytest_asyncio

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from src.core.config.settings import Settings  # noqa: E402
from src.core.events.event_bus import EventBus  # noqa: E402
from src.core.resilience.retry_policy import RetryPolicy  # noqa: E402
from src.infrastructure.cache.response_cache import ResponseCache  # noqa: E402
from src.infrastructure.monitoring.alert_manager import AlertManager  # noqa: E402
from src.infrastructure.monitoring.health_checker import HealthChecker  # noqa: E402
from src.telemetry.services.stream_orchestrator import StreamOrchestrator  # noqa: E402
from tests.test_fixtures import ClientTestFactory, FakeApiClient, FakeClock  # noqa: E402


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """
    Settings isolated from any .env file.

    Background loops get long intervals so they stay idle unless a test
    drives them directly. Upstream quotas are 100 requests a second so
    real-clock tests never wait on a rate limiter.
    """
    return Settings(
        _env_file=None,
        HEALTH_CHECK_INTERVAL_SECONDS=3600,
        DATA_QUALITY_INTERVAL_SECONDS=3600,
        FETCH_TIMEOUT_SECONDS=1.0,
        STREAM_RESTART_DELAY_SECONDS=30.0,
        CB_RECOVERY_TIMEOUT_MS=1000,
        CACHE_TTL_MS=60_000,
        ALERT_AUTO_ACK_SECONDS=300,
        N2YO_REQUESTS_PER_DAY=8_640_000,
        NASA_REQUESTS_PER_HOUR=360_000,
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
    )


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus(max_handlers=100)


class EventRecorder:
    """Records every event published on the topics it listens to."""

    def __init__(self, bus: EventBus):
        self._bus = bus
        self.received: list[tuple[str, Any]] = []

    def listen(self, *topics: str) -> "EventRecorder":
        for topic in topics:
            self._bus.subscribe(topic, lambda event, topic=topic: self.received.append((topic, event)))
        return self

    def of(self, topic: str) -> list[Any]:
        return [event for name, event in self.received if name == topic]

    def topics(self) -> list[str]:
        return [name for name, _ in self.received]


@pytest.fixture
def recorder(event_bus) -> EventRecorder:
    return EventRecorder(event_bus)


# ============================================================================
# Infrastructure Fixtures
# ============================================================================


@pytest.fixture
def fake_client() -> FakeApiClient:
    return ClientTestFactory.healthy("fake")


@pytest.fixture
def alert_manager(event_bus, fake_clock, test_settings) -> AlertManager:
    return AlertManager(
        event_bus,
        history_size=test_settings.alerts.ALERT_HISTORY_SIZE,
        auto_acknowledge_seconds=test_settings.alerts.ALERT_AUTO_ACK_SECONDS,
        clock=fake_clock,
    )


@pytest.fixture
def response_cache(fake_clock, test_settings) -> ResponseCache:
    return ResponseCache(ttl_ms=test_settings.cache.CACHE_TTL_MS, clock=fake_clock)


@pytest.fixture
def health_checker() -> HealthChecker:
    return HealthChecker(probe_timeout_seconds=1.0)


@pytest.fixture
def retry_policy(test_settings, fake_clock) -> RetryPolicy:
    return RetryPolicy.from_settings(test_settings, sleep=fake_clock.sleep)


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def orchestrator(
    event_bus, alert_manager, health_checker, response_cache, retry_policy, test_settings, fake_clock, fake_client
):
    """
    Orchestrator with one fake upstream registered as "fake".

    Timestamps come from the fake clock; scheduler and background loops use
    real asyncio sleeps.
    """
    orchestrator = StreamOrchestrator(
        event_bus=event_bus,
        alert_manager=alert_manager,
        health_checker=health_checker,
        cache=response_cache,
        retry_policy=retry_policy,
        settings=test_settings,
        clock=fake_clock,
    )
    orchestrator.register_api_client("fake", fake_client)
    yield orchestrator
    await orchestrator.shutdown()
