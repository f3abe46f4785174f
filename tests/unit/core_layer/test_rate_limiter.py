"""
Unit Tests for TokenBucketRateLimiter

Time is driven by a FakeClock whose sleep advances the clock, so waits are
instant and exact.
"""

import asyncio

import pytest

from src.core.events.event_bus import EventBus
from src.core.events.models import RateLimitWaitEvent
from src.core.resilience.rate_limiter import TokenBucketRateLimiter
from tests.test_fixtures import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


def make_limiter(clock, rate=2.0, burst=1.0, event_bus=None):
    return TokenBucketRateLimiter(
        "test-api",
        requests_per_second=rate,
        burst_multiplier=burst,
        event_bus=event_bus,
        clock=clock,
        sleep=clock.sleep,
    )


@pytest.mark.unit
class TestConstruction:
    def test_capacity_is_rate_times_multiplier(self, clock):
        limiter = make_limiter(clock, rate=2.0, burst=10.0)
        assert limiter.capacity == 20.0
        assert limiter.available_tokens == 20.0

    def test_capacity_never_below_one_token(self, clock):
        limiter = TokenBucketRateLimiter.per_day("n2yo", 1000, clock=clock, sleep=clock.sleep)
        assert limiter.rate == pytest.approx(1000 / 86400)
        assert limiter.capacity == 1.0

    def test_per_hour_rate(self, clock):
        limiter = TokenBucketRateLimiter.per_hour("nasa", 1000, clock=clock, sleep=clock.sleep)
        assert limiter.rate == pytest.approx(1000 / 3600)
        assert limiter.capacity == pytest.approx(1000 / 3600 * 10)

    def test_rejects_non_positive_rate(self):
        with pytest.raises(ValueError):
            TokenBucketRateLimiter("x", requests_per_second=0)


@pytest.mark.unit
class TestAcquire:
    @pytest.mark.asyncio
    async def test_immediate_while_tokens_available(self, clock):
        limiter = make_limiter(clock)

        assert await limiter.acquire() == 0.0
        assert await limiter.acquire() == 0.0
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_waits_when_bucket_empty(self, clock):
        limiter = make_limiter(clock)
        await limiter.acquire()
        await limiter.acquire()

        waited = await limiter.acquire()

        assert waited == pytest.approx(0.5)
        assert clock.sleeps == [pytest.approx(0.5)]

    @pytest.mark.asyncio
    async def test_refills_with_elapsed_time(self, clock):
        limiter = make_limiter(clock)
        await limiter.acquire()
        await limiter.acquire()

        clock.advance(1.0)
        assert limiter.available_tokens == pytest.approx(2.0)

    @pytest.mark.asyncio
    async def test_refill_capped_at_capacity(self, clock):
        limiter = make_limiter(clock)
        clock.advance(3600)
        assert limiter.available_tokens == pytest.approx(limiter.capacity)

    @pytest.mark.asyncio
    async def test_never_rejects_and_respects_rate_bound(self, clock):
        limiter = make_limiter(clock, rate=2.0, burst=2.0)
        start = clock.now

        results = [await limiter.acquire() for _ in range(12)]

        elapsed = clock.now - start
        assert len(results) == 12
        # capacity + rate * elapsed is the most that can ever be granted
        assert 12 <= limiter.capacity + limiter.rate * elapsed + 1e-9

    @pytest.mark.asyncio
    async def test_concurrent_waiters_are_serialised(self, clock):
        limiter = make_limiter(clock, rate=2.0, burst=0.5)  # capacity floors at 1

        waits = await asyncio.gather(*(limiter.acquire() for _ in range(3)))

        assert sorted(waits) == [0.0, pytest.approx(0.5), pytest.approx(0.5)]
        assert limiter.stats()["acquired"] == 3

    @pytest.mark.asyncio
    async def test_wait_publishes_diagnostic_event(self, clock):
        bus = EventBus()
        received = []
        bus.subscribe("rate-limit-wait", received.append)
        limiter = make_limiter(clock, event_bus=bus)

        for _ in range(3):
            await limiter.acquire()

        assert len(received) == 1
        assert isinstance(received[0], RateLimitWaitEvent)
        assert received[0].limiter == "test-api"
        assert received[0].wait_seconds == pytest.approx(0.5)
