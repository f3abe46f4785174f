"""
Unit Tests for HealthChecker
"""

import asyncio

import pytest

from src.core.config.constants import SystemStatus
from src.core.resilience.rate_limiter import TokenBucketRateLimiter
from src.infrastructure.monitoring.health_checker import HealthChecker, derive_status
from src.telemetry.models.health import ApiStatus
from tests.test_fixtures import ClientTestFactory, FakeApiClient, FakeClock


class RaisingClient(FakeApiClient):
    async def test_connection(self) -> bool:
        raise RuntimeError("probe exploded")


class HangingClient(FakeApiClient):
    async def test_connection(self) -> bool:
        await asyncio.sleep(10)
        return True


@pytest.mark.unit
class TestDeriveStatus:
    def test_no_apis_is_offline(self):
        assert derive_status({}) == SystemStatus.OFFLINE

    def test_all_online_is_operational(self):
        statuses = {n: ApiStatus(name=n, is_online=True) for n in ("n2yo", "nasa")}
        assert derive_status(statuses) == SystemStatus.OPERATIONAL

    def test_some_online_is_degraded(self):
        statuses = {"n2yo": ApiStatus(name="n2yo", is_online=True), "nasa": ApiStatus(name="nasa")}
        assert derive_status(statuses) == SystemStatus.DEGRADED

    def test_none_online_is_critical(self):
        statuses = {"n2yo": ApiStatus(name="n2yo"), "nasa": ApiStatus(name="nasa")}
        assert derive_status(statuses) == SystemStatus.CRITICAL


@pytest.mark.unit
class TestHealthChecker:
    @pytest.mark.asyncio
    async def test_check_all_updates_statuses(self):
        checker = HealthChecker()
        checker.register("n2yo", ClientTestFactory.healthy("n2yo"))
        checker.register("nasa", ClientTestFactory.offline("nasa"))

        statuses = await checker.check_all()

        assert statuses["n2yo"].is_online is True
        assert statuses["nasa"].is_online is False
        assert statuses["nasa"].consecutive_failures == 1
        assert checker.system_status() == SystemStatus.DEGRADED

    @pytest.mark.asyncio
    async def test_error_rate_accumulates(self):
        client = ClientTestFactory.healthy("nasa")
        checker = HealthChecker()
        checker.register("nasa", client)

        await checker.check_all()
        client.online = False
        await checker.check_all()

        status = checker.statuses()["nasa"]
        assert status.total_checks == 2
        assert status.failed_checks == 1
        assert status.error_rate == 0.5
        assert status.last_success_at is not None

    @pytest.mark.asyncio
    async def test_probe_exception_means_offline(self):
        checker = HealthChecker()
        checker.register("n2yo", RaisingClient("n2yo"))

        status = await checker.check_api("n2yo")
        assert status.is_online is False

    @pytest.mark.asyncio
    async def test_probe_timeout_means_offline(self):
        checker = HealthChecker(probe_timeout_seconds=0.01)
        checker.register("n2yo", HangingClient("n2yo"))

        status = await checker.check_api("n2yo")
        assert status.is_online is False

    def test_registered_api_starts_offline(self):
        checker = HealthChecker()
        checker.register("nasa", ClientTestFactory.healthy("nasa"))

        assert checker.api_names == ["nasa"]
        assert checker.system_status() == SystemStatus.CRITICAL

    def test_unregister(self):
        checker = HealthChecker()
        checker.register("nasa", ClientTestFactory.healthy("nasa"))
        checker.unregister("nasa")

        assert checker.system_status() == SystemStatus.OFFLINE


@pytest.mark.unit
class TestRateLimitedProbes:
    @pytest.mark.asyncio
    async def test_every_check_takes_a_token(self):
        clock = FakeClock()
        limiter = TokenBucketRateLimiter.per_day("n2yo", 1000, clock=clock, sleep=clock.sleep)
        client = ClientTestFactory.healthy("n2yo")
        checker = HealthChecker()
        checker.register("n2yo", client, limiter)

        for _ in range(10):
            await checker.check_all()

        assert client.probes == 10
        assert limiter.stats()["acquired"] == 10
        # one token in the bucket, then a full refill period per check
        assert sum(clock.sleeps) == pytest.approx(9 * 86.4)

    @pytest.mark.asyncio
    async def test_token_wait_is_outside_check_timeout(self):
        clock = FakeClock()
        waits = []

        async def slow_sleep(seconds):
            waits.append(seconds)
            clock.advance(seconds)
            await asyncio.sleep(0.05)

        limiter = TokenBucketRateLimiter("nasa", requests_per_second=0.01, clock=clock, sleep=slow_sleep)
        checker = HealthChecker(probe_timeout_seconds=0.02)
        checker.register("nasa", ClientTestFactory.healthy("nasa"), limiter)

        await checker.check_api("nasa")
        status = await checker.check_api("nasa")

        assert sum(waits) == pytest.approx(100.0)
        assert status.is_online is True

    @pytest.mark.asyncio
    async def test_unregister_drops_limiter(self):
        clock = FakeClock()
        limiter = TokenBucketRateLimiter("nasa", requests_per_second=1.0, clock=clock, sleep=clock.sleep)
        checker = HealthChecker()
        checker.register("nasa", ClientTestFactory.healthy("nasa"), limiter)
        checker.unregister("nasa")
        checker.register("nasa", ClientTestFactory.healthy("nasa"))

        await checker.check_all()

        assert limiter.stats()["acquired"] == 0
