#!/usr/bin/env python3
"""
Health Checker Module

Probes each upstream API once per health-check round and keeps a per-API
ApiStatus. A probe is an upstream call like any other: when the API has a
rate limiter the probe takes a token first, outside the probe timeout.

Aggregate status rule:

- every API online      -> operational
- at least one online   -> degraded
- none online           -> critical
- no API configured     -> offline

Author: Senior Solution Architect
Date: 2025-12-05
"""

import asyncio
import time
from collections.abc import Callable, Mapping

from src.core.config.constants import Stage, SystemStatus
from src.core.events.models import utc_now
from src.core.logging.logger import get_logger, log_stage
from src.core.resilience.rate_limiter import TokenBucketRateLimiter
from src.infrastructure.api_clients.base_client import BaseApiClient
from src.telemetry.models.health import ApiStatus

logger = get_logger(__name__)


def derive_status(api_statuses: Mapping[str, ApiStatus]) -> SystemStatus:
    if not api_statuses:
        return SystemStatus.OFFLINE
    online = sum(1 for status in api_statuses.values() if status.is_online)
    if online == len(api_statuses):
        return SystemStatus.OPERATIONAL
    if online > 0:
        return SystemStatus.DEGRADED
    return SystemStatus.CRITICAL


class HealthChecker:
    """
    Upstream reachability checker.

    STAGE-H: Health check orchestration

    Usage:
        checker = HealthChecker()
        checker.register("nasa", nasa_client, nasa_limiter)
        statuses = await checker.check_all()
        status = checker.system_status()
    """

    def __init__(
        self,
        probe_timeout_seconds: float = 10.0,
        timer: Callable[[], float] = time.perf_counter,
    ):
        self.probe_timeout_seconds = probe_timeout_seconds
        self._timer = timer
        self._clients: dict[str, BaseApiClient] = {}
        self._limiters: dict[str, TokenBucketRateLimiter] = {}
        self._statuses: dict[str, ApiStatus] = {}

        logger.info("Health checker initialized", stage=Stage.HEALTH.value)

    def register(
        self, name: str, client: BaseApiClient, rate_limiter: TokenBucketRateLimiter | None = None
    ) -> None:
        self._clients[name] = client
        if rate_limiter is not None:
            self._limiters[name] = rate_limiter
        self._statuses.setdefault(name, ApiStatus(name=name))

    def unregister(self, name: str) -> None:
        self._clients.pop(name, None)
        self._limiters.pop(name, None)
        self._statuses.pop(name, None)

    @property
    def api_names(self) -> list[str]:
        return list(self._clients)

    def statuses(self) -> dict[str, ApiStatus]:
        return dict(self._statuses)

    def system_status(self) -> SystemStatus:
        return derive_status(self._statuses)

    async def check_all(self) -> dict[str, ApiStatus]:
        """
        Probe every registered API concurrently.

        STAGE-H.1: Upstream probe round
        """
        names = list(self._clients)
        results = await asyncio.gather(*(self._probe(name) for name in names))
        for name, (online, elapsed_ms) in zip(names, results):
            self._update(name, online, elapsed_ms)

        log_stage(
            logger,
            Stage.HEALTH,
            "Health check round complete",
            online=[name for name in names if self._statuses[name].is_online],
            offline=[name for name in names if not self._statuses[name].is_online],
            status=self.system_status().value,
        )
        return self.statuses()

    async def check_api(self, name: str) -> ApiStatus:
        online, elapsed_ms = await self._probe(name)
        return self._update(name, online, elapsed_ms)

    async def _probe(self, name: str) -> tuple[bool, float]:
        client = self._clients[name]
        limiter = self._limiters.get(name)
        if limiter is not None:
            await limiter.acquire()
        started = self._timer()
        try:
            online = await asyncio.wait_for(client.test_connection(), timeout=self.probe_timeout_seconds)
        except asyncio.TimeoutError:
            log_stage(logger, Stage.HEALTH, "Upstream probe timed out", level="warning", api=name)
            online = False
        except Exception as exc:
            # test_connection() should return False; anything raised still means offline
            log_stage(
                logger,
                Stage.HEALTH,
                "Upstream probe raised",
                level="error",
                api=name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            online = False
        return bool(online), (self._timer() - started) * 1000

    def _update(self, name: str, online: bool, elapsed_ms: float) -> ApiStatus:
        previous = self._statuses.get(name) or ApiStatus(name=name)
        now = utc_now()
        total = previous.total_checks + 1
        failed = previous.failed_checks + (0 if online else 1)

        status = previous.model_copy(
            update={
                "is_online": online,
                "response_time_ms": round(elapsed_ms, 2),
                "total_checks": total,
                "failed_checks": failed,
                "error_rate": failed / total,
                "consecutive_failures": 0 if online else previous.consecutive_failures + 1,
                "last_success_at": now if online else previous.last_success_at,
                "last_checked_at": now,
            }
        )
        self._statuses[name] = status
        return status
