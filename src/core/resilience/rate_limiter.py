"""
Token Bucket Rate Limiter

One limiter per upstream API, shared by every stream polling that API.

Algorithm:
1. Refill: tokens += elapsed_seconds * rate, capped at capacity
2. If a token is available, consume it and return immediately
3. Otherwise compute the wait until one token has accrued, publish a
   rate-limit-wait event, sleep, and go back to 1

Callers are never rejected: the limiter back-pressures them instead.
Waiters are served in arrival order because access is serialized through an
asyncio.Lock, which wakes waiters FIFO.

Bound: over any window of T seconds at most rate * T + capacity
acquisitions complete.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from src.core.config.constants import DEFAULT_BURST_MULTIPLIER, Stage
from src.core.events.models import RateLimitWaitEvent
from src.core.logging.logger import get_logger, log_stage

if TYPE_CHECKING:
    from src.core.events.event_bus import EventBus

logger = get_logger(__name__)


class TokenBucketRateLimiter:
    """
    Async token bucket.

    Usage:
        nasa_limiter = TokenBucketRateLimiter.per_hour("nasa", 1000)
        await nasa_limiter.acquire()
    """

    def __init__(
        self,
        name: str,
        requests_per_second: float,
        burst_multiplier: float = DEFAULT_BURST_MULTIPLIER,
        event_bus: "EventBus | None" = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be > 0")

        self.name = name
        self.rate = requests_per_second
        # Low daily quotas would otherwise yield a bucket that never holds a whole token
        self.capacity = max(1.0, requests_per_second * burst_multiplier)
        self._event_bus = event_bus
        self._clock = clock
        self._sleep = sleep

        self._tokens = self.capacity
        self._last_refill = clock()
        self._lock = asyncio.Lock()

        self._acquired = 0
        self._waits = 0
        self._total_wait_seconds = 0.0

        logger.info(
            "Rate limiter initialized",
            limiter=name,
            rate_per_second=round(self.rate, 6),
            capacity=self.capacity,
        )

    @classmethod
    def per_hour(cls, name: str, requests: int, **kwargs) -> "TokenBucketRateLimiter":
        return cls(name, requests / 3600, **kwargs)

    @classmethod
    def per_day(cls, name: str, requests: int, **kwargs) -> "TokenBucketRateLimiter":
        return cls(name, requests / 86400, **kwargs)

    @property
    def available_tokens(self) -> float:
        self._refill()
        return self._tokens

    async def acquire(self) -> float:
        """
        Take one token, waiting for it if necessary.

        Returns:
            Seconds spent waiting
        """
        waited = 0.0
        async with self._lock:
            while True:
                self._refill()
                if self._tokens >= 1.0:
                    self._tokens -= 1.0
                    self._acquired += 1
                    if waited:
                        self._total_wait_seconds += waited
                    return waited

                wait_seconds = (1.0 - self._tokens) / self.rate
                self._waits += 1
                log_stage(
                    logger,
                    Stage.RATE_LIMITING,
                    "Waiting for rate limit token",
                    level="debug",
                    limiter=self.name,
                    wait_seconds=round(wait_seconds, 3),
                )
                if self._event_bus is not None:
                    self._event_bus.emit(
                        RateLimitWaitEvent(
                            limiter=self.name,
                            wait_seconds=wait_seconds,
                            available_tokens=self._tokens,
                        )
                    )
                await self._sleep(wait_seconds)
                waited += wait_seconds

    def stats(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "rate_per_second": self.rate,
            "capacity": self.capacity,
            "available_tokens": round(self.available_tokens, 3),
            "acquired": self._acquired,
            "waits": self._waits,
            "total_wait_seconds": round(self._total_wait_seconds, 3),
        }

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._last_refill
        if elapsed > 0:
            self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
            self._last_refill = now
