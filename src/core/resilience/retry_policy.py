"""
Retry Policy

Single place for the orchestrator's retry and timeout numbers:
- per-fetch hard timeout
- whether a failed poll is still considered retryable
- delayed restart of a stream whose start-up failed (tenacity driven)

Author: System Architect
Date: 2025-12-10
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_fixed

from src.core.config.constants import Stage
from src.core.exceptions import ApiTimeoutError, StreamStartupError
from src.core.logging.logger import get_logger, log_stage

if TYPE_CHECKING:
    from src.core.config.settings import Settings

logger = get_logger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """
    Retry/backoff configuration shared by the orchestrator's failure paths.

    Args:
        fetch_timeout_seconds: Hard timeout for a single upstream fetch
        restart_delay_seconds: Delay before a failed stream start is retried
        restart_attempts: Delayed restart attempts before giving up
        sleep: Async sleep used for delays (injectable for tests)
    """

    def __init__(
        self,
        fetch_timeout_seconds: float = 10.0,
        restart_delay_seconds: float = 30.0,
        restart_attempts: int = 1,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if restart_attempts < 1:
            raise ValueError("restart_attempts must be >= 1")
        self.fetch_timeout_seconds = fetch_timeout_seconds
        self.restart_delay_seconds = restart_delay_seconds
        self.restart_attempts = restart_attempts
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: "Settings", **kwargs) -> "RetryPolicy":
        orchestrator = settings.orchestrator
        return cls(
            fetch_timeout_seconds=orchestrator.FETCH_TIMEOUT_SECONDS,
            restart_delay_seconds=orchestrator.STREAM_RESTART_DELAY_SECONDS,
            restart_attempts=orchestrator.STREAM_RESTART_ATTEMPTS,
            **kwargs,
        )

    @staticmethod
    def is_retryable(error_count: int, max_retries: int) -> bool:
        """A failed poll stays retryable until error_count reaches max_retries."""
        return error_count < max_retries

    async def with_fetch_timeout(self, awaitable: Awaitable[T], source: str = "") -> T:
        """Await an upstream call, converting a timeout into ApiTimeoutError."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.fetch_timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise ApiTimeoutError(
                f"Upstream fetch timed out after {self.fetch_timeout_seconds}s",
                details={"api": source, "timeout_seconds": self.fetch_timeout_seconds},
            ) from exc

    async def wait_before_restart(self) -> None:
        await self._sleep(self.restart_delay_seconds)

    def restart_retrying(self, stream_id: str = "") -> AsyncRetrying:
        """
        Tenacity controller for delayed stream restarts.

        Usage:
            await policy.wait_before_restart()
            async for attempt in policy.restart_retrying(stream_id):
                with attempt:
                    await start()
        """
        log_stage(
            logger,
            Stage.RETRY,
            "Restarting stream",
            stream_id=stream_id,
            attempts=self.restart_attempts,
            delay=self.restart_delay_seconds,
        )
        std_logger = logging.getLogger(__name__)  # tenacity logs through the stdlib logger
        return AsyncRetrying(
            stop=stop_after_attempt(self.restart_attempts),
            wait=wait_fixed(self.restart_delay_seconds),
            retry=retry_if_exception_type(StreamStartupError),
            sleep=self._sleep,
            reraise=True,
            before_sleep=before_sleep_log(std_logger, logging.WARNING),
        )
