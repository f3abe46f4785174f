"""
Stream definition and runtime state.

A StreamDefinition is immutable once registered; everything that changes
while a stream runs lives on its StreamRuntimeState, which is owned by the
orchestrator.
"""

import asyncio
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.core.config.constants import (
    DEFAULT_BASE_CONFIDENCE,
    ERROR_RATE_WINDOW,
    THROUGHPUT_WINDOW_SECONDS,
    StreamPriority,
)
from src.core.resilience.circuit_breaker import CircuitBreaker


class AlertThresholds(BaseModel):
    """Per-stream alerting thresholds."""

    model_config = ConfigDict(frozen=True)

    max_response_time_ms: int = Field(..., gt=0)
    max_error_rate: float = Field(..., ge=0.0, le=1.0)
    max_data_age_ms: int = Field(..., gt=0)


class StreamDefinition(BaseModel):
    """
    Declarative description of one polled data stream.

    `source` selects the API client and rate limiter; `stream_kind` and
    `params` are passed to the client's fetch().
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    source: str
    stream_kind: str
    data_type: str
    params: dict[str, Any] = Field(default_factory=dict)
    priority: StreamPriority = StreamPriority.MEDIUM
    poll_interval_ms: int = Field(..., gt=0)
    max_retries: int = Field(default=3, ge=1)
    failure_threshold: int | None = Field(default=None, ge=1)
    health_check_interval_ms: int = Field(default=30_000, gt=0)
    alert_thresholds: AlertThresholds
    base_confidence: float = Field(default=DEFAULT_BASE_CONFIDENCE, gt=0.0, le=1.0)

    @property
    def breaker_threshold(self) -> int:
        """Consecutive failures that open the stream's breaker."""
        return self.failure_threshold or self.max_retries

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000


@dataclass
class StreamRuntimeState:
    """Mutable per-stream state."""

    definition: StreamDefinition
    circuit_breaker: CircuitBreaker
    last_data_received_at: float
    is_active: bool = False
    error_count: int = 0
    in_flight: bool = False
    generation: int = 0
    total_fetches: int = 0
    total_failures: int = 0
    skipped_ticks: int = 0
    error_rate_alerted: bool = False
    last_response_time_ms: float | None = None
    task: asyncio.Task | None = None
    recent_outcomes: deque = field(default_factory=lambda: deque(maxlen=ERROR_RATE_WINDOW))
    success_times: deque = field(default_factory=deque)

    def record_outcome(self, success: bool, now: float) -> None:
        self.total_fetches += 1
        self.recent_outcomes.append(success)
        if success:
            self.success_times.append(now)
        else:
            self.total_failures += 1
        self._prune(now)

    @property
    def error_rate(self) -> float:
        if not self.recent_outcomes:
            return 0.0
        return sum(1 for ok in self.recent_outcomes if not ok) / len(self.recent_outcomes)

    def throughput(self, now: float) -> float:
        """Successful fetches per second over the sliding window."""
        self._prune(now)
        return len(self.success_times) / THROUGHPUT_WINDOW_SECONDS

    def data_age_ms(self, now: float) -> float:
        return max(0.0, (now - self.last_data_received_at) * 1000)

    def _prune(self, now: float) -> None:
        horizon = now - THROUGHPUT_WINDOW_SECONDS
        while self.success_times and self.success_times[0] < horizon:
            self.success_times.popleft()
