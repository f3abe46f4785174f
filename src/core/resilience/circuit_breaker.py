"""
Circuit Breaker for Upstream Telemetry Streams.

One breaker is owned by each stream's runtime state. It isolates a failing
upstream endpoint so the poller stops hammering it and serves cached data
instead.

MECHANISM OF ACTION:
-------------------
1.  **State Transitions**:
    - **CLOSED**: Healthy. Live fetches are allowed.
      - On Failure: consecutive failure counter increments.
      - On Success: counter resets to 0.
      - Threshold Reached: failures >= failure_threshold -> OPEN.

    - **OPEN**: Upstream considered down. `is_open()` returns True, callers
      serve cached data.
      - Recovery: once `reset_timeout_ms` has elapsed since the last failure,
        the next `is_open()` moves the breaker to HALF-OPEN and returns False
        exactly once (the trial fetch).

    - **HALF-OPEN**: Probing mode.
      - While the trial is outstanding `is_open()` keeps returning True.
      - On Success: back to CLOSED.
      - On Failure: back to OPEN, the timeout restarts.
      - A trial that never reports back is replaced by a new one after
        another reset timeout.

2.  **Rate-based tripping (optional)**:
    With `failure_rate_threshold` set, outcomes inside `monitoring_window_ms`
    are kept and the breaker also opens once at least `minimum_calls`
    outcomes show a failure rate at or above the threshold. Without it the
    breaker is purely count-based.

State is in-memory only and never shared between processes.
"""

import time
from collections import deque
from collections.abc import Callable
from typing import Any

from src.core.config.constants import CircuitState, Stage
from src.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)


class CircuitBreaker:
    """
    In-memory circuit breaker with a single half-open trial.

    Args:
        name: Breaker name (the stream id)
        failure_threshold: Consecutive failures that open the breaker
        reset_timeout_ms: Open period before a half-open trial
        monitoring_window_ms: Outcome window for rate-based tripping
        failure_rate_threshold: Optional failure rate that also opens the breaker
        minimum_calls: Outcomes needed before the rate is considered
        clock: Monotonic clock in seconds (injectable for tests)
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int,
        reset_timeout_ms: int,
        monitoring_window_ms: int = 300_000,
        failure_rate_threshold: float | None = None,
        minimum_calls: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        if reset_timeout_ms <= 0:
            raise ValueError("reset_timeout_ms must be > 0")

        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout_ms = reset_timeout_ms
        self.monitoring_window_ms = monitoring_window_ms
        self.failure_rate_threshold = failure_rate_threshold
        self.minimum_calls = minimum_calls
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._last_failure_time: float | None = None
        self._trial_started_at: float | None = None
        self._outcomes: deque[tuple[float, bool]] = deque()

        self._opened_count = 0
        self._total_successes = 0
        self._total_failures = 0

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def last_failure_time(self) -> float | None:
        return self._last_failure_time

    def is_open(self) -> bool:
        """
        Gate for live fetches.

        Returns:
            True if the caller must not perform a live fetch now
        """
        if self._state == CircuitState.CLOSED:
            return False

        now = self._clock()
        reset_seconds = self.reset_timeout_ms / 1000

        if self._state == CircuitState.OPEN:
            if self._last_failure_time is not None and now - self._last_failure_time < reset_seconds:
                return True
            self._transition(CircuitState.HALF_OPEN)
            self._trial_started_at = now
            return False

        # HALF_OPEN: one trial at a time
        if self._trial_started_at is not None and now - self._trial_started_at < reset_seconds:
            return True
        self._trial_started_at = now
        return False

    def record_success(self) -> None:
        self._total_successes += 1
        self._record_outcome(success=True)
        self._failure_count = 0
        self._trial_started_at = None
        if self._state != CircuitState.CLOSED:
            self._transition(CircuitState.CLOSED)

    def record_failure(self) -> None:
        now = self._clock()
        self._total_failures += 1
        self._failure_count += 1
        self._last_failure_time = now
        self._record_outcome(success=False)

        if self._state == CircuitState.HALF_OPEN:
            self._trial_started_at = None
            self._transition(CircuitState.OPEN)
            return

        if self._state == CircuitState.CLOSED and (
            self._failure_count >= self.failure_threshold or self._failure_rate_exceeded()
        ):
            self._transition(CircuitState.OPEN)

    def failure_rate(self) -> float:
        """Failure rate over the monitoring window (0.0 with no outcomes)."""
        self._prune(self._clock())
        if not self._outcomes:
            return 0.0
        failures = sum(1 for _, ok in self._outcomes if not ok)
        return failures / len(self._outcomes)

    def reset(self) -> None:
        """Force the breaker closed and forget all history."""
        self._failure_count = 0
        self._last_failure_time = None
        self._trial_started_at = None
        self._outcomes.clear()
        if self._state != CircuitState.CLOSED:
            self._transition(CircuitState.CLOSED)

    def stats(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "state": self._state.value,
            "failure_count": self._failure_count,
            "failure_threshold": self.failure_threshold,
            "failure_rate": round(self.failure_rate(), 4),
            "opened_count": self._opened_count,
            "total_successes": self._total_successes,
            "total_failures": self._total_failures,
        }

    def _record_outcome(self, success: bool) -> None:
        if self.failure_rate_threshold is None:
            return
        now = self._clock()
        self._outcomes.append((now, success))
        self._prune(now)

    def _prune(self, now: float) -> None:
        horizon = now - self.monitoring_window_ms / 1000
        while self._outcomes and self._outcomes[0][0] < horizon:
            self._outcomes.popleft()

    def _failure_rate_exceeded(self) -> bool:
        if self.failure_rate_threshold is None or len(self._outcomes) < self.minimum_calls:
            return False
        return self.failure_rate() >= self.failure_rate_threshold

    def _transition(self, new_state: CircuitState) -> None:
        old_state = self._state
        self._state = new_state
        if new_state == CircuitState.OPEN:
            self._opened_count += 1

        log_stage(
            logger,
            Stage.CIRCUIT_BREAKER,
            "Circuit state changed",
            level="warning" if new_state == CircuitState.OPEN else "info",
            breaker=self.name,
            from_state=old_state.value,
            to_state=new_state.value,
            failure_count=self._failure_count,
        )
