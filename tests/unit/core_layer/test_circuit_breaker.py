"""
Unit Tests for CircuitBreaker

Tests the state machine (closed -> open -> half-open -> closed/open),
the single half-open trial, and optional rate-based tripping.
"""

import pytest

from src.core.config.constants import CircuitState
from src.core.resilience.circuit_breaker import CircuitBreaker
from tests.test_fixtures import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def breaker(clock):
    return CircuitBreaker("iss-position", failure_threshold=3, reset_timeout_ms=1000, clock=clock)


@pytest.mark.unit
class TestCircuitBreakerConstruction:
    def test_initial_state_closed(self, breaker):
        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_count == 0
        assert breaker.is_open() is False

    @pytest.mark.parametrize("threshold", [0, -1])
    def test_rejects_threshold_below_one(self, threshold):
        with pytest.raises(ValueError):
            CircuitBreaker("x", failure_threshold=threshold, reset_timeout_ms=1000)

    def test_rejects_non_positive_reset_timeout(self):
        with pytest.raises(ValueError):
            CircuitBreaker("x", failure_threshold=1, reset_timeout_ms=0)


@pytest.mark.unit
class TestCircuitBreakerTransitions:
    def test_opens_at_threshold(self, breaker):
        breaker.record_failure()
        breaker.record_failure()
        assert breaker.state == CircuitState.CLOSED

        breaker.record_failure()
        assert breaker.state == CircuitState.OPEN
        assert breaker.is_open() is True

    def test_success_resets_failure_count(self, breaker):
        breaker.record_failure()
        breaker.record_failure()
        breaker.record_success()
        breaker.record_failure()

        assert breaker.failure_count == 1
        assert breaker.state == CircuitState.CLOSED

    def test_threshold_of_one_opens_on_first_failure(self, clock):
        breaker = CircuitBreaker("x", failure_threshold=1, reset_timeout_ms=1000, clock=clock)
        breaker.record_failure()
        assert breaker.state == CircuitState.OPEN

    def test_stays_open_until_reset_timeout(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()

        clock.advance(0.999)
        assert breaker.is_open() is True
        assert breaker.state == CircuitState.OPEN

    def test_half_open_after_reset_timeout(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()

        clock.advance(1.0)
        assert breaker.is_open() is False
        assert breaker.state == CircuitState.HALF_OPEN

    def test_half_open_allows_single_trial(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()
        clock.advance(1.0)

        assert breaker.is_open() is False  # the trial
        assert breaker.is_open() is True  # no second concurrent trial

    def test_half_open_success_closes(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()
        clock.advance(1.0)
        breaker.is_open()

        breaker.record_success()
        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_count == 0
        assert breaker.is_open() is False

    def test_half_open_failure_reopens(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()
        clock.advance(1.0)
        breaker.is_open()

        breaker.record_failure()
        assert breaker.state == CircuitState.OPEN
        assert breaker.is_open() is True
        assert breaker.last_failure_time == clock.now

    def test_trial_regranted_after_another_timeout(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()
        clock.advance(1.0)
        assert breaker.is_open() is False

        clock.advance(1.0)
        assert breaker.is_open() is False
        assert breaker.state == CircuitState.HALF_OPEN

    def test_reset_forces_closed(self, breaker):
        for _ in range(3):
            breaker.record_failure()
        breaker.reset()

        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_count == 0
        assert breaker.last_failure_time is None


@pytest.mark.unit
class TestCircuitBreakerMonotonicity:
    def test_open_never_skips_to_closed_without_success(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()

        seen = []
        for _ in range(5):
            clock.advance(0.3)
            breaker.is_open()
            seen.append(breaker.state)

        assert CircuitState.CLOSED not in seen

    def test_only_success_leaves_half_open_for_closed(self, breaker, clock):
        for _ in range(3):
            breaker.record_failure()
        clock.advance(1.0)
        breaker.is_open()

        for _ in range(3):
            breaker.is_open()
            assert breaker.state == CircuitState.HALF_OPEN


@pytest.mark.unit
class TestCircuitBreakerFailureRate:
    def test_count_only_by_default(self, clock):
        breaker = CircuitBreaker("x", failure_threshold=5, reset_timeout_ms=1000, clock=clock)
        for _ in range(20):
            breaker.record_failure()
            breaker.record_success()

        assert breaker.state == CircuitState.CLOSED
        assert breaker.failure_rate() == 0.0

    def test_rate_trips_when_enabled(self, clock):
        breaker = CircuitBreaker(
            "x",
            failure_threshold=100,
            reset_timeout_ms=1000,
            failure_rate_threshold=0.5,
            minimum_calls=4,
            clock=clock,
        )
        breaker.record_success()
        breaker.record_failure()
        breaker.record_success()
        assert breaker.state == CircuitState.CLOSED

        breaker.record_failure()
        assert breaker.state == CircuitState.OPEN

    def test_rate_window_forgets_old_outcomes(self, clock):
        breaker = CircuitBreaker(
            "x",
            failure_threshold=100,
            reset_timeout_ms=1000,
            monitoring_window_ms=10_000,
            failure_rate_threshold=0.9,
            minimum_calls=2,
            clock=clock,
        )
        breaker.record_failure()
        clock.advance(11)
        breaker.record_success()

        assert breaker.failure_rate() == 0.0

    def test_stats_reports_state(self, breaker):
        for _ in range(3):
            breaker.record_failure()

        stats = breaker.stats()
        assert stats["state"] == "open"
        assert stats["opened_count"] == 1
        assert stats["total_failures"] == 3
