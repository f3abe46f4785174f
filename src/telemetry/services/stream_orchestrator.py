"""
Stream Orchestrator Service
===========================

WHAT IS THE STREAM ORCHESTRATOR?
---------------------------------
The StreamOrchestrator owns every registered telemetry stream and drives its
polling. It does not talk HTTP itself: it coordinates the circuit breaker,
rate limiter, API client, response cache, alert manager and event bus so
that each poll tick follows the same pipeline.

THE POLL TICK:
--------------
┌─────────────────────────────────────────────────────────────────┐
│ 1. CIRCUIT GATE                                                 │
│ - Breaker open: serve the cached payload (discounted) or raise  │
│   a "no cached data" warning, and stop here                     │
└─────────────────────────────────────────────────────────────────┘
                            ↓
┌─────────────────────────────────────────────────────────────────┐
│ 2. RATE LIMITING                                                │
│ - One token per upstream request the fetch sends, taken from    │
│   the source API's bucket (may wait)                            │
└─────────────────────────────────────────────────────────────────┘
                            ↓
┌─────────────────────────────────────────────────────────────────┐
│ 3. UPSTREAM FETCH (hard timeout)                                │
└─────────────────────────────────────────────────────────────────┘
                            ↓
┌─────────────────────────────────────────────────────────────────┐
│ 4a. SUCCESS: slow-response alert, cache put, breaker success,   │
│     publish "<id>-update" and "telemetry-update"                │
│ 4b. FAILURE: breaker failure, publish "<id>-error", alert by    │
│     priority, fall back to the cached payload                   │
└─────────────────────────────────────────────────────────────────┘

Results of a tick whose stream was stopped or restarted while the fetch was
in flight are discarded: not cached, not published, not counted.

SCHEDULING:
-----------
Each active stream has one scheduler task. Every poll interval it launches
the tick as a separate task, unless the previous tick is still in flight, in
which case the tick is skipped. Stopping a stream cancels its scheduler at
once; a running tick finishes but its result is dropped.

BACKGROUND LOOPS:
-----------------
- Health check: probes each upstream once, recomputes the aggregate status,
  publishes "health-check-complete"
- Data-quality sweep: raises a staleness warning for every active stream
  whose data is older than its max_data_age_ms

DEPENDENCY INJECTION:
---------------------
All collaborators are passed in; nothing is looked up from module scope.
See src/application/runtime.py for the production wiring.
"""

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable
from typing import Any

from src.core.config.constants import (
    AlertLevel,
    DataQuality,
    Stage,
    StreamPriority,
    SystemStatus,
)
from src.core.config.settings import Settings
from src.core.events.event_bus import EventBus
from src.core.exceptions import (
    OrchestratorInitializationError,
    StreamNotFoundError,
    StreamRegistrationError,
    StreamStartupError,
    TelemetryBaseError,
)
from src.core.logging.logger import clear_stream_id, get_logger, log_stage, set_stream_id
from src.core.resilience.circuit_breaker import CircuitBreaker
from src.core.resilience.rate_limiter import TokenBucketRateLimiter
from src.core.resilience.retry_policy import RetryPolicy
from src.infrastructure.api_clients.base_client import BaseApiClient
from src.infrastructure.cache.response_cache import ResponseCache
from src.infrastructure.monitoring.alert_manager import AlertManager
from src.infrastructure.monitoring.health_checker import HealthChecker
from src.telemetry.models.events import (
    CriticalFailureEvent,
    HealthCheckCompleteEvent,
    StreamErrorEvent,
    StreamUpdateEvent,
    SystemInitializedEvent,
    TelemetryUpdateEvent,
)
from src.telemetry.models.health import StreamSummary, SystemHealthSnapshot
from src.telemetry.models.payload import TelemetryPayload
from src.telemetry.models.stream import StreamDefinition, StreamRuntimeState

logger = get_logger(__name__)

# Outcomes needed before the error-rate threshold is evaluated
ERROR_RATE_MIN_SAMPLES = 5


def _error_message(exc: BaseException) -> str:
    if isinstance(exc, TelemetryBaseError):
        return exc.message
    return str(exc) or type(exc).__name__


class StreamOrchestrator:
    """
    Owns stream definitions and runtime state and drives polling.

    Usage:
        orchestrator = StreamOrchestrator(bus, alerts, health, cache, policy, settings)
        orchestrator.register_api_client("nasa", nasa_client, nasa_limiter)
        orchestrator.register_stream(definition)
        await orchestrator.start()
        snapshot = orchestrator.get_system_health()
        await orchestrator.shutdown()
    """

    def __init__(
        self,
        event_bus: EventBus,
        alert_manager: AlertManager,
        health_checker: HealthChecker,
        cache: ResponseCache,
        retry_policy: RetryPolicy,
        settings: Settings,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._bus = event_bus
        self._alerts = alert_manager
        self._health = health_checker
        self._cache = cache
        self._retry_policy = retry_policy
        self._settings = settings
        self._clock = clock
        self._sleep = sleep

        self._clients: dict[str, BaseApiClient] = {}
        self._limiters: dict[str, TokenBucketRateLimiter] = {}
        self._definitions: dict[str, StreamDefinition] = {}
        self._states: dict[str, StreamRuntimeState] = {}

        self._status = SystemStatus.OFFLINE
        self._started_at: float | None = None
        self._initialized = False
        self._activate_on_start = True
        self._loops: list[asyncio.Task] = []
        self._restart_tasks: dict[str, asyncio.Task] = {}
        self._tick_tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_api_client(
        self,
        name: str,
        client: BaseApiClient,
        rate_limiter: TokenBucketRateLimiter | None = None,
    ) -> None:
        self._clients[name] = client
        if rate_limiter is not None:
            self._limiters[name] = rate_limiter
        self._health.register(name, client, rate_limiter)
        log_stage(logger, Stage.REGISTRATION, "API client registered", api=name, rate_limited=rate_limiter is not None)

    def register_stream(self, definition: StreamDefinition) -> StreamRuntimeState:
        if definition.id in self._definitions:
            raise StreamRegistrationError(
                f"Stream '{definition.id}' is already registered", stream_id=definition.id
            )

        breaker_settings = self._settings.circuit_breaker
        breaker = CircuitBreaker(
            name=definition.id,
            failure_threshold=definition.breaker_threshold,
            reset_timeout_ms=breaker_settings.CB_RECOVERY_TIMEOUT_MS,
            monitoring_window_ms=breaker_settings.CB_MONITORING_WINDOW_MS,
            failure_rate_threshold=breaker_settings.CB_FAILURE_RATE_THRESHOLD,
            minimum_calls=breaker_settings.CB_MINIMUM_CALLS,
            clock=self._clock,
        )
        state = StreamRuntimeState(
            definition=definition,
            circuit_breaker=breaker,
            last_data_received_at=self._clock(),
        )
        self._definitions[definition.id] = definition
        self._states[definition.id] = state

        log_stage(
            logger,
            Stage.REGISTRATION,
            "Stream registered",
            stream_id=definition.id,
            source=definition.source,
            priority=definition.priority.value,
            poll_interval_ms=definition.poll_interval_ms,
        )
        return state

    async def unregister_stream(self, stream_id: str) -> bool:
        if stream_id not in self._definitions:
            return False
        await self.stop_stream(stream_id)
        del self._definitions[stream_id]
        del self._states[stream_id]
        self._cache.delete(stream_id)
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def status(self) -> SystemStatus:
        return self._status

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def start(self, activate_streams: bool = True) -> bool:
        """
        Initialize the orchestrator.

        STAGE-0.0: Probe upstreams, start background loops and (optionally)
        every registered stream.

        Returns:
            True on success. On failure the critical-failure path has already
            run (emergency alert, critical status, critical-failure event).
        """
        if self._initialized:
            return True
        self._activate_on_start = activate_streams

        log_stage(logger, Stage.INITIALIZATION, "Initializing stream orchestrator", streams=len(self._definitions))
        try:
            await self._health.check_all()
            self._status = self._health.system_status()
            online = [name for name, status in self._health.statuses().items() if status.is_online]

            if not online and self._settings.orchestrator.REQUIRE_UPSTREAM_ON_START:
                raise OrchestratorInitializationError(
                    "No upstream API is reachable",
                    details={"apis": self._health.api_names},
                ).with_suggestion("Check network connectivity and API keys, then retry initialization")

            if self._started_at is None:
                self._started_at = self._clock()
            self._start_background_loops()

            if activate_streams:
                for stream_id in list(self._definitions):
                    await self.start_stream(stream_id)

            self._initialized = True
        except Exception as exc:
            self._handle_critical_failure(exc)
            return False

        log_stage(
            logger,
            Stage.INITIALIZATION,
            "Stream orchestrator initialized",
            status=self._status.value,
            active_streams=self.active_stream_ids(),
        )
        self._bus.emit(SystemInitializedEvent(streams=self.active_stream_ids()))
        return True

    async def retry_initialization(self) -> bool:
        """Manual retry after a failed initialization."""
        return await self.start(activate_streams=self._activate_on_start)

    async def shutdown(self) -> None:
        log_stage(logger, Stage.SHUTDOWN, "Shutting down stream orchestrator")
        await self.stop_all_streams()

        pending = [*self._loops, *self._restart_tasks.values(), *self._tick_tasks]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        self._loops.clear()
        self._restart_tasks.clear()
        self._tick_tasks.clear()
        self._alerts.shutdown()
        self._initialized = False
        self._status = SystemStatus.OFFLINE

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    async def start_stream(self, stream_id: str) -> bool:
        """
        Start polling a stream.

        Never raises for stream-level problems: an unknown id returns False,
        a start-up failure is logged and a delayed restart is scheduled.
        """
        if stream_id not in self._states:
            log_stage(logger, Stage.SCHEDULING, "Cannot start unknown stream", level="warning", stream_id=stream_id)
            return False

        try:
            self._activate(stream_id)
        except StreamStartupError as exc:
            log_stage(
                logger,
                Stage.SCHEDULING,
                "Stream start-up failed, scheduling restart",
                level="error",
                stream_id=stream_id,
                error=exc.message,
                restart_in_seconds=self._retry_policy.restart_delay_seconds,
            )
            self._schedule_restart(stream_id)
            return False
        return True

    async def stop_stream(self, stream_id: str) -> bool:
        state = self._states.get(stream_id)
        if state is None:
            return False

        restart = self._restart_tasks.pop(stream_id, None)
        if restart is not None:
            restart.cancel()

        if not state.is_active:
            return False

        state.is_active = False
        state.generation += 1
        if state.task is not None:
            state.task.cancel()
            state.task = None

        log_stage(logger, Stage.SCHEDULING, "Stream stopped", stream_id=stream_id)
        return True

    async def stop_all_streams(self) -> None:
        for stream_id in list(self._states):
            await self.stop_stream(stream_id)

    async def poll_once(self, stream_id: str) -> bool:
        """
        Run one tick now.

        Returns:
            False if skipped because a tick for this stream is already in flight
        """
        state = self._require_state(stream_id)
        if state.in_flight:
            state.skipped_ticks += 1
            return False
        await self._run_tick(stream_id)
        return True

    def _activate(self, stream_id: str) -> None:
        state = self._states.get(stream_id)
        if state is None:
            raise StreamNotFoundError(f"Stream '{stream_id}' is not registered", stream_id=stream_id)
        if state.is_active:
            return

        source = state.definition.source
        if source not in self._clients:
            raise StreamStartupError(
                f"No API client registered for source '{source}'",
                stream_id=stream_id,
                details={"source": source},
            )

        state.is_active = True
        state.generation += 1
        state.task = asyncio.get_running_loop().create_task(
            self._run_schedule(stream_id, state.generation), name=f"poll:{stream_id}"
        )
        log_stage(
            logger,
            Stage.SCHEDULING,
            "Stream started",
            stream_id=stream_id,
            poll_interval_ms=state.definition.poll_interval_ms,
        )

    def _schedule_restart(self, stream_id: str) -> None:
        if stream_id in self._restart_tasks:
            return
        self._restart_tasks[stream_id] = asyncio.get_running_loop().create_task(
            self._restart_stream(stream_id), name=f"restart:{stream_id}"
        )

    async def _restart_stream(self, stream_id: str) -> None:
        try:
            await self._retry_policy.wait_before_restart()
            async for attempt in self._retry_policy.restart_retrying(stream_id):
                with attempt:
                    self._activate(stream_id)
            log_stage(logger, Stage.RETRY, "Stream restarted", stream_id=stream_id)
        except (StreamStartupError, StreamNotFoundError) as exc:
            self._alerts.create_alert(
                AlertLevel.CRITICAL,
                f"Stream {stream_id} failed to restart: {exc.message}",
                source=stream_id,
            )
        finally:
            if self._restart_tasks.get(stream_id) is asyncio.current_task():
                del self._restart_tasks[stream_id]

    async def _run_schedule(self, stream_id: str, generation: int) -> None:
        state = self._states[stream_id]
        interval = state.definition.poll_interval_seconds
        while True:
            await self._sleep(interval)
            if state.generation != generation:
                return
            if state.in_flight:
                state.skipped_ticks += 1
                log_stage(
                    logger,
                    Stage.SCHEDULING,
                    "Tick skipped, previous fetch still in flight",
                    level="debug",
                    stream_id=stream_id,
                )
                continue
            task = asyncio.get_running_loop().create_task(
                self._run_tick(stream_id, generation), name=f"tick:{stream_id}"
            )
            self._tick_tasks.add(task)
            task.add_done_callback(self._tick_tasks.discard)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    async def _run_tick(self, stream_id: str, generation: int | None = None) -> None:
        state = self._states.get(stream_id)
        if state is None or state.in_flight:
            return
        if generation is None:
            generation = state.generation
        elif generation != state.generation:
            return

        state.in_flight = True
        set_stream_id(stream_id)
        try:
            await self._tick(state, generation)
        except Exception as exc:
            log_stage(
                logger,
                Stage.FETCH,
                "Unexpected error in poll tick",
                level="error",
                stream_id=stream_id,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
        finally:
            state.in_flight = False
            clear_stream_id()

    async def _tick(self, state: StreamRuntimeState, generation: int) -> None:
        definition = state.definition

        if state.circuit_breaker.is_open():
            log_stage(
                logger,
                Stage.CIRCUIT_BREAKER,
                "Circuit open, serving cached data",
                level="debug",
                stream_id=definition.id,
            )
            self._serve_cached(state, alert_if_missing=True)
            return

        client = self._clients.get(definition.source)
        limiter = self._limiters.get(definition.source)
        if client is not None and limiter is not None:
            for _ in range(client.request_count(definition.stream_kind, dict(definition.params))):
                await limiter.acquire()
                if state.generation != generation:
                    return

        started = self._clock()
        try:
            if client is None:
                raise StreamStartupError(
                    f"No API client registered for source '{definition.source}'",
                    stream_id=definition.id,
                )
            data = await self._retry_policy.with_fetch_timeout(
                client.fetch(definition.stream_kind, dict(definition.params)),
                source=definition.source,
            )
        except Exception as exc:
            if state.generation != generation:
                log_stage(logger, Stage.FETCH, "Discarding failure of stopped stream", level="debug", stream_id=definition.id)
                return
            self._on_failure(state, exc)
            return

        if state.generation != generation:
            log_stage(logger, Stage.FETCH, "Discarding result of stopped stream", level="debug", stream_id=definition.id)
            return
        self._on_success(state, client, data, (self._clock() - started) * 1000)

    def _on_success(
        self, state: StreamRuntimeState, client: BaseApiClient, data: Any, response_time_ms: float
    ) -> None:
        definition = state.definition
        now = self._clock()
        quality, factor = client.assess(definition.stream_kind, data)
        payload = TelemetryPayload(
            source=definition.source,
            data_type=definition.data_type,
            payload=data,
            quality=quality,
            confidence=min(1.0, definition.base_confidence * factor),
        )

        if response_time_ms > definition.alert_thresholds.max_response_time_ms:
            self._alerts.create_alert(
                AlertLevel.WARNING,
                f"Slow response from {definition.id}: {response_time_ms:.0f}ms",
                source=definition.id,
            )

        self._cache.put(definition.id, payload)
        state.circuit_breaker.record_success()
        state.error_count = 0
        state.last_data_received_at = now
        state.last_response_time_ms = response_time_ms
        state.record_outcome(True, now)

        log_stage(
            logger,
            Stage.PUBLISH,
            "Telemetry update",
            level="debug",
            stream_id=definition.id,
            quality=quality.value,
            response_time_ms=round(response_time_ms, 2),
        )
        self._bus.emit(StreamUpdateEvent(stream_id=definition.id, payload=payload))
        self._bus.emit(
            TelemetryUpdateEvent(stream_id=definition.id, payload=payload, response_time_ms=response_time_ms)
        )
        self._check_error_rate(state)

    def _on_failure(self, state: StreamRuntimeState, exc: BaseException) -> None:
        definition = state.definition
        state.circuit_breaker.record_failure()
        state.error_count += 1
        state.record_outcome(False, self._clock())

        message = _error_message(exc)
        retryable = self._retry_policy.is_retryable(state.error_count, definition.max_retries)
        log_stage(
            logger,
            Stage.FETCH,
            "Stream fetch failed",
            level="warning",
            stream_id=definition.id,
            error=message,
            error_type=type(exc).__name__,
            error_count=state.error_count,
            retryable=retryable,
            circuit_state=state.circuit_breaker.state.value,
        )

        self._bus.emit(StreamErrorEvent(stream_id=definition.id, error=message, retryable=retryable))
        level = AlertLevel.CRITICAL if definition.priority == StreamPriority.CRITICAL else AlertLevel.WARNING
        self._alerts.create_alert(level, f"Stream {definition.id} fetch failed: {message}", source=definition.id)

        self._serve_cached(state, alert_if_missing=False)
        self._check_error_rate(state)

    def _serve_cached(self, state: StreamRuntimeState, alert_if_missing: bool) -> bool:
        stream_id = state.definition.id
        payload = self.get_cached_payload(stream_id)
        if payload is None:
            if alert_if_missing:
                self._alerts.create_alert(
                    AlertLevel.WARNING, f"No cached data available for {stream_id}", source=stream_id
                )
            return False

        log_stage(
            logger,
            Stage.CACHE,
            "Serving cached payload",
            level="debug",
            stream_id=stream_id,
            quality=payload.quality.value,
            confidence=round(payload.confidence, 4),
        )
        self._bus.emit(StreamUpdateEvent(stream_id=stream_id, payload=payload))
        self._bus.emit(TelemetryUpdateEvent(stream_id=stream_id, payload=payload))
        return True

    def _check_error_rate(self, state: StreamRuntimeState) -> None:
        if len(state.recent_outcomes) < ERROR_RATE_MIN_SAMPLES:
            return
        threshold = state.definition.alert_thresholds.max_error_rate
        rate = state.error_rate
        if rate > threshold and not state.error_rate_alerted:
            state.error_rate_alerted = True
            self._alerts.create_alert(
                AlertLevel.WARNING,
                f"Error rate for {state.definition.id} is {rate:.0%} (threshold {threshold:.0%})",
                source=state.definition.id,
            )
        elif rate <= threshold:
            state.error_rate_alerted = False

    # ------------------------------------------------------------------
    # Background loops
    # ------------------------------------------------------------------

    def _start_background_loops(self) -> None:
        if self._loops:
            return
        settings = self._settings.orchestrator
        loop = asyncio.get_running_loop()
        self._loops = [
            loop.create_task(
                self._periodic("health-check", settings.HEALTH_CHECK_INTERVAL_SECONDS, self.run_health_check),
                name="health-check",
            ),
            loop.create_task(
                self._periodic("data-quality", settings.DATA_QUALITY_INTERVAL_SECONDS, self.run_data_quality_sweep),
                name="data-quality",
            ),
        ]

    async def _periodic(self, name: str, interval: float, func: Callable[[], Any]) -> None:
        while True:
            await self._sleep(interval)
            try:
                result = func()
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                log_stage(
                    logger,
                    Stage.HEALTH,
                    "Background loop iteration failed",
                    level="error",
                    loop=name,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )

    async def run_health_check(self) -> SystemHealthSnapshot:
        """
        Probe upstreams once and publish the result.

        STAGE-H.1: Health check round
        """
        await self._health.check_all()
        self._status = self._health.system_status()
        snapshot = self.get_system_health()
        self._bus.emit(HealthCheckCompleteEvent(snapshot=snapshot))
        return snapshot

    def run_data_quality_sweep(self) -> list[str]:
        """
        Raise a staleness warning for every active stream with old data.

        Returns:
            Ids of the streams found stale
        """
        now = self._clock()
        stale = []
        for state in self._states.values():
            if not state.is_active:
                continue
            age_ms = state.data_age_ms(now)
            if age_ms > state.definition.alert_thresholds.max_data_age_ms:
                stale.append(state.definition.id)
                self._alerts.create_alert(
                    AlertLevel.WARNING,
                    f"Stale data detected in {state.definition.id}: {age_ms:.0f}ms old",
                    source=state.definition.id,
                )

        self._alerts.acknowledge_expired()
        if stale:
            log_stage(logger, Stage.QUALITY, "Data quality sweep found stale streams", level="warning", streams=stale)
        return stale

    def _handle_critical_failure(self, exc: BaseException) -> None:
        message = _error_message(exc)
        self._status = SystemStatus.CRITICAL
        log_stage(
            logger,
            Stage.INITIALIZATION,
            "Critical failure during initialization",
            level="critical",
            error=message,
            error_type=type(exc).__name__,
            details=exc.details if isinstance(exc, TelemetryBaseError) else None,
        )
        self._alerts.create_alert(
            AlertLevel.EMERGENCY, f"System initialization failed: {message}", source="system"
        )
        self._bus.emit(CriticalFailureEvent(error=message, snapshot=self.get_system_health()))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_system_health(self) -> SystemHealthSnapshot:
        now = self._clock()
        streams = {
            stream_id: StreamSummary(
                id=stream_id,
                priority=state.definition.priority,
                is_active=state.is_active,
                data_age_ms=round(state.data_age_ms(now), 2),
                throughput=round(state.throughput(now), 4),
                error_count=state.error_count,
                error_rate=round(state.error_rate, 4),
                circuit_state=state.circuit_breaker.state,
                has_cached_data=self._cache.has_fresh(stream_id),
                health_check_interval_ms=state.definition.health_check_interval_ms,
                last_response_time_ms=state.last_response_time_ms,
            )
            for stream_id, state in self._states.items()
        }
        return SystemHealthSnapshot(
            status=self._status,
            uptime_seconds=round(now - self._started_at, 3) if self._started_at is not None else 0.0,
            api_statuses=self._health.statuses(),
            alerts=self._alerts.active_alerts(),
            streams=streams,
        )

    def get_cached_payload(self, stream_id: str) -> TelemetryPayload | None:
        """
        Latest cached payload re-issued at reduced confidence.

        Older than the stream's max_data_age_ms -> quality "bad" with the
        additional stale penalty; otherwise quality "poor".
        """
        state = self._states.get(stream_id)
        payload = self._cache.get(stream_id)
        if state is None or payload is None:
            return None

        settings = self._settings.orchestrator
        factor = settings.CACHE_CONFIDENCE_PENALTY
        quality = DataQuality.POOR
        age_ms = self._cache.age_ms(stream_id) or 0.0
        if age_ms > state.definition.alert_thresholds.max_data_age_ms:
            factor *= settings.STALE_CACHE_CONFIDENCE_PENALTY
            quality = DataQuality.BAD
        return payload.degraded(factor, quality)

    def republish_cached(self, stream_id: str) -> bool:
        """Publish the cached payload of a stream again (e.g. for a newly shown view)."""
        state = self._states.get(stream_id)
        if state is None:
            return False
        return self._serve_cached(state, alert_if_missing=False)

    def acknowledge_alert(self, alert_id: str) -> bool:
        return self._alerts.acknowledge(alert_id)

    def stream_ids(self) -> list[str]:
        return list(self._definitions)

    def active_stream_ids(self) -> list[str]:
        return [stream_id for stream_id, state in self._states.items() if state.is_active]

    def get_stream_definition(self, stream_id: str) -> StreamDefinition:
        return self._require_state(stream_id).definition

    def get_runtime_state(self, stream_id: str) -> StreamRuntimeState:
        return self._require_state(stream_id)

    def is_stream_active(self, stream_id: str) -> bool:
        state = self._states.get(stream_id)
        return state is not None and state.is_active

    def has_stream(self, stream_id: str) -> bool:
        return stream_id in self._states

    def _require_state(self, stream_id: str) -> StreamRuntimeState:
        state = self._states.get(stream_id)
        if state is None:
            raise StreamNotFoundError(f"Stream '{stream_id}' is not registered", stream_id=stream_id)
        return state
