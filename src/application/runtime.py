#!/usr/bin/env python3
"""
Telemetry Runtime (composition root)

Builds every collaborator once and wires them together:

    EventBus ─┬─> AlertManager
              ├─> TokenBucketRateLimiter (one per upstream API)
              ├─> StreamOrchestrator <── HealthChecker, ResponseCache,
              │                          RetryPolicy, API clients
              └─> TabManager ──────────> StreamOrchestrator

The FastAPI app keeps the runtime on app.state; nothing here is stored at
module level.

Author: Senior Solution Architect
Date: 2025-12-08
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from src.core.config.constants import Stage, UpstreamApi
from src.core.config.settings import Settings, get_settings
from src.core.events.event_bus import EventBus
from src.core.logging.logger import get_logger, log_stage
from src.core.resilience.rate_limiter import TokenBucketRateLimiter
from src.core.resilience.retry_policy import RetryPolicy
from src.infrastructure.api_clients import BaseApiClient, N2YOClient, NASAClient
from src.infrastructure.cache.response_cache import ResponseCache
from src.infrastructure.monitoring.alert_manager import AlertManager
from src.infrastructure.monitoring.health_checker import HealthChecker
from src.telemetry.models.stream import StreamDefinition
from src.telemetry.models.view import ViewConfig
from src.telemetry.services.stream_orchestrator import StreamOrchestrator
from src.telemetry.services.tab_manager import TabManager
from src.telemetry.streams.catalog import default_streams, default_views

logger = get_logger(__name__)


@dataclass
class TelemetryRuntime:
    settings: Settings
    event_bus: EventBus
    alert_manager: AlertManager
    health_checker: HealthChecker
    cache: ResponseCache
    retry_policy: RetryPolicy
    orchestrator: StreamOrchestrator
    tab_manager: TabManager
    clients: dict[str, BaseApiClient] = field(default_factory=dict)
    rate_limiters: dict[str, TokenBucketRateLimiter] = field(default_factory=dict)
    requested_view: str | None = None

    async def start(self, view_id: str | None = None) -> bool:
        """
        Initialize the orchestrator and activate the initial view.

        Streams are started by the tab manager, not by the orchestrator, so
        only the streams the initial view needs begin polling.
        """
        self.requested_view = view_id
        ok = await self.orchestrator.start(activate_streams=False)
        if ok and view_id:
            await self.tab_manager.switch_to_tab(view_id)
        return ok

    async def retry_initialization(self) -> bool:
        """
        Manual retry after a failed start.

        On success the view requested at start-up, or DEFAULT_VIEW, is
        activated unless a client has activated one in the meantime.
        """
        ok = await self.orchestrator.retry_initialization()
        if ok and self.tab_manager.active_view is None:
            await self.tab_manager.switch_to_tab(self.requested_view or self.settings.app.DEFAULT_VIEW)
        return ok

    async def stop(self) -> None:
        await self.tab_manager.cleanup()
        await self.orchestrator.shutdown()
        for client in self.clients.values():
            await client.close()
        await self.event_bus.drain()
        log_stage(logger, Stage.SHUTDOWN, "Telemetry runtime stopped")


def default_clients(settings: Settings) -> dict[str, BaseApiClient]:
    upstream = settings.upstream
    return {
        UpstreamApi.N2YO.value: N2YOClient(
            api_key=upstream.N2YO_API_KEY,
            base_url=upstream.N2YO_BASE_URL,
            timeout=upstream.UPSTREAM_TIMEOUT_SECONDS,
        ),
        UpstreamApi.NASA.value: NASAClient(
            api_key=upstream.NASA_API_KEY,
            base_url=upstream.NASA_BASE_URL,
            timeout=upstream.UPSTREAM_TIMEOUT_SECONDS,
        ),
    }


def default_rate_limiters(
    settings: Settings,
    event_bus: EventBus,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> dict[str, TokenBucketRateLimiter]:
    upstream = settings.upstream
    common = {
        "burst_multiplier": upstream.RATE_LIMIT_BURST_MULTIPLIER,
        "event_bus": event_bus,
        "clock": clock,
        "sleep": sleep,
    }
    return {
        UpstreamApi.N2YO.value: TokenBucketRateLimiter.per_day(
            UpstreamApi.N2YO.value, upstream.N2YO_REQUESTS_PER_DAY, **common
        ),
        UpstreamApi.NASA.value: TokenBucketRateLimiter.per_hour(
            UpstreamApi.NASA.value, upstream.NASA_REQUESTS_PER_HOUR, **common
        ),
    }


def build_runtime(
    settings: Settings | None = None,
    clients: dict[str, BaseApiClient] | None = None,
    streams: list[StreamDefinition] | None = None,
    views: list[ViewConfig] | None = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> TelemetryRuntime:
    """
    Build a fully wired runtime.

    Args:
        settings: Defaults to get_settings()
        clients: Upstream clients keyed by source name; defaults to N2YO + NASA
        streams: Stream catalog; defaults to default_streams()
        views: View catalog; defaults to default_views()
        clock: Monotonic clock shared by every time-based component
        sleep: Async sleep shared by the limiter, retry policy and loops
    """
    settings = settings or get_settings()
    clients = clients if clients is not None else default_clients(settings)

    event_bus = EventBus(max_handlers=settings.event_bus.EVENT_BUS_MAX_HANDLERS)
    alert_manager = AlertManager(
        event_bus,
        history_size=settings.alerts.ALERT_HISTORY_SIZE,
        auto_acknowledge_seconds=settings.alerts.ALERT_AUTO_ACK_SECONDS,
        clock=clock,
    )
    health_checker = HealthChecker(probe_timeout_seconds=settings.orchestrator.FETCH_TIMEOUT_SECONDS)
    cache = ResponseCache(ttl_ms=settings.cache.CACHE_TTL_MS, clock=clock)
    retry_policy = RetryPolicy.from_settings(settings, sleep=sleep)
    rate_limiters = default_rate_limiters(settings, event_bus, clock=clock, sleep=sleep)

    orchestrator = StreamOrchestrator(
        event_bus=event_bus,
        alert_manager=alert_manager,
        health_checker=health_checker,
        cache=cache,
        retry_policy=retry_policy,
        settings=settings,
        clock=clock,
        sleep=sleep,
    )
    for name, client in clients.items():
        orchestrator.register_api_client(name, client, rate_limiters.get(name))
    for definition in streams if streams is not None else default_streams():
        orchestrator.register_stream(definition)

    tab_manager = TabManager(
        orchestrator,
        event_bus,
        views=views if views is not None else default_views(),
    )

    log_stage(
        logger,
        Stage.INITIALIZATION,
        "Telemetry runtime built",
        apis=list(clients),
        streams=orchestrator.stream_ids(),
        views=[view.id for view in tab_manager.views],
    )
    return TelemetryRuntime(
        settings=settings,
        event_bus=event_bus,
        alert_manager=alert_manager,
        health_checker=health_checker,
        cache=cache,
        retry_policy=retry_policy,
        orchestrator=orchestrator,
        tab_manager=tab_manager,
        clients=clients,
        rate_limiters=rate_limiters,
    )
