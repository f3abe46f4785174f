"""
Tab Manager Service

Demand-driven activation layer over the StreamOrchestrator. Each UI view
(tab) names the data it needs; switching to a view starts the streams it
requires, replays their cached payloads so the view is not blank until the
next poll, and stops the streams this manager started for views no longer
shown.

PROPAGATION FILTERS:
--------------------
The manager re-publishes a filtered subset of bus traffic for the active
view only:

    telemetry-update        -> data-for-tab:<view>    (streams of the view)
    alert-created           -> alert:<view>           (view.alert_enabled;
                                                       info alerts raised by
                                                       other streams dropped)
    health-check-complete   -> health-update:<view>   (view.health_monitoring)

It owns no caching or breaker logic.

Author: System Architect
Date: 2025-12-08
"""

from dataclasses import dataclass
from datetime import datetime

from src.core.config.constants import (
    EVENT_ALERT_CREATED,
    EVENT_HEALTH_CHECK_COMPLETE,
    EVENT_TELEMETRY_UPDATE,
    STREAM_ERROR_TOPIC,
    AlertLevel,
    Stage,
)
from src.core.events.event_bus import EventBus, Subscription
from src.core.events.models import utc_now
from src.core.exceptions import UnknownViewError
from src.core.logging.logger import get_logger, log_stage
from src.telemetry.models.events import (
    AlertCreatedEvent,
    HealthCheckCompleteEvent,
    StreamErrorEvent,
    TabSwitchedEvent,
    TelemetryUpdateEvent,
    ViewAlertEvent,
    ViewDataEvent,
    ViewHealthEvent,
)
from src.telemetry.models.view import ViewConfig, ViewStatus
from src.telemetry.services.stream_orchestrator import StreamOrchestrator

logger = get_logger(__name__)


@dataclass
class _ViewTracking:
    state: str = "idle"
    last_update: datetime | None = None


class TabManager:
    """
    Maps views to streams and drives stream activation on tab switches.

    Usage:
        tabs = TabManager(orchestrator, event_bus, views=default_views())
        await tabs.switch_to_tab("satellite-tracking")
        status = tabs.get_view_status("satellite-tracking")
        await tabs.cleanup()
    """

    def __init__(
        self,
        orchestrator: StreamOrchestrator,
        event_bus: EventBus,
        views: list[ViewConfig] | None = None,
        stop_background_streams: bool = True,
    ):
        self._orchestrator = orchestrator
        self._bus = event_bus
        self.stop_background_streams = stop_background_streams

        self._views: dict[str, ViewConfig] = {}
        self._active_view: str | None = None
        self._started: set[str] = set()
        self._tracking: dict[str, _ViewTracking] = {}
        self._subscriptions: list[Subscription] = []
        self._error_subscriptions: list[Subscription] = []

        for view in views or []:
            self.register_view(view)
        self._attach()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def register_view(self, view: ViewConfig) -> None:
        self._views[view.id] = view
        log_stage(
            logger,
            Stage.TABS,
            "View registered",
            level="debug",
            view_id=view.id,
            requirements=list(view.data_requirements),
        )

    @property
    def views(self) -> list[ViewConfig]:
        return list(self._views.values())

    @property
    def active_view(self) -> str | None:
        return self._active_view

    @property
    def started_streams(self) -> set[str]:
        return set(self._started)

    def get_view(self, view_id: str) -> ViewConfig:
        view = self._views.get(view_id)
        if view is None:
            raise UnknownViewError(view_id)
        return view

    def required_streams(self, view_id: str) -> list[str]:
        """
        Requirements of a view that are registered streams.

        Anything else in data_requirements (e.g. "system-health") is served
        by the health snapshot rather than a polled stream.
        """
        view = self.get_view(view_id)
        return [req for req in view.data_requirements if self._orchestrator.has_stream(req)]

    # ------------------------------------------------------------------
    # Switching
    # ------------------------------------------------------------------

    async def switch_to_tab(self, view_id: str) -> ViewStatus:
        """
        Make `view_id` the active view.

        STAGE-T.1: Start required streams, replay cache, stop unneeded ones

        Raises:
            UnknownViewError: view_id is not registered
        """
        view = self.get_view(view_id)
        required = self.required_streams(view_id)
        previous = self._active_view

        if not self._subscriptions:
            self._attach()

        self._active_view = view.id
        self._tracking.setdefault(view.id, _ViewTracking())
        self._watch_stream_errors(required)
        self._bus.emit(TabSwitchedEvent(view_id=view.id))

        for stream_id in required:
            if not self._orchestrator.is_stream_active(stream_id):
                # a failed start schedules its own restart; remember it either way so it is stopped later
                await self._orchestrator.start_stream(stream_id)
                self._started.add(stream_id)

        replayed = [stream_id for stream_id in required if self._orchestrator.republish_cached(stream_id)]

        stopped = []
        if self.stop_background_streams:
            for stream_id in sorted(self._started - set(required)):
                await self._orchestrator.stop_stream(stream_id)
                self._started.discard(stream_id)
                stopped.append(stream_id)

        log_stage(
            logger,
            Stage.TABS,
            "Switched view",
            previous_view=previous,
            view_id=view.id,
            required=required,
            replayed=replayed,
            stopped=stopped,
        )
        return self.get_view_status(view.id)

    def get_view_status(self, view_id: str) -> ViewStatus:
        self.get_view(view_id)
        tracking = self._tracking.get(view_id) or _ViewTracking()
        return ViewStatus(
            view_id=view_id,
            state=tracking.state,
            last_update=tracking.last_update,
            streams=self.required_streams(view_id),
        )

    async def cleanup(self) -> None:
        """Stop every stream started here and drop all bus subscriptions."""
        for stream_id in sorted(self._started):
            await self._orchestrator.stop_stream(stream_id)
        self._started.clear()

        for subscription in [*self._subscriptions, *self._error_subscriptions]:
            self._bus.unsubscribe(subscription)
        self._subscriptions.clear()
        self._error_subscriptions.clear()
        self._tracking.clear()
        self._active_view = None

        log_stage(logger, Stage.TABS, "Tab manager cleaned up")

    # ------------------------------------------------------------------
    # Propagation
    # ------------------------------------------------------------------

    def _attach(self) -> None:
        self._subscriptions = [
            self._bus.subscribe(EVENT_TELEMETRY_UPDATE, self._on_telemetry_update),
            self._bus.subscribe(EVENT_ALERT_CREATED, self._on_alert_created),
            self._bus.subscribe(EVENT_HEALTH_CHECK_COMPLETE, self._on_health_check),
        ]

    def _watch_stream_errors(self, stream_ids: list[str]) -> None:
        for subscription in self._error_subscriptions:
            self._bus.unsubscribe(subscription)
        self._error_subscriptions = [
            self._bus.subscribe(STREAM_ERROR_TOPIC.format(stream_id=stream_id), self._on_stream_error)
            for stream_id in stream_ids
        ]

    def _active(self) -> ViewConfig | None:
        if self._active_view is None:
            return None
        return self._views.get(self._active_view)

    def _on_telemetry_update(self, event: TelemetryUpdateEvent) -> None:
        view = self._active()
        if view is None or event.stream_id not in view.data_requirements:
            return

        tracking = self._tracking.setdefault(view.id, _ViewTracking())
        tracking.state = "stale" if event.payload.served_from_cache else "live"
        tracking.last_update = utc_now()
        self._bus.emit(ViewDataEvent(view_id=view.id, stream_id=event.stream_id, payload=event.payload))

    def _on_stream_error(self, event: StreamErrorEvent) -> None:
        view = self._active()
        if view is None or event.stream_id not in view.data_requirements:
            return
        self._tracking.setdefault(view.id, _ViewTracking()).state = "error"

    def _on_alert_created(self, event: AlertCreatedEvent) -> None:
        view = self._active()
        if view is None or not view.alert_enabled:
            return

        alert = event.alert
        if (
            alert.level == AlertLevel.INFO
            and self._orchestrator.has_stream(alert.source)
            and alert.source not in view.data_requirements
        ):
            log_stage(
                logger,
                Stage.TABS,
                "Suppressed background info alert",
                level="debug",
                view_id=view.id,
                alert_id=alert.id,
                source=alert.source,
            )
            return
        self._bus.emit(ViewAlertEvent(view_id=view.id, alert=alert))

    def _on_health_check(self, event: HealthCheckCompleteEvent) -> None:
        view = self._active()
        if view is None or not view.health_monitoring:
            return
        self._bus.emit(ViewHealthEvent(view_id=view.id, snapshot=event.snapshot))
