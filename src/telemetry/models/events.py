"""
Typed bus events.

Each topic has exactly one event model with a fixed payload shape. `kind`
is the discriminator; `topic` is the bus topic the event is published on
(per-stream and per-view events embed their id in the topic).

Usage:
    def on_event(event: BusEvent) -> None:
        match event:
            case StreamUpdateEvent(stream_id=sid, payload=p): ...
            case AlertCreatedEvent(alert=a): ...
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter

from src.core.config.constants import (
    EVENT_ALERT_CREATED,
    EVENT_CRITICAL_FAILURE,
    EVENT_HEALTH_CHECK_COMPLETE,
    EVENT_SYSTEM_INITIALIZED,
    EVENT_TAB_SWITCHED,
    EVENT_TELEMETRY_UPDATE,
    STREAM_ERROR_TOPIC,
    STREAM_UPDATE_TOPIC,
    VIEW_ALERT_TOPIC,
    VIEW_DATA_TOPIC,
    VIEW_HEALTH_TOPIC,
)
from src.core.events.models import BusEventModel, HandlerErrorEvent, RateLimitWaitEvent, utc_now
from src.telemetry.models.health import Alert, SystemHealthSnapshot
from src.telemetry.models.payload import TelemetryPayload


class StreamUpdateEvent(BusEventModel):
    """Published on "<stream_id>-update"."""

    kind: Literal["stream-update"] = "stream-update"
    stream_id: str
    payload: TelemetryPayload

    @property
    def topic(self) -> str:
        return STREAM_UPDATE_TOPIC.format(stream_id=self.stream_id)


class StreamErrorEvent(BusEventModel):
    """Published on "<stream_id>-error"."""

    kind: Literal["stream-error"] = "stream-error"
    stream_id: str
    error: str
    retryable: bool
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def topic(self) -> str:
        return STREAM_ERROR_TOPIC.format(stream_id=self.stream_id)


class TelemetryUpdateEvent(BusEventModel):
    kind: Literal["telemetry-update"] = EVENT_TELEMETRY_UPDATE
    stream_id: str
    payload: TelemetryPayload
    response_time_ms: float | None = None


class AlertCreatedEvent(BusEventModel):
    kind: Literal["alert-created"] = EVENT_ALERT_CREATED
    alert: Alert


class HealthCheckCompleteEvent(BusEventModel):
    kind: Literal["health-check-complete"] = EVENT_HEALTH_CHECK_COMPLETE
    snapshot: SystemHealthSnapshot


class CriticalFailureEvent(BusEventModel):
    """Distinguished event: consumers should present a blocking error state."""

    kind: Literal["critical-failure"] = EVENT_CRITICAL_FAILURE
    error: str
    timestamp: datetime = Field(default_factory=utc_now)
    snapshot: SystemHealthSnapshot


class TabSwitchedEvent(BusEventModel):
    kind: Literal["tab-switched"] = EVENT_TAB_SWITCHED
    view_id: str
    timestamp: datetime = Field(default_factory=utc_now)


class SystemInitializedEvent(BusEventModel):
    kind: Literal["system-initialized"] = EVENT_SYSTEM_INITIALIZED
    streams: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utc_now)


class ViewDataEvent(BusEventModel):
    """Stream data re-published for the active view on "data-for-tab:<view>"."""

    kind: Literal["view-data"] = "view-data"
    view_id: str
    stream_id: str
    payload: TelemetryPayload

    @property
    def topic(self) -> str:
        return VIEW_DATA_TOPIC.format(view_id=self.view_id)


class ViewAlertEvent(BusEventModel):
    kind: Literal["view-alert"] = "view-alert"
    view_id: str
    alert: Alert

    @property
    def topic(self) -> str:
        return VIEW_ALERT_TOPIC.format(view_id=self.view_id)


class ViewHealthEvent(BusEventModel):
    kind: Literal["view-health"] = "view-health"
    view_id: str
    snapshot: SystemHealthSnapshot

    @property
    def topic(self) -> str:
        return VIEW_HEALTH_TOPIC.format(view_id=self.view_id)


BusEvent = Annotated[
    Union[
        StreamUpdateEvent,
        StreamErrorEvent,
        TelemetryUpdateEvent,
        AlertCreatedEvent,
        HealthCheckCompleteEvent,
        CriticalFailureEvent,
        TabSwitchedEvent,
        SystemInitializedEvent,
        ViewDataEvent,
        ViewAlertEvent,
        ViewHealthEvent,
        HandlerErrorEvent,
        RateLimitWaitEvent,
    ],
    Field(discriminator="kind"),
]

_bus_event_adapter: TypeAdapter[Any] = TypeAdapter(BusEvent)


def parse_bus_event(data: dict[str, Any]) -> BusEventModel:
    """Rebuild a typed event from its JSON form (as sent on the SSE feed)."""
    return _bus_event_adapter.validate_python(data)
