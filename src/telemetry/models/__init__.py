from .events import (
    AlertCreatedEvent,
    BusEvent,
    CriticalFailureEvent,
    HealthCheckCompleteEvent,
    StreamErrorEvent,
    StreamUpdateEvent,
    SystemInitializedEvent,
    TabSwitchedEvent,
    TelemetryUpdateEvent,
    ViewAlertEvent,
    ViewDataEvent,
    ViewHealthEvent,
    parse_bus_event,
)
from .health import Alert, ApiStatus, StreamSummary, SystemHealthSnapshot
from .payload import TelemetryPayload
from .stream import AlertThresholds, StreamDefinition, StreamRuntimeState
from .view import ViewConfig, ViewStatus

__all__ = [
    "AlertThresholds",
    "StreamDefinition",
    "StreamRuntimeState",
    "TelemetryPayload",
    "Alert",
    "ApiStatus",
    "StreamSummary",
    "SystemHealthSnapshot",
    "BusEvent",
    "StreamUpdateEvent",
    "StreamErrorEvent",
    "TelemetryUpdateEvent",
    "AlertCreatedEvent",
    "HealthCheckCompleteEvent",
    "CriticalFailureEvent",
    "TabSwitchedEvent",
    "SystemInitializedEvent",
    "ViewDataEvent",
    "ViewAlertEvent",
    "ViewHealthEvent",
    "parse_bus_event",
    "ViewConfig",
    "ViewStatus",
]
