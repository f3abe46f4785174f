"""
System Constants and Enumerations

This module defines system-wide constants and enumerations used across
the telemetry orchestration service.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic numbers and event topic names
- Type-safe enums for state management
- Easy to update and track changes

Author: System Architect
Date: 2025-12-05
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Orchestration stages for structured logging.

    Format: {SEQUENCE}_{DESCRIPTIVE_NAME}
    - SEQUENCE: Numeric order for the polling lifecycle, alphabetic prefix
      for cross-cutting concerns
    - DESCRIPTIVE_NAME: Clear, uppercase description with underscores

    Examples:
        stage="3.0_UPSTREAM_FETCH"
        stage="CB_CIRCUIT_BREAKER"
    """

    # Stream lifecycle (Sequential 0.0 - 5.0)
    INITIALIZATION = "0.0_INITIALIZATION"
    REGISTRATION = "1.0_STREAM_REGISTRATION"
    SCHEDULING = "1.1_STREAM_SCHEDULING"
    RATE_LIMITING = "2.0_RATE_LIMITING"
    FETCH = "3.0_UPSTREAM_FETCH"
    CACHE = "4.0_RESPONSE_CACHE"
    PUBLISH = "5.0_EVENT_PUBLISH"
    SHUTDOWN = "6.0_SHUTDOWN"

    # Cross-Cutting Concerns (Alphabetic Prefixes)
    CIRCUIT_BREAKER = "CB_CIRCUIT_BREAKER"
    RETRY = "R_RETRY_LOGIC"
    HEALTH = "H_HEALTH_CHECK"
    QUALITY = "Q_DATA_QUALITY"
    ALERTING = "A_ALERTING"
    EVENT_BUS = "E_EVENT_BUS"
    TABS = "T_TAB_MANAGEMENT"


# ============================================================================
# Circuit Breaker States
# ============================================================================


class CircuitState(str, Enum):
    """
    Circuit breaker states.

    CLOSED: Normal operation, live fetches allowed
    OPEN: Failing fast, cached data only
    HALF_OPEN: Testing recovery with a single trial fetch
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half-open"


# ============================================================================
# Stream / Data Classification
# ============================================================================


class StreamPriority(str, Enum):
    """Stream priority; critical streams escalate failures as critical alerts."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DataQuality(str, Enum):
    """
    Quality grade attached to every telemetry payload.

    GOOD: Live, well-formed data
    POOR: Served from cache, or live but incomplete
    BAD: Stale cached data
    """

    GOOD = "good"
    POOR = "poor"
    BAD = "bad"


class AlertLevel(str, Enum):
    """Alert severity levels, lowest first."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"
    EMERGENCY = "emergency"


class SystemStatus(str, Enum):
    """
    Aggregate system status.

    OPERATIONAL: All upstream APIs reachable
    DEGRADED: Some upstream APIs reachable
    CRITICAL: No upstream API reachable, or initialization failed
    OFFLINE: Nothing configured or not started
    """

    OPERATIONAL = "operational"
    DEGRADED = "degraded"
    CRITICAL = "critical"
    OFFLINE = "offline"


class UpstreamApi(str, Enum):
    """Supported upstream APIs."""

    N2YO = "n2yo"
    NASA = "nasa"


# ============================================================================
# Event Topics
# ============================================================================

EVENT_TELEMETRY_UPDATE = "telemetry-update"
EVENT_ALERT_CREATED = "alert-created"
EVENT_HEALTH_CHECK_COMPLETE = "health-check-complete"
EVENT_CRITICAL_FAILURE = "critical-failure"
EVENT_TAB_SWITCHED = "tab-switched"
EVENT_SYSTEM_INITIALIZED = "system-initialized"
EVENT_RATE_LIMIT_WAIT = "rate-limit-wait"
EVENT_ERROR = "error"  # Reserved: handler failures are re-published here

# Per-stream and per-view topic templates
STREAM_UPDATE_TOPIC = "{stream_id}-update"
STREAM_ERROR_TOPIC = "{stream_id}-error"
VIEW_DATA_TOPIC = "data-for-tab:{view_id}"
VIEW_ALERT_TOPIC = "alert:{view_id}"
VIEW_HEALTH_TOPIC = "health-update:{view_id}"

# ============================================================================
# Defaults
# ============================================================================

DEFAULT_MAX_HANDLERS = 100  # Handlers per topic before a leak warning
DEFAULT_BURST_MULTIPLIER = 10.0  # Token bucket capacity = rate * multiplier
DEFAULT_BASE_CONFIDENCE = 0.95  # Confidence of a good live payload
ERROR_RATE_WINDOW = 20  # Recent fetch outcomes used for the error rate
THROUGHPUT_WINDOW_SECONDS = 60.0  # Sliding window for stream throughput

# Mission control observer (Houston) used for position lookups
OBSERVER_LATITUDE = 29.5583
OBSERVER_LONGITUDE = -95.0853
OBSERVER_ALTITUDE = 0

ISS_NORAD_ID = 25544

# ============================================================================
# HTTP / SSE
# ============================================================================

SSE_EVENT_HEARTBEAT = "heartbeat"
SSE_HEARTBEAT_INTERVAL = 15  # seconds
SSE_QUEUE_MAX_SIZE = 256  # Events buffered per SSE subscriber
