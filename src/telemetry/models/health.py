"""Alert and system health models."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.config.constants import AlertLevel, CircuitState, StreamPriority, SystemStatus
from src.core.events.models import utc_now


class Alert(BaseModel):
    """
    User-visible alert.

    Every level except emergency auto-resolves (is acknowledged after the
    configured timeout).
    """

    id: str
    level: AlertLevel
    message: str
    source: str = "system"
    timestamp: datetime = Field(default_factory=utc_now)
    acknowledged: bool = False
    auto_resolve: bool = True


class ApiStatus(BaseModel):
    """Reachability of one upstream API, as seen by the health checker."""

    name: str
    is_online: bool = False
    response_time_ms: float = 0.0
    error_rate: float = 0.0
    consecutive_failures: int = 0
    last_success_at: datetime | None = None
    last_checked_at: datetime | None = None
    total_checks: int = 0
    failed_checks: int = 0


class StreamSummary(BaseModel):
    id: str
    priority: StreamPriority
    is_active: bool
    data_age_ms: float
    throughput: float
    error_count: int
    error_rate: float
    circuit_state: CircuitState
    has_cached_data: bool
    health_check_interval_ms: int
    last_response_time_ms: float | None = None


class SystemHealthSnapshot(BaseModel):
    """Aggregate health, recomputed by the health-check loop and on demand."""

    status: SystemStatus
    uptime_seconds: float
    last_update: datetime = Field(default_factory=utc_now)
    api_statuses: dict[str, ApiStatus] = Field(default_factory=dict)
    alerts: list[Alert] = Field(default_factory=list)
    streams: dict[str, StreamSummary] = Field(default_factory=dict)
