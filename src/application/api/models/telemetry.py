"""
Telemetry API Response Models

Response bodies of the health, stream, tab and system routes. Domain models
(SystemHealthSnapshot, StreamSummary, ViewConfig, ViewStatus) are returned
as-is where they already have the right shape; the models here only wrap
them.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.config.constants import SystemStatus
from src.core.events.models import utc_now
from src.telemetry.models.health import StreamSummary
from src.telemetry.models.view import ViewConfig, ViewStatus


class LivenessResponse(BaseModel):
    status: str = Field(default="alive", description="Always 'alive' when the process answers")
    timestamp: datetime = Field(default_factory=utc_now)


class StreamListResponse(BaseModel):
    streams: list[StreamSummary] = Field(..., description="Runtime summary of every registered stream")
    active: list[str] = Field(..., description="Ids of streams currently polling")


class StopStreamsResponse(BaseModel):
    stopped: list[str] = Field(..., description="Streams that were active before the call")


class TabListResponse(BaseModel):
    views: list[ViewConfig]
    active_view: str | None = None


class TabActivationResponse(BaseModel):
    view: ViewConfig
    status: ViewStatus


class RetryResponse(BaseModel):
    initialized: bool = Field(..., description="Whether re-initialization succeeded")
    status: SystemStatus


class AlertAcknowledgeResponse(BaseModel):
    alert_id: str
    acknowledged: bool
