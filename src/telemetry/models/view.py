"""UI view configuration consumed by the tab manager."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.core.config.constants import StreamPriority


class ViewConfig(BaseModel):
    """
    One UI view (tab).

    `data_requirements` may name registered streams or other data the view
    shows (e.g. "system-health"); only registered streams are started.
    `update_frequency_ms` is a rendering hint for the UI and does not drive
    any polling.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    priority: StreamPriority = StreamPriority.MEDIUM
    update_frequency_ms: int = Field(default=5000, ge=0)
    data_requirements: tuple[str, ...] = ()
    alert_enabled: bool = True
    health_monitoring: bool = True


class ViewStatus(BaseModel):
    """Freshness of the data shown in a view."""

    view_id: str
    state: str = "idle"  # idle | live | stale | error
    last_update: datetime | None = None
    streams: list[str] = Field(default_factory=list)
