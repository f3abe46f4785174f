"""Telemetry payload: the unit broadcast to consumers for every stream update."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.core.config.constants import DataQuality
from src.core.events.models import utc_now


class TelemetryPayload(BaseModel):
    """
    One stream update.

    Payloads are never mutated; a cached payload is re-issued through
    degraded(), which always lowers confidence and never reports `good`.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=utc_now)
    source: str
    data_type: str
    payload: Any = None
    quality: DataQuality = DataQuality.GOOD
    confidence: float = Field(..., ge=0.0, le=1.0)
    served_from_cache: bool = False

    def degraded(self, factor: float, quality: DataQuality) -> "TelemetryPayload":
        """Copy of this payload re-issued from cache at reduced confidence."""
        if not 0.0 < factor < 1.0:
            raise ValueError("degradation factor must be strictly between 0 and 1")
        if quality == DataQuality.GOOD:
            raise ValueError("cached payloads cannot be reported as good quality")
        return self.model_copy(
            update={
                "confidence": self.confidence * factor,
                "quality": quality,
                "served_from_cache": True,
            }
        )
