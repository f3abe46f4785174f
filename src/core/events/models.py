"""
Event Bus Base Models

Every event published through the bus is a pydantic model carrying a `kind`
discriminator and exposing the topic it is published on. Domain events are
declared in src/telemetry/models/events.py; the two below belong to the core
because the bus and the rate limiter publish them themselves.
"""

import json
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.core.config.constants import EVENT_ERROR, EVENT_RATE_LIMIT_WAIT


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BusEventModel(BaseModel):
    """Base class for typed bus events."""

    model_config = ConfigDict(frozen=True)

    kind: str

    @property
    def topic(self) -> str:
        return self.kind

    def format_sse(self, event_id: str | None = None) -> str:
        """Format as SSE protocol string."""
        lines = []
        if event_id:
            lines.append(f"id: {event_id}")
        lines.append(f"event: {self.topic}")
        lines.append(f"data: {json.dumps(self.model_dump(mode='json'))}")
        return "\n".join(lines) + "\n\n"


class HandlerErrorEvent(BusEventModel):
    """Published on the reserved "error" topic when a handler raises."""

    kind: Literal["error"] = EVENT_ERROR
    source_event: str
    error: str
    error_type: str
    handler: str
    timestamp: datetime = Field(default_factory=utc_now)


class RateLimitWaitEvent(BusEventModel):
    """Diagnostic: a caller is waiting for a rate limiter token."""

    kind: Literal["rate-limit-wait"] = EVENT_RATE_LIMIT_WAIT
    limiter: str
    wait_seconds: float
    available_tokens: float
    timestamp: datetime = Field(default_factory=utc_now)


def describe_payload(payload: Any) -> str:
    """Short description of a payload for log lines."""
    if isinstance(payload, BusEventModel):
        return payload.kind
    return type(payload).__name__
