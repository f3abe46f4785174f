"""
Event Stream Bridge
===================

Turns bus events into an SSE feed for one HTTP client.

    EventBus.publish ──> handler (sync) ──> asyncio.Queue ──> async generator ──> SSE
                         put_nowait           bounded          format_sse()

Bus handlers are synchronous and must never block, so the handler only does
put_nowait. When the client reads slower than events arrive, the oldest
queued event is dropped to make room. A heartbeat event is sent when
nothing arrived for `heartbeat_interval` seconds so proxies keep the
connection open.
"""

import asyncio
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

from src.core.config.constants import (
    EVENT_ALERT_CREATED,
    EVENT_CRITICAL_FAILURE,
    EVENT_HEALTH_CHECK_COMPLETE,
    EVENT_SYSTEM_INITIALIZED,
    EVENT_TAB_SWITCHED,
    EVENT_TELEMETRY_UPDATE,
    SSE_EVENT_HEARTBEAT,
    SSE_HEARTBEAT_INTERVAL,
    SSE_QUEUE_MAX_SIZE,
    VIEW_ALERT_TOPIC,
    VIEW_DATA_TOPIC,
    VIEW_HEALTH_TOPIC,
)
from src.core.events.event_bus import EventBus, Subscription
from src.core.events.models import BusEventModel
from src.core.logging.logger import get_logger

logger = get_logger(__name__)

GLOBAL_TOPICS = (
    EVENT_TELEMETRY_UPDATE,
    EVENT_ALERT_CREATED,
    EVENT_HEALTH_CHECK_COMPLETE,
    EVENT_CRITICAL_FAILURE,
    EVENT_TAB_SWITCHED,
    EVENT_SYSTEM_INITIALIZED,
)


def feed_topics(view_id: str | None = None) -> list[str]:
    """Global topics, or the filtered per-view topics when a view is given."""
    if view_id is None:
        return list(GLOBAL_TOPICS)
    return [
        VIEW_DATA_TOPIC.format(view_id=view_id),
        VIEW_ALERT_TOPIC.format(view_id=view_id),
        VIEW_HEALTH_TOPIC.format(view_id=view_id),
        EVENT_CRITICAL_FAILURE,
        EVENT_TAB_SWITCHED,
    ]


class EventStreamBridge:
    """
    One SSE subscriber.

    Usage:
        bridge = EventStreamBridge(event_bus, feed_topics())
        return StreamingResponse(bridge.stream(request.is_disconnected), media_type="text/event-stream")
    """

    def __init__(
        self,
        event_bus: EventBus,
        topics: list[str],
        max_queue_size: int = SSE_QUEUE_MAX_SIZE,
        heartbeat_interval: float = SSE_HEARTBEAT_INTERVAL,
    ):
        if max_queue_size < 1:
            raise ValueError("max_queue_size must be >= 1")
        self._event_bus = event_bus
        self.topics = list(topics)
        self.heartbeat_interval = heartbeat_interval
        self._queue: asyncio.Queue[BusEventModel] = asyncio.Queue(maxsize=max_queue_size)
        self._subscriptions: list[Subscription] = []
        self._sequence = 0
        self.dropped = 0

    @property
    def is_open(self) -> bool:
        return bool(self._subscriptions)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def open(self) -> None:
        if self._subscriptions:
            return
        self._subscriptions = [self._event_bus.subscribe(topic, self._enqueue) for topic in self.topics]
        logger.debug("SSE subscriber attached", topics=self.topics)

    def close(self) -> None:
        for subscription in self._subscriptions:
            self._event_bus.unsubscribe(subscription)
        self._subscriptions = []
        logger.debug("SSE subscriber detached", dropped=self.dropped)

    def __enter__(self) -> "EventStreamBridge":
        self.open()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _enqueue(self, event: Any) -> None:
        if not isinstance(event, BusEventModel):
            return
        if self._queue.full():
            self._queue.get_nowait()
            self.dropped += 1
        self._queue.put_nowait(event)

    async def next_message(self) -> str:
        """Next SSE frame: a queued event, or a heartbeat after the idle interval."""
        try:
            event = await asyncio.wait_for(self._queue.get(), timeout=self.heartbeat_interval)
        except asyncio.TimeoutError:
            return f"event: {SSE_EVENT_HEARTBEAT}\ndata: {{}}\n\n"
        self._sequence += 1
        return event.format_sse(event_id=str(self._sequence))

    async def stream(
        self, is_disconnected: Callable[[], Awaitable[bool]] | None = None
    ) -> AsyncGenerator[str, None]:
        with self:
            while True:
                if is_disconnected is not None and await is_disconnected():
                    break
                yield await self.next_message()
