"""
In-Process Event Bus

Typed publish/subscribe used by every component to talk to consumers.

Delivery rules:
- Handlers run synchronously, in subscription order, over a snapshot of the
  handler list taken when publish() starts. Handlers unsubscribed while the
  dispatch is running are not called.
- A handler that raises does not stop the others. The failure is logged and
  re-published on the reserved "error" topic. A failure inside an "error"
  handler is only logged.
- "Once" subscriptions are removed before their handler runs, so a handler
  that publishes the same topic again is not re-entered.
- A handler that returns an awaitable has it scheduled as a task on the
  running loop; failures of that task follow the same error path.

Author: System Architect
Date: 2025-12-10
"""

import asyncio
import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import count
from typing import Any

from src.core.config.constants import DEFAULT_MAX_HANDLERS, EVENT_ERROR, Stage
from src.core.events.models import BusEventModel, HandlerErrorEvent, describe_payload
from src.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)

Handler = Callable[[Any], Any]

_subscription_ids = count(1)


@dataclass(eq=False)
class Subscription:
    """Handle returned by subscribe(); pass it to unsubscribe()."""

    event_name: str
    handler: Handler
    once: bool = False
    id: int = field(default_factory=lambda: next(_subscription_ids))
    active: bool = True


class EventBus:
    """
    Synchronous in-memory event bus.

    Usage:
        bus = EventBus()
        sub = bus.subscribe("telemetry-update", on_update)
        bus.emit(TelemetryUpdateEvent(...))
        bus.unsubscribe(sub)
    """

    def __init__(self, max_handlers: int = DEFAULT_MAX_HANDLERS):
        self.max_handlers = max_handlers
        self._handlers: dict[str, list[Subscription]] = {}
        self._pending: set[asyncio.Task] = set()
        self._published = 0
        self._handler_failures = 0

    def subscribe(self, event_name: str, handler: Handler, once: bool = False) -> Subscription:
        subscription = Subscription(event_name=event_name, handler=handler, once=once)
        handlers = self._handlers.setdefault(event_name, [])
        handlers.append(subscription)

        if len(handlers) > self.max_handlers:
            log_stage(
                logger,
                Stage.EVENT_BUS,
                "Possible handler leak: max handlers exceeded",
                level="warning",
                event_name=event_name,
                handler_count=len(handlers),
                max_handlers=self.max_handlers,
            )
        return subscription

    def once(self, event_name: str, handler: Handler) -> Subscription:
        return self.subscribe(event_name, handler, once=True)

    def unsubscribe(self, subscription: Subscription) -> bool:
        """Remove a subscription. Returns False if it was already removed."""
        subscription.active = False
        handlers = self._handlers.get(subscription.event_name)
        if not handlers or subscription not in handlers:
            return False

        handlers.remove(subscription)
        if not handlers:
            del self._handlers[subscription.event_name]
        return True

    def publish(self, event_name: str, payload: Any = None) -> bool:
        """
        Deliver payload to every handler of event_name.

        Returns:
            True if at least one handler was invoked
        """
        handlers = self._handlers.get(event_name)
        if not handlers:
            return False

        self._published += 1
        invoked = False
        for subscription in list(handlers):
            if not subscription.active:
                continue
            if subscription.once:
                self.unsubscribe(subscription)

            invoked = True
            try:
                result = subscription.handler(payload)
            except Exception as exc:
                self._handle_failure(event_name, payload, subscription, exc)
                continue

            if inspect.isawaitable(result):
                self._schedule(event_name, payload, subscription, result)

        return invoked

    def emit(self, event: BusEventModel) -> bool:
        """Publish a typed event on its own topic."""
        return self.publish(event.topic, event)

    def listener_count(self, event_name: str) -> int:
        return len(self._handlers.get(event_name, ()))

    def event_names(self) -> list[str]:
        return list(self._handlers)

    def clear(self, event_name: str | None = None) -> None:
        """Remove all handlers, or only those of one topic."""
        names = [event_name] if event_name is not None else list(self._handlers)
        for name in names:
            for subscription in self._handlers.pop(name, []):
                subscription.active = False

    def stats(self) -> dict[str, Any]:
        return {
            "topics": len(self._handlers),
            "handlers": sum(len(h) for h in self._handlers.values()),
            "published": self._published,
            "handler_failures": self._handler_failures,
            "pending_tasks": len(self._pending),
        }

    async def drain(self) -> None:
        """Wait for handler tasks scheduled so far."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _schedule(self, event_name: str, payload: Any, subscription: Subscription, awaitable) -> None:
        try:
            loop = asyncio.get_running_loop()
            task = asyncio.ensure_future(awaitable, loop=loop)
        except RuntimeError as exc:
            # No running loop: the coroutine can never run
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self._handle_failure(event_name, payload, subscription, exc)
            return

        self._pending.add(task)

        def _done(finished: asyncio.Task) -> None:
            self._pending.discard(finished)
            if finished.cancelled():
                return
            exc = finished.exception()
            if exc is not None:
                self._handle_failure(event_name, payload, subscription, exc)

        task.add_done_callback(_done)

    def _handle_failure(
        self, event_name: str, payload: Any, subscription: Subscription, exc: BaseException
    ) -> None:
        self._handler_failures += 1
        handler_name = getattr(subscription.handler, "__qualname__", repr(subscription.handler))
        log_stage(
            logger,
            Stage.EVENT_BUS,
            "Event handler failed",
            level="error",
            event_name=event_name,
            payload_type=describe_payload(payload),
            handler=handler_name,
            error=str(exc),
            error_type=type(exc).__name__,
        )

        if event_name == EVENT_ERROR:
            return

        self.emit(
            HandlerErrorEvent(
                source_event=event_name,
                error=str(exc),
                error_type=type(exc).__name__,
                handler=handler_name,
            )
        )
