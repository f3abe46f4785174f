#!/usr/bin/env python3
"""
Alert Manager

Creates user-visible alerts, keeps the most recent ones in a ring buffer and
publishes each one on the event bus ("alert-created").

STAGE-A: Alerting

- Alert ids: alert-<epoch ms>-<random suffix>
- Every level except emergency is auto-resolving: it is acknowledged after
  the configured timeout. Emergency alerts stay until acknowledged by hand.
- Auto-acknowledgement is scheduled with loop.call_later when a loop is
  running; acknowledge_expired() applies the same rule lazily otherwise.

Author: Senior Solution Architect
Date: 2025-12-05
"""

import asyncio
import secrets
import time
from collections import deque
from collections.abc import Callable
from typing import Any

from src.core.config.constants import AlertLevel, Stage
from src.core.events.event_bus import EventBus
from src.core.logging.logger import get_logger, log_stage
from src.telemetry.models.events import AlertCreatedEvent
from src.telemetry.models.health import Alert

logger = get_logger(__name__)

_LOG_LEVELS = {
    AlertLevel.INFO: "info",
    AlertLevel.WARNING: "warning",
    AlertLevel.CRITICAL: "error",
    AlertLevel.EMERGENCY: "critical",
}


class AlertManager:
    """
    Alert ring buffer plus bus publication.

    Usage:
        alerts = AlertManager(event_bus)
        alerts.create_alert(AlertLevel.WARNING, "Stale data detected in iss-position", source="iss-position")
    """

    def __init__(
        self,
        event_bus: EventBus,
        history_size: int = 50,
        auto_acknowledge_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._event_bus = event_bus
        self.history_size = history_size
        self.auto_acknowledge_seconds = auto_acknowledge_seconds
        self._clock = clock
        self._alerts: deque[Alert] = deque(maxlen=history_size)
        self._created_at: dict[str, float] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._counts: dict[str, int] = {level.value: 0 for level in AlertLevel}

    def create_alert(
        self,
        level: AlertLevel,
        message: str,
        source: str = "system",
        auto_resolve: bool | None = None,
    ) -> Alert:
        if auto_resolve is None:
            auto_resolve = level != AlertLevel.EMERGENCY

        alert = Alert(
            id=f"alert-{int(time.time() * 1000)}-{secrets.token_hex(4)}",
            level=level,
            message=message,
            source=source,
            auto_resolve=auto_resolve,
        )

        if len(self._alerts) == self._alerts.maxlen:
            evicted = self._alerts[0]
            self._forget(evicted.id)
        self._alerts.append(alert)
        self._created_at[alert.id] = self._clock()
        self._counts[level.value] += 1

        log_stage(
            logger,
            Stage.ALERTING,
            message,
            level=_LOG_LEVELS[level],
            alert_id=alert.id,
            alert_level=level.value,
            source=source,
        )

        if auto_resolve:
            self._schedule_auto_acknowledge(alert.id)

        self._event_bus.emit(AlertCreatedEvent(alert=alert))
        return alert

    def acknowledge(self, alert_id: str) -> bool:
        """Mark an alert acknowledged. Returns False if unknown or already acknowledged."""
        for index, alert in enumerate(self._alerts):
            if alert.id == alert_id:
                if alert.acknowledged:
                    return False
                self._alerts[index] = alert.model_copy(update={"acknowledged": True})
                self._forget(alert_id)
                log_stage(logger, Stage.ALERTING, "Alert acknowledged", level="debug", alert_id=alert_id)
                return True
        return False

    def acknowledge_expired(self) -> int:
        """Acknowledge every auto-resolving alert older than the timeout."""
        now = self._clock()
        expired = [
            alert.id
            for alert in self._alerts
            if alert.auto_resolve
            and not alert.acknowledged
            and now - self._created_at.get(alert.id, now) >= self.auto_acknowledge_seconds
        ]
        return sum(1 for alert_id in expired if self.acknowledge(alert_id))

    def get_alert(self, alert_id: str) -> Alert | None:
        return next((alert for alert in self._alerts if alert.id == alert_id), None)

    def alerts(self) -> list[Alert]:
        """All retained alerts, oldest first."""
        return list(self._alerts)

    def active_alerts(self) -> list[Alert]:
        self.acknowledge_expired()
        return [alert for alert in self._alerts if not alert.acknowledged]

    def stats(self) -> dict[str, Any]:
        return {
            "retained": len(self._alerts),
            "active": sum(1 for alert in self._alerts if not alert.acknowledged),
            "created_by_level": dict(self._counts),
        }

    def shutdown(self) -> None:
        """Cancel pending auto-acknowledge timers."""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()

    def _schedule_auto_acknowledge(self, alert_id: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timers[alert_id] = loop.call_later(
            self.auto_acknowledge_seconds, self.acknowledge, alert_id
        )

    def _forget(self, alert_id: str) -> None:
        handle = self._timers.pop(alert_id, None)
        if handle is not None:
            handle.cancel()
        self._created_at.pop(alert_id, None)
