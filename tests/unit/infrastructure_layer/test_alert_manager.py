"""
Unit Tests for AlertManager

Tests alert creation, bus publication, the bounded history and
auto-acknowledgement rules.
"""

import asyncio

import pytest

from src.core.config.constants import EVENT_ALERT_CREATED, AlertLevel
from src.core.events.event_bus import EventBus
from src.infrastructure.monitoring.alert_manager import AlertManager
from src.telemetry.models.events import AlertCreatedEvent
from tests.test_fixtures import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def alerts(bus, clock):
    return AlertManager(bus, history_size=3, auto_acknowledge_seconds=300, clock=clock)


@pytest.mark.unit
class TestAlertCreation:
    def test_alert_fields(self, alerts):
        alert = alerts.create_alert(AlertLevel.WARNING, "Stale data detected in apod", source="apod")

        assert alert.id.startswith("alert-")
        assert alert.level == AlertLevel.WARNING
        assert alert.source == "apod"
        assert alert.acknowledged is False
        assert alert.auto_resolve is True

    def test_ids_are_unique(self, alerts):
        ids = {alerts.create_alert(AlertLevel.INFO, f"note {i}").id for i in range(3)}
        assert len(ids) == 3

    def test_publishes_alert_created(self, alerts, bus):
        received = []
        bus.subscribe(EVENT_ALERT_CREATED, received.append)

        alert = alerts.create_alert(AlertLevel.CRITICAL, "Stream iss-position fetch failed: boom")

        assert len(received) == 1
        assert isinstance(received[0], AlertCreatedEvent)
        assert received[0].alert.id == alert.id

    def test_emergency_does_not_auto_resolve(self, alerts):
        alert = alerts.create_alert(AlertLevel.EMERGENCY, "System initialization failed: no upstream")
        assert alert.auto_resolve is False

    def test_history_is_bounded_oldest_first(self, alerts):
        created = [alerts.create_alert(AlertLevel.INFO, f"alert {i}") for i in range(5)]

        retained = alerts.alerts()
        assert [a.id for a in retained] == [a.id for a in created[-3:]]


@pytest.mark.unit
class TestAcknowledgement:
    def test_manual_acknowledge(self, alerts):
        alert = alerts.create_alert(AlertLevel.EMERGENCY, "down")

        assert alerts.acknowledge(alert.id) is True
        assert alerts.get_alert(alert.id).acknowledged is True
        assert alerts.acknowledge(alert.id) is False

    def test_acknowledge_unknown_id(self, alerts):
        assert alerts.acknowledge("alert-0-missing") is False

    def test_expired_warning_is_acknowledged(self, alerts, clock):
        warning = alerts.create_alert(AlertLevel.WARNING, "slow")
        emergency = alerts.create_alert(AlertLevel.EMERGENCY, "down")

        clock.advance(299)
        assert alerts.acknowledge_expired() == 0

        clock.advance(1)
        assert alerts.acknowledge_expired() == 1
        assert alerts.get_alert(warning.id).acknowledged is True
        assert alerts.get_alert(emergency.id).acknowledged is False

    def test_active_alerts_excludes_expired(self, alerts, clock):
        alerts.create_alert(AlertLevel.INFO, "note")
        emergency = alerts.create_alert(AlertLevel.EMERGENCY, "down")
        clock.advance(600)

        assert [a.id for a in alerts.active_alerts()] == [emergency.id]

    @pytest.mark.asyncio
    async def test_timer_acknowledges_on_running_loop(self, bus, clock):
        alerts = AlertManager(bus, auto_acknowledge_seconds=0.01, clock=clock)
        alert = alerts.create_alert(AlertLevel.WARNING, "slow")

        await asyncio.sleep(0.05)
        assert alerts.get_alert(alert.id).acknowledged is True

    @pytest.mark.asyncio
    async def test_shutdown_cancels_timers(self, bus, clock):
        alerts = AlertManager(bus, auto_acknowledge_seconds=0.01, clock=clock)
        alert = alerts.create_alert(AlertLevel.WARNING, "slow")

        alerts.shutdown()
        await asyncio.sleep(0.05)
        assert alerts.get_alert(alert.id).acknowledged is False

    def test_stats(self, alerts):
        alerts.create_alert(AlertLevel.WARNING, "a")
        alerts.create_alert(AlertLevel.WARNING, "b")

        stats = alerts.stats()
        assert stats["retained"] == 2
        assert stats["created_by_level"]["warning"] == 2
