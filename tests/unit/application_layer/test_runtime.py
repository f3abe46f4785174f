"""
Unit Tests for Runtime Wiring
"""

import pytest

from src.application.runtime import build_runtime, default_clients, default_rate_limiters
from src.core.config.constants import SystemStatus
from src.core.events.event_bus import EventBus
from src.infrastructure.api_clients import N2YOClient, NASAClient
from src.telemetry.streams.catalog import default_streams, default_views
from tests.test_fixtures import FakeApiClient, StreamTestFactory


@pytest.mark.unit
class TestCatalog:
    def test_stream_ids_unique(self):
        ids = [stream.id for stream in default_streams()]
        assert len(ids) == len(set(ids))

    def test_critical_stream_present(self):
        streams = {stream.id: stream for stream in default_streams()}
        assert streams["iss-position"].priority == "critical"

    def test_default_view_registered(self, test_settings):
        assert test_settings.DEFAULT_VIEW in [view.id for view in default_views()]


@pytest.mark.unit
class TestDefaults:
    def test_default_clients(self, test_settings):
        clients = default_clients(test_settings)

        assert isinstance(clients["n2yo"], N2YOClient)
        assert isinstance(clients["nasa"], NASAClient)
        assert clients["nasa"].api_key == "DEMO_KEY"

    def test_default_rate_limiters_follow_quotas(self, test_settings):
        limiters = default_rate_limiters(test_settings, EventBus())

        assert limiters["n2yo"].rate == pytest.approx(8_640_000 / 86_400)
        assert limiters["nasa"].rate == pytest.approx(360_000 / 3600)


@pytest.mark.unit
class TestBuildRuntime:
    def test_registers_catalog(self, test_settings):
        runtime = build_runtime(
            test_settings,
            clients={"n2yo": FakeApiClient(name="n2yo"), "nasa": FakeApiClient(name="nasa")},
        )

        assert runtime.orchestrator.stream_ids() == [stream.id for stream in default_streams()]
        assert set(runtime.rate_limiters) == {"n2yo", "nasa"}
        assert runtime.health_checker.api_names == ["n2yo", "nasa"]

    @pytest.mark.asyncio
    async def test_start_activates_view_then_stop_closes_clients(self, test_settings):
        client = FakeApiClient(name="fake")
        runtime = build_runtime(
            test_settings,
            clients={"fake": client},
            streams=[StreamTestFactory.definition(stream_id="iss-position", poll_interval_ms=3_600_000)],
        )

        assert await runtime.start(view_id="dashboard") is True
        assert runtime.tab_manager.active_view == "dashboard"
        assert runtime.orchestrator.active_stream_ids() == ["iss-position"]

        await runtime.stop()
        assert client.closed is True
        assert runtime.orchestrator.active_stream_ids() == []

    @pytest.mark.asyncio
    async def test_failed_start_skips_view_activation(self, test_settings):
        runtime = build_runtime(
            test_settings,
            clients={"fake": FakeApiClient(name="fake", online=False)},
            streams=[StreamTestFactory.definition(stream_id="iss-position")],
        )

        assert await runtime.start(view_id="dashboard") is False
        assert runtime.tab_manager.active_view is None
        await runtime.stop()

    @pytest.mark.asyncio
    async def test_retry_after_failed_start_activates_requested_view(self, test_settings):
        client = FakeApiClient(name="fake", online=False)
        runtime = build_runtime(
            test_settings,
            clients={"fake": client},
            streams=[StreamTestFactory.definition(stream_id="iss-position", poll_interval_ms=3_600_000)],
        )
        assert await runtime.start(view_id="mission-control-center") is False

        client.online = True
        assert await runtime.retry_initialization() is True

        assert runtime.orchestrator.status == SystemStatus.OPERATIONAL
        assert runtime.tab_manager.active_view == "mission-control-center"
        assert runtime.orchestrator.active_stream_ids() == ["iss-position"]
        await runtime.stop()

    @pytest.mark.asyncio
    async def test_retry_falls_back_to_default_view(self, test_settings):
        client = FakeApiClient(name="fake", online=False)
        runtime = build_runtime(
            test_settings,
            clients={"fake": client},
            streams=[StreamTestFactory.definition(stream_id="iss-position", poll_interval_ms=3_600_000)],
        )
        await runtime.start()

        client.online = True
        await runtime.retry_initialization()

        assert runtime.tab_manager.active_view == test_settings.DEFAULT_VIEW
        await runtime.stop()

    @pytest.mark.asyncio
    async def test_retry_keeps_view_activated_meanwhile(self, test_settings):
        client = FakeApiClient(name="fake", online=False)
        runtime = build_runtime(
            test_settings,
            clients={"fake": client},
            streams=[StreamTestFactory.definition(stream_id="iss-position", poll_interval_ms=3_600_000)],
        )
        await runtime.start(view_id="dashboard")
        await runtime.tab_manager.switch_to_tab("mission-control")

        client.online = True
        await runtime.retry_initialization()

        assert runtime.tab_manager.active_view == "mission-control"
        await runtime.stop()
