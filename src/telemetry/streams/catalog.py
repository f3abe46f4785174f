"""
Default stream and view catalogs.

Streams:
    iss-position       N2YO, critical, every 2 s
    active-satellites  N2YO, high, every 5 s (ISS, Starlink, NOAA, AQUA)
    earth-imagery      NASA, medium, every 30 s
"""

from src.core.config.constants import ISS_NORAD_ID, StreamPriority, UpstreamApi
from src.telemetry.models.stream import AlertThresholds, StreamDefinition
from src.telemetry.models.view import ViewConfig

TRACKED_SATELLITES = (ISS_NORAD_ID, 43013, 40379, 25994)


def default_streams() -> list[StreamDefinition]:
    return [
        StreamDefinition(
            id="iss-position",
            source=UpstreamApi.N2YO.value,
            stream_kind="positions",
            params={"satellite_id": ISS_NORAD_ID, "seconds": 1},
            data_type="iss_position",
            priority=StreamPriority.CRITICAL,
            poll_interval_ms=2000,
            max_retries=5,
            health_check_interval_ms=10_000,
            alert_thresholds=AlertThresholds(
                max_response_time_ms=3000, max_error_rate=0.05, max_data_age_ms=10_000
            ),
            base_confidence=0.98,
        ),
        StreamDefinition(
            id="active-satellites",
            source=UpstreamApi.N2YO.value,
            stream_kind="multi_positions",
            params={"satellite_ids": list(TRACKED_SATELLITES), "lat": 41.702, "lng": -76.014, "seconds": 1},
            data_type="satellite_constellation",
            priority=StreamPriority.HIGH,
            poll_interval_ms=5000,
            max_retries=3,
            health_check_interval_ms=30_000,
            alert_thresholds=AlertThresholds(
                max_response_time_ms=5000, max_error_rate=0.1, max_data_age_ms=30_000
            ),
            base_confidence=0.92,
        ),
        StreamDefinition(
            id="earth-imagery",
            source=UpstreamApi.NASA.value,
            stream_kind="earth_imagery",
            params={"lat": 41.702, "lon": -76.014},
            data_type="earth_imagery",
            priority=StreamPriority.MEDIUM,
            poll_interval_ms=30_000,
            max_retries=2,
            health_check_interval_ms=60_000,
            alert_thresholds=AlertThresholds(
                max_response_time_ms=10_000, max_error_rate=0.15, max_data_age_ms=120_000
            ),
            base_confidence=0.95,
        ),
    ]


def default_views() -> list[ViewConfig]:
    return [
        ViewConfig(
            id="dashboard",
            name="Mission Overview",
            priority=StreamPriority.CRITICAL,
            update_frequency_ms=1000,
            data_requirements=("system-health", "iss-position", "active-satellites"),
        ),
        ViewConfig(
            id="mission-control",
            name="Mission Control",
            priority=StreamPriority.CRITICAL,
            update_frequency_ms=2000,
            data_requirements=("iss-position", "telemetry", "earth-imagery"),
        ),
        ViewConfig(
            id="satellite-tracking",
            name="Satellite Tracking",
            priority=StreamPriority.HIGH,
            update_frequency_ms=5000,
            data_requirements=("active-satellites", "orbital-data", "tracking-data"),
        ),
        ViewConfig(
            id="mission-simulation",
            name="Mission Simulation",
            priority=StreamPriority.MEDIUM,
            update_frequency_ms=10_000,
            data_requirements=("simulation-data", "scenario-updates"),
            alert_enabled=False,
            health_monitoring=False,
        ),
        ViewConfig(
            id="mission-control-center",
            name="Control Center (LIVE)",
            priority=StreamPriority.CRITICAL,
            update_frequency_ms=1000,
            data_requirements=("live-telemetry", "console-displays", "system-status", "iss-position"),
        ),
        ViewConfig(
            id="training-hub",
            name="Training Hub",
            priority=StreamPriority.MEDIUM,
            update_frequency_ms=30_000,
            data_requirements=("training-scenarios", "performance-metrics"),
            alert_enabled=False,
            health_monitoring=False,
        ),
        ViewConfig(
            id="resource-manager",
            name="Resource Manager",
            priority=StreamPriority.HIGH,
            update_frequency_ms=15_000,
            data_requirements=("resource-allocation", "bandwidth-usage", "power-consumption"),
        ),
        ViewConfig(
            id="team-coordination",
            name="Team Coordination",
            priority=StreamPriority.MEDIUM,
            update_frequency_ms=20_000,
            data_requirements=("team-status", "communication-logs"),
            alert_enabled=False,
            health_monitoring=False,
        ),
    ]
