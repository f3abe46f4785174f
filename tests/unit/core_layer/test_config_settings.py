"""
Unit Tests for Configuration Settings

Tests the settings loading, validation, section views and default values.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.core.config.settings import Settings, get_settings, reload_settings


@pytest.mark.unit
class TestSettingsDefaults:
    """Test default values of each section."""

    def test_orchestrator_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.orchestrator.HEALTH_CHECK_INTERVAL_SECONDS == 30.0
        assert settings.orchestrator.DATA_QUALITY_INTERVAL_SECONDS == 60.0
        assert settings.orchestrator.STREAM_RESTART_DELAY_SECONDS == 30.0
        assert settings.orchestrator.REQUIRE_UPSTREAM_ON_START is True

    def test_circuit_breaker_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.circuit_breaker.CB_RECOVERY_TIMEOUT_MS == 60_000
        assert settings.circuit_breaker.CB_FAILURE_RATE_THRESHOLD is None

    def test_cache_ttl_default_is_five_minutes(self):
        settings = Settings(_env_file=None)
        assert settings.cache.CACHE_TTL_MS == 300_000

    def test_upstream_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.upstream.NASA_API_KEY == "DEMO_KEY"
        assert settings.upstream.N2YO_REQUESTS_PER_DAY == 1000
        assert settings.upstream.NASA_REQUESTS_PER_HOUR == 1000
        assert settings.upstream.RATE_LIMIT_BURST_MULTIPLIER == 10.0

    def test_alert_and_bus_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.alerts.ALERT_HISTORY_SIZE == 50
        assert settings.alerts.ALERT_AUTO_ACK_SECONDS == 300.0
        assert settings.event_bus.EVENT_BUS_MAX_HANDLERS == 100

    def test_app_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.app.API_BASE_PATH == "/api/v1"
        assert settings.app.DEFAULT_VIEW == "dashboard"
        assert settings.app.ENVIRONMENT in ["development", "staging", "production"]


@pytest.mark.unit
class TestSettingsSections:
    """Section views mirror the flat fields."""

    def test_section_reflects_override(self):
        settings = Settings(_env_file=None, FETCH_TIMEOUT_SECONDS=2.5, CACHE_TTL_MS=120_000)

        assert settings.orchestrator.FETCH_TIMEOUT_SECONDS == 2.5
        assert settings.cache.CACHE_TTL_MS == 120_000

    def test_environment_variable_override(self):
        with patch.dict(os.environ, {"NASA_API_KEY": "abc123", "LOG_LEVEL": "debug"}):
            settings = Settings(_env_file=None)

        assert settings.upstream.NASA_API_KEY == "abc123"
        assert settings.logging.LOG_LEVEL == "DEBUG"


@pytest.mark.unit
class TestSettingsValidation:
    """Test validators."""

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="VERBOSE")

    def test_invalid_log_format_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_FORMAT="xml")

    def test_cache_ttl_must_cover_breaker_open_period(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None, CACHE_TTL_MS=10_000, CB_RECOVERY_TIMEOUT_MS=60_000)

        assert "CACHE_TTL_MS" in str(exc_info.value)

    def test_cache_ttl_equal_to_recovery_accepted(self):
        settings = Settings(_env_file=None, CACHE_TTL_MS=60_000, CB_RECOVERY_TIMEOUT_MS=60_000)
        assert settings.cache.CACHE_TTL_MS == 60_000

    @pytest.mark.parametrize("penalty", [0.0, 1.0, 1.5, -0.1])
    def test_confidence_penalty_must_be_strict_fraction(self, penalty):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, CACHE_CONFIDENCE_PENALTY=penalty)

    @pytest.mark.parametrize("rate", [0.0, 1.2])
    def test_failure_rate_threshold_bounds(self, rate):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, CB_FAILURE_RATE_THRESHOLD=rate)

    def test_restart_attempts_at_least_one(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, STREAM_RESTART_ATTEMPTS=0)


@pytest.mark.unit
class TestSettingsSingleton:
    def test_get_settings_returns_same_instance(self):
        assert get_settings() is get_settings()

    def test_reload_settings_replaces_instance(self):
        before = get_settings()
        after = reload_settings()

        assert after is not before
        assert get_settings() is after
