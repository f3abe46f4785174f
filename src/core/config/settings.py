#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
telemetry orchestration service. All tunables (loop cadences, breaker and
cache timings, upstream quotas, alert retention) are declared here.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Grouped section views (settings.orchestrator, settings.upstream, ...)
- Easy testing with override mechanisms

Author: System Architect
Date: 2025-12-05
"""

from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OrchestratorSettings(BaseSettings):
    """
    Stream orchestration loop configuration.

    STAGE-0.1: Orchestrator cadences and recovery timings
    """

    HEALTH_CHECK_INTERVAL_SECONDS: float = Field(default=30.0, description="Upstream probe cadence")
    DATA_QUALITY_INTERVAL_SECONDS: float = Field(default=60.0, description="Staleness sweep cadence")
    FETCH_TIMEOUT_SECONDS: float = Field(default=10.0, description="Hard timeout per upstream fetch")
    STREAM_RESTART_DELAY_SECONDS: float = Field(default=30.0, description="Delay before restarting a failed stream")
    STREAM_RESTART_ATTEMPTS: int = Field(default=1, description="Delayed restart attempts after a start-up failure")
    CACHE_CONFIDENCE_PENALTY: float = Field(default=0.7, description="Confidence factor for cached payloads")
    STALE_CACHE_CONFIDENCE_PENALTY: float = Field(default=0.5, description="Extra factor once cached data is stale")
    REQUIRE_UPSTREAM_ON_START: bool = Field(default=True, description="Fail initialization when no upstream is reachable")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class CircuitBreakerSettings(BaseSettings):
    """
    Circuit breaker configuration for per-stream fault isolation.

    STAGE-CB: Circuit breaker thresholds

    The failure threshold is per stream (defaults to the stream's max_retries);
    the timings below are shared.
    """

    CB_RECOVERY_TIMEOUT_MS: int = Field(default=60_000, description="Open period before a half-open trial")
    CB_MONITORING_WINDOW_MS: int = Field(default=300_000, description="Window for rate-based tripping")
    CB_FAILURE_RATE_THRESHOLD: float | None = Field(
        default=None, description="Failure rate that also opens the breaker (disabled when unset)"
    )
    CB_MINIMUM_CALLS: int = Field(default=10, description="Outcomes required before rate-based tripping")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class CacheSettings(BaseSettings):
    """
    Response cache configuration.

    STAGE-2: Cache TTL configuration
    """

    CACHE_TTL_MS: int = Field(default=300_000, description="Last-good payload lifetime (5 minutes)")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class AlertSettings(BaseSettings):
    """Alert retention and auto-acknowledgement."""

    ALERT_HISTORY_SIZE: int = Field(default=50, description="Alerts kept in the ring buffer")
    ALERT_AUTO_ACK_SECONDS: float = Field(default=300.0, description="Auto-acknowledge delay for non-emergency alerts")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class EventBusSettings(BaseSettings):
    """Event bus limits."""

    EVENT_BUS_MAX_HANDLERS: int = Field(default=100, description="Handlers per topic before a leak warning")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class UpstreamSettings(BaseSettings):
    """
    Upstream API configuration.

    STAGE-0.2: Upstream provider configuration

    Supports: N2YO (satellite tracking), NASA (planetary data)
    """

    N2YO_API_KEY: str | None = Field(default=None, description="N2YO API key")
    N2YO_BASE_URL: str = Field(default="https://api.n2yo.com/rest/v1/satellite", description="N2YO base URL")
    N2YO_REQUESTS_PER_DAY: int = Field(default=1000, description="N2YO daily quota")

    NASA_API_KEY: str = Field(default="DEMO_KEY", description="NASA API key")
    NASA_BASE_URL: str = Field(default="https://api.nasa.gov", description="NASA base URL")
    NASA_REQUESTS_PER_HOUR: int = Field(default=1000, description="NASA hourly quota")

    UPSTREAM_TIMEOUT_SECONDS: float = Field(default=10.0, description="HTTP client timeout")
    RATE_LIMIT_BURST_MULTIPLIER: float = Field(default=10.0, description="Bucket capacity as a multiple of the rate")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration

    Architectural Decision: structlog for production-grade logging
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ApplicationSettings(BaseSettings):
    """
    General application settings.

    STAGE-0: Application initialization
    """

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Mission Telemetry Orchestrator", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")
    API_BASE_PATH: str = Field(default="/api/v1", description="Route prefix")
    DEFAULT_VIEW: str = Field(default="dashboard", description="View activated on startup")
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    STAGE-0: Centralized configuration initialization

    Usage:
        from src.core.config.settings import get_settings

        settings = get_settings()
        interval = settings.orchestrator.HEALTH_CHECK_INTERVAL_SECONDS
        nasa_key = settings.upstream.NASA_API_KEY
    """

    # Orchestrator settings
    HEALTH_CHECK_INTERVAL_SECONDS: float = Field(default=30.0, description="Upstream probe cadence")
    DATA_QUALITY_INTERVAL_SECONDS: float = Field(default=60.0, description="Staleness sweep cadence")
    FETCH_TIMEOUT_SECONDS: float = Field(default=10.0, description="Hard timeout per upstream fetch")
    STREAM_RESTART_DELAY_SECONDS: float = Field(default=30.0, description="Delay before restarting a failed stream")
    STREAM_RESTART_ATTEMPTS: int = Field(default=1, ge=1, description="Delayed restart attempts")
    CACHE_CONFIDENCE_PENALTY: float = Field(default=0.7, description="Confidence factor for cached payloads")
    STALE_CACHE_CONFIDENCE_PENALTY: float = Field(default=0.5, description="Extra factor once cached data is stale")
    REQUIRE_UPSTREAM_ON_START: bool = Field(default=True, description="Fail initialization when no upstream is reachable")

    # Circuit Breaker settings
    CB_RECOVERY_TIMEOUT_MS: int = Field(default=60_000, ge=1, description="Open period before a half-open trial")
    CB_MONITORING_WINDOW_MS: int = Field(default=300_000, ge=1, description="Window for rate-based tripping")
    CB_FAILURE_RATE_THRESHOLD: float | None = Field(default=None, description="Failure rate that also opens the breaker")
    CB_MINIMUM_CALLS: int = Field(default=10, ge=1, description="Outcomes required before rate-based tripping")

    # Cache settings
    CACHE_TTL_MS: int = Field(default=300_000, ge=1, description="Last-good payload lifetime")

    # Alert settings
    ALERT_HISTORY_SIZE: int = Field(default=50, ge=1, description="Alerts kept in the ring buffer")
    ALERT_AUTO_ACK_SECONDS: float = Field(default=300.0, description="Auto-acknowledge delay")

    # Event bus settings
    EVENT_BUS_MAX_HANDLERS: int = Field(default=100, ge=1, description="Handlers per topic before a leak warning")

    # Upstream settings
    N2YO_API_KEY: str | None = Field(default=None, description="N2YO API key")
    N2YO_BASE_URL: str = Field(default="https://api.n2yo.com/rest/v1/satellite", description="N2YO base URL")
    N2YO_REQUESTS_PER_DAY: int = Field(default=1000, ge=1, description="N2YO daily quota")
    NASA_API_KEY: str = Field(default="DEMO_KEY", description="NASA API key")
    NASA_BASE_URL: str = Field(default="https://api.nasa.gov", description="NASA base URL")
    NASA_REQUESTS_PER_HOUR: int = Field(default=1000, ge=1, description="NASA hourly quota")
    UPSTREAM_TIMEOUT_SECONDS: float = Field(default=10.0, description="HTTP client timeout")
    RATE_LIMIT_BURST_MULTIPLIER: float = Field(default=10.0, description="Bucket capacity as a multiple of the rate")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    # Application settings
    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Mission Telemetry Orchestrator", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")
    API_BASE_PATH: str = Field(default="/api/v1", description="Route prefix")
    DEFAULT_VIEW: str = Field(default="dashboard", description="View activated on startup")
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Allowed CORS origins")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("CACHE_CONFIDENCE_PENALTY", "STALE_CACHE_CONFIDENCE_PENALTY")
    @classmethod
    def validate_penalty(cls, v):
        """Cached data must always be reported below live confidence."""
        if not 0.0 < v < 1.0:
            raise ValueError("confidence penalties must be strictly between 0 and 1")
        return v

    @field_validator("CB_FAILURE_RATE_THRESHOLD")
    @classmethod
    def validate_failure_rate(cls, v):
        """Validate optional failure rate threshold."""
        if v is not None and not 0.0 < v <= 1.0:
            raise ValueError("CB_FAILURE_RATE_THRESHOLD must be in (0, 1]")
        return v

    @model_validator(mode="after")
    def validate_cache_covers_open_period(self):
        """A cached payload must outlive at least one breaker open period."""
        if self.CACHE_TTL_MS < self.CB_RECOVERY_TIMEOUT_MS:
            raise ValueError(
                f"CACHE_TTL_MS ({self.CACHE_TTL_MS}) must be >= "
                f"CB_RECOVERY_TIMEOUT_MS ({self.CB_RECOVERY_TIMEOUT_MS})"
            )
        return self

    @property
    def orchestrator(self) -> 'OrchestratorSettings':
        """Get orchestrator settings."""
        return OrchestratorSettings(
            HEALTH_CHECK_INTERVAL_SECONDS=self.HEALTH_CHECK_INTERVAL_SECONDS,
            DATA_QUALITY_INTERVAL_SECONDS=self.DATA_QUALITY_INTERVAL_SECONDS,
            FETCH_TIMEOUT_SECONDS=self.FETCH_TIMEOUT_SECONDS,
            STREAM_RESTART_DELAY_SECONDS=self.STREAM_RESTART_DELAY_SECONDS,
            STREAM_RESTART_ATTEMPTS=self.STREAM_RESTART_ATTEMPTS,
            CACHE_CONFIDENCE_PENALTY=self.CACHE_CONFIDENCE_PENALTY,
            STALE_CACHE_CONFIDENCE_PENALTY=self.STALE_CACHE_CONFIDENCE_PENALTY,
            REQUIRE_UPSTREAM_ON_START=self.REQUIRE_UPSTREAM_ON_START,
        )

    @property
    def circuit_breaker(self) -> 'CircuitBreakerSettings':
        """Get circuit breaker settings."""
        return CircuitBreakerSettings(
            CB_RECOVERY_TIMEOUT_MS=self.CB_RECOVERY_TIMEOUT_MS,
            CB_MONITORING_WINDOW_MS=self.CB_MONITORING_WINDOW_MS,
            CB_FAILURE_RATE_THRESHOLD=self.CB_FAILURE_RATE_THRESHOLD,
            CB_MINIMUM_CALLS=self.CB_MINIMUM_CALLS,
        )

    @property
    def cache(self) -> 'CacheSettings':
        """Get cache settings."""
        return CacheSettings(CACHE_TTL_MS=self.CACHE_TTL_MS)

    @property
    def alerts(self) -> 'AlertSettings':
        """Get alert settings."""
        return AlertSettings(
            ALERT_HISTORY_SIZE=self.ALERT_HISTORY_SIZE,
            ALERT_AUTO_ACK_SECONDS=self.ALERT_AUTO_ACK_SECONDS,
        )

    @property
    def event_bus(self) -> 'EventBusSettings':
        """Get event bus settings."""
        return EventBusSettings(EVENT_BUS_MAX_HANDLERS=self.EVENT_BUS_MAX_HANDLERS)

    @property
    def upstream(self) -> 'UpstreamSettings':
        """Get upstream API settings."""
        return UpstreamSettings(
            N2YO_API_KEY=self.N2YO_API_KEY,
            N2YO_BASE_URL=self.N2YO_BASE_URL,
            N2YO_REQUESTS_PER_DAY=self.N2YO_REQUESTS_PER_DAY,
            NASA_API_KEY=self.NASA_API_KEY,
            NASA_BASE_URL=self.NASA_BASE_URL,
            NASA_REQUESTS_PER_HOUR=self.NASA_REQUESTS_PER_HOUR,
            UPSTREAM_TIMEOUT_SECONDS=self.UPSTREAM_TIMEOUT_SECONDS,
            RATE_LIMIT_BURST_MULTIPLIER=self.RATE_LIMIT_BURST_MULTIPLIER,
        )

    @property
    def logging(self) -> 'LoggingSettings':
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    @property
    def app(self) -> 'ApplicationSettings':
        """Get application settings."""
        return ApplicationSettings(
            ENVIRONMENT=self.ENVIRONMENT,
            APP_NAME=self.APP_NAME,
            APP_VERSION=self.APP_VERSION,
            API_HOST=self.API_HOST,
            API_PORT=self.API_PORT,
            API_BASE_PATH=self.API_BASE_PATH,
            DEFAULT_VIEW=self.DEFAULT_VIEW,
            CORS_ORIGINS=self.CORS_ORIGINS,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Ignore extra environment variables
    )


# Global settings instance (lazy singleton)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance.

    STAGE-0.3: Settings initialization

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
