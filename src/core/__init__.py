"""
Core Module

Foundational components: configuration, logging, exceptions, events and
resilience primitives.
"""

from .exceptions import (
    ApiClientError,
    ConfigurationError,
    StreamError,
    TelemetryBaseError,
    UnknownViewError,
)
from .logging import (
    clear_stream_id,
    get_logger,
    get_stream_id,
    log_stage,
    set_stream_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_stream_id",
    "get_stream_id",
    "clear_stream_id",
    "log_stage",
    "TelemetryBaseError",
    "ConfigurationError",
    "ApiClientError",
    "StreamError",
    "UnknownViewError",
]
