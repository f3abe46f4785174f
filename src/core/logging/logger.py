#!/usr/bin/env python3
"""
Structured Logging Module using structlog

This module provides structured logging with:
- Stream ID correlation for per-stream tracing
- Stage identifiers for the polling lifecycle
- JSON formatting for log aggregation
- Automatic redaction of upstream API keys
- Context processors for automatic field injection

Logging is the diagnostic channel only. User-visible problems are raised as
alerts on the event bus, never inferred from log output.

Author: System Architect
Date: 2025-12-05
"""

import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

import structlog
from structlog.types import EventDict, WrappedLogger

from src.core.config.settings import get_settings

# Stream currently being processed by this task
stream_id_ctx: ContextVar[str | None] = ContextVar("stream_id", default=None)

_KEY_PATTERNS = (
    re.compile(r"(apiKey=)[^&\s]+"),
    re.compile(r"(api_key=)[^&\s]+"),
)


def add_stream_id(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add stream ID to log event from context variable.

    STAGE-L.1: Stream ID injection
    """
    stream_id = stream_id_ctx.get()
    if stream_id and "stream_id" not in event_dict:
        event_dict["stream_id"] = stream_id
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add ISO timestamp to log event.

    STAGE-L.2: Timestamp injection
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return event_dict


def _redact(value: str) -> str:
    for pattern in _KEY_PATTERNS:
        value = pattern.sub(r"\1[REDACTED]", value)
    return value


def redact_secrets(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Redact upstream API keys from log messages and string fields.

    STAGE-L.3: Secret redaction

    Patterns redacted:
    - apiKey=... (N2YO query parameter) -> apiKey=[REDACTED]
    - api_key=... (NASA query parameter) -> api_key=[REDACTED]
    """
    for key, value in list(event_dict.items()):
        if isinstance(value, str):
            event_dict[key] = _redact(value)
    return event_dict


def add_log_level_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add log level name to event dict.

    STAGE-L.4: Log level injection
    """
    if "level" in event_dict:
        event_dict["level"] = event_dict["level"].upper()
    return event_dict


def setup_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Setup structured logging with structlog.

    STAGE-L: Logging initialization

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
    """
    settings = get_settings()

    log_level = log_level or settings.logging.LOG_LEVEL
    log_format = log_format or settings.logging.LOG_FORMAT

    logging.basicConfig(
        format="%(message)s", stream=sys.stdout, level=getattr(logging, log_level.upper())
    )

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,  # Merge context variables
            add_stream_id,  # Add stream ID from context
            add_timestamp,  # Add ISO timestamp
            structlog.stdlib.add_log_level,  # Add log level
            add_log_level_name,  # Convert log level to uppercase
            structlog.stdlib.PositionalArgumentsFormatter(),  # Format positional args
            structlog.processors.StackInfoRenderer(),  # Render stack info
            structlog.processors.format_exc_info,  # Format exception info
            redact_secrets,  # Redact API keys
            renderer,  # JSON or console renderer
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        BoundLogger: Structured logger instance

    Usage:
        logger = get_logger(__name__)
        logger.info("message", key="value", stage=Stage.FETCH)
    """
    return structlog.get_logger(name)


def set_stream_id(stream_id: str) -> None:
    """
    Set stream ID in context for the current polling task.

    Args:
        stream_id: Stream ID to set
    """
    stream_id_ctx.set(stream_id)


def get_stream_id() -> str | None:
    """Get current stream ID from context."""
    return stream_id_ctx.get()


def clear_stream_id() -> None:
    """Clear stream ID from context."""
    stream_id_ctx.set(None)


def log_stage(
    logger: structlog.stdlib.BoundLogger, stage: str, message: str, level: str = "info", **kwargs
) -> None:
    """
    Log a message with stage information.

    Args:
        logger: Logger instance
        stage: Stage identifier (a Stage member or plain string)
        message: Log message
        level: Log level (debug, info, warning, error, critical)
        **kwargs: Additional fields to log

    Usage:
        log_stage(logger, Stage.CACHE, "Cached payload served", stream_id="iss-position")
    """
    stage_value = stage.value if hasattr(stage, "value") else stage
    log_func = getattr(logger, level.lower())
    log_func(message, stage=stage_value, **kwargs)
