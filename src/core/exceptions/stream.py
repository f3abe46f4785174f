"""
Stream Orchestration Exceptions

All exceptions related to stream registration, start-up, orchestrator
initialization and view management.

Author: System Architect
Date: 2025-12-08
"""

from src.core.exceptions.base import TelemetryBaseError


class StreamError(TelemetryBaseError):
    """Base exception for stream orchestration errors."""
    pass


class StreamNotFoundError(StreamError):
    """Raised when an operation names a stream that is not registered."""
    pass


class StreamRegistrationError(StreamError):
    """
    Raised when a stream definition cannot be registered.

    Common causes:
    - Duplicate stream id
    """
    pass


class StreamStartupError(StreamError):
    """
    Raised when a stream cannot be started.

    Common causes:
    - No API client configured for the stream's source
    - No rate limiter configured for the stream's source

    The orchestrator catches this, logs it and schedules a delayed restart.
    """
    pass


class OrchestratorInitializationError(StreamError):
    """
    Raised when the orchestrator fails to initialize.

    This is a critical error: it is escalated as an emergency alert and a
    critical-failure event.
    """
    pass


class UnknownViewError(TelemetryBaseError):
    """Raised when switching to a view that is not registered."""

    def __init__(self, view_id: str):
        super().__init__(f"Unknown view: {view_id}", details={"view_id": view_id})
        self.view_id = view_id
