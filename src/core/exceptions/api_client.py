"""
Upstream API Client Exceptions

All exceptions raised by the upstream API clients (N2YO, NASA).

Author: System Architect
Date: 2025-12-08
"""

from typing import Any

from src.core.exceptions.base import TelemetryBaseError


class ApiClientError(TelemetryBaseError):
    """Base exception for upstream API errors."""
    pass


class ApiTimeoutError(ApiClientError):
    """
    Raised when an upstream request exceeds its timeout.

    Common causes:
    - Slow upstream response
    - Network latency
    """
    pass


class ApiConnectionError(ApiClientError):
    """
    Raised when the upstream API cannot be reached.

    Common causes:
    - DNS failure
    - Connection refused or reset
    """
    pass


class ApiResponseError(ApiClientError):
    """Raised when the upstream API answers with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        stream_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, stream_id=stream_id, details=details)
        self.status_code = status_code
        if status_code is not None:
            self.details.setdefault("status_code", status_code)


class ApiRateLimitError(ApiResponseError):
    """
    Raised when the upstream API rejects a request with 429.

    The local token bucket should prevent this; seeing it means the quota
    is shared with another consumer or the configured rate is too high.
    """

    def __init__(
        self,
        message: str,
        retry_after: float | None = None,
        stream_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, status_code=429, stream_id=stream_id, details=details)
        self.retry_after = retry_after
        if retry_after is not None:
            self.details.setdefault("retry_after", retry_after)


class MalformedResponseError(ApiClientError):
    """Raised when an upstream response body cannot be decoded."""
    pass


class UnknownEndpointError(ApiClientError):
    """Raised when a client is asked for a stream kind it does not serve."""
    pass
