"""
Exception Module

Structured exception hierarchy for the telemetry orchestration service.
Exceptions are organized by theme.

Module Structure:
-----------------
- **base.py**: TelemetryBaseError base class + ConfigurationError
- **api_client.py**: Upstream API client exceptions
- **stream.py**: Stream orchestration and view exceptions

Usage:
------
```python
from src.core.exceptions import ApiTimeoutError, StreamStartupError
from src.core.exceptions.api_client import ApiRateLimitError
```

Author: System Architect
Date: 2025-12-08
"""

from src.core.exceptions.api_client import (
    ApiClientError,
    ApiConnectionError,
    ApiRateLimitError,
    ApiResponseError,
    ApiTimeoutError,
    MalformedResponseError,
    UnknownEndpointError,
)
from src.core.exceptions.base import ConfigurationError, TelemetryBaseError
from src.core.exceptions.stream import (
    OrchestratorInitializationError,
    StreamError,
    StreamNotFoundError,
    StreamRegistrationError,
    StreamStartupError,
    UnknownViewError,
)

__all__ = [
    # Base
    "TelemetryBaseError",
    "ConfigurationError",
    # API client
    "ApiClientError",
    "ApiTimeoutError",
    "ApiConnectionError",
    "ApiResponseError",
    "ApiRateLimitError",
    "MalformedResponseError",
    "UnknownEndpointError",
    # Stream
    "StreamError",
    "StreamNotFoundError",
    "StreamRegistrationError",
    "StreamStartupError",
    "OrchestratorInitializationError",
    "UnknownViewError",
]
