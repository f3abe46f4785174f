"""
Configuration Module

Centralized, type-safe configuration for the telemetry orchestration service.

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: Enums, event topic names and defaults

Usage:
------
```python
from src.core.config import get_settings
from src.core.config.constants import CircuitState, StreamPriority

settings = get_settings()
ttl = settings.cache.CACHE_TTL_MS
```

Environment Variables:
---------------------
```bash
N2YO_API_KEY=...
NASA_API_KEY=DEMO_KEY
CACHE_TTL_MS=300000
CB_RECOVERY_TIMEOUT_MS=60000
LOG_LEVEL=INFO
LOG_FORMAT=json
```

Validation:
----------
Settings are validated on first access; `CACHE_TTL_MS` smaller than
`CB_RECOVERY_TIMEOUT_MS` is rejected.

Author: System Architect
Date: 2025-12-05
"""

from src.core.config.constants import (
    EVENT_ALERT_CREATED,
    EVENT_CRITICAL_FAILURE,
    EVENT_ERROR,
    EVENT_HEALTH_CHECK_COMPLETE,
    EVENT_RATE_LIMIT_WAIT,
    EVENT_SYSTEM_INITIALIZED,
    EVENT_TAB_SWITCHED,
    EVENT_TELEMETRY_UPDATE,
    AlertLevel,
    CircuitState,
    DataQuality,
    Stage,
    StreamPriority,
    SystemStatus,
    UpstreamApi,
)
from src.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "reload_settings",
    # Enums
    "Stage",
    "CircuitState",
    "StreamPriority",
    "DataQuality",
    "AlertLevel",
    "SystemStatus",
    "UpstreamApi",
    # Topics
    "EVENT_TELEMETRY_UPDATE",
    "EVENT_ALERT_CREATED",
    "EVENT_HEALTH_CHECK_COMPLETE",
    "EVENT_CRITICAL_FAILURE",
    "EVENT_TAB_SWITCHED",
    "EVENT_SYSTEM_INITIALIZED",
    "EVENT_RATE_LIMIT_WAIT",
    "EVENT_ERROR",
]
