"""
API Models Package
==================

Pydantic response models of the HTTP routes.

ORGANIZATION:
-------------
- telemetry.py: health, stream, tab and system response models
"""

from src.application.api.models.telemetry import (
    AlertAcknowledgeResponse,
    LivenessResponse,
    RetryResponse,
    StopStreamsResponse,
    StreamListResponse,
    TabActivationResponse,
    TabListResponse,
)

__all__ = [
    "AlertAcknowledgeResponse",
    "LivenessResponse",
    "RetryResponse",
    "StopStreamsResponse",
    "StreamListResponse",
    "TabActivationResponse",
    "TabListResponse",
]
