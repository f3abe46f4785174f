"""
Application Services Package
=============================

Services used by the API routes that are not part of the telemetry domain
itself.

- event_stream.py: bridges event bus topics onto Server-Sent Event frames
"""

from src.application.services.event_stream import GLOBAL_TOPICS, EventStreamBridge, feed_topics

__all__ = [
    "GLOBAL_TOPICS",
    "EventStreamBridge",
    "feed_topics",
]
