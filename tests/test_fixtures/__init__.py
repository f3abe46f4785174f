"""
Test Fixtures Package

Shared test utilities and helpers for consistent testing across all modules.
"""

from .clock import FakeClock
from .client_factory import ClientTestFactory, FakeApiClient
from .stream_factory import StreamTestFactory

__all__ = ["FakeClock", "FakeApiClient", "ClientTestFactory", "StreamTestFactory"]
