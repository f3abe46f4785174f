"""
Cache Module

Provides the in-memory last-known-good response cache.
"""

from .response_cache import CacheEntry, ResponseCache

__all__ = [
    "CacheEntry",
    "ResponseCache",
]
