#!/usr/bin/env python3
"""
Response Cache

Last-known-good payload per stream, time-boxed by a TTL.

STAGE-4: Response cache

- One entry per stream id; a new put() supersedes the old entry
- get() is a miss once the entry is past its expiry; expired entries are
  left in place (overwritten by the next put) rather than purged
- Discounting cached data is the orchestrator's job, the cache stores the
  payload exactly as fetched

All access happens on the event loop thread, so no lock is needed.

Author: System Architect
Date: 2025-12-13
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.core.config.constants import Stage
from src.core.logging.logger import get_logger, log_stage

logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    payload: Any
    stored_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def age_ms(self, now: float) -> float:
        return max(0.0, (now - self.stored_at) * 1000)


class ResponseCache:
    """
    In-memory TTL cache keyed by stream id.

    Args:
        ttl_ms: Entry lifetime in milliseconds
        clock: Monotonic clock in seconds (injectable for tests)
    """

    def __init__(self, ttl_ms: int = 300_000, clock: Callable[[], float] = time.monotonic):
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be > 0")
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    def put(self, stream_id: str, payload: Any) -> CacheEntry:
        now = self._clock()
        entry = CacheEntry(payload=payload, stored_at=now, expires_at=now + self.ttl_ms / 1000)
        self._entries[stream_id] = entry
        log_stage(logger, Stage.CACHE, "Payload cached", level="debug", stream_id=stream_id)
        return entry

    def get(self, stream_id: str) -> Any | None:
        """Return the cached payload, or None when missing or expired."""
        entry = self.get_entry(stream_id)
        return entry.payload if entry is not None else None

    def get_entry(self, stream_id: str) -> CacheEntry | None:
        entry = self._entries.get(stream_id)
        if entry is None or entry.is_expired(self._clock()):
            self._misses += 1
            return None
        self._hits += 1
        return entry

    def age_ms(self, stream_id: str) -> float | None:
        """Age of the stored entry (expired or not), None if never stored."""
        entry = self._entries.get(stream_id)
        if entry is None:
            return None
        return entry.age_ms(self._clock())

    def has_fresh(self, stream_id: str) -> bool:
        entry = self._entries.get(stream_id)
        return entry is not None and not entry.is_expired(self._clock())

    def delete(self, stream_id: str) -> bool:
        return self._entries.pop(stream_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict[str, Any]:
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "ttl_ms": self.ttl_ms,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total, 4) if total else 0.0,
        }
