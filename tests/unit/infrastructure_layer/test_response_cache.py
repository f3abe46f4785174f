"""
Unit Tests for ResponseCache
"""

import pytest

from src.infrastructure.cache.response_cache import ResponseCache
from tests.test_fixtures import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResponseCache(ttl_ms=5000, clock=clock)


@pytest.mark.unit
class TestResponseCache:
    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValueError):
            ResponseCache(ttl_ms=0)

    def test_miss_when_never_stored(self, cache):
        assert cache.get("iss-position") is None
        assert cache.age_ms("iss-position") is None

    def test_put_then_get(self, cache):
        cache.put("iss-position", {"lat": 1})
        assert cache.get("iss-position") == {"lat": 1}

    def test_put_supersedes_previous_entry(self, cache, clock):
        cache.put("iss-position", {"lat": 1})
        clock.advance(2)
        cache.put("iss-position", {"lat": 2})

        assert cache.get("iss-position") == {"lat": 2}
        assert cache.age_ms("iss-position") == 0.0
        assert len(cache) == 1

    def test_expires_at_ttl(self, cache, clock):
        cache.put("apod", {"title": "Nebula"})

        clock.advance(4.999)
        assert cache.get("apod") == {"title": "Nebula"}

        clock.advance(0.001)
        assert cache.get("apod") is None
        assert cache.has_fresh("apod") is False

    def test_expired_entry_still_reports_age(self, cache, clock):
        cache.put("apod", {})
        clock.advance(10)

        assert cache.age_ms("apod") == pytest.approx(10_000)
        assert len(cache) == 1

    def test_delete_and_clear(self, cache):
        cache.put("a", 1)
        cache.put("b", 2)

        assert cache.delete("a") is True
        assert cache.delete("a") is False
        cache.clear()
        assert len(cache) == 0

    def test_stats_track_hits_and_misses(self, cache):
        cache.put("a", 1)
        cache.get("a")
        cache.get("b")

        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == 0.5
