"""Tests for the pre/post drop correlation cache."""

from lineage_bridge.events.cache import CorrelationCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestTake:
    """Read-and-remove semantics."""

    def test_round_trip(self):
        cache = CorrelationCache()
        cache.put("sales.orders@prod", {"location": "hdfs:///t"})

        assert cache.take("sales.orders@prod") == {"location": "hdfs:///t"}

    def test_second_take_misses(self):
        cache = CorrelationCache()
        cache.put("k", "v")

        assert cache.take("k") == "v"
        assert cache.take("k") is None

    def test_take_unknown_key(self):
        assert CorrelationCache().take("never-stored") is None

    def test_put_replaces(self):
        cache = CorrelationCache()
        cache.put("k", "old")
        cache.put("k", "new")

        assert cache.size == 1
        assert cache.take("k") == "new"

    def test_peek_does_not_remove(self):
        cache = CorrelationCache()
        cache.put("k", "v")

        assert cache.peek("k") == "v"
        assert "k" in cache
        assert cache.take("k") == "v"
        assert "k" not in cache

    def test_stats(self):
        cache = CorrelationCache(max_size=5, ttl_seconds=60.0)
        cache.put("k", "v")
        cache.take("k")
        cache.take("k")

        stats = cache.stats
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["size"] == 0
        assert stats["max_size"] == 5


class TestBounds:
    """Entries whose post-event never arrives must not accumulate."""

    def test_expired_entry_not_returned(self):
        clock = FakeClock()
        cache = CorrelationCache(ttl_seconds=600.0, clock=clock)
        cache.put("k", "v")

        clock.advance(601)
        assert cache.take("k") is None

    def test_entry_within_ttl_returned(self):
        clock = FakeClock()
        cache = CorrelationCache(ttl_seconds=600.0, clock=clock)
        cache.put("k", "v")

        clock.advance(599)
        assert cache.take("k") == "v"

    def test_cleanup_expired(self):
        clock = FakeClock()
        cache = CorrelationCache(ttl_seconds=10.0, clock=clock)
        cache.put("a", 1)
        clock.advance(5)
        cache.put("b", 2)
        clock.advance(6)

        assert cache.cleanup_expired() == 1
        assert cache.size == 1
        assert cache.peek("b") == 2

    def test_put_reclaims_expired_entries(self):
        clock = FakeClock()
        cache = CorrelationCache(ttl_seconds=10.0, clock=clock)
        for i in range(5):
            cache.put(f"stale-{i}", i)
        clock.advance(11)

        cache.put("fresh", "v")
        assert cache.size == 1

    def test_capacity_evicts_oldest(self):
        cache = CorrelationCache(max_size=2)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.put("c", 3)

        assert cache.size == 2
        assert cache.take("a") is None
        assert cache.take("b") == 2
        assert cache.take("c") == 3
        assert cache.stats["evictions"] == 1

    def test_clear(self):
        cache = CorrelationCache()
        cache.put("a", 1)
        cache.clear()
        assert cache.size == 0
