"""Tests for the proxy response cache."""

from airwx.server.cache import ResponseCache


class FakeClock:
    def __init__(self, t: float = 1000.0):
        self.t = t

    def __call__(self) -> float:
        return self.t


class TestResponseCache:
    def test_hit_within_ttl(self):
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=600, clock=clock)
        assert cache.put("metar:KWRI", 200, b"[]")
        clock.t += 600
        entry = cache.get("metar:KWRI")
        assert entry is not None
        assert entry.body == b"[]"
        assert entry.content_type == "application/json"

    def test_expired_entry_evicted(self):
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=600, clock=clock)
        cache.put("metar:KWRI", 200, b"[]")
        clock.t += 601
        assert cache.get("metar:KWRI") is None
        assert len(cache) == 0

    def test_entry_evicted_by_concurrent_reader(self):
        cache = ResponseCache(ttl_seconds=600, clock=lambda: 0.0)
        cache.put("metar:KWRI", 200, b"[]")
        reads = []
        evicting = []

        def clock() -> float:
            # another reader evicts the key between our lookup and expiry check
            if not evicting:
                evicting.append(True)
                reads.append(cache.get("metar:KWRI"))
            return 1000.0

        cache._clock = clock
        assert cache.get("metar:KWRI") is None
        assert reads == [None]
        assert len(cache) == 0

    def test_non_200_not_cached(self):
        cache = ResponseCache()
        assert not cache.put("metar:KWRI", 502, b"{}")
        assert cache.get("metar:KWRI") is None

    def test_keys_are_exact(self):
        cache = ResponseCache()
        cache.put("tafTimeline:KWRI:24", 200, b"[]")
        assert cache.get("tafTimeline:KWRI:12") is None
        assert cache.get("tafTimeline:KWRI:24") is not None

    def test_clear(self):
        cache = ResponseCache()
        cache.put("a", 200, b"1")
        cache.put("b", 200, b"2")
        cache.clear()
        assert len(cache) == 0
