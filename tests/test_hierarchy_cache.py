"""Tests for the projection cache."""

from services.hierarchy_cache import (
    FULL_HIERARCHY_KEY,
    STATS_KEY,
    HierarchyCache,
    subtree_key,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestHierarchyCache:
    def test_get_or_set_builds_once(self):
        cache = HierarchyCache(ttl_seconds=300)
        calls = []

        def build():
            calls.append(1)
            return {"tree": True}

        assert cache.get_or_set("k", build) == {"tree": True}
        assert cache.get_or_set("k", build) == {"tree": True}
        assert len(calls) == 1
        assert cache.hits == 1

    def test_entries_expire_after_ttl(self):
        clock = FakeClock()
        cache = HierarchyCache(ttl_seconds=300, clock=clock)
        cache.set("k", "value")

        clock.now = 299
        assert cache.get("k") == "value"
        clock.now = 300
        assert cache.get("k") is None

    def test_zero_ttl_disables_caching(self):
        cache = HierarchyCache(ttl_seconds=0)
        assert cache.set("k", "value") is False
        assert cache.get("k") is None

    def test_none_results_are_not_cached(self):
        cache = HierarchyCache()
        cache.get_or_set("k", lambda: None)
        assert "k" not in cache

    def test_invalidate_for_drops_related_keys_only(self):
        cache = HierarchyCache()
        for key in (FULL_HIERARCHY_KEY, STATS_KEY, subtree_key(1), subtree_key(2), subtree_key(3)):
            cache.set(key, "value")

        cache.invalidate_for([1, 2])

        assert FULL_HIERARCHY_KEY not in cache
        assert STATS_KEY not in cache
        assert subtree_key(1) not in cache
        assert subtree_key(2) not in cache
        assert subtree_key(3) in cache

    def test_value_built_across_an_invalidation_is_discarded(self):
        cache = HierarchyCache()

        def build():
            # A write lands while the projection is being built.
            cache.invalidate([FULL_HIERARCHY_KEY])
            return "stale"

        assert cache.get_or_set(FULL_HIERARCHY_KEY, build) == "stale"
        assert FULL_HIERARCHY_KEY not in cache

    def test_clear(self):
        cache = HierarchyCache()
        cache.set("k", "value")
        cache.clear()
        assert "k" not in cache
