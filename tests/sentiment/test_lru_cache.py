"""
Tests for LRUCache.
"""

import pytest

from sentiment.lru import LRUCache


class TestLRUCache:
    """Capacity and recency."""

    def test_get_missing(self):
        assert LRUCache(2).get("nope") is None

    def test_evicts_least_recently_used(self):
        cache = LRUCache(3)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        cache.get("a")
        cache.set("d", 4)

        # "b" was the oldest untouched entry
        assert "b" not in cache
        assert cache.get("a") == 1
        assert cache.get("c") == 3
        assert cache.get("d") == 4
        assert len(cache) == 3

    def test_overwrite_refreshes_recency(self):
        cache = LRUCache(2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 10)
        cache.set("c", 3)

        assert list(cache) == ["a", "c"]
        assert cache.get("a") == 10

    def test_never_exceeds_capacity(self):
        cache = LRUCache(5)
        for i in range(50):
            cache.set(i, i)
        assert len(cache) == 5
        assert list(cache) == [45, 46, 47, 48, 49]

    def test_clear(self):
        cache = LRUCache(2)
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            LRUCache(0)
