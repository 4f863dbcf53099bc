"""
Test suite for the in-memory TTL cache.

The tests verify:
1. Values are served until their own deadline and evicted on the first read after it
2. Per-entry ttl overrides the default lifetime
3. A cached None is distinguishable from a miss
4. Cache keys are deterministic regardless of dict or filter field order
"""

import pytest

from price_transparency.core.cache import MISSING, InMemoryCache, make_cache_key
from price_transparency.models.schemas import SearchFilters


class TestExpiry:
    """Entries live exactly as long as the ttl they were written with."""

    def test_value_served_before_deadline(self, cache: InMemoryCache, clock) -> None:
        cache.set("k", "v")
        clock.advance(299)
        assert cache.get("k") == "v"

    def test_value_evicted_after_default_ttl(self, cache: InMemoryCache, clock) -> None:
        cache.set("k", "v")
        clock.advance(301)
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_per_entry_ttl_overrides_default(self, cache: InMemoryCache, clock) -> None:
        cache.set("short", 1, ttl=120)
        cache.set("long", 2, ttl=3600)
        clock.advance(121)
        assert cache.get("short") is None
        assert cache.get("long") == 2

    def test_zero_ttl_expires_on_next_tick(self, cache: InMemoryCache, clock) -> None:
        cache.set("k", "v", ttl=0)
        assert cache.get("k") == "v"
        clock.advance(0.001)
        assert "k" not in cache

    def test_purge_expired_counts_removed(self, cache: InMemoryCache, clock) -> None:
        cache.set("a", 1, ttl=10)
        cache.set("b", 2, ttl=10)
        cache.set("c", 3, ttl=1000)
        clock.advance(11)
        assert cache.purge_expired() == 2
        assert len(cache) == 1


class TestOperations:

    def test_cached_none_is_a_hit(self, cache: InMemoryCache) -> None:
        cache.set("k", None)
        assert cache.get("k", MISSING) is None
        assert "k" in cache

    def test_missing_key_returns_default(self, cache: InMemoryCache) -> None:
        assert cache.get("nope", MISSING) is MISSING
        assert cache.get("nope", 42) == 42

    def test_overwrite_resets_deadline(self, cache: InMemoryCache, clock) -> None:
        cache.set("k", 1, ttl=10)
        clock.advance(8)
        cache.set("k", 2, ttl=10)
        clock.advance(8)
        assert cache.get("k") == 2

    def test_delete_and_clear(self, cache: InMemoryCache) -> None:
        cache.set("a", 1)
        cache.set("b", 2)
        cache.delete("a")
        cache.delete("missing")
        assert "a" not in cache
        cache.clear()
        assert len(cache) == 0


class TestCacheKeys:

    def test_dict_order_does_not_matter(self) -> None:
        assert make_cache_key("op", {"a": 1, "b": 2}) == make_cache_key("op", {"b": 2, "a": 1})

    def test_equal_filters_share_a_key(self) -> None:
        first = SearchFilters(procedureCode="27447", state="CA", page=1)
        second = SearchFilters(state="CA", procedureCode="27447")
        assert make_cache_key("prices", "27447", first) == make_cache_key("prices", "27447", second)

    def test_different_inputs_differ(self) -> None:
        assert make_cache_key("drugs", "lipitor") != make_cache_key("drugs", "atorvastatin")
        assert make_cache_key("er", 34.05, -118.24, 25) != make_cache_key("urgent_care", 34.05, -118.24, 25)

    @pytest.mark.parametrize("part", ["27447", 27447])
    def test_key_starts_with_operation(self, part) -> None:
        assert make_cache_key("prices", part).startswith("prices:")
