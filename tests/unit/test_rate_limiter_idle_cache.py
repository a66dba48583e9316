"""Unit tests for IdleExpiringCache.

Tests cover:
- Get-or-insert semantics (single value per key, creation flag)
- Expiry on access after the idle window
- Access refreshing the idle clock
- Bounded sweep on access and full sweep on demand
- Concurrent insertion of the same key
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.rate_limiter.storage.idle_cache import IdleExpiringCache


@pytest.fixture
def cache(clock):
    """Cache with a 5 second idle window on the fake clock."""
    return IdleExpiringCache[object](time_to_idle=5.0, monotonic=clock.monotonic)


@pytest.mark.unit
class TestIdleExpiringCacheBasics:
    """Test basic get-or-insert behaviour."""

    def test_rejects_non_positive_window(self):
        """Test time_to_idle must be positive."""
        with pytest.raises(ValueError, match="time_to_idle must be positive"):
            IdleExpiringCache(time_to_idle=0)

    def test_rejects_negative_sweep_batch(self):
        """Test sweep_batch must not be negative."""
        with pytest.raises(ValueError, match="sweep_batch must not be negative"):
            IdleExpiringCache(time_to_idle=1.0, sweep_batch=-1)

    def test_insert_on_miss(self, cache):
        """Test factory is called for an unseen key."""
        value, created = cache.get_or_insert("a", lambda: "first")

        assert value == "first"
        assert created is True
        assert "a" in cache
        assert len(cache) == 1

    def test_existing_value_returned_without_factory(self, cache):
        """Test factory is not called for a live key."""
        first, _ = cache.get_or_insert("a", object)
        calls = []

        second, created = cache.get_or_insert(
            "a", lambda: calls.append(1) or object()
        )

        assert second is first
        assert created is False
        assert calls == []

    def test_keys_are_independent(self, cache):
        """Test distinct keys hold distinct values."""
        a, _ = cache.get_or_insert("a", object)
        b, _ = cache.get_or_insert("b", object)

        assert a is not b
        assert len(cache) == 2


@pytest.mark.unit
class TestIdleExpiringCacheExpiry:
    """Test time-to-idle expiry."""

    def test_entry_survives_exactly_the_window(self, cache, clock):
        """Test an entry idle for exactly time_to_idle is still live."""
        first, _ = cache.get_or_insert("a", object)
        clock.advance(seconds=5)

        value, created = cache.get_or_insert("a", object)

        assert value is first
        assert created is False

    def test_entry_replaced_after_window(self, cache, clock):
        """Test an entry idle past the window is replaced on access."""
        first, _ = cache.get_or_insert("a", object)
        clock.advance(seconds=5, milliseconds=1)

        assert "a" not in cache
        value, created = cache.get_or_insert("a", object)
        assert value is not first
        assert created is True

    def test_access_refreshes_idle_clock(self, cache, clock):
        """Test repeated access keeps an entry alive indefinitely."""
        first, _ = cache.get_or_insert("a", object)
        for _ in range(10):
            clock.advance(seconds=4)
            value, _ = cache.get_or_insert("a", object)
            assert value is first

    def test_evict_expired_removes_only_idle_entries(self, cache, clock):
        """Test on-demand sweep drops idle entries and keeps live ones."""
        cache.get_or_insert("idle", object)
        clock.advance(seconds=3)
        cache.get_or_insert("active", object)
        clock.advance(seconds=3)

        evicted = cache.evict_expired()

        assert evicted == 1
        assert "idle" not in cache
        assert "active" in cache

    def test_evict_expired_follows_access_order(self, cache, clock):
        """Test an entry re-accessed after insertion is not evicted early."""
        cache.get_or_insert("a", object)
        cache.get_or_insert("b", object)
        clock.advance(seconds=3)
        cache.get_or_insert("a", object)
        clock.advance(seconds=3)

        assert cache.evict_expired() == 1
        assert "a" in cache
        assert "b" not in cache

    def test_access_sweeps_other_expired_entries(self, cache, clock):
        """Test an access drops unrelated idle keys."""
        for key in ("a", "b", "c"):
            cache.get_or_insert(key, object)
        clock.advance(seconds=6)

        cache.get_or_insert("d", object)

        assert len(cache) == 1
        assert "d" in cache

    def test_access_sweep_is_bounded(self, clock):
        """Test one access removes at most sweep_batch expired entries."""
        cache: IdleExpiringCache[object] = IdleExpiringCache(
            time_to_idle=5.0, monotonic=clock.monotonic, sweep_batch=10
        )
        for i in range(30):
            cache.get_or_insert(f"key-{i}", object)
        clock.advance(seconds=6)

        cache.get_or_insert("new", object)

        assert len(cache) == 30 - 10 + 1
        assert cache.evict_expired() == 20
        assert len(cache) == 1


@pytest.mark.unit
class TestIdleExpiringCacheConcurrency:
    """Test concurrent access."""

    def test_concurrent_insert_creates_single_value(self):
        """Test racing threads for an unseen key all get the same value."""
        cache: IdleExpiringCache[object] = IdleExpiringCache(time_to_idle=60.0)
        barrier = threading.Barrier(16)

        def resolve(_):
            barrier.wait()
            return cache.get_or_insert("hot", object)

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(resolve, range(16)))

        assert len({id(value) for value, _ in results}) == 1
        assert sum(created for _, created in results) == 1
        assert len(cache) == 1
