"""
Cache Tests

Unit tests for the TTL cache and its statistics.
"""

import random
import threading

import pytest

from wbjee_finder.services.cache import Cache

TTL = 1800


@pytest.fixture
def cache(clock):
    return Cache(ttl=TTL, clock=clock)


class TestCache:
    """Test cases for Cache class."""

    def test_stats_example(self, cache):
        cache.set("k1", "a")
        cache.set("k2", "b")

        assert cache.get("k1") == "a"
        assert cache.get("k3") is None
        assert cache.stats() == {
            "hits": 1,
            "misses": 1,
            "totalRequests": 2,
            "hitRate": "50.00%",
            "size": 2,
        }

    def test_empty_stats_have_zero_hit_rate(self, cache):
        assert cache.stats() == {
            "hits": 0,
            "misses": 0,
            "totalRequests": 0,
            "hitRate": "0%",
            "size": 0,
        }

    def test_set_then_get_is_a_hit(self, cache):
        cache.set("orcr", b'{"rows": []}')

        assert cache.get("orcr") == b'{"rows": []}'
        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 0

    def test_absent_key_is_a_miss(self, cache):
        assert cache.get("missing") is None
        stats = cache.stats()
        assert stats["misses"] == 1
        assert stats["hits"] == 0

    def test_overwrite_replaces_value_and_refreshes_timestamp(self, cache, clock):
        cache.set("k", "old")
        clock.advance(TTL - 1)
        cache.set("k", "new")
        clock.advance(TTL - 1)

        assert cache.get("k") == "new"
        assert len(cache) == 1

    def test_expired_entry_is_a_miss_before_sweep(self, cache, clock):
        cache.set("k", "stale")
        clock.advance(TTL + 1)

        assert cache.get("k") is None
        stats = cache.stats()
        assert stats["misses"] == 1
        # Still stored until the sweep runs
        assert stats["size"] == 1

    def test_entry_expires_exactly_at_ttl(self, cache, clock):
        cache.set("k", "v")
        clock.advance(TTL - 0.5)
        assert cache.get("k") == "v"
        clock.advance(0.5)
        assert cache.get("k") is None

    def test_sweep_removes_only_expired_entries(self, cache, clock):
        cache.set("old", "1")
        clock.advance(TTL - 60)
        cache.set("young", "2")
        clock.advance(120)

        cache.sweep()

        assert len(cache) == 1
        assert cache.get("young") == "2"
        assert cache.get("old") is None

    def test_sweep_does_not_touch_counters(self, cache, clock):
        cache.set("k", "v")
        cache.get("k")
        clock.advance(TTL * 2)
        cache.sweep()

        stats = cache.stats()
        assert stats["totalRequests"] == 1
        assert stats["size"] == 0

    def test_clear_returns_prior_count_and_resets_stats(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        cache.get("a")
        cache.get("zzz")

        assert cache.clear() == 3
        assert cache.stats() == {
            "hits": 0,
            "misses": 0,
            "totalRequests": 0,
            "hitRate": "0%",
            "size": 0,
        }
        assert cache.get("a") is None

    def test_clear_on_empty_cache(self, cache):
        assert cache.clear() == 0

    def test_unhashable_key_degrades_to_miss(self, cache):
        assert cache.get(["not", "hashable"]) is None
        assert cache.stats()["misses"] == 1

    def test_hit_rate_is_rounded_to_two_decimals(self, cache):
        cache.set("k", "v")
        cache.get("k")
        cache.get("x")
        cache.get("y")

        assert cache.stats()["hitRate"] == "33.33%"

    def test_totals_always_add_up(self, cache, clock):
        rng = random.Random(7)
        keys = [f"k{i}" for i in range(5)]
        for _ in range(300):
            key = rng.choice(keys)
            action = rng.random()
            if action < 0.4:
                cache.set(key, key.upper())
            elif action < 0.9:
                cache.get(key)
            else:
                clock.advance(rng.randint(0, TTL))
                if rng.random() < 0.5:
                    cache.sweep()

            stats = cache.stats()
            assert stats["hits"] + stats["misses"] == stats["totalRequests"]

    def test_concurrent_gets_keep_exact_totals(self):
        cache = Cache(ttl=TTL)
        cache.set("present", "v")
        workers, calls = 8, 2000
        barrier = threading.Barrier(workers + 1)
        stop = threading.Event()
        snapshots = []

        def reader():
            barrier.wait()
            for i in range(calls):
                cache.get("present" if i % 2 == 0 else "absent")

        def watcher():
            barrier.wait()
            while True:
                snapshots.append(cache.stats())
                if stop.is_set():
                    break

        threads = [threading.Thread(target=reader) for _ in range(workers)]
        stats_thread = threading.Thread(target=watcher)
        stats_thread.start()
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        stop.set()
        stats_thread.join()

        stats = cache.stats()
        assert stats["totalRequests"] == workers * calls
        assert stats["hits"] == workers * calls // 2
        assert stats["misses"] == workers * calls // 2
        assert snapshots
        for snapshot in snapshots:
            assert snapshot["hits"] + snapshot["misses"] == snapshot["totalRequests"]

    def test_clear_is_atomic_under_concurrent_traffic(self):
        cache = Cache(ttl=TTL)
        workers, calls = 6, 2000
        barrier = threading.Barrier(workers + 1)
        cleared_counts = []
        snapshots = []

        def worker(n):
            barrier.wait()
            for i in range(calls):
                key = f"k{n}-{i % 10}"
                if i % 3 == 0:
                    cache.set(key, i)
                else:
                    cache.get(key)

        def clearer():
            barrier.wait()
            for _ in range(200):
                cleared_counts.append(cache.clear())
                snapshots.append(cache.stats())

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(workers)]
        threads.append(threading.Thread(target=clearer))
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(count >= 0 for count in cleared_counts)
        for snapshot in snapshots + [cache.stats()]:
            assert snapshot["hits"] + snapshot["misses"] == snapshot["totalRequests"]
            assert snapshot["size"] <= workers * 10
