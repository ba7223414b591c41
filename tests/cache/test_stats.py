"""Tests for CacheStats counters."""

import threading

import pytest

from zipreel.cache.stats import CacheLevel, CacheStats, StatsSnapshot


class TestCacheStats:
    """Tests for the hit counters."""

    def test_starts_at_zero(self) -> None:
        snap = CacheStats().snapshot()
        assert snap == StatsSnapshot()
        assert snap.cache_hit_rate == 0.0

    def test_record_increments_one_counter_and_total(self) -> None:
        stats = CacheStats()
        stats.record(CacheLevel.TIER1)
        stats.record(CacheLevel.TIER2)
        stats.record(CacheLevel.TIER2)
        stats.record(CacheLevel.PRIMARY)
        assert stats.tier1_hits == 1
        assert stats.tier2_hits == 2
        assert stats.primary_hits == 1
        assert stats.total_searches == 4

    def test_hit_rate(self) -> None:
        stats = CacheStats()
        stats.record(CacheLevel.TIER1)
        stats.record(CacheLevel.PRIMARY)
        stats.record(CacheLevel.PRIMARY)
        stats.record(CacheLevel.TIER2)
        assert stats.snapshot().cache_hit_rate == pytest.approx(0.5)

    def test_snapshot_is_frozen_copy(self) -> None:
        stats = CacheStats()
        snap = stats.snapshot()
        stats.record(CacheLevel.TIER1)
        assert snap.tier1_hits == 0
        with pytest.raises(Exception):
            snap.tier1_hits = 5

    def test_str_report(self) -> None:
        stats = CacheStats()
        stats.record(CacheLevel.PRIMARY)
        assert str(stats) == (
            "Tier 1 Cache Hits: 0\n"
            "Tier 2 Cache Hits: 0\n"
            "Primary Store Hits: 1\n"
            "Total Searches: 1"
        )

    def test_concurrent_records_are_counted(self) -> None:
        stats = CacheStats()

        def worker() -> None:
            for _ in range(500):
                stats.record(CacheLevel.TIER1)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert stats.tier1_hits == 2000
        assert stats.total_searches == 2000
