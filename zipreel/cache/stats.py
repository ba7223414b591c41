"""
Hit accounting across the cache hierarchy.

Counters only ever go up.  Clearing a cache tier leaves them alone.
"""

import logging
import threading
from enum import Enum

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class CacheLevel(str, Enum):
    """Source that resolved a query."""

    TIER1 = "TIER1"
    TIER2 = "TIER2"
    PRIMARY = "PRIMARY"


class StatsSnapshot(BaseModel):
    """Point-in-time copy of the counters.

    Attributes:
        tier1_hits: Queries answered by a user's Tier 1 bucket.
        tier2_hits: Queries answered by the shared Tier 2 cache.
        primary_hits: Full misses answered by the primary store.
        total_searches: Every resolved query.
        cache_hit_rate: Share of queries answered by either cache tier
            (0.0 if no queries).
    """

    model_config = ConfigDict(frozen=True)

    tier1_hits: int = 0
    tier2_hits: int = 0
    primary_hits: int = 0
    total_searches: int = 0
    cache_hit_rate: float = 0.0


class CacheStats:
    """Monotonic, thread-safe hit counters."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tier1_hits = 0
        self._tier2_hits = 0
        self._primary_hits = 0
        self._total_searches = 0

    def record(self, level: CacheLevel) -> None:
        """Count one resolved query: a hit for *level* plus one search."""
        with self._lock:
            if level is CacheLevel.TIER1:
                self._tier1_hits += 1
            elif level is CacheLevel.TIER2:
                self._tier2_hits += 1
            else:
                self._primary_hits += 1
            self._total_searches += 1

    @property
    def tier1_hits(self) -> int:
        return self._tier1_hits

    @property
    def tier2_hits(self) -> int:
        return self._tier2_hits

    @property
    def primary_hits(self) -> int:
        return self._primary_hits

    @property
    def total_searches(self) -> int:
        return self._total_searches

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            cached = self._tier1_hits + self._tier2_hits
            total = self._total_searches
            return StatsSnapshot(
                tier1_hits=self._tier1_hits,
                tier2_hits=self._tier2_hits,
                primary_hits=self._primary_hits,
                total_searches=total,
                cache_hit_rate=cached / total if total > 0 else 0.0,
            )

    def __str__(self) -> str:
        s = self.snapshot()
        return (
            f"Tier 1 Cache Hits: {s.tier1_hits}\n"
            f"Tier 2 Cache Hits: {s.tier2_hits}\n"
            f"Primary Store Hits: {s.primary_hits}\n"
            f"Total Searches: {s.total_searches}"
        )
