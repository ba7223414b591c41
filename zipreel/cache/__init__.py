"""Two-tier search cache (Tier 1 per user / Tier 2 shared)."""

from zipreel.cache.entry import CacheEntry, LogicalClock
from zipreel.cache.stats import CacheLevel, CacheStats, StatsSnapshot
from zipreel.cache.tier1 import UserCache
from zipreel.cache.tier2 import GlobalCache

__all__ = [
    "CacheEntry",
    "CacheLevel",
    "CacheStats",
    "GlobalCache",
    "LogicalClock",
    "StatsSnapshot",
    "UserCache",
]
