"""
Shared result cache for ZipReel (Tier 2).

A single bounded map shared by every user.  When full, the least
frequently accessed entry is evicted so globally popular queries
survive bursts of one-off searches.
"""

import logging
import threading
from collections import OrderedDict
from typing import List, Optional, Sequence

from zipreel.cache.entry import CacheEntry, Clock, LogicalClock
from zipreel.catalog.models import Movie
from zipreel.config import get_settings
from zipreel.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class GlobalCache:
    """Tier 2 cache: one bounded, LFU-evicted map for all users.

    Args:
        max_entries: Capacity.  Defaults to ``cache.max_global_entries``
            from settings.
        clock: Source of access ticks.

    Raises:
        ConfigurationError: If the capacity is less than 1.
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        if max_entries is None:
            max_entries = get_settings().cache.max_global_entries
        if max_entries < 1:
            raise ConfigurationError(
                f"max_entries must be >= 1, got {max_entries}"
            )
        self._max_entries = max_entries
        self._clock = clock or LogicalClock()
        self._store: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: str) -> Optional[List[Movie]]:
        """Look up *key*; a hit bumps its frequency and returns a copy."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            entry.touch(self._clock())
            logger.debug(
                "Tier 2 cache hit",
                extra={"cache_key": key, "frequency": entry.frequency},
            )
            return entry.snapshot_results()

    def put(self, key: str, results: Sequence[Movie]) -> None:
        """Store *results* under *key*, evicting the LFU entry if full.

        Eviction happens whenever the cache is full, even when *key* is
        already present.  Ties on frequency go to the entry first in
        insertion order.
        """
        with self._lock:
            if len(self._store) >= self._max_entries:
                victim = min(self._store.values(), key=lambda e: e.frequency)
                del self._store[victim.key]
                logger.info(
                    "Tier 2 LFU eviction",
                    extra={"cache_key": victim.key, "frequency": victim.frequency},
                )
            if key in self._store:
                del self._store[key]
                logger.debug("Tier 2 entry overwritten", extra={"cache_key": key})
            self._store[key] = CacheEntry.create(key, results, self._clock())

    def clear(self) -> int:
        """Remove all entries and return how many there were."""
        with self._lock:
            count = len(self._store)
            self._store.clear()
        logger.info("Tier 2 cache cleared", extra={"entries_removed": count})
        return count

    def frequency(self, key: str) -> Optional[int]:
        """Access count of *key*, or ``None`` if it is not cached."""
        with self._lock:
            entry = self._store.get(key)
            return entry.frequency if entry is not None else None

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._store)

    @property
    def size(self) -> int:
        """Current number of entries in the cache."""
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store
