"""
Per-user result cache for ZipReel (Tier 1).

Every user gets an independent bucket bounded by ``max_entries_per_user``.
When a bucket is full, the least recently accessed entry in that bucket
is evicted before the new one is inserted.  Buckets are guarded by their
own lock, so two writers for the same user cannot both pass the capacity
check.
"""

import logging
import threading
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from zipreel.cache.entry import CacheEntry, Clock, LogicalClock
from zipreel.catalog.models import Movie
from zipreel.config import get_settings
from zipreel.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class _Bucket:
    """One user's entries plus the lock that guards them."""

    __slots__ = ("entries", "lock")

    def __init__(self) -> None:
        self.entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self.lock = threading.Lock()


class UserCache:
    """Tier 1 cache: bounded, LRU-evicted bucket per user.

    Args:
        max_entries_per_user: Bucket capacity.  Defaults to
            ``cache.max_entries_per_user`` from settings.
        clock: Source of access ticks.  Defaults to a fresh
            :class:`LogicalClock`.

    Raises:
        ConfigurationError: If the capacity is less than 1.
    """

    def __init__(
        self,
        max_entries_per_user: Optional[int] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        if max_entries_per_user is None:
            max_entries_per_user = get_settings().cache.max_entries_per_user
        if max_entries_per_user < 1:
            raise ConfigurationError(
                f"max_entries_per_user must be >= 1, got {max_entries_per_user}"
            )
        self._max_entries_per_user = max_entries_per_user
        self._clock = clock or LogicalClock()
        self._buckets: Dict[str, _Bucket] = {}
        self._registry_lock = threading.Lock()

    @property
    def max_entries_per_user(self) -> int:
        return self._max_entries_per_user

    def _bucket(self, user_id: str, create: bool = False) -> Optional[_Bucket]:
        with self._registry_lock:
            bucket = self._buckets.get(user_id)
            if bucket is None and create:
                bucket = _Bucket()
                self._buckets[user_id] = bucket
            return bucket

    def get(self, user_id: str, key: str) -> Optional[List[Movie]]:
        """Look up *key* in *user_id*'s bucket.

        A hit touches the entry and returns a copy of its results.  A
        miss leaves every entry untouched.

        Returns:
            The cached movies, or ``None`` on a miss.
        """
        bucket = self._bucket(user_id)
        if bucket is None:
            return None
        with bucket.lock:
            entry = bucket.entries.get(key)
            if entry is None:
                return None
            entry.touch(self._clock())
            logger.debug(
                "Tier 1 cache hit",
                extra={"user_id": user_id, "cache_key": key},
            )
            return entry.snapshot_results()

    def put(self, user_id: str, key: str, results: Sequence[Movie]) -> None:
        """Store *results* under *key* for *user_id*.

        If the bucket is full, the entry with the smallest
        ``last_accessed`` goes first (on a tie the one earliest in the
        bucket), even when *key* is already present.  The new entry then
        replaces any existing one and moves to the end of the bucket.
        """
        bucket = self._bucket(user_id, create=True)
        with bucket.lock:
            if len(bucket.entries) >= self._max_entries_per_user:
                victim = min(
                    bucket.entries.values(), key=lambda e: e.last_accessed
                )
                del bucket.entries[victim.key]
                logger.info(
                    "Tier 1 LRU eviction",
                    extra={"user_id": user_id, "cache_key": victim.key},
                )
            if key in bucket.entries:
                del bucket.entries[key]
                logger.debug(
                    "Tier 1 entry overwritten",
                    extra={"user_id": user_id, "cache_key": key},
                )
            bucket.entries[key] = CacheEntry.create(key, results, self._clock())

    def clear(self) -> int:
        """Remove every bucket.

        Returns:
            Number of entries removed across all users.
        """
        with self._registry_lock:
            count = sum(len(b.entries) for b in self._buckets.values())
            self._buckets.clear()
        logger.info("Tier 1 cache cleared", extra={"entries_removed": count})
        return count

    def clear_user(self, user_id: str) -> int:
        """Remove one user's bucket and return how many entries it held."""
        with self._registry_lock:
            bucket = self._buckets.pop(user_id, None)
        count = len(bucket.entries) if bucket is not None else 0
        logger.info(
            "Tier 1 bucket cleared",
            extra={"user_id": user_id, "entries_removed": count},
        )
        return count

    def size(self, user_id: str) -> int:
        bucket = self._bucket(user_id)
        return len(bucket.entries) if bucket is not None else 0

    def keys(self, user_id: str) -> List[str]:
        bucket = self._bucket(user_id)
        if bucket is None:
            return []
        with bucket.lock:
            return list(bucket.entries)

    def users(self) -> List[str]:
        with self._registry_lock:
            return list(self._buckets)
