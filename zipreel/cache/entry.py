"""
Cache entries and the clock that orders them.

Both cache tiers store :class:`CacheEntry` objects.  Recency is measured
in ticks of an injectable clock rather than wall time, so eviction order
is deterministic: the default :class:`LogicalClock` returns a strictly
increasing integer on every call.
"""

import itertools
import threading
from typing import Callable, List, Sequence, Union

from pydantic import BaseModel, Field

from zipreel.catalog.models import Movie

Timestamp = Union[int, float]
Clock = Callable[[], Timestamp]


class LogicalClock:
    """Thread-safe monotonic tick counter.

    Args:
        start: Value returned by the first call.
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            return next(self._counter)


class CacheEntry(BaseModel):
    """One cached result set plus its access metadata.

    Attributes:
        key: Cache key the entry is stored under.
        results: Private copy of the matched movies.
        frequency: Number of accesses, starting at 1 on creation.
        last_accessed: Clock tick of the most recent access.
    """

    key: str
    results: List[Movie] = Field(default_factory=list)
    frequency: int = 1
    last_accessed: Timestamp = 0

    @classmethod
    def create(
        cls, key: str, results: Sequence[Movie], now: Timestamp
    ) -> "CacheEntry":
        """Build an entry holding its own copy of *results*."""
        return cls(key=key, results=list(results), frequency=1, last_accessed=now)

    def touch(self, now: Timestamp) -> None:
        """Record one access at tick *now*."""
        self.frequency += 1
        self.last_accessed = now

    def snapshot_results(self) -> List[Movie]:
        """Return a new list; mutating it never changes the entry."""
        return list(self.results)
