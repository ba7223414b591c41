"""
Query coordinator for ZipReel.

Resolves a search through the cache hierarchy:

1. the user's Tier 1 bucket,
2. the shared Tier 2 cache (a hit is promoted into Tier 1),
3. the primary store (the result populates both tiers).

Exactly one hit counter and the total-search counter are bumped per
resolved query.  An unknown user fails before any cache, store or
stats access.
"""

import logging
from typing import Callable, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict

from zipreel.cache.stats import CacheLevel, CacheStats
from zipreel.cache.tier1 import UserCache
from zipreel.cache.tier2 import GlobalCache
from zipreel.catalog.models import Movie
from zipreel.catalog.query import (
    MultiFieldQuery,
    QueryDescriptor,
    SearchType,
    SingleFieldQuery,
)
from zipreel.exceptions import InvalidCacheLevelError, UnknownActorError

logger = logging.getLogger(__name__)

PrimaryQuery = Callable[[QueryDescriptor], Sequence[Movie]]
UserExists = Callable[[str], bool]


class SearchResult(BaseModel):
    """One matched movie and the tier that produced it."""

    model_config = ConfigDict(frozen=True)

    movie: Movie
    found_in: CacheLevel

    def __str__(self) -> str:
        return f"{self.movie.title} (Found in {self.found_in.value})"


class Resolution(BaseModel):
    """Outcome of one lookup: the tier that answered and its movies."""

    model_config = ConfigDict(frozen=True)

    cache_key: str
    found_in: CacheLevel
    movies: List[Movie]


class QueryCoordinator:
    """Runs the Tier 1 -> Tier 2 -> primary store lookup chain.

    Args:
        query_primary: Pure function returning every movie that matches a
            descriptor, in store order.  Only called on a full miss.
        user_exists: Predicate telling whether a user id is registered.
        user_cache: Tier 1 cache.  Built from settings if omitted.
        global_cache: Tier 2 cache.  Built from settings if omitted.
        stats: Hit counters.  A fresh instance if omitted.
    """

    def __init__(
        self,
        query_primary: PrimaryQuery,
        user_exists: UserExists,
        user_cache: Optional[UserCache] = None,
        global_cache: Optional[GlobalCache] = None,
        stats: Optional[CacheStats] = None,
    ) -> None:
        self._query_primary = query_primary
        self._user_exists = user_exists
        self.user_cache = user_cache if user_cache is not None else UserCache()
        self.global_cache = global_cache if global_cache is not None else GlobalCache()
        self.stats = stats if stats is not None else CacheStats()

    def search(
        self, user_id: str, search_type: SearchType, value: str
    ) -> List[SearchResult]:
        """Single-field search (title, genre or year equality).

        Raises:
            UnknownActorError: If *user_id* is not registered.
            pydantic.ValidationError: If *search_type* is not a
                :class:`SearchType`.
        """
        self._require_user(user_id)
        return self.resolve(
            user_id, SingleFieldQuery(search_type=search_type, value=value)
        )

    def search_multi(
        self, user_id: str, genre: str, year: int, min_rating: float
    ) -> List[SearchResult]:
        """Genre + year + minimum-rating search.

        Raises:
            UnknownActorError: If *user_id* is not registered.
        """
        self._require_user(user_id)
        return self.resolve(
            user_id,
            MultiFieldQuery(genre=genre, year=year, min_rating=min_rating),
        )

    def resolve(
        self, user_id: str, descriptor: QueryDescriptor
    ) -> List[SearchResult]:
        """Resolve *descriptor* for *user_id* through the cache hierarchy.

        Returns:
            One :class:`SearchResult` per matched movie, in the order the
            resolving source holds them.

        Raises:
            UnknownActorError: If *user_id* is not registered.
        """
        resolution = self.lookup(user_id, descriptor)
        return [
            SearchResult(movie=m, found_in=resolution.found_in)
            for m in resolution.movies
        ]

    def lookup(self, user_id: str, descriptor: QueryDescriptor) -> Resolution:
        """Like :meth:`resolve`, but keeps the tier even when nothing matched."""
        self._require_user(user_id)
        key = descriptor.cache_key

        results = self.user_cache.get(user_id, key)
        if results is not None:
            found_in = CacheLevel.TIER1
        else:
            results = self.global_cache.get(key)
            if results is not None:
                found_in = CacheLevel.TIER2
                self.user_cache.put(user_id, key, results)
            else:
                found_in = CacheLevel.PRIMARY
                results = list(self._query_primary(descriptor))
                self.user_cache.put(user_id, key, results)
                self.global_cache.put(key, results)

        self.stats.record(found_in)
        logger.debug(
            "Query resolved",
            extra={
                "user_id": user_id,
                "cache_key": key,
                "found_in": found_in.value,
                "result_count": len(results),
            },
        )
        return Resolution(cache_key=key, found_in=found_in, movies=results)

    def clear_cache(self, level: Union[CacheLevel, str]) -> int:
        """Clear one cache tier.  Stats are not reset.

        Args:
            level: ``TIER1`` or ``TIER2``, as enum or case-insensitive
                string value.

        Returns:
            Number of entries removed.

        Raises:
            InvalidCacheLevelError: For ``PRIMARY`` or anything unknown.
        """
        try:
            tier = CacheLevel(level.upper() if isinstance(level, str) else level)
        except ValueError:
            raise InvalidCacheLevelError(f"Invalid cache level: {level!r}") from None

        if tier is CacheLevel.TIER1:
            return self.user_cache.clear()
        if tier is CacheLevel.TIER2:
            return self.global_cache.clear()
        raise InvalidCacheLevelError(f"Invalid cache level: {tier.value}")

    def _require_user(self, user_id: str) -> None:
        if not self._user_exists(user_id):
            logger.warning("Search by unknown user", extra={"user_id": user_id})
            raise UnknownActorError(f"User not found: {user_id}")
