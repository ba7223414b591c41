"""
Search service facade.

Owns the movie catalog, the user registry and a :class:`QueryCoordinator`
wired to them, with cache capacities taken from settings.
"""

import logging
from typing import List, Optional, Union

from zipreel.cache.entry import Clock, LogicalClock
from zipreel.cache.stats import CacheLevel, StatsSnapshot
from zipreel.cache.tier1 import UserCache
from zipreel.cache.tier2 import GlobalCache
from zipreel.catalog.models import Movie, User
from zipreel.catalog.query import SearchType
from zipreel.catalog.store import MovieCatalog, UserRegistry
from zipreel.config import get_settings
from zipreel.core.coordinator import QueryCoordinator, SearchResult

logger = logging.getLogger(__name__)


class SearchService:
    """Movie search with two-tier caching.

    Args:
        max_entries_per_user: Tier 1 bucket capacity (settings default).
        max_global_entries: Tier 2 capacity (settings default).
        clock: Tick source shared by both tiers.
    """

    def __init__(
        self,
        max_entries_per_user: Optional[int] = None,
        max_global_entries: Optional[int] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        cache_settings = get_settings().cache
        if max_entries_per_user is None:
            max_entries_per_user = cache_settings.max_entries_per_user
        if max_global_entries is None:
            max_global_entries = cache_settings.max_global_entries
        clock = clock or LogicalClock()

        self.catalog = MovieCatalog()
        self.users = UserRegistry()
        self.coordinator = QueryCoordinator(
            query_primary=self.catalog.query,
            user_exists=self.users.exists,
            user_cache=UserCache(max_entries_per_user, clock=clock),
            global_cache=GlobalCache(max_global_entries, clock=clock),
        )
        logger.info(
            "SearchService initialised",
            extra={
                "max_entries_per_user": max_entries_per_user,
                "max_global_entries": max_global_entries,
            },
        )

    def add_movie(
        self, id: str, title: str, genre: str, year: int, rating: float
    ) -> Movie:
        return self.catalog.add(id, title, genre, year, rating)

    def add_user(self, id: str, name: str, preferred_genre: str = "") -> User:
        return self.users.add(id, name, preferred_genre)

    def search(
        self, user_id: str, search_type: SearchType, value: str
    ) -> List[SearchResult]:
        return self.coordinator.search(user_id, search_type, value)

    def search_multi(
        self, user_id: str, genre: str, year: int, min_rating: float
    ) -> List[SearchResult]:
        return self.coordinator.search_multi(user_id, genre, year, min_rating)

    def clear_cache(self, level: Union[CacheLevel, str]) -> int:
        removed = self.coordinator.clear_cache(level)
        logger.info(
            "Cache cleared",
            extra={"cache_level": getattr(level, "value", level), "entries_removed": removed},
        )
        return removed

    def get_cache_stats(self) -> StatsSnapshot:
        return self.coordinator.stats.snapshot()
