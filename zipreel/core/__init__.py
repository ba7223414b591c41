"""Search orchestration."""

from zipreel.core.coordinator import QueryCoordinator, Resolution, SearchResult
from zipreel.core.service import SearchService

__all__ = ["QueryCoordinator", "Resolution", "SearchResult", "SearchService"]
