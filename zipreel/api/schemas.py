"""
Pydantic request/response models for the ZipReel REST API.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from zipreel.cache.stats import CacheLevel
from zipreel.catalog.models import Movie
from zipreel.catalog.query import SearchType


class MovieCreate(BaseModel):
    """Movie registration body."""

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    genre: str
    year: int
    rating: float = Field(..., ge=0.0)


class UserCreate(BaseModel):
    """User registration body."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    preferred_genre: str = ""


class SearchRequest(BaseModel):
    """Single-field search body.

    Attributes:
        user_id: Searching user.
        search_type: ``TITLE``, ``GENRE`` or ``YEAR``.
        value: Value to match exactly.
    """

    user_id: str
    search_type: SearchType
    value: str


class MultiSearchRequest(BaseModel):
    """Genre + year + minimum rating search body."""

    user_id: str
    genre: str
    year: int
    min_rating: float = Field(default=0.0)


class SearchHit(BaseModel):
    movie: Movie
    found_in: CacheLevel


class SearchResponse(BaseModel):
    """Search results.

    Attributes:
        results: Matched movies in source order.
        found_in: Tier that resolved the query.
        count: Number of results.
    """

    results: List[SearchHit]
    found_in: CacheLevel
    count: int


class ClearCacheResponse(BaseModel):
    level: CacheLevel
    entries_removed: int


class HealthResponse(BaseModel):
    """Health check response.

    Attributes:
        status: Service health status.
        version: API version string.
        uptime_seconds: Seconds since service start.
        components: Health status of sub-components.
    """

    status: str
    version: str
    uptime_seconds: float
    components: Dict[str, str] = {}


class ErrorResponse(BaseModel):
    """Standard error body.

    Attributes:
        error: Error type identifier.
        message: Human-readable error description.
        request_id: Request ID for correlation.
    """

    error: str
    message: str
    request_id: Optional[str] = None
