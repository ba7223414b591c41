"""
FastAPI application factory for ZipReel.

Exposes catalog registration, cached search, cache statistics and cache
administration over HTTP.  Every route runs against one shared
:class:`SearchService` held in ``app.state``.
"""

import logging
import time
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from zipreel.api.schemas import (
    ClearCacheResponse,
    ErrorResponse,
    HealthResponse,
    MovieCreate,
    MultiSearchRequest,
    SearchHit,
    SearchRequest,
    SearchResponse,
    UserCreate,
)
from zipreel.cache.stats import StatsSnapshot
from zipreel.catalog.models import Movie, User
from zipreel.catalog.query import MultiFieldQuery, SingleFieldQuery
from zipreel.config import get_settings
from zipreel.core.coordinator import Resolution
from zipreel.core.service import SearchService
from zipreel.exceptions import (
    ConfigurationError,
    DuplicateIdentifierError,
    InvalidCacheLevelError,
    UnknownActorError,
    ZipReelException,
)

logger = logging.getLogger(__name__)

_UNKNOWN_USER = {404: {"model": ErrorResponse, "description": "Unknown user"}}
_DUPLICATE = {409: {"model": ErrorResponse, "description": "Duplicate id"}}
_BAD_LEVEL = {400: {"model": ErrorResponse, "description": "Invalid cache level"}}


def _to_response(resolution: Resolution) -> SearchResponse:
    return SearchResponse(
        results=[
            SearchHit(movie=m, found_in=resolution.found_in)
            for m in resolution.movies
        ],
        found_in=resolution.found_in,
        count=len(resolution.movies),
    )


def create_app(service: Optional[SearchService] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        service: Search service to serve.  A fresh one built from
            settings is used if omitted.

    Returns:
        Configured FastAPI instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="ZipReel",
        description="Movie search with two-tier caching",
        version=settings.api.version,
    )
    app.state.service = service if service is not None else SearchService()
    app.state.version = settings.api.version
    app.state.start_time = time.time()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Request-ID middleware --
    @app.middleware("http")
    async def add_request_id(request: Request, call_next: Any) -> Response:
        """Attach a unique request ID to every request."""
        request_id = request.headers.get(
            "X-Request-Id", uuid.uuid4().hex[:12]
        )
        request.state.request_id = request_id
        response: Response = await call_next(request)
        response.headers["X-Request-Id"] = request_id
        return response

    # -- Global exception handlers --
    @app.exception_handler(ZipReelException)
    async def zipreel_exception_handler(
        request: Request, exc: ZipReelException
    ) -> Response:
        """Handle all ZipReelException subclasses with consistent JSON."""
        request_id = getattr(request.state, "request_id", "unknown")

        status_map = {
            UnknownActorError: 404,
            DuplicateIdentifierError: 409,
            InvalidCacheLevelError: 400,
            ConfigurationError: 500,
        }
        status_code = status_map.get(type(exc), 500)

        # e.g. "UnknownActorError" -> "unknownactor"
        error_type = exc.__class__.__name__.replace("Error", "").lower()

        return Response(
            content=ErrorResponse(
                error=error_type,
                message=str(exc),
                request_id=request_id,
            ).model_dump_json(),
            status_code=status_code,
            media_type="application/json",
        )

    # -- Routes --

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Service health check",
    )
    async def health(request: Request) -> HealthResponse:
        """Return service health status and catalog sizes."""
        svc: SearchService = request.app.state.service
        return HealthResponse(
            status="healthy",
            version=request.app.state.version,
            uptime_seconds=round(
                time.time() - request.app.state.start_time, 1
            ),
            components={
                "catalog": "healthy" if len(svc.catalog) > 0 else "empty",
                "users": "healthy" if len(svc.users) > 0 else "empty",
                "cache": "healthy",
            },
        )

    @app.post(
        "/movies",
        response_model=Movie,
        status_code=201,
        summary="Register a movie",
        responses=_DUPLICATE,
    )
    async def add_movie(body: MovieCreate, request: Request) -> Movie:
        svc: SearchService = request.app.state.service
        return svc.add_movie(
            body.id, body.title, body.genre, body.year, body.rating
        )

    @app.post(
        "/users",
        response_model=User,
        status_code=201,
        summary="Register a user",
        responses=_DUPLICATE,
    )
    async def add_user(body: UserCreate, request: Request) -> User:
        svc: SearchService = request.app.state.service
        return svc.add_user(body.id, body.name, body.preferred_genre)

    @app.post(
        "/search",
        response_model=SearchResponse,
        summary="Search by title, genre or year",
        responses=_UNKNOWN_USER,
    )
    async def search(body: SearchRequest, request: Request) -> SearchResponse:
        svc: SearchService = request.app.state.service
        resolution = svc.coordinator.lookup(
            body.user_id,
            SingleFieldQuery(search_type=body.search_type, value=body.value),
        )
        return _to_response(resolution)

    @app.post(
        "/search/multi",
        response_model=SearchResponse,
        summary="Search by genre, year and minimum rating",
        responses=_UNKNOWN_USER,
    )
    async def search_multi(
        body: MultiSearchRequest, request: Request
    ) -> SearchResponse:
        svc: SearchService = request.app.state.service
        resolution = svc.coordinator.lookup(
            body.user_id,
            MultiFieldQuery(
                genre=body.genre, year=body.year, min_rating=body.min_rating
            ),
        )
        return _to_response(resolution)

    @app.get(
        "/cache/stats",
        response_model=StatsSnapshot,
        summary="Hit counters per cache tier",
    )
    async def cache_stats(request: Request) -> StatsSnapshot:
        svc: SearchService = request.app.state.service
        return svc.get_cache_stats()

    @app.delete(
        "/cache/{level}",
        response_model=ClearCacheResponse,
        summary="Clear one cache tier",
        responses=_BAD_LEVEL,
    )
    async def clear_cache(level: str, request: Request) -> ClearCacheResponse:
        svc: SearchService = request.app.state.service
        removed = svc.clear_cache(level)
        return ClearCacheResponse(level=level.upper(), entries_removed=removed)

    return app
