"""Shared fixtures for ZipReel tests."""

import pytest

from zipreel.config import reset_settings
from zipreel.core.service import SearchService


SAMPLE_MOVIES = [
    {"id": "1", "title": "Inception", "genre": "Sci-Fi", "year": 2010, "rating": 9.5},
    {"id": "2", "title": "The Dark Knight", "genre": "Action", "year": 2008, "rating": 9.0},
    {"id": "3", "title": "Iron Man", "genre": "Action", "year": 2008, "rating": 7.9},
    {"id": "4", "title": "Interstellar", "genre": "Sci-Fi", "year": 2014, "rating": 8.6},
    {"id": "5", "title": "Moon", "genre": "Sci-Fi", "year": 2010, "rating": 8.05},
]


@pytest.fixture(autouse=True)
def _clean_settings():
    """Reset the settings singleton before and after each test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def service() -> SearchService:
    """Service with the sample catalog and two users registered."""
    svc = SearchService(max_entries_per_user=5, max_global_entries=20)
    for movie in SAMPLE_MOVIES:
        svc.add_movie(**movie)
    svc.add_user("u1", "John", "Action")
    svc.add_user("u2", "Alice", "Sci-Fi")
    return svc
