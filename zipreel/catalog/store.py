"""
Primary movie store and user registry.

Both are plain in-memory registries with uniqueness checks.  The
catalog's :meth:`MovieCatalog.query` is the authoritative, linear-scan
source the cache tiers sit in front of.
"""

import logging
from typing import Dict, List

from zipreel.catalog.models import Movie, User
from zipreel.catalog.query import QueryDescriptor
from zipreel.exceptions import DuplicateIdentifierError

logger = logging.getLogger(__name__)


class MovieCatalog:
    """Registry of movies, scanned in registration order on query."""

    def __init__(self) -> None:
        self._movies: Dict[str, Movie] = {}

    def add_movie(self, movie: Movie) -> Movie:
        """Register a movie.

        Args:
            movie: The movie to register.

        Returns:
            The registered movie.

        Raises:
            DuplicateIdentifierError: If a movie with the same id exists.
        """
        if movie.id in self._movies:
            raise DuplicateIdentifierError(
                f"Movie with ID {movie.id} already exists"
            )
        self._movies[movie.id] = movie
        logger.info(
            "Movie added",
            extra={"movie_id": movie.id, "title": movie.title},
        )
        return movie

    def add(
        self, id: str, title: str, genre: str, year: int, rating: float
    ) -> Movie:
        """Build and register a movie from its fields."""
        return self.add_movie(
            Movie(id=id, title=title, genre=genre, year=year, rating=rating)
        )

    def get(self, movie_id: str) -> Movie:
        """Return a movie by id.

        Raises:
            KeyError: If no such movie is registered.
        """
        return self._movies[movie_id]

    def all(self) -> List[Movie]:
        return list(self._movies.values())

    def query(self, descriptor: QueryDescriptor) -> List[Movie]:
        """Return every movie matching *descriptor*, in registration order."""
        results = [m for m in self._movies.values() if descriptor.matches(m)]
        logger.debug(
            "Primary store scanned",
            extra={
                "cache_key": descriptor.cache_key,
                "scanned": len(self._movies),
                "matched": len(results),
            },
        )
        return results

    def __contains__(self, movie_id: object) -> bool:
        return movie_id in self._movies

    def __len__(self) -> int:
        return len(self._movies)


class UserRegistry:
    """Registry of users allowed to search."""

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}

    def add_user(self, user: User) -> User:
        """Register a user.

        Raises:
            DuplicateIdentifierError: If a user with the same id exists.
        """
        if user.id in self._users:
            raise DuplicateIdentifierError(
                f"User with ID {user.id} already exists"
            )
        self._users[user.id] = user
        logger.info(
            "User added",
            extra={"user_id": user.id, "user_name": user.name},
        )
        return user

    def add(self, id: str, name: str, preferred_genre: str = "") -> User:
        """Build and register a user from its fields."""
        return self.add_user(
            User(id=id, name=name, preferred_genre=preferred_genre)
        )

    def get(self, user_id: str) -> User:
        return self._users[user_id]

    def exists(self, user_id: str) -> bool:
        return user_id in self._users

    def __len__(self) -> int:
        return len(self._users)
