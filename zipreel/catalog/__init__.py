"""Movie catalog: records, query descriptors and the primary store."""

from zipreel.catalog.models import Movie, User
from zipreel.catalog.query import (
    MultiFieldQuery,
    QueryDescriptor,
    SearchType,
    SingleFieldQuery,
)
from zipreel.catalog.store import MovieCatalog, UserRegistry

__all__ = [
    "Movie",
    "MovieCatalog",
    "MultiFieldQuery",
    "QueryDescriptor",
    "SearchType",
    "SingleFieldQuery",
    "User",
    "UserRegistry",
]
