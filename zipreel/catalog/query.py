"""
Query descriptors for catalog searches.

A descriptor does two jobs: it derives the deterministic cache key used
by both cache tiers, and it filters movies when the primary store is
scanned after a full cache miss.
"""

import math
from decimal import ROUND_DOWN, Decimal, localcontext
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict

from zipreel.catalog.models import Movie


class SearchType(str, Enum):
    """Fields a single-field search can match on."""

    TITLE = "TITLE"
    GENRE = "GENRE"
    YEAR = "YEAR"


def format_rating(rating: float) -> str:
    """Reduce a rating to one decimal place for use in a cache key.

    Digits past the first decimal are dropped, so ``8.04`` and ``8.06``
    both yield ``"8.0"``.  Queries whose thresholds differ only past the
    first decimal therefore share a cache entry.  Non-finite values are
    kept as ``"inf"``, ``"-inf"`` or ``"nan"``.
    """
    if not math.isfinite(rating):
        return str(float(rating))
    # str() first so the shortest repr is quantized, not the binary expansion
    value = Decimal(str(rating))
    with localcontext() as ctx:
        # room for every integer digit plus the one decimal place
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return str(value.quantize(Decimal("0.1"), rounding=ROUND_DOWN))


class SingleFieldQuery(BaseModel):
    """Exact match on one field.

    Attributes:
        search_type: Field to match.
        value: Value compared against the field's string form.
    """

    model_config = ConfigDict(frozen=True)

    search_type: SearchType
    value: str

    @property
    def cache_key(self) -> str:
        return f"{self.search_type.value}:{self.value}"

    def matches(self, movie: Movie) -> bool:
        if self.search_type is SearchType.TITLE:
            return movie.title == self.value
        if self.search_type is SearchType.GENRE:
            return movie.genre == self.value
        return str(movie.year) == self.value


class MultiFieldQuery(BaseModel):
    """Genre and year equality plus a minimum rating.

    Attributes:
        genre: Required genre.
        year: Required release year.
        min_rating: Inclusive lower bound on rating.
    """

    model_config = ConfigDict(frozen=True)

    genre: str
    year: int
    min_rating: float

    @property
    def cache_key(self) -> str:
        return f"MULTI:{self.genre}:{self.year}:{format_rating(self.min_rating)}"

    def matches(self, movie: Movie) -> bool:
        return (
            movie.genre == self.genre
            and movie.year == self.year
            and movie.rating >= self.min_rating
        )


QueryDescriptor = Union[SingleFieldQuery, MultiFieldQuery]
