"""
Catalog records for ZipReel.

Movies and users are immutable once registered; the cache tiers hold
references to the same ``Movie`` instances the catalog owns.
"""

from pydantic import BaseModel, ConfigDict, field_validator


class Movie(BaseModel):
    """A single catalog item.

    Attributes:
        id: Unique movie identifier.
        title: Display title.
        genre: Genre label, e.g. ``Sci-Fi``.
        year: Release year.
        rating: Average rating.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    genre: str
    year: int
    rating: float

    @field_validator("id")
    @classmethod
    def id_must_not_be_empty(cls, v: str) -> str:
        """Validate that the movie id is not blank."""
        if not v or not v.strip():
            raise ValueError("Movie id must not be empty")
        return v.strip()


class User(BaseModel):
    """A registered user.

    Attributes:
        id: Unique user identifier.
        name: Display name.
        preferred_genre: Favourite genre; informational only.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    preferred_genre: str = ""

    @field_validator("id")
    @classmethod
    def id_must_not_be_empty(cls, v: str) -> str:
        """Validate that the user id is not blank."""
        if not v or not v.strip():
            raise ValueError("User id must not be empty")
        return v.strip()
