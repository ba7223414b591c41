"""
ZipReel exception hierarchy.

All custom exceptions inherit from ZipReelException so callers can
catch a single base type when they want a broad safety net.
"""


class ZipReelException(Exception):
    """Base exception for all ZipReel errors."""


class ConfigurationError(ZipReelException, ValueError):
    """Raised when configuration is invalid or cannot be loaded."""


class UnknownActorError(ZipReelException, KeyError):
    """Raised when a query references a user that is not registered."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "User not found"


class InvalidCacheLevelError(ZipReelException, ValueError):
    """Raised when an administrative clear targets an unknown cache tier."""


class DuplicateIdentifierError(ZipReelException, ValueError):
    """Raised when registering a movie or user id that already exists."""
