"""REST API for ZipReel."""

from zipreel.api.app import create_app

__all__ = ["create_app"]
