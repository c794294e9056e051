"""HTTP transport package."""

from txstats.api.app import create_app

__all__ = ["create_app"]
