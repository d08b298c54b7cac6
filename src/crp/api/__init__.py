"""HTTP API."""

from crp.api.app import create_app

__all__ = ["create_app"]
