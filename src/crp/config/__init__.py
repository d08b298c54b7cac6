"""Configuration package."""

from crp.config.settings import Settings

__all__ = ["Settings"]
