"""Ingestion package."""

from crp.ingestion.fetch_reddit import DEFAULT_SUBREDDITS, RedditClient
from crp.ingestion.token_cache import TokenCache

__all__ = ["DEFAULT_SUBREDDITS", "RedditClient", "TokenCache"]
