"""Utility helpers."""

from crp.utils.logging import configure_logging, get_logger
from crp.utils.text import join_post_text, truncate
from crp.utils.time import from_unix, utc_now

__all__ = [
    "configure_logging",
    "get_logger",
    "join_post_text",
    "truncate",
    "from_unix",
    "utc_now",
]
