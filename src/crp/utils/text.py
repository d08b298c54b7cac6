"""Text helpers."""

from __future__ import annotations


def join_post_text(title: str, body: str = "") -> str:
    """Combine a post title and body into the text blob used for matching."""
    return f"{title or ''} {body or ''}"


def truncate(text: str | None, max_chars: int) -> str:
    """Trim and cut text to at most ``max_chars`` characters."""
    return (text or "").strip()[:max_chars]
