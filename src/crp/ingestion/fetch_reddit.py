"""Reddit search fetcher.

Uses OAuth (client credentials) when REDDIT_CLIENT_ID/SECRET are configured
for the higher rate limit, and the public JSON endpoint otherwise.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional, Sequence

import httpx

from crp.config import Settings
from crp.errors import RateLimited, Unreachable, UpstreamError
from crp.ingestion.token_cache import TokenCache
from crp.models import RawPost
from crp.utils.logging import get_logger
from crp.utils.time import from_unix


logger = get_logger(__name__)


DEFAULT_SUBREDDITS: tuple[str, ...] = ("delhi", "india", "delhiNCR")
DEFAULT_RETRY_AFTER_SECONDS = 60


class RedditClient:
    """Minimal async client for subreddit search."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        token_cache: Optional[TokenCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.token_cache = token_cache or TokenCache()
        self._transport = transport

    async def access_token(self) -> Optional[str]:
        """Return a cached or freshly issued OAuth token, or None to use the public API."""
        cached = self.token_cache.get()
        if cached:
            return cached

        if not self.settings.has_reddit_oauth:
            return None

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.reddit_token_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    f"{self.settings.reddit_public_base_url}/api/v1/access_token",
                    data={"grant_type": "client_credentials"},
                    auth=(self.settings.reddit_client_id, self.settings.reddit_client_secret),
                    headers={"User-Agent": self.settings.reddit_user_agent},
                )
                response.raise_for_status()
                payload = response.json()
            token = payload["access_token"]
            self.token_cache.store(token, float(payload.get("expires_in", 3600)))
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
            logger.warning("reddit.oauth_failed falling_back=public error=%s", exc)
            return None

        logger.info("reddit.oauth_token_acquired")
        return token

    async def search(
        self,
        keyword: str,
        subreddit: str = "delhi",
        limit: int = 25,
    ) -> list[RawPost]:
        """Search one subreddit for recent posts matching a keyword."""
        token = await self.access_token()
        headers = {"User-Agent": self.settings.reddit_user_agent}
        if token:
            url = f"{self.settings.reddit_oauth_base_url}/r/{subreddit}/search"
            headers["Authorization"] = f"Bearer {token}"
        else:
            url = f"{self.settings.reddit_public_base_url}/r/{subreddit}/search.json"

        params: dict[str, str | int] = {
            "q": f"{keyword} Delhi",
            "restrict_sr": "true",
            "sort": "new",
            "limit": limit,
            "t": "month",
        }

        logger.info("reddit.search.start keyword=%s subreddit=%s limit=%s", keyword, subreddit, limit)
        async with httpx.AsyncClient(
            timeout=self.settings.reddit_timeout_seconds,
            transport=self._transport,
        ) as client:
            response = await _get_with_retry(
                client,
                url,
                params=params,
                headers=headers,
                retries=self.settings.reddit_max_retries,
            )

        if response.status_code == 401 and token:
            self.token_cache.clear()
            logger.warning("reddit.token_rejected subreddit=%s", subreddit)
            raise UpstreamError("Reddit API error: HTTP 401")
        if response.status_code == 429:
            retry_after = _retry_after(response)
            raise RateLimited(
                f"Reddit rate limit hit. Wait {retry_after} seconds before retrying.",
                retry_after=retry_after,
            )
        if response.status_code >= 400:
            raise UpstreamError(f"Reddit API error: HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(f"Reddit API error: invalid JSON ({exc})") from exc

        children = ((payload or {}).get("data") or {}).get("children") or []
        posts = [_to_raw_post(child.get("data") or {}) for child in children]
        logger.info("reddit.search.complete subreddit=%s count=%s", subreddit, len(posts))
        return posts

    async def search_many(
        self,
        keyword: str,
        subreddits: Sequence[str] = DEFAULT_SUBREDDITS,
        per_source: int = 15,
    ) -> list[RawPost]:
        """Search several subreddits, dropping cross-posted duplicates.

        A failing subreddit is logged and skipped.
        """
        seen: set[str] = set()
        posts: list[RawPost] = []

        for index, subreddit in enumerate(subreddits):
            if index:
                await asyncio.sleep(self.settings.reddit_source_delay_seconds)
            try:
                found = await self.search(keyword, subreddit, per_source)
            except (RateLimited, Unreachable, UpstreamError) as exc:
                logger.warning("reddit.search_many.source_failed subreddit=%s error=%s", subreddit, exc)
                continue

            for post in found:
                if post.reddit_id and post.reddit_id in seen:
                    continue
                if post.reddit_id:
                    seen.add(post.reddit_id)
                posts.append(post)

        return posts


def _to_raw_post(data: dict[str, Any]) -> RawPost:
    """Convert a Reddit listing child into a RawPost."""
    permalink = data.get("permalink") or ""
    return RawPost(
        reddit_id=data.get("id"),
        title=data.get("title") or "",
        body=data.get("selftext") or "",
        author=data.get("author") or "[deleted]",
        permalink=f"https://www.reddit.com{permalink}" if permalink else "",
        created_at=from_unix(data.get("created_utc")),
        score=data.get("score") or 0,
        num_comments=data.get("num_comments") or 0,
        subreddit=data.get("subreddit"),
    )


def _retry_after(response: httpx.Response) -> int:
    value = response.headers.get("retry-after")
    try:
        return int(float(value)) if value else DEFAULT_RETRY_AFTER_SECONDS
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


async def _get_with_retry(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[dict] = None,
    headers: Optional[dict] = None,
    retries: int = 2,
) -> httpx.Response:
    """GET with simple retry and backoff on 5xx and transport errors."""
    attempt = 0
    while True:
        try:
            response = await client.get(url, params=params, headers=headers)
            if response.status_code >= 500 and attempt < retries:
                attempt += 1
                await asyncio.sleep(min(2**attempt, 8))
                continue
            return response
        except httpx.RequestError as exc:
            attempt += 1
            if attempt > retries:
                raise Unreachable(
                    "Could not connect to Reddit API. Check your internet connection."
                ) from exc
            await asyncio.sleep(min(2**attempt, 8))
