"""Test doubles for the pipeline collaborators."""

from datetime import datetime, timezone
from typing import Optional

from crp.db import MemoryComplaintStore
from crp.errors import StorageError
from crp.models import GeocodeHit, NotificationResult, RawPost


class FakeGeocoder:
    def __init__(self, hit: Optional[GeocodeHit] = None, error: Optional[Exception] = None):
        self.hit = hit
        self.error = error
        self.calls: list[str] = []

    async def geocode(self, place_name):
        self.calls.append(place_name)
        if self.error:
            raise self.error
        return self.hit


class FakeNotifier:
    """Records calls; can succeed, fail, or raise per instance."""

    def __init__(self, success: bool = True, error: Optional[Exception] = None):
        self.success = success
        self.error = error
        self.calls: list[tuple] = []

    async def send_authority_notice(self, complaint, contact, source_link):
        self.calls.append(("authority", complaint.complaint_id, contact.primary_email))
        return self._result("authority_email")

    async def send_citizen_notice(self, destination, complaint):
        self.calls.append(("citizen", complaint.complaint_id, destination))
        return self._result("citizen")

    def _result(self, channel):
        if self.error:
            raise self.error
        return NotificationResult(success=self.success, channel=channel)


class FakeReddit:
    def __init__(self, posts=None, error: Optional[Exception] = None):
        self.posts = posts or []
        self.error = error
        self.calls: list[tuple] = []

    async def search(self, keyword, subreddit="delhi", limit=25):
        self.calls.append(("search", keyword, subreddit, limit))
        if self.error:
            raise self.error
        return self.posts[:limit]

    async def search_many(self, keyword, subreddits=None, per_source=15):
        self.calls.append(("search_many", keyword))
        if self.error:
            raise self.error
        return list(self.posts)


class CountingStore(MemoryComplaintStore):
    """Memory store that counts calls and can fail on demand."""

    def __init__(self, fail_insert: bool = False, fail_update: bool = False):
        super().__init__()
        self.fail_insert = fail_insert
        self.fail_update = fail_update
        self.insert_calls = 0
        self.exists_calls = 0
        self.update_calls: list[tuple] = []

    async def insert(self, complaint):
        self.insert_calls += 1
        if self.fail_insert:
            raise StorageError("Database error: connection refused")
        return await super().insert(complaint)

    async def exists(self, reddit_id):
        self.exists_calls += 1
        return await super().exists(reddit_id)

    async def update(self, complaint_id, **fields):
        self.update_calls.append((complaint_id, fields))
        if self.fail_update:
            raise StorageError("Database error: timeout")
        await super().update(complaint_id, **fields)


def make_post(**overrides) -> RawPost:
    payload = {
        "reddit_id": "abc123",
        "title": "Massive pothole in Janakpuri near District Centre",
        "body": "caused accidents",
        "author": "delhi_resident_99",
        "permalink": "https://www.reddit.com/r/delhi/comments/abc123/",
        "created_at": datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc),
    }
    payload.update(overrides)
    return RawPost(**payload)


class FakeClock:
    """Monotonic clock whose sleeps advance time instead of waiting."""

    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
