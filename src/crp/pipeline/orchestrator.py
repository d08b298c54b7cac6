"""Resolution orchestrator.

Sequences classification, location, dedup, persistence, authority lookup and
notification for one post, and drives the batch and preview variants.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from crp.authority import lookup
from crp.classification import classify
from crp.config import Settings
from crp.db import ComplaintStore, build_store
from crp.ingestion import DEFAULT_SUBREDDITS, RedditClient
from crp.location import NominatimGeocoder, RateLimiter, extract_location, resolve_location
from crp.location.geocode import CITY_NAME, Geocoder
from crp.models import (
    AuthorityContact,
    BatchItem,
    BatchSummary,
    CitizenContact,
    Complaint,
    DuplicateOutcome,
    NotificationResult,
    Outcome,
    PreviewItem,
    PreviewSummary,
    RawPost,
    RegisteredOutcome,
    RejectedOutcome,
)
from crp.notify import AuthorityNotifier, CitizenNotifier, EmailNotifier, SmsNotifier
from crp.pipeline.ids import generate_complaint_id
from crp.utils.logging import get_logger
from crp.utils.text import join_post_text, truncate
from crp.utils.time import utc_now


logger = get_logger(__name__)


PREVIEW_BODY_CHARS = 500


def _location_label(locality_name: str) -> str:
    if locality_name == CITY_NAME:
        return CITY_NAME
    return f"{locality_name}, {CITY_NAME}"


def _settled(result: object, channel: str) -> NotificationResult:
    """Turn a gathered result into a NotificationResult; exceptions count as failures."""
    if isinstance(result, NotificationResult):
        return result
    if isinstance(result, BaseException):
        logger.error("resolve.notify.exception channel=%s error=%s", channel, result)
        return NotificationResult(success=False, channel=channel, reason=str(result))
    return NotificationResult(success=False, channel=channel, reason="Unexpected result")


class Resolver:
    """Turn raw posts into registered, routed complaints."""

    def __init__(
        self,
        store: ComplaintStore,
        geocoder: Geocoder,
        reddit: RedditClient,
        authority_notifier: AuthorityNotifier,
        email_notifier: CitizenNotifier,
        sms_notifier: CitizenNotifier,
        limiter: Optional[RateLimiter] = None,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings or Settings()
        self.store = store
        self.geocoder = geocoder
        self.reddit = reddit
        self.authority_notifier = authority_notifier
        self.email_notifier = email_notifier
        self.sms_notifier = sms_notifier
        self.limiter = limiter
        self._sleep = sleep

    async def resolve(
        self, post: RawPost, citizen: Optional[CitizenContact] = None
    ) -> Outcome:
        """Run one post through the full pipeline.

        Rejections and duplicates are returned as outcomes. A storage failure
        on insert propagates and no notification is attempted.
        """
        citizen = citizen or CitizenContact()

        classification = classify(post.title, post.body)
        if not classification.is_civic:
            logger.info(
                "resolve.rejected reddit_id=%s reason=%s",
                post.reddit_id,
                classification.rejection_reason,
            )
            return RejectedOutcome(
                reason=classification.rejection_reason or "",
                classification=classification,
            )

        location = await resolve_location(
            join_post_text(post.title, post.body), self.geocoder, self.limiter
        )

        if post.reddit_id and await self.store.exists(post.reddit_id):
            logger.info("resolve.duplicate reddit_id=%s", post.reddit_id)
            return DuplicateOutcome(reddit_id=post.reddit_id)

        title = post.title.strip()
        complaint = Complaint(
            complaint_id=generate_complaint_id(),
            title=title,
            description=post.body.strip() or title,
            department=classification.department,
            department_full=classification.department_full,
            urgency=classification.urgency,
            confidence=classification.confidence,
            location=_location_label(location.locality_name),
            lat=location.lat,
            lng=location.lng,
            source_handle=f"u/{post.author}" if post.author else None,
            reddit_id=post.reddit_id,
            reddit_permalink=post.permalink or None,
            citizen_email=citizen.email,
            citizen_phone=citizen.phone,
            reported_at=post.created_at or utc_now(),
        )

        stored = await self.store.insert(complaint)
        if stored is None:
            logger.info("resolve.duplicate_on_insert reddit_id=%s", post.reddit_id)
            return DuplicateOutcome(reddit_id=post.reddit_id)

        contact = lookup(location.locality_name, complaint.department)
        authority, citizen_email, citizen_sms = await self._notify(
            complaint, contact, post.permalink, citizen
        )

        citizen_notified = citizen_email.success or citizen_sms.success
        try:
            await self.store.update(
                complaint.complaint_id,
                authority_email_sent=authority.success,
                citizen_notified=citizen_notified,
            )
        except Exception as exc:
            logger.error(
                "resolve.update_failed complaint_id=%s error=%s", complaint.complaint_id, exc
            )

        logger.info(
            "resolve.registered complaint_id=%s department=%s urgency=%s location=%s",
            complaint.complaint_id,
            complaint.department,
            complaint.urgency,
            complaint.location,
        )
        return RegisteredOutcome(
            complaint_id=complaint.complaint_id,
            department=complaint.department,
            department_full=complaint.department_full,
            urgency=complaint.urgency,
            confidence=complaint.confidence,
            location=complaint.location,
            lat=complaint.lat,
            lng=complaint.lng,
            geocoded=location.geocoded,
            authority_body=contact.authority_body,
            authority_zone=contact.zone,
            authority_email_sent=authority.success,
            citizen_email_sent=citizen_email.success,
            citizen_sms_sent=citizen_sms.success,
            reported_at=complaint.reported_at,
            tracking_url=f"{self.settings.tracking_base_url}?id={complaint.complaint_id}",
        )

    async def _notify(
        self,
        complaint: Complaint,
        contact: AuthorityContact,
        source_link: str,
        citizen: CitizenContact,
    ) -> tuple[NotificationResult, NotificationResult, NotificationResult]:
        """Send every applicable notification concurrently; never raises."""

        async def skipped(channel: str, reason: str) -> NotificationResult:
            return NotificationResult(success=False, channel=channel, reason=reason)

        results = await asyncio.gather(
            self.authority_notifier.send_authority_notice(complaint, contact, source_link),
            self.email_notifier.send_citizen_notice(citizen.email, complaint)
            if citizen.email
            else skipped("citizen_email", "No citizen email provided"),
            self.sms_notifier.send_citizen_notice(citizen.phone, complaint)
            if citizen.phone
            else skipped("citizen_sms", "No citizen phone provided"),
            return_exceptions=True,
        )
        channels = ("authority_email", "citizen_email", "citizen_sms")
        return tuple(_settled(result, channel) for result, channel in zip(results, channels))

    async def batch_process(
        self, keyword: str = "pothole", subreddit: str = "delhi", limit: int = 10
    ) -> BatchSummary:
        """Fetch posts for a keyword and register each one in turn."""
        limit = max(1, min(limit, self.settings.batch_max_posts))
        posts = await self.reddit.search(keyword, subreddit, limit)
        logger.info("batch.start keyword=%s subreddit=%s fetched=%s", keyword, subreddit, len(posts))

        summary = BatchSummary()
        for post in posts:
            summary.processed += 1
            outcome = await self.resolve(post)

            if isinstance(outcome, RejectedOutcome):
                summary.rejected += 1
                continue
            if isinstance(outcome, DuplicateOutcome):
                summary.duplicates += 1
                continue

            summary.registered += 1
            summary.complaints.append(
                BatchItem(
                    complaint_id=outcome.complaint_id,
                    title=post.title,
                    department=outcome.department,
                    urgency=outcome.urgency,
                    location=outcome.location,
                    authority_notified=outcome.authority_email_sent,
                )
            )
            await self._sleep(self.settings.batch_post_delay_seconds)

        logger.info(
            "batch.complete processed=%s registered=%s rejected=%s duplicates=%s",
            summary.processed,
            summary.registered,
            summary.rejected,
            summary.duplicates,
        )
        return summary

    async def preview(
        self,
        keyword: str,
        subreddit: str = "delhi",
        limit: int = 20,
        multi: bool = False,
    ) -> PreviewSummary:
        """Fetch and classify posts without geocoding or persisting them."""
        keyword = keyword.strip().lower()
        if multi:
            posts = await self.reddit.search_many(keyword)
            source = " + ".join(DEFAULT_SUBREDDITS)
        else:
            posts = await self.reddit.search(keyword, subreddit, limit)
            source = subreddit

        summary = PreviewSummary(keyword=keyword, source=source, total_fetched=len(posts))
        for post in posts:
            classification = classify(post.title, post.body)
            if not classification.is_civic:
                summary.rejected_count += 1
                continue

            summary.complaints.append(
                PreviewItem(
                    reddit_id=post.reddit_id,
                    reddit_title=post.title,
                    reddit_body=truncate(post.body, PREVIEW_BODY_CHARS),
                    reddit_author=post.author,
                    reddit_permalink=post.permalink,
                    reddit_score=post.score,
                    department=classification.department,
                    department_full=classification.department_full,
                    urgency=classification.urgency,
                    confidence=classification.confidence,
                    extracted_location=extract_location(join_post_text(post.title, post.body))
                    or CITY_NAME,
                    created_at=post.created_at,
                )
            )

        summary.civic_count = len(summary.complaints)
        logger.info(
            "preview.complete keyword=%s fetched=%s civic=%s rejected=%s",
            keyword,
            summary.total_fetched,
            summary.civic_count,
            summary.rejected_count,
        )
        return summary


def build_resolver(settings: Optional[Settings] = None) -> Resolver:
    """Wire a Resolver from settings with the production collaborators."""
    settings = settings or Settings()
    email = EmailNotifier(settings)
    return Resolver(
        store=build_store(settings),
        geocoder=NominatimGeocoder(settings),
        reddit=RedditClient(settings),
        authority_notifier=email,
        email_notifier=email,
        sms_notifier=SmsNotifier(settings),
        limiter=RateLimiter(settings.geocode_min_interval_seconds),
        settings=settings,
    )
