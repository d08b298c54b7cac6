"""Core data models for classification, routing and registration."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


Urgency = Literal["low", "medium", "high"]
ComplaintStatus = Literal["open", "in_progress", "resolved"]


class _CamelModel(BaseModel):
    """Accept and emit camelCase keys while keeping snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class RawPost(_CamelModel):
    """A social-media post as received from the fetch collaborator or a client."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    reddit_id: Optional[str] = None
    title: str = ""
    body: str = ""
    author: str = "anonymous"
    permalink: str = ""
    created_at: Optional[datetime] = None
    score: int = 0
    num_comments: int = 0
    subreddit: Optional[str] = None

    @field_validator("title", "body", "permalink", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Optional[str]) -> str:
        return "" if value is None else value

    @field_validator("author", mode="before")
    @classmethod
    def _none_as_anonymous(cls, value: Optional[str]) -> str:
        return value or "anonymous"


class ClassificationResult(_CamelModel):
    """Outcome of keyword classification for one post."""

    is_civic: bool
    department: Optional[str] = None
    department_full: Optional[str] = None
    urgency: Optional[Urgency] = None
    confidence: int = Field(default=0, ge=0, le=100)
    keyword_score: int = Field(default=0, ge=0)
    rejection_reason: Optional[str] = None


class GeocodeHit(_CamelModel):
    """A single geocoder result."""

    lat: float
    lng: float
    display_name: str
    bounding_box: Optional[list[str]] = None


class LocationResolution(_CamelModel):
    """Resolved locality and coordinates; coordinates are never missing."""

    locality_name: str
    lat: float
    lng: float
    display_name: str
    geocoded: bool = False
    bounding_box: Optional[list[str]] = None


class AuthorityContact(_CamelModel):
    """Responsible authority for a locality, with the email chosen for a department."""

    district: str
    authority_body: str
    zone: str
    email: str
    phone: str
    roads_email: Optional[str] = None
    water_email: Optional[str] = None
    primary_email: str


class CitizenContact(_CamelModel):
    """Optional citizen contact details supplied at registration."""

    email: Optional[str] = None
    phone: Optional[str] = None


class Complaint(_CamelModel):
    """The persisted complaint aggregate."""

    complaint_id: str
    title: str
    description: str
    department: str
    department_full: str
    urgency: Urgency
    confidence: int = Field(ge=0, le=100)
    status: ComplaintStatus = "open"
    location: str
    lat: float
    lng: float
    source: str = "reddit"
    source_handle: Optional[str] = None
    reddit_id: Optional[str] = None
    reddit_permalink: Optional[str] = None
    citizen_email: Optional[str] = None
    citizen_phone: Optional[str] = None
    authority_email_sent: bool = False
    citizen_notified: bool = False
    reported_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NotificationResult(_CamelModel):
    """Result of a single notification attempt."""

    success: bool
    channel: str
    channel_id: Optional[str] = None
    reason: Optional[str] = None
    mock: bool = False


class RegisteredOutcome(_CamelModel):
    """A post that was persisted and routed."""

    kind: Literal["registered"] = "registered"
    complaint_id: str
    department: str
    department_full: str
    urgency: Urgency
    confidence: int
    location: str
    lat: float
    lng: float
    geocoded: bool
    authority_body: str
    authority_zone: str
    authority_email_sent: bool
    citizen_email_sent: bool
    citizen_sms_sent: bool
    reported_at: datetime
    tracking_url: str

    @property
    def citizen_notified(self) -> bool:
        return self.citizen_email_sent or self.citizen_sms_sent


class RejectedOutcome(_CamelModel):
    """A post that classification decided is not a civic complaint."""

    kind: Literal["rejected"] = "rejected"
    reason: str
    classification: ClassificationResult


class DuplicateOutcome(_CamelModel):
    """A post whose source id has already been registered."""

    kind: Literal["duplicate"] = "duplicate"
    reddit_id: Optional[str] = None


Outcome = RegisteredOutcome | RejectedOutcome | DuplicateOutcome


class BatchItem(_CamelModel):
    """Summary of one registered complaint inside a batch run."""

    complaint_id: str
    title: str
    department: str
    urgency: Urgency
    location: str
    authority_notified: bool


class BatchSummary(_CamelModel):
    """Tallies for a batch fetch-and-register run."""

    processed: int = 0
    registered: int = 0
    rejected: int = 0
    duplicates: int = 0
    complaints: list[BatchItem] = Field(default_factory=list)


class PreviewItem(_CamelModel):
    """A classified post shown by the fetch preview, not persisted."""

    reddit_id: Optional[str] = None
    reddit_title: str
    reddit_body: str
    reddit_author: str
    reddit_permalink: str
    reddit_score: int
    department: str
    department_full: str
    urgency: Urgency
    confidence: int
    extracted_location: str
    created_at: Optional[datetime] = None


class PreviewSummary(_CamelModel):
    """Result of a fetch preview."""

    keyword: str
    source: str
    total_fetched: int = 0
    civic_count: int = 0
    rejected_count: int = 0
    complaints: list[PreviewItem] = Field(default_factory=list)
