"""Complaint store backends."""

from __future__ import annotations

from typing import Any, Optional, Protocol

import psycopg
from psycopg import errors as pg_errors

from crp.config import Settings
from crp.db.client import db_cursor
from crp.errors import StorageError
from crp.models import Complaint
from crp.utils.logging import get_logger
from crp.utils.time import utc_now


logger = get_logger(__name__)


SCHEMA_SQL = """
create table if not exists complaints (
  id serial primary key,
  complaint_id text unique not null,
  title text not null,
  description text,
  department text,
  department_full text,
  urgency text check (urgency in ('low', 'medium', 'high')),
  confidence integer,
  status text default 'open' check (status in ('open', 'in_progress', 'resolved')),
  location text,
  lat double precision not null,
  lng double precision not null,
  source text default 'reddit',
  source_handle text,
  reddit_id text unique,
  reddit_permalink text,
  citizen_email text,
  citizen_phone text,
  authority_email_sent boolean default false,
  citizen_notified boolean default false,
  reported_at timestamptz,
  created_at timestamptz default now(),
  updated_at timestamptz default now()
)
"""

INSERT_COLUMNS: tuple[str, ...] = (
    "complaint_id",
    "title",
    "description",
    "department",
    "department_full",
    "urgency",
    "confidence",
    "status",
    "location",
    "lat",
    "lng",
    "source",
    "source_handle",
    "reddit_id",
    "reddit_permalink",
    "citizen_email",
    "citizen_phone",
    "authority_email_sent",
    "citizen_notified",
    "reported_at",
)

UPDATABLE_COLUMNS = frozenset({"authority_email_sent", "citizen_notified", "status"})

SELECT_COLUMNS = ", ".join((*INSERT_COLUMNS, "created_at", "updated_at"))


class ComplaintStore(Protocol):
    """Persistence operations the pipeline needs."""

    async def insert(self, complaint: Complaint) -> Optional[Complaint]:
        """Store a complaint; return None when its reddit_id is already stored."""

    async def exists(self, reddit_id: str) -> bool:
        """Return True when a complaint for this reddit_id exists."""

    async def update(self, complaint_id: str, **fields: Any) -> None:
        """Update mutable fields of a stored complaint."""

    async def list_recent(self, limit: int = 50) -> list[Complaint]:
        """Return the most recently created complaints."""


def _check_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - UPDATABLE_COLUMNS
    if unknown:
        raise ValueError(f"Cannot update columns: {sorted(unknown)}")


class PostgresComplaintStore:
    """Postgres-backed store using psycopg async connections."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()

    async def init_schema(self) -> None:
        try:
            async with db_cursor(self.settings) as cursor:
                await cursor.execute(SCHEMA_SQL)
        except psycopg.Error as exc:
            raise StorageError(f"Database error: {exc}") from exc

    async def insert(self, complaint: Complaint) -> Optional[Complaint]:
        record = complaint.model_dump(include=set(INSERT_COLUMNS))
        placeholders = ", ".join(["%s"] * len(INSERT_COLUMNS))
        query = (
            f"insert into complaints ({', '.join(INSERT_COLUMNS)}) values ({placeholders}) "
            f"on conflict (reddit_id) do nothing returning {SELECT_COLUMNS}"
        )
        try:
            async with db_cursor(self.settings) as cursor:
                await cursor.execute(query, [record[column] for column in INSERT_COLUMNS])
                row = await cursor.fetchone()
        except pg_errors.UniqueViolation:
            logger.info("store.insert.duplicate reddit_id=%s", complaint.reddit_id)
            return None
        except psycopg.Error as exc:
            logger.error("store.insert.failed complaint_id=%s error=%s", complaint.complaint_id, exc)
            raise StorageError(f"Database error: {exc}") from exc

        if row is None:
            logger.info("store.insert.duplicate reddit_id=%s", complaint.reddit_id)
            return None

        logger.info("store.insert.ok complaint_id=%s", complaint.complaint_id)
        return Complaint.model_validate(row)

    async def exists(self, reddit_id: str) -> bool:
        try:
            async with db_cursor(self.settings) as cursor:
                await cursor.execute(
                    "select 1 from complaints where reddit_id = %s limit 1", (reddit_id,)
                )
                row = await cursor.fetchone()
        except psycopg.Error as exc:
            raise StorageError(f"Database error: {exc}") from exc
        return row is not None

    async def update(self, complaint_id: str, **fields: Any) -> None:
        _check_fields(fields)
        if not fields:
            return
        assignments = ", ".join(f"{column} = %s" for column in fields)
        query = f"update complaints set {assignments}, updated_at = now() where complaint_id = %s"
        try:
            async with db_cursor(self.settings) as cursor:
                await cursor.execute(query, [*fields.values(), complaint_id])
        except psycopg.Error as exc:
            raise StorageError(f"Database error: {exc}") from exc

    async def list_recent(self, limit: int = 50) -> list[Complaint]:
        try:
            async with db_cursor(self.settings) as cursor:
                await cursor.execute(
                    f"select {SELECT_COLUMNS} from complaints order by created_at desc limit %s",
                    (limit,),
                )
                rows = await cursor.fetchall()
        except psycopg.Error as exc:
            raise StorageError(f"Database error: {exc}") from exc
        return [Complaint.model_validate(row) for row in rows]


class MemoryComplaintStore:
    """Process-local store used when no database is configured."""

    def __init__(self) -> None:
        self.complaints: dict[str, Complaint] = {}

    async def insert(self, complaint: Complaint) -> Optional[Complaint]:
        if complaint.reddit_id and await self.exists(complaint.reddit_id):
            return None
        if complaint.complaint_id in self.complaints:
            raise StorageError(f"Database error: duplicate complaint_id {complaint.complaint_id}")
        now = utc_now()
        stored = complaint.model_copy(update={"created_at": now, "updated_at": now})
        self.complaints[stored.complaint_id] = stored
        logger.info("store.memory.insert complaint_id=%s", stored.complaint_id)
        return stored

    async def exists(self, reddit_id: str) -> bool:
        return any(c.reddit_id == reddit_id for c in self.complaints.values())

    async def update(self, complaint_id: str, **fields: Any) -> None:
        _check_fields(fields)
        current = self.complaints.get(complaint_id)
        if current is None:
            return
        self.complaints[complaint_id] = current.model_copy(
            update={**fields, "updated_at": utc_now()}
        )

    async def list_recent(self, limit: int = 50) -> list[Complaint]:
        # dicts keep insertion order, newest last
        return list(reversed(self.complaints.values()))[:limit]


def build_store(settings: Optional[Settings] = None) -> ComplaintStore:
    """Postgres when a database is configured, otherwise the in-memory store."""
    settings = settings or Settings()
    if settings.has_database:
        return PostgresComplaintStore(settings)
    logger.warning("store.memory_mode reason=no_database_configured")
    return MemoryComplaintStore()
