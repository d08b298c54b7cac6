"""Complaint id generation."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from crp.utils.time import utc_now


ID_PREFIX = "CMR"


def generate_complaint_id(now: Optional[datetime] = None) -> str:
    """Return an id like ``CMR-2026-4F9A1C``."""
    year = (now or utc_now()).year
    return f"{ID_PREFIX}-{year}-{uuid.uuid4().hex[:6].upper()}"
