import re
from datetime import datetime, timezone

from crp.pipeline import generate_complaint_id


def test_complaint_id_format():
    complaint_id = generate_complaint_id(datetime(2026, 3, 1, tzinfo=timezone.utc))
    assert re.fullmatch(r"CMR-2026-[0-9A-F]{6}", complaint_id)


def test_complaint_ids_are_unique():
    ids = {generate_complaint_id() for _ in range(100)}
    assert len(ids) == 100
