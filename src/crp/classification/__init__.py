"""Classification package."""

from crp.classification.engine import (
    classify,
    confidence_for_score,
    detect_urgency,
    expected_resolution_days,
    score_text,
)

__all__ = [
    "classify",
    "confidence_for_score",
    "detect_urgency",
    "expected_resolution_days",
    "score_text",
]
