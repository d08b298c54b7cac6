"""Keyword-scoring classifier for civic complaints."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Optional

from crp.classification.rules import (
    CIVIC_KEYWORDS,
    CIVIC_THRESHOLD,
    DEPARTMENT_RULES,
    GENERAL_DEPARTMENT,
    GENERAL_DEPARTMENT_FULL,
    HIGH_URGENCY_KEYWORDS,
    MEDIUM_URGENCY_KEYWORDS,
    REJECTION_REASON,
    RESOLUTION_DAYS,
    DepartmentRule,
)
from crp.models import ClassificationResult, Urgency
from crp.utils.text import join_post_text


@lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)


def score_text(text: str, keywords: Iterable[str]) -> int:
    """Score text against a keyword list.

    Each whole-word occurrence adds 1, or 2 for multi-word phrases.
    """
    lower = (text or "").lower()
    score = 0
    for keyword in keywords:
        matches = len(_keyword_pattern(keyword).findall(lower))
        weight = 2 if " " in keyword else 1
        score += matches * weight
    return score


def confidence_for_score(score: int) -> int:
    """Map the winning department score to a confidence percentage."""
    if score >= 4:
        return 95
    if score == 3:
        return 85
    if score == 2:
        return 75
    if score == 1:
        return 60
    return 40


def detect_urgency(text: str) -> Urgency:
    high = score_text(text, HIGH_URGENCY_KEYWORDS)
    medium = score_text(text, MEDIUM_URGENCY_KEYWORDS)
    if high >= 2:
        return "high"
    if high >= 1 or medium >= 2:
        return "medium"
    return "low"


def best_department(text: str) -> tuple[Optional[DepartmentRule], int]:
    """Return the strictly highest-scoring department and its score."""
    best: Optional[DepartmentRule] = None
    best_score = 0
    for rule in DEPARTMENT_RULES:
        score = score_text(text, rule.keywords)
        if score > best_score:
            best = rule
            best_score = score
    return best, best_score


def classify(title: str, body: str = "") -> ClassificationResult:
    """Decide whether a post is a civic complaint and route it.

    Priority
    --------
    1) civic relevance gate (score below threshold => rejected)
    2) department with the highest keyword score, else General
    3) confidence from the department score
    4) urgency from high/medium cue words
    """
    text = join_post_text(title, body).lower()

    if score_text(text, CIVIC_KEYWORDS) < CIVIC_THRESHOLD:
        return ClassificationResult(is_civic=False, rejection_reason=REJECTION_REASON)

    rule, score = best_department(text)
    return ClassificationResult(
        is_civic=True,
        department=rule.name if rule else GENERAL_DEPARTMENT,
        department_full=rule.full_name if rule else GENERAL_DEPARTMENT_FULL,
        urgency=detect_urgency(text),
        confidence=confidence_for_score(score),
        keyword_score=score,
    )


def expected_resolution_days(urgency: Optional[str]) -> int:
    """SLA in days for an urgency tier; unknown tiers get the medium SLA."""
    return RESOLUTION_DAYS.get(urgency or "medium", RESOLUTION_DAYS["medium"])
