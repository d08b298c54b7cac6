"""Keyword tables for civic relevance, department and urgency scoring.

Hindi transliterations are included because Delhi posts mix languages.
Multi-word phrases score double when matched (see ``engine.score_text``).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DepartmentRule:
    """A department and the keywords that indicate it."""

    name: str
    full_name: str
    keywords: tuple[str, ...]


GENERAL_DEPARTMENT = "General"
GENERAL_DEPARTMENT_FULL = "Municipal Corporation"

CIVIC_THRESHOLD = 2
REJECTION_REASON = "No civic keywords detected"

# Scored in this order; ties keep the earlier department.
DEPARTMENT_RULES: tuple[DepartmentRule, ...] = (
    DepartmentRule(
        name="PWD",
        full_name="Public Works Department",
        keywords=(
            "pothole", "potholes", "road", "street", "pavement", "asphalt", "highway",
            "lane", "footpath", "sidewalk", "divider", "median", "crack", "bump",
            "broken road", "sadak", "gutter filled", "road repair", "overpass",
            "underpass", "bridge", "road damage", "road condition", "construction",
            "debris on road", "gravel",
        ),
    ),
    DepartmentRule(
        name="Jal Board",
        full_name="Delhi Jal Board",
        keywords=(
            "water", "pipe", "leak", "main", "supply", "tap", "drinkable", "contaminated",
            "sewage", "drain", "sewer", "waterlogging", "flood", "flooding", "burst pipe",
            "paani", "nali", "drainage", "storm drain", "puddle", "overflow",
            "water supply", "no water", "water cut", "dirty water", "water tank",
            "borewell", "groundwater",
        ),
    ),
    DepartmentRule(
        name="Sanitation",
        full_name="MCD Sanitation Department",
        keywords=(
            "garbage", "trash", "waste", "dump", "litter", "bin", "collection", "pickup",
            "smell", "odor", "rat", "pest", "rodent", "cockroach", "filth", "dirty",
            "kachra", "safai", "sweeper", "overflowing bin", "dumping", "illegal dump",
            "hygiene", "open garbage", "waste disposal", "solid waste",
            "sanitation worker",
        ),
    ),
    DepartmentRule(
        name="Electricity",
        full_name="Delhi Electricity Supply Board",
        keywords=(
            "electricity", "power", "light", "streetlight", "transformer", "wire",
            "cable", "electric", "bijli", "current", "voltage", "outage", "power cut",
            "tripping", "sparking", "electric shock", "loose wire", "fallen wire",
            "no electricity", "power failure", "load shedding", "meter",
            "short circuit",
        ),
    ),
    DepartmentRule(
        name="Parks",
        full_name="Parks and Gardens Department",
        keywords=(
            "park", "garden", "playground", "tree", "bush", "grass", "bench", "fountain",
            "trail", "green", "graffiti", "vandal", "restroom", "swing", "slide",
            "park equipment", "DDA park", "fallen tree", "dead tree", "overgrown",
            "recreation", "public space", "plant", "hedge",
        ),
    ),
    DepartmentRule(
        name="Traffic",
        full_name="Delhi Traffic Police",
        keywords=(
            "traffic", "signal", "jam", "congestion", "parking", "illegal parking",
            "double parking", "blocking", "challan", "no parking", "traffic light",
            "zebra crossing", "divider broken", "one way", "road block", "barricade",
            "accident", "speeding", "traffic management", "rush hour",
        ),
    ),
    DepartmentRule(
        name="Health",
        full_name="MCD Health Department",
        keywords=(
            "mosquito", "dengue", "malaria", "stagnant water", "vector", "fogging",
            "hospital", "clinic", "dispensary", "ambulance", "health hazard",
            "disease", "epidemic", "fumigation", "health camp", "medicine",
        ),
    ),
)

HIGH_URGENCY_KEYWORDS: tuple[str, ...] = (
    "danger", "dangerous", "urgent", "emergency", "hazard", "hazardous",
    "accident", "accidents", "injury", "hurt", "blood", "fire", "burning", "flooding",
    "collapse", "fallen", "sparking", "electrocution", "gas leak", "toxic",
    "death", "critical", "immediately", "asap", "severe", "extreme",
    "no water for days", "weeks", "4 days", "5 days", "month", "months",
    "ambulance", "hospital", "child hurt", "kids danger", "school",
)

MEDIUM_URGENCY_KEYWORDS: tuple[str, ...] = (
    "problem", "issue", "blocked", "clogged", "overflowing", "damaged",
    "broken", "missing", "not working", "dirty", "smelly", "pest", "rats",
    "dark", "unsafe", "repeated", "again", "still", "ongoing", "nobody",
    "no one", "ignored", "not resolved", "days", "weeks", "inconvenient",
)

# A post must score at least CIVIC_THRESHOLD against these to be imported.
CIVIC_KEYWORDS: tuple[str, ...] = (
    "pothole", "potholes", "road", "street", "water", "garbage", "trash", "light",
    "electricity", "sewer", "drain", "park", "signal", "parking", "tree",
    "pipe", "leak", "flood", "smell", "waste", "repair", "broken", "fix",
    "accident", "accidents", "complaint", "paani", "bijli", "sadak", "kachra",
    "nali", "safai", "government", "authority", "mcd", "dda", "bses", "pwdurban",
    "municipal",
)

# Days the authority has to resolve a complaint, by urgency.
RESOLUTION_DAYS: dict[str, int] = {
    "high": 3,
    "medium": 7,
    "low": 15,
}
