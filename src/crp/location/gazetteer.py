"""Delhi locality catalog and free-text locality extraction.

The catalog is ordered from most specific (sectors, colonies) to least
specific (broad zones). ``extract_location`` returns the first entry found, so
a name must precede any broader name it contains.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Locality:
    """A known place name and the area it belongs to."""

    name: str
    area: str


def _group(area: str, *names: str) -> tuple[Locality, ...]:
    return tuple(Locality(name=name, area=area) for name in names)


LOCALITIES: tuple[Locality, ...] = (
    # Sectors precede the broader "Dwarka" they contain.
    *_group(
        "South West Delhi",
        "Dwarka Sector 10", "Dwarka Sector 12", "Dwarka Sector 13",
        "Dwarka Sector 14", "Dwarka Sector 6", "Dwarka Sector 7", "Dwarka Sector 8",
        "Dwarka",
    ),
    *_group(
        "Central Delhi",
        "Connaught Place", "Karol Bagh", "Paharganj", "Daryaganj", "Chandni Chowk",
        "Lal Kuan", "Kashmere Gate", "Civil Lines", "Tis Hazari", "Mori Gate",
    ),
    *_group(
        "South Delhi",
        "Hauz Khas", "Green Park", "South Extension", "Lajpat Nagar", "Defence Colony",
        "Greater Kailash", "Malviya Nagar", "Saket", "Mehrauli", "Vasant Kunj",
        "Vasant Vihar", "R K Puram", "Munirka", "Safdarjung", "Andrews Ganj",
    ),
    *_group(
        "West Delhi",
        "Janakpuri", "Vikaspuri", "Uttam Nagar", "Tilak Nagar",
        "Rajouri Garden", "Mayapuri", "Punjabi Bagh", "Paschim Vihar", "Subhash Nagar",
    ),
    *_group(
        "North Delhi",
        "Model Town", "Pitampura", "Rohini", "Shalimar Bagh", "Ashok Vihar",
        "Wazirpur", "Shakurpur", "Lawrence Road", "Rani Bagh",
    ),
    *_group(
        "East Delhi",
        "Laxmi Nagar", "Preet Vihar", "Mayur Vihar", "Patparganj", "Kondli",
        "Geeta Colony", "Shahdara", "Dilshad Garden", "Vivek Vihar",
    ),
    *_group(
        "North East Delhi",
        "Yamuna Vihar", "Bhajanpura", "Mustafabad", "Seelampur",
    ),
    # Landmarks people use as location references.
    *_group(
        "Landmark",
        "India Gate", "Lodhi Garden", "Nehru Place", "Sarojini Nagar", "INA Market",
        "Moti Bagh", "Chanakyapuri", "Diplomatic Enclave",
    ),
    *_group(
        "Zone",
        "North Delhi", "South Delhi", "East Delhi", "West Delhi", "Central Delhi",
        "New Delhi",
    ),
)

# Tried in order when no catalog entry matches.
FALLBACK_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"in ([A-Z][a-zA-Z\s]+),?\s*Delhi"),
    re.compile(r"at ([A-Z][a-zA-Z\s]+),?\s*Delhi"),
    re.compile(
        r"near ([A-Z][a-zA-Z\s]+"
        r"(?:Nagar|Colony|Vihar|Bagh|Enclave|Extension|Park|Market|Chowk))"
    ),
)

MIN_FALLBACK_CHARS = 4
MAX_FALLBACK_CHARS = 49


def match_catalog(text: str) -> Optional[Locality]:
    """Return the first catalog locality whose name occurs in the text."""
    lower = text.lower()
    for locality in LOCALITIES:
        if locality.name.lower() in lower:
            return locality
    return None


def match_fallback(text: str) -> Optional[str]:
    """Capture an unlisted place name from phrases like "in X, Delhi"."""
    for pattern in FALLBACK_PATTERNS:
        match = pattern.search(text)
        if not match or not match.group(1):
            continue
        extracted = match.group(1).strip()
        if MIN_FALLBACK_CHARS <= len(extracted) <= MAX_FALLBACK_CHARS:
            return extracted
    return None


def extract_location(text: Optional[str]) -> Optional[str]:
    """Extract the most likely Delhi locality mentioned in text."""
    if not text or not isinstance(text, str):
        return None

    locality = match_catalog(text)
    if locality is not None:
        return locality.name

    return match_fallback(text)
