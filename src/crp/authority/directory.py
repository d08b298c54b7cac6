"""Static directory of Delhi municipal contacts by locality.

Entries are checked in order for partial matches, so the first entry whose
name overlaps the locality wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from crp.models import AuthorityContact
from crp.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthorityEntry:
    """Responsible body for a locality."""

    locality: str
    district: str
    authority_body: str
    zone: str
    email: str
    phone: str
    roads_email: Optional[str] = None
    water_email: Optional[str] = None


def _central(locality: str, body: str, zone: str, email: str, phone: str) -> AuthorityEntry:
    return AuthorityEntry(
        locality, "Central Delhi", body, zone, email, phone,
        "pwd_central@delhi.gov.in", "djb.central@delhijalboard.in",
    )


def _north(locality: str, district: str, zone: str) -> AuthorityEntry:
    return AuthorityEntry(
        locality, district, "MCD North Zone", zone,
        "mcd.north@mcdonline.gov.in", "+91-11-23960107",
        "pwd_north@delhi.gov.in", "djb.north@delhijalboard.in",
    )


def _west(locality: str) -> AuthorityEntry:
    return AuthorityEntry(
        locality, "West Delhi", "MCD West Zone", "West Zone",
        "mcd.west@mcdonline.gov.in", "+91-11-25524000",
        "pwd_west@delhi.gov.in", "djb.west@delhijalboard.in",
    )


def _south(locality: str) -> AuthorityEntry:
    return AuthorityEntry(
        locality, "South Delhi", "MCD South Zone", "South Zone",
        "mcd.south@mcdonline.gov.in", "+91-11-26260101",
        "pwd_south@delhi.gov.in", "djb.south@delhijalboard.in",
    )


def _rohini(locality: str) -> AuthorityEntry:
    return AuthorityEntry(
        locality, "North West Delhi", "MCD Rohini Zone", "Rohini Zone",
        "mcd.rohini@mcdonline.gov.in", "+91-11-27044200",
        "pwd_northwest@delhi.gov.in", "djb.northwest@delhijalboard.in",
    )


def _shahdara_south(locality: str) -> AuthorityEntry:
    return AuthorityEntry(
        locality, "East Delhi", "MCD Shahdara South Zone", "Shahdara South Zone",
        "mcd.shahdarasouth@mcdonline.gov.in", "+91-11-22044700",
        "pwd_east@delhi.gov.in", "djb.east@delhijalboard.in",
    )


# NOTE: addresses are illustrative; verify zone mailboxes against mcd.gov.in.
DIRECTORY: tuple[AuthorityEntry, ...] = (
    # Central
    _central(
        "Connaught Place", "NDMC (New Delhi Municipal Council)", "NDMC Zone",
        "complaints@ndmc.gov.in", "+91-11-23746000",
    ),
    _central(
        "Chandni Chowk", "MCD Central Zone", "City SP Zone",
        "mcd.central@mcdonline.gov.in", "+91-11-23926060",
    ),
    _central(
        "Karol Bagh", "MCD Central Zone", "Karol Bagh Zone",
        "karolbagh.mcd@mcdonline.gov.in", "+91-11-23581400",
    ),
    _central(
        "Paharganj", "MCD Central Zone", "City SP Zone",
        "mcd.central@mcdonline.gov.in", "+91-11-23926060",
    ),
    _north("Civil Lines", "North Delhi", "Civil Lines Zone"),
    # West
    _west("Janakpuri"),
    AuthorityEntry(
        "Dwarka", "South West Delhi", "MCD South West Zone", "Dwarka Zone",
        "dwarka.mcd@mcdonline.gov.in", "+91-11-25088400",
        "pwd_southwest@delhi.gov.in", "djb.southwest@delhijalboard.in",
    ),
    _west("Vikaspuri"),
    _west("Rajouri Garden"),
    _west("Punjabi Bagh"),
    _west("Tilak Nagar"),
    # South
    _south("Lajpat Nagar"),
    _south("Hauz Khas"),
    _south("Greater Kailash"),
    _south("Saket"),
    _south("Malviya Nagar"),
    _south("Defence Colony"),
    # North
    _rohini("Rohini"),
    _rohini("Pitampura"),
    _north("Model Town", "North Delhi", "North Zone"),
    _north("Ashok Vihar", "North West Delhi", "North Zone"),
    # East
    _shahdara_south("Mayur Vihar"),
    _shahdara_south("Preet Vihar"),
    _shahdara_south("Laxmi Nagar"),
    AuthorityEntry(
        "Shahdara", "Shahdara", "MCD Shahdara North Zone", "Shahdara North Zone",
        "mcd.shahdaranorth@mcdonline.gov.in", "+91-11-22813377",
        "pwd_east@delhi.gov.in", "djb.east@delhijalboard.in",
    ),
)

DEFAULT_ENTRY = AuthorityEntry(
    locality="Delhi",
    district="Delhi",
    authority_body="MCD Headquarters",
    zone="Central Complaints Cell",
    email="complaints@mcdonline.gov.in",
    phone="+91-11-23924317",
    roads_email="pwd@delhi.gov.in",
    water_email="customercare@delhijalboard.in",
)

ROADS_TERMS = ("pwd", "road")
WATER_TERMS = ("water", "jal", "sewage")


def department_email(entry: AuthorityEntry, department: Optional[str]) -> str:
    """Pick the department-specific mailbox, falling back to the general one."""
    if not department:
        return entry.email

    dept = department.lower()
    if any(term in dept for term in ROADS_TERMS):
        return entry.roads_email or entry.email
    if any(term in dept for term in WATER_TERMS):
        return entry.water_email or entry.email
    return entry.email


def _to_contact(entry: AuthorityEntry, primary_email: str) -> AuthorityContact:
    return AuthorityContact(
        district=entry.district,
        authority_body=entry.authority_body,
        zone=entry.zone,
        email=entry.email,
        phone=entry.phone,
        roads_email=entry.roads_email,
        water_email=entry.water_email,
        primary_email=primary_email,
    )


def default_contact() -> AuthorityContact:
    return _to_contact(DEFAULT_ENTRY, DEFAULT_ENTRY.email)


def find_entry(locality_name: str) -> Optional[AuthorityEntry]:
    """Exact match first, then the first bidirectional substring match."""
    for entry in DIRECTORY:
        if entry.locality == locality_name:
            return entry

    needle = locality_name.lower()
    for entry in DIRECTORY:
        key = entry.locality.lower()
        if key in needle or needle in key:
            return entry
    return None


def lookup(locality_name: Optional[str], department: Optional[str] = None) -> AuthorityContact:
    """Resolve the authority contact for a locality and department."""
    if not locality_name:
        return default_contact()

    entry = find_entry(locality_name)
    if entry is None:
        logger.info("authority.default locality=%s", locality_name)
        return default_contact()

    return _to_contact(entry, department_email(entry, department))
