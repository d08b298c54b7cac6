"""Notifier interfaces."""

from typing import Protocol

from crp.models import AuthorityContact, Complaint, NotificationResult


class AuthorityNotifier(Protocol):
    """Forwards a registered complaint to the responsible authority."""

    async def send_authority_notice(
        self, complaint: Complaint, contact: AuthorityContact, source_link: str
    ) -> NotificationResult:
        """Send the notice.

        Expected failures (missing configuration, bad address) are reported
        as ``success=False`` rather than raised.
        """
        ...


class CitizenNotifier(Protocol):
    """Confirms a registration to the citizen who reported it."""

    async def send_citizen_notice(
        self, destination: str, complaint: Complaint
    ) -> NotificationResult:
        """Send the confirmation to an email address or phone number."""
        ...


class NotificationError(Exception):
    """Raised by a transport when a notification fails to send."""
    pass
