"""Email notifier implementation using SMTP."""

from __future__ import annotations

import asyncio
import html
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Optional

from crp.classification import expected_resolution_days
from crp.config import Settings
from crp.models import AuthorityContact, Complaint, NotificationResult
from crp.utils.logging import get_logger

from .base import NotificationError


logger = get_logger(__name__)


URGENCY_LABELS = {
    "high": "HIGH PRIORITY",
    "medium": "MEDIUM PRIORITY",
    "low": "LOW PRIORITY",
}


def _is_valid_address(address: Optional[str]) -> bool:
    return bool(address) and "@" in address and not address.startswith("@")


def _maps_link(complaint: Complaint) -> str:
    return f"https://maps.google.com/?q={complaint.lat},{complaint.lng}"


def authority_subject(complaint: Complaint) -> str:
    return (
        f"New Civic Complaint - {complaint.complaint_id} - {complaint.location} "
        f"[{complaint.urgency.upper()}]"
    )


def authority_text(complaint: Complaint, source_link: str) -> str:
    days = expected_resolution_days(complaint.urgency)
    return "\n".join(
        [
            "Civic Mirror - New Complaint Alert",
            f"Complaint ID: {complaint.complaint_id}",
            f"Priority: {complaint.urgency.upper()}",
            f"Issue: {complaint.title}",
            f"Description: {complaint.description}",
            f"Location: {complaint.location} ({complaint.lat:.4f}, {complaint.lng:.4f})",
            f"Map: {_maps_link(complaint)}",
            f"Department: {complaint.department_full or complaint.department}",
            f"Source: {source_link or 'n/a'}",
            f"Reported: {complaint.reported_at.isoformat()}",
            "",
            "Please acknowledge within 24 hours and resolve within "
            f"{days} days, quoting {complaint.complaint_id}.",
        ]
    )


def authority_html(complaint: Complaint, contact: AuthorityContact, source_link: str) -> str:
    esc = html.escape
    days = expected_resolution_days(complaint.urgency)
    label = URGENCY_LABELS.get(complaint.urgency, URGENCY_LABELS["medium"])
    source = (
        f'<a href="{esc(source_link)}">View original post</a>' if source_link else "n/a"
    )
    return f"""<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; color: #333; max-width: 600px;">
  <h2>Civic Mirror - New Complaint Alert</h2>
  <p>Dear {esc(contact.authority_body)},</p>
  <p>A new civic complaint has been registered for your zone ({esc(contact.zone)}).</p>
  <p><strong>Complaint ID:</strong> <code>{esc(complaint.complaint_id)}</code></p>
  <p><strong>Priority:</strong> {label}</p>
  <p><strong>Issue:</strong> {esc(complaint.title)}</p>
  <p><strong>Description:</strong> {esc(complaint.description)}</p>
  <p><strong>Location:</strong> {esc(complaint.location)}
    (<a href="{_maps_link(complaint)}">{complaint.lat:.4f}, {complaint.lng:.4f}</a>)</p>
  <p><strong>Department:</strong> {esc(complaint.department_full or complaint.department)}</p>
  <p><strong>Source:</strong> {source}</p>
  <p><strong>Reported on:</strong> {complaint.reported_at.isoformat()}</p>
  <p><strong>Action required:</strong> acknowledge within 24 hours and resolve within
    {days} days.</p>
  <hr>
  <small>Automated message from Civic Mirror. Do not reply to this email.</small>
</body>
</html>"""


def citizen_subject(complaint: Complaint) -> str:
    return f"Complaint Registered - {complaint.complaint_id} - Civic Mirror"


def citizen_text(complaint: Complaint, tracking_url: str) -> str:
    return "\n".join(
        [
            "Your complaint has been registered with Civic Mirror.",
            f"Complaint ID: {complaint.complaint_id}",
            f"Issue: {complaint.title}",
            f"Location: {complaint.location}",
            f"Department notified: {complaint.department_full or complaint.department}",
            f"Priority: {complaint.urgency.upper()}",
            "",
            f"Track your complaint at: {tracking_url}",
        ]
    )


class EmailNotifier:
    """Sends authority notices and citizen confirmations via SMTP."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()

    @property
    def configured(self) -> bool:
        return self.settings.has_smtp

    @property
    def from_address(self) -> str:
        return f'"{self.settings.email_from_name}" <{self.settings.smtp_user}>'

    async def send_authority_notice(
        self, complaint: Complaint, contact: AuthorityContact, source_link: str
    ) -> NotificationResult:
        recipient = contact.primary_email or contact.email
        if not _is_valid_address(recipient):
            return NotificationResult(
                success=False, channel="authority_email", reason="Invalid authority address"
            )

        if not self.configured:
            return self._unconfigured("authority_email", recipient, complaint)

        message = EmailMessage()
        message["Subject"] = authority_subject(complaint)
        message["From"] = self.from_address
        message["To"] = recipient
        cc = sorted(
            {
                address
                for address in (contact.roads_email, contact.water_email)
                if address and address != recipient
            }
        )
        if cc:
            message["Cc"] = ", ".join(cc)
        message.set_content(authority_text(complaint, source_link))
        message.add_alternative(authority_html(complaint, contact, source_link), subtype="html")

        return await self._send(message, "authority_email", complaint)

    async def send_citizen_notice(
        self, destination: str, complaint: Complaint
    ) -> NotificationResult:
        if not _is_valid_address(destination):
            logger.warning("notify.email.invalid_address complaint_id=%s", complaint.complaint_id)
            return NotificationResult(
                success=False, channel="citizen_email", reason="Invalid email address"
            )

        if not self.configured:
            return self._unconfigured("citizen_email", destination, complaint)

        tracking_url = f"{self.settings.tracking_base_url}?id={complaint.complaint_id}"
        message = EmailMessage()
        message["Subject"] = citizen_subject(complaint)
        message["From"] = self.from_address
        message["To"] = destination
        message.set_content(citizen_text(complaint, tracking_url))

        return await self._send(message, "citizen_email", complaint)

    def _unconfigured(
        self, channel: str, recipient: str, complaint: Complaint
    ) -> NotificationResult:
        if self.settings.notify_mock_when_unconfigured:
            logger.info(
                "notify.email.mock channel=%s to=%s complaint_id=%s",
                channel,
                recipient,
                complaint.complaint_id,
            )
            return NotificationResult(success=True, channel=channel, mock=True)
        return NotificationResult(success=False, channel=channel, reason="Email not configured")

    async def _send(
        self, message: EmailMessage, channel: str, complaint: Complaint
    ) -> NotificationResult:
        if "Message-ID" not in message:
            message["Message-ID"] = make_msgid(domain="civicmirror.in")
        try:
            await asyncio.to_thread(self._deliver, message)
        except NotificationError as exc:
            logger.error(
                "notify.email.failed channel=%s complaint_id=%s error=%s",
                channel,
                complaint.complaint_id,
                exc,
            )
            return NotificationResult(success=False, channel=channel, reason=str(exc))

        logger.info(
            "notify.email.sent channel=%s to=%s complaint_id=%s",
            channel,
            message["To"],
            complaint.complaint_id,
        )
        return NotificationResult(
            success=True, channel=channel, channel_id=message.get("Message-ID")
        )

    def _deliver(self, message: EmailMessage) -> None:
        """Blocking SMTP delivery; runs in a worker thread."""
        try:
            with smtplib.SMTP(
                self.settings.smtp_host,
                self.settings.smtp_port,
                timeout=self.settings.smtp_timeout_seconds,
            ) as server:
                if self.settings.smtp_use_tls:
                    server.starttls()

                if self.settings.smtp_user and self.settings.smtp_password:
                    server.login(self.settings.smtp_user, self.settings.smtp_password)

                server.send_message(message)

        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"Email notification failed: {exc}") from exc
