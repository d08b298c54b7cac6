"""SMS notifier using the Twilio Messages REST API."""

from __future__ import annotations

import re
from typing import Optional

import httpx

from crp.config import Settings
from crp.models import Complaint, NotificationResult
from crp.utils.logging import get_logger

from .base import NotificationError


logger = get_logger(__name__)


MIN_PHONE_CHARS = 10


def format_indian_phone(phone: str) -> str:
    """Format an Indian phone number as E.164 (+91XXXXXXXXXX).

    Handles 9876543210, 09876543210, 919876543210 and +919876543210.
    """
    digits = re.sub(r"\D", "", phone)

    if digits.startswith("91") and len(digits) == 12:
        return f"+{digits}"
    if len(digits) == 10:
        return f"+91{digits}"
    if digits.startswith("0") and len(digits) == 11:
        return f"+91{digits[1:]}"
    return phone if phone.startswith("+") else f"+{digits}"


def sms_body(complaint: Complaint) -> str:
    return "\n".join(
        [
            f"Civic Mirror: Complaint {complaint.complaint_id} registered.",
            f"Issue: {complaint.title[:60]}",
            f"Dept: {complaint.department}",
            "Track at: civicmirror.in/track",
        ]
    )


class SmsNotifier:
    """Sends citizen confirmations by SMS."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or Settings()
        self._transport = transport

    async def send_citizen_notice(
        self, destination: str, complaint: Complaint
    ) -> NotificationResult:
        if not destination or len(destination) < MIN_PHONE_CHARS:
            return NotificationResult(
                success=False, channel="citizen_sms", reason="Invalid phone number"
            )

        phone = format_indian_phone(destination)
        body = sms_body(complaint)

        if not self.settings.has_twilio:
            if self.settings.notify_mock_when_unconfigured:
                logger.info(
                    "notify.sms.mock to=%s complaint_id=%s", phone, complaint.complaint_id
                )
                return NotificationResult(success=True, channel="citizen_sms", mock=True)
            return NotificationResult(
                success=False, channel="citizen_sms", reason="SMS not configured"
            )

        try:
            sid = await self._deliver(phone, body)
        except NotificationError as exc:
            logger.error(
                "notify.sms.failed complaint_id=%s error=%s", complaint.complaint_id, exc
            )
            return NotificationResult(success=False, channel="citizen_sms", reason=str(exc))

        logger.info("notify.sms.sent sid=%s complaint_id=%s", sid, complaint.complaint_id)
        return NotificationResult(success=True, channel="citizen_sms", channel_id=sid)

    async def _deliver(self, phone: str, body: str) -> Optional[str]:
        account_sid = self.settings.twilio_account_sid
        url = f"{self.settings.twilio_api_base_url}/Accounts/{account_sid}/Messages.json"
        data = {
            "From": self.settings.twilio_phone_number,
            "To": phone,
            "Body": body,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.twilio_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    url,
                    data=data,
                    auth=(account_sid, self.settings.twilio_auth_token),
                )
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise NotificationError(f"SMS notification failed: {exc}") from exc

        return payload.get("sid")
