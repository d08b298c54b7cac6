import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from crp.config import Settings
from crp.models import Complaint
from crp.notify import SmsNotifier, format_indian_phone


@pytest.fixture
def complaint() -> Complaint:
    return Complaint(
        complaint_id="CMR-2026-ABC123",
        title="No water supply for 5 days in Dwarka",
        description="paani nahi aa raha",
        department="Jal Board",
        department_full="Delhi Jal Board",
        urgency="high",
        confidence=95,
        location="Dwarka, Delhi",
        lat=28.59,
        lng=77.04,
        reported_at=datetime(2026, 1, 15, tzinfo=timezone.utc),
    )


@pytest.fixture
def twilio_settings() -> Settings:
    return Settings(
        _env_file=None,
        TWILIO_ACCOUNT_SID="AC123",
        TWILIO_AUTH_TOKEN="secret",
        TWILIO_PHONE_NUMBER="+15550001111",
    )


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("9876543210", "+919876543210"),
        ("09876543210", "+919876543210"),
        ("919876543210", "+919876543210"),
        ("+91 98765-43210", "+919876543210"),
        ("+15550001111", "+15550001111"),
    ],
)
def test_format_indian_phone(raw, expected):
    assert format_indian_phone(raw) == expected


def test_sends_through_twilio(twilio_settings, complaint):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["authorization"]
        seen["form"] = dict(httpx.QueryParams(request.content.decode()))
        return httpx.Response(201, json={"sid": "SM999"})

    notifier = SmsNotifier(twilio_settings, transport=httpx.MockTransport(handler))
    result = asyncio.run(notifier.send_citizen_notice("9876543210", complaint))

    assert result.success is True
    assert result.channel_id == "SM999"
    assert seen["path"] == "/2010-04-01/Accounts/AC123/Messages.json"
    assert seen["auth"].startswith("Basic ")
    assert seen["form"]["To"] == "+919876543210"
    assert seen["form"]["From"] == "+15550001111"
    assert "CMR-2026-ABC123" in seen["form"]["Body"]
    assert "Dept: Jal Board" in seen["form"]["Body"]


def test_twilio_error_becomes_failed_result(twilio_settings, complaint):
    notifier = SmsNotifier(
        twilio_settings,
        transport=httpx.MockTransport(lambda request: httpx.Response(400, json={"code": 21211})),
    )
    result = asyncio.run(notifier.send_citizen_notice("9876543210", complaint))
    assert result.success is False
    assert result.reason.startswith("SMS notification failed")


def test_short_phone_is_rejected(twilio_settings, complaint):
    result = asyncio.run(SmsNotifier(twilio_settings).send_citizen_notice("12345", complaint))
    assert result.success is False
    assert result.reason == "Invalid phone number"


def test_unconfigured_twilio_returns_mock_success(settings, complaint):
    result = asyncio.run(SmsNotifier(settings).send_citizen_notice("9876543210", complaint))
    assert result.success is True
    assert result.mock is True
