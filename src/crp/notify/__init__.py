"""Notification channels for authorities and citizens."""

from .base import AuthorityNotifier, CitizenNotifier, NotificationError
from .email import EmailNotifier
from .sms import SmsNotifier, format_indian_phone

__all__ = [
    "AuthorityNotifier",
    "CitizenNotifier",
    "EmailNotifier",
    "NotificationError",
    "SmsNotifier",
    "format_indian_phone",
]
