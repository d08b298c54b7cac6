"""Logging helpers."""

from __future__ import annotations

import logging
from typing import Optional


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Reddit OAuth and Twilio requests carry credentials in their URLs or headers.
QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger; later calls only change the level."""
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
    else:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
