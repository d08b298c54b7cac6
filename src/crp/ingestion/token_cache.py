"""Single-credential access token cache."""

from __future__ import annotations

import time
from typing import Callable, Optional


# Refresh this many seconds before the issuer says the token expires.
EXPIRY_BUFFER_SECONDS = 60


class TokenCache:
    """Hold one bearer token and its expiry.

    Shared by concurrent requests; a refresh race costs at most one extra
    token request because refreshing is idempotent.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._token: Optional[str] = None
        self._expires_at = 0.0

    def get(self) -> Optional[str]:
        """Return the cached token if it has not expired."""
        if self._token and self._clock() < self._expires_at:
            return self._token
        return None

    def store(self, token: str, expires_in: float) -> None:
        self._token = token
        self._expires_at = self._clock() + expires_in - EXPIRY_BUFFER_SECONDS

    def clear(self) -> None:
        self._token = None
        self._expires_at = 0.0

    @property
    def expires_at(self) -> float:
        return self._expires_at
