"""Exception taxonomy shared by the pipeline, collaborators and HTTP layer.

Classification rejections and duplicate submissions are not errors; they are
reported as outcome models (see ``crp.models``).
"""

from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for pipeline failures."""


class InputValidationError(PipelineError):
    """Malformed or missing required input. Never retried."""


class UpstreamUnavailable(PipelineError):
    """An external collaborator could not serve the request."""


class RateLimited(UpstreamUnavailable):
    """The upstream asked us to slow down."""

    def __init__(self, message: str, retry_after: Optional[int] = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class Unreachable(UpstreamUnavailable):
    """The upstream could not be reached (connection refused, timeout)."""


class UpstreamError(UpstreamUnavailable):
    """The upstream answered with an unexpected error response."""


class StorageError(PipelineError):
    """Transport or database fault in the complaint store."""
