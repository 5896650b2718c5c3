"""Error kinds surfaced by the metrics engine."""

from __future__ import annotations


class MetricsError(Exception):
    """Base class for every failure a report request can end with."""


class NotFound(MetricsError, LookupError):
    """Raised when a referenced catalog item does not exist."""


class InvalidRange(MetricsError, ValueError):
    """Raised when a report's start date falls after its end date."""


class UpstreamUnavailable(MetricsError):
    """Raised when a remote collaborator fails, times out or answers non-200."""

    def __init__(self, service: str, detail: str) -> None:
        super().__init__(f"{service} unavailable: {detail}")
        self.service = service
        self.detail = detail
