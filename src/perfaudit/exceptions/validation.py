"""Target validation exceptions."""

from __future__ import annotations

from perfaudit.exceptions.base import PerfAuditError


class ValidationError(PerfAuditError, ValueError):
    """Raised when a target descriptor is malformed.

    Carries the offending field so callers can report it without parsing
    the message.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
