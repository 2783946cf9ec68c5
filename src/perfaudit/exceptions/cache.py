"""Report cache exceptions."""

from __future__ import annotations

from perfaudit.exceptions.base import PerfAuditError


class CacheIOError(PerfAuditError):
    """Raised when the cache index or a report payload cannot be read or written."""


class NotFoundError(PerfAuditError, LookupError):
    """Raised when a requested cache entry or report payload does not exist."""
