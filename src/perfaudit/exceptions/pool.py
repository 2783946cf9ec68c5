"""Browser pool exceptions."""

from __future__ import annotations

from perfaudit.exceptions.base import PerfAuditError


class PoolExhaustedError(PerfAuditError):
    """Raised when a browser handle could not be created after repeated attempts."""

    retryable = True


class PoolClosedError(PerfAuditError):
    """Raised when acquiring from a pool that is shutting down."""
