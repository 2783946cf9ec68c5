"""Retry policy for batch collection."""

from __future__ import annotations

from perfaudit.exceptions import PerfAuditError


def is_retryable(exc: BaseException) -> bool:
    """Return True when another attempt at the same target may succeed."""
    return isinstance(exc, PerfAuditError) and exc.retryable


def backoff_delay(attempt: int, base_seconds: float) -> float:
    """Seconds to wait after failed ``attempt`` (1-based) before the next one."""
    if attempt < 1:
        raise ValueError("attempt must be >= 1")
    return base_seconds * attempt
