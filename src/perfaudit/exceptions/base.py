"""Root exception type."""

from __future__ import annotations


class PerfAuditError(Exception):
    """Base class for all perfaudit errors."""

    retryable: bool = False
