"""Audit engine exceptions."""

from __future__ import annotations

from perfaudit.exceptions.base import PerfAuditError


class AuditEngineError(PerfAuditError):
    """Raised when the audit engine returns no usable report."""

    retryable = True


class AuditTimeoutError(AuditEngineError):
    """Raised when a single audit attempt exceeds its time budget."""
