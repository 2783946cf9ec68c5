"""Configuration-related exceptions."""

from __future__ import annotations

from perfaudit.exceptions.base import PerfAuditError


class ConfigError(PerfAuditError, ValueError):
    """Raised when audit configuration is invalid."""
