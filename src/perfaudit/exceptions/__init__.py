"""Shared exception hierarchy for perfaudit."""

from __future__ import annotations

from .base import PerfAuditError
from .cache import CacheIOError, NotFoundError
from .config import ConfigError
from .engine import AuditEngineError, AuditTimeoutError
from .pool import PoolClosedError, PoolExhaustedError
from .validation import ValidationError

__all__ = [
    "AuditEngineError",
    "AuditTimeoutError",
    "CacheIOError",
    "ConfigError",
    "NotFoundError",
    "PerfAuditError",
    "PoolClosedError",
    "PoolExhaustedError",
    "ValidationError",
]
