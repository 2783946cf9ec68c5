"""Config data model for audit collection."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from perfaudit.constants.cache import DEFAULT_CACHE_DIR, DEFAULT_MAX_REPORTS, DEFAULT_TTL_HOURS
from perfaudit.constants.collection import (
    DEFAULT_ATTEMPT_TIMEOUT_SECONDS,
    DEFAULT_COLLECT_MAX_AGE_HOURS,
    DEFAULT_CONCURRENCY,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MEMORY_CHECK_INTERVAL_SECONDS,
    DEFAULT_MEMORY_WARNING_MB,
    DEFAULT_RETRY_BACKOFF_SECONDS,
)
from perfaudit.constants.engine import DEFAULT_LIGHTHOUSE_BIN
from perfaudit.constants.pool import DEFAULT_MAX_BROWSERS, DEFAULT_MAX_CREATE_ATTEMPTS, DEFAULT_USER_DATA_DIR


@dataclass(frozen=True)
class AuditConfig:
    """Resolved collection config."""

    cache_dir: Path = Path(DEFAULT_CACHE_DIR)
    max_reports: int = DEFAULT_MAX_REPORTS
    ttl_hours: float = DEFAULT_TTL_HOURS
    collect_max_age_hours: float = DEFAULT_COLLECT_MAX_AGE_HOURS
    max_browsers: int = DEFAULT_MAX_BROWSERS
    user_data_dir: Path = Path(DEFAULT_USER_DATA_DIR)
    concurrency: int = DEFAULT_CONCURRENCY
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS
    attempt_timeout_seconds: float = DEFAULT_ATTEMPT_TIMEOUT_SECONDS
    memory_check_interval_seconds: float = DEFAULT_MEMORY_CHECK_INTERVAL_SECONDS
    memory_warning_mb: int = DEFAULT_MEMORY_WARNING_MB
    max_create_attempts: int = DEFAULT_MAX_CREATE_ATTEMPTS
    lighthouse_bin: str = DEFAULT_LIGHTHOUSE_BIN
    throttling: dict[str, float] | None = None
    blocked_url_patterns: tuple[str, ...] = ()
