"""Configuration filenames and bounds."""

from __future__ import annotations

CONFIG_FILENAME: str = "perfaudit.yaml"

CONFIG_ALLOWED_KEYS: frozenset[str] = frozenset(
    {
        "cache_dir",
        "max_reports",
        "ttl_hours",
        "collect_max_age_hours",
        "max_browsers",
        "user_data_dir",
        "concurrency",
        "max_attempts",
        "retry_backoff_seconds",
        "attempt_timeout_seconds",
        "memory_check_interval_seconds",
        "memory_warning_mb",
        "max_create_attempts",
        "lighthouse_bin",
        "throttling",
        "blocked_url_patterns",
    }
)
