"""Constants for single and batch report collection."""

from __future__ import annotations

DEFAULT_CONCURRENCY: int = 5
DEFAULT_MAX_ATTEMPTS: int = 3
DEFAULT_RETRY_BACKOFF_SECONDS: float = 1.0
DEFAULT_ATTEMPT_TIMEOUT_SECONDS: float = 120.0

# Freshness bound used when a single collection consults the cache.
DEFAULT_COLLECT_MAX_AGE_HOURS: float = 1.0

DEFAULT_MEMORY_CHECK_INTERVAL_SECONDS: float = 5.0
DEFAULT_MEMORY_WARNING_MB: int = 2000
BYTES_PER_MB: int = 1024 * 1024
