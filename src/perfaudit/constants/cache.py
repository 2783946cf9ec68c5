"""Constants used by the report cache and content hashing."""

from __future__ import annotations

CACHE_INDEX_VERSION: int = 1
CACHE_INDEX_FILENAME: str = "index.json"
CACHE_PAYLOAD_SUFFIX: str = ".json"
CACHE_TEMP_PREFIX: str = ".cache-"
CACHE_TEMP_SUFFIX: str = ".tmp"

DEFAULT_CACHE_DIR: str = ".lhdata/reports"
DEFAULT_MAX_REPORTS: int = 100
DEFAULT_TTL_HOURS: float = 24.0

# Hex characters kept from the SHA-256 digest of a target descriptor.
CONTENT_HASH_LENGTH: int = 16

MS_PER_HOUR: int = 60 * 60 * 1000
