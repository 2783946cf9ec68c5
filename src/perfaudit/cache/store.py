"""Report cache keyed by target content hash.

Layout under the cache root::

    index.json          # metadata for every live entry
    <hash>-<ms>.json    # one payload file per entry

The index has a single writer. Concurrent writers in separate processes are
not coordinated.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from perfaudit.cache.fingerprint import content_hash
from perfaudit.cache.index import load_index, save_index
from perfaudit.constants.cache import (
    CACHE_INDEX_FILENAME,
    CACHE_PAYLOAD_SUFFIX,
    CACHE_TEMP_PREFIX,
    CACHE_TEMP_SUFFIX,
    DEFAULT_MAX_REPORTS,
    DEFAULT_TTL_HOURS,
    MS_PER_HOUR,
)
from perfaudit.exceptions import CacheIOError, NotFoundError
from perfaudit.io import load_json_object, remove_quietly, write_json_atomic
from perfaudit.model import CacheEntry, Target
from perfaudit.types import JsonObject

logger = logging.getLogger(__name__)


class ReportCache:
    """Freshness-bounded, size-bounded store of audit reports."""

    def __init__(
        self,
        root: Path,
        *,
        max_reports: int = DEFAULT_MAX_REPORTS,
        ttl_hours: float = DEFAULT_TTL_HOURS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_reports <= 0:
            raise ValueError("max_reports must be positive")
        if ttl_hours <= 0:
            raise ValueError("ttl_hours must be positive")
        self.root = root
        self.max_reports = max_reports
        self.ttl_ms = int(ttl_hours * MS_PER_HOUR)
        self._clock = clock

    @property
    def index_path(self) -> Path:
        """Location of the index document."""
        return self.root / CACHE_INDEX_FILENAME

    def find(self, target: Target, max_age_hours: float | None = None) -> CacheEntry | None:
        """Return the freshest live entry for ``target`` no older than ``max_age_hours``.

        ``None`` means the cache TTL is the only bound. A miss returns ``None``.
        """
        now = self._now_ms()
        max_age_ms = self.ttl_ms if max_age_hours is None else min(self.ttl_ms, int(max_age_hours * MS_PER_HOUR))
        wanted_hash = content_hash(target)

        candidates = [
            entry
            for entry in load_index(self.index_path)
            if entry.content_hash == wanted_hash
            and entry.target.url == target.url
            and entry.target.device == target.device
            and entry.target.categories == target.categories
            and entry.age_ms(now) <= max_age_ms
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda entry: (entry.timestamp, entry.id))

    def insert(self, target: Target, report: JsonObject) -> CacheEntry:
        """Persist ``report`` for ``target`` and supersede any entry with the same hash."""
        now = self._now_ms()
        target_hash = content_hash(target)
        entry_id = f"{target_hash}-{now}"
        entry = CacheEntry(
            id=entry_id,
            target=target,
            timestamp=now,
            content_hash=target_hash,
            report_path=f"{entry_id}{CACHE_PAYLOAD_SUFFIX}",
        )

        try:
            write_json_atomic(
                path=self._payload_path(entry),
                payload=report,
                temp_prefix=CACHE_TEMP_PREFIX,
                temp_suffix=CACHE_TEMP_SUFFIX,
                indent=None,
            )
        except (OSError, TypeError, ValueError) as exc:
            raise CacheIOError(f"Failed to write report payload for {target.url}: {exc}") from exc

        previous = load_index(self.index_path)
        superseded = [existing for existing in previous if existing.content_hash == target_hash]
        if superseded:
            logger.debug("Superseding %d cache entr(y/ies) for hash %s", len(superseded), target_hash)

        kept = [existing for existing in previous if existing.content_hash != target_hash]
        kept.append(entry)
        live, evicted = self._evict(kept, now)
        save_index(self.index_path, live)

        for stale in superseded + evicted:
            if stale.report_path != entry.report_path:
                self._remove_payload(stale)
        if evicted:
            logger.info("Evicted %d cache entr(y/ies); %d live", len(evicted), len(live))
        return entry

    def load(self, entry: CacheEntry) -> JsonObject:
        """Read the stored report for ``entry``."""
        path = self._payload_path(entry)
        if not path.is_file():
            raise NotFoundError(f"Report payload not found: {path}")
        try:
            return load_json_object(path)
        except OSError as exc:
            raise CacheIOError(f"Failed to read report payload {path}: {exc}") from exc
        except ValueError as exc:
            raise CacheIOError(f"Corrupt report payload {path}: {exc}") from exc

    def get(self, entry_id: str) -> CacheEntry:
        """Return the live entry with ``entry_id``."""
        for entry in load_index(self.index_path):
            if entry.id == entry_id:
                return entry
        raise NotFoundError(f"Cache entry not found: {entry_id}")

    def entries(self) -> tuple[CacheEntry, ...]:
        """Return all indexed entries, newest first."""
        return tuple(sorted(load_index(self.index_path), key=lambda entry: (-entry.timestamp, entry.id)))

    def clear(self) -> None:
        """Drop every entry and its payload file."""
        for entry in load_index(self.index_path):
            self._remove_payload(entry)
        save_index(self.index_path, [])

    def _evict(self, entries: list[CacheEntry], now: int) -> tuple[list[CacheEntry], list[CacheEntry]]:
        """Drop entries past the TTL, then keep only the most recent ``max_reports``."""
        fresh = [entry for entry in entries if entry.age_ms(now) <= self.ttl_ms]
        expired = [entry for entry in entries if entry.age_ms(now) > self.ttl_ms]
        fresh.sort(key=lambda entry: (-entry.timestamp, entry.id))
        return fresh[: self.max_reports], expired + fresh[self.max_reports :]

    def _payload_path(self, entry: CacheEntry) -> Path:
        return self.root / entry.report_path

    def _remove_payload(self, entry: CacheEntry) -> None:
        try:
            remove_quietly(self._payload_path(entry))
        except OSError as exc:
            raise CacheIOError(f"Failed to remove report payload {entry.report_path}: {exc}") from exc

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)
