"""Reading, normalizing and serializing the cache index document."""

from __future__ import annotations

import logging
from pathlib import Path

from perfaudit.constants.cache import CACHE_INDEX_VERSION, CACHE_TEMP_PREFIX, CACHE_TEMP_SUFFIX
from perfaudit.constants.targets import VALID_DEVICES
from perfaudit.exceptions import CacheIOError
from perfaudit.io import load_json_object, write_json_atomic
from perfaudit.model import CacheEntry, Target
from perfaudit.types import CacheIndexPayload, CacheIndexRow

logger = logging.getLogger(__name__)


def load_index(index_path: Path) -> list[CacheEntry]:
    """Load index entries, falling back to an empty index when the file is corrupt.

    A missing file is an empty index. A file that exists but cannot be read
    raises ``CacheIOError``.
    """
    if not index_path.is_file():
        return []

    try:
        payload = load_json_object(index_path)
    except OSError as exc:
        raise CacheIOError(f"Failed to read cache index {index_path}: {exc}") from exc
    except ValueError as exc:
        logger.warning("Discarding corrupt cache index %s: %s", index_path, exc)
        return []

    if payload.get("version") != CACHE_INDEX_VERSION:
        logger.warning("Discarding cache index %s with unsupported version %r", index_path, payload.get("version"))
        return []

    raw_entries = payload.get("entries")
    if not isinstance(raw_entries, list):
        return []

    entries: list[CacheEntry] = []
    for raw in raw_entries:
        entry = _entry_from_row(raw)
        if entry is None:
            logger.debug("Skipping malformed cache index row: %r", raw)
            continue
        entries.append(entry)
    return entries


def save_index(index_path: Path, entries: list[CacheEntry]) -> None:
    """Persist index entries atomically, newest first."""
    ordered = sorted(entries, key=lambda entry: (-entry.timestamp, entry.id))
    payload: CacheIndexPayload = {
        "version": CACHE_INDEX_VERSION,
        "entries": [_row_from_entry(entry) for entry in ordered],
    }
    try:
        write_json_atomic(
            path=index_path,
            payload=payload,
            temp_prefix=CACHE_TEMP_PREFIX,
            temp_suffix=CACHE_TEMP_SUFFIX,
        )
    except OSError as exc:
        raise CacheIOError(f"Failed to write cache index {index_path}: {exc}") from exc


def _row_from_entry(entry: CacheEntry) -> CacheIndexRow:
    return {
        "id": entry.id,
        "url": entry.target.url,
        "device": entry.target.device,
        "categories": list(entry.target.categories),
        "timestamp": entry.timestamp,
        "hash": entry.content_hash,
        "report_path": entry.report_path,
    }


def _entry_from_row(raw: object) -> CacheEntry | None:
    if not isinstance(raw, dict):
        return None

    entry_id = raw.get("id")
    url = raw.get("url")
    device = raw.get("device")
    categories = raw.get("categories")
    timestamp = raw.get("timestamp")
    content_hash = raw.get("hash")
    report_path = raw.get("report_path")

    if not isinstance(entry_id, str) or not entry_id:
        return None
    if not isinstance(url, str) or not isinstance(device, str) or device not in VALID_DEVICES:
        return None
    if not isinstance(categories, list) or not all(isinstance(item, str) for item in categories):
        return None
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        return None
    if not isinstance(content_hash, str) or not isinstance(report_path, str):
        return None

    return CacheEntry(
        id=entry_id,
        target=Target(url=url, device=device, categories=tuple(categories)),  # type: ignore[arg-type]
        timestamp=timestamp,
        content_hash=content_hash,
        report_path=report_path,
    )
