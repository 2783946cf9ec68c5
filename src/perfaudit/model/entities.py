"""Frozen dataclasses for targets, cache entries and collection results."""

from __future__ import annotations

from dataclasses import dataclass, field

from perfaudit.constants.targets import Device
from perfaudit.types import JsonObject


@dataclass(frozen=True)
class Target:
    """One audit request: the (url, device, categories) triple.

    ``categories`` is de-duplicated and sorted on construction, so two targets
    naming the same set in a different order compare equal and hash to the
    same cache key.
    """

    url: str
    device: Device = "mobile"
    categories: tuple[str, ...] = ("performance",)

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", tuple(sorted(set(self.categories), key=str)))

    def to_dict(self) -> JsonObject:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "url": self.url,
            "device": self.device,
            "categories": list(self.categories),
        }


@dataclass(frozen=True)
class CacheEntry:
    """Index metadata for one stored report."""

    id: str
    target: Target
    timestamp: int
    content_hash: str
    report_path: str

    def age_ms(self, now_ms: int) -> int:
        """Return entry age in milliseconds relative to ``now_ms``."""
        return now_ms - self.timestamp


@dataclass(frozen=True)
class CollectResult:
    """Outcome of collecting one target."""

    entry_id: str
    url: str
    device: str
    categories: tuple[str, ...]
    timestamp: int
    cached: bool

    @classmethod
    def from_entry(cls, entry: CacheEntry, *, cached: bool) -> CollectResult:
        """Build a result from the cache entry that backs it."""
        return cls(
            entry_id=entry.id,
            url=entry.target.url,
            device=entry.target.device,
            categories=entry.target.categories,
            timestamp=entry.timestamp,
            cached=cached,
        )

    def to_dict(self) -> JsonObject:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "entry_id": self.entry_id,
            "url": self.url,
            "device": self.device,
            "categories": list(self.categories),
            "timestamp": self.timestamp,
            "cached": self.cached,
        }


@dataclass(frozen=True)
class FailedTarget:
    """A batch item that exhausted its attempts or failed permanently."""

    target: Target
    error: str
    error_type: str
    attempts: int

    def to_dict(self) -> JsonObject:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "target": self.target.to_dict(),
            "error": self.error,
            "error_type": self.error_type,
            "attempts": self.attempts,
        }


@dataclass(frozen=True)
class BatchResult:
    """Strict partition of batch targets into successes and failures."""

    succeeded: tuple[CollectResult, ...] = ()
    failed: tuple[FailedTarget, ...] = ()
    memory_warnings: tuple[str, ...] = field(default=())

    def to_dict(self) -> JsonObject:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "succeeded": [result.to_dict() for result in self.succeeded],
            "failed": [failure.to_dict() for failure in self.failed],
            "memory_warnings": list(self.memory_warnings),
        }
