"""Contract between the collector and whatever produces audit reports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from perfaudit.model import Target
from perfaudit.pool import BrowserHandle
from perfaudit.types import JsonObject


@dataclass(frozen=True)
class AuditOptions:
    """Per-run knobs forwarded to the audit engine."""

    throttling: dict[str, float] | None = None
    blocked_url_patterns: tuple[str, ...] = ()


class AuditEngine(Protocol):
    """Runs one audit of ``target`` inside the browser leased as ``handle``."""

    async def run(self, target: Target, handle: BrowserHandle, options: AuditOptions) -> JsonObject:
        """Return the audit report, or raise ``AuditEngineError``."""
        ...
