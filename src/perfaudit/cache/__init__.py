"""Content-addressable persistence of audit reports."""

from __future__ import annotations

from .fingerprint import content_hash
from .store import ReportCache

__all__ = ["ReportCache", "content_hash"]
