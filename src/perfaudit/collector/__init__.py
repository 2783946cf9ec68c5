"""Report collection package."""

from __future__ import annotations

from typing import Any

__all__ = ["AuditCollector", "MemoryMonitor"]


def __getattr__(name: str) -> Any:
    """Lazily expose collector APIs to avoid import cycles at package import time."""
    if name == "AuditCollector":
        from .orchestrator import AuditCollector

        return AuditCollector
    if name == "MemoryMonitor":
        from .memory import MemoryMonitor

        return MemoryMonitor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
