"""perfaudit: pooled browser audits, a report cache and critical path analysis."""

from __future__ import annotations

from typing import Any

__version__ = "0.1.0"

__all__ = [
    "AuditCollector",
    "AuditConfig",
    "BrowserPool",
    "ReportCache",
    "analyze_critical_path",
    "build_target",
    "load_config",
    "rank_issues",
]


def __getattr__(name: str) -> Any:
    """Lazily expose the public API so importing the package stays cheap."""
    if name == "AuditCollector":
        from perfaudit.collector import AuditCollector

        return AuditCollector
    if name in {"AuditConfig", "load_config"}:
        from perfaudit import config

        return getattr(config, name)
    if name == "BrowserPool":
        from perfaudit.pool import BrowserPool

        return BrowserPool
    if name == "ReportCache":
        from perfaudit.cache import ReportCache

        return ReportCache
    if name in {"analyze_critical_path", "rank_issues"}:
        from perfaudit import analysis

        return getattr(analysis, name)
    if name == "build_target":
        from perfaudit.validation import build_target

        return build_target
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
