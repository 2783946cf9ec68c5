"""Pure analyses over stored audit reports."""

from __future__ import annotations

from perfaudit.analysis.critical_path import analyze_critical_path
from perfaudit.analysis.weighting import rank_issues

__all__ = ["analyze_critical_path", "rank_issues"]
