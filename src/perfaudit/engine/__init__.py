"""Audit engine contract and the Lighthouse CLI adapter."""

from __future__ import annotations

from perfaudit.engine.base import AuditEngine, AuditOptions
from perfaudit.engine.lighthouse import LighthouseCliEngine, build_args
from perfaudit.engine.normalize import normalize_report

__all__ = ["AuditEngine", "AuditOptions", "LighthouseCliEngine", "build_args", "normalize_report"]
