"""Configuration loading and validation for perfaudit.

This package facade re-exports the public names so callers can use
``from perfaudit.config import ...``.
"""

from __future__ import annotations

from perfaudit.config.loader import load_config
from perfaudit.config.model import AuditConfig

__all__ = ["AuditConfig", "load_config"]
