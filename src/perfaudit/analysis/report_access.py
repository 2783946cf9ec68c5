"""Tolerant accessors over report dicts.

Reports come from an external engine; any missing or mistyped field reads as
empty or zero instead of raising.
"""

from __future__ import annotations

import math
from typing import Any


def as_dict(value: object) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: object) -> list[Any]:
    return value if isinstance(value, list) else []


def number_or_zero(value: object) -> float:
    """Return ``value`` as a finite float, or 0.0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return float(value)


def optional_number(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def get_audit(report: object, audit_id: str) -> dict[str, Any]:
    return as_dict(as_dict(as_dict(report).get("audits")).get(audit_id))


def audit_details(report: object, audit_id: str) -> dict[str, Any]:
    return as_dict(get_audit(report, audit_id).get("details"))


def audit_items(report: object, audit_id: str) -> list[dict[str, Any]]:
    """Return the dict rows of ``details.items`` for one audit."""
    return [item for item in as_list(audit_details(report, audit_id).get("items")) if isinstance(item, dict)]
