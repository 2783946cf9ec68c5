"""Trim raw Lighthouse output down to the fields analysis reads."""

from __future__ import annotations

import math
from typing import Any

from perfaudit.constants.engine import AUDIT_KEEP_FIELDS
from perfaudit.exceptions import AuditEngineError
from perfaudit.types import JsonObject


def normalize_report(raw: object) -> JsonObject:
    """Return a compact report dict built from raw engine output.

    Raises ``AuditEngineError`` when ``raw`` is not an object or carries no audits.
    """
    if not isinstance(raw, dict):
        raise AuditEngineError(f"Audit engine returned {type(raw).__name__}, expected an object")

    raw_audits = raw.get("audits")
    if not isinstance(raw_audits, dict) or not raw_audits:
        raise AuditEngineError("Audit engine returned a report without audits")

    requested_url = raw.get("requestedUrl")
    final_url = raw.get("finalUrl") or raw.get("finalDisplayedUrl") or requested_url

    return {
        "requestedUrl": requested_url,
        "finalUrl": final_url,
        "fetchTime": raw.get("fetchTime"),
        "lighthouseVersion": raw.get("lighthouseVersion"),
        "userAgent": raw.get("userAgent"),
        "categories": _normalize_categories(raw.get("categories")),
        "audits": {
            str(audit_id): _normalize_audit(str(audit_id), audit)
            for audit_id, audit in raw_audits.items()
            if isinstance(audit, dict)
        },
    }


def clamp_score(value: Any) -> float | None:
    """Clamp a score into ``[0, 1]``; anything non-numeric becomes ``None``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value):
        return None
    return max(0.0, min(1.0, float(value)))


def _normalize_categories(raw: object) -> JsonObject:
    if not isinstance(raw, dict):
        return {}
    categories: JsonObject = {}
    for category_id, category in raw.items():
        if not isinstance(category, dict):
            continue
        refs = category.get("auditRefs")
        categories[str(category_id)] = {
            "id": category.get("id", category_id),
            "title": category.get("title", category_id),
            "score": clamp_score(category.get("score")),
            "auditRefs": [
                {"id": ref.get("id"), "weight": ref.get("weight", 0)}
                for ref in (refs if isinstance(refs, list) else [])
                if isinstance(ref, dict) and ref.get("id")
            ],
        }
    return categories


def _normalize_audit(audit_id: str, audit: dict[str, Any]) -> JsonObject:
    normalized: JsonObject = {
        "id": audit.get("id", audit_id),
        "title": audit.get("title", ""),
        "description": audit.get("description", ""),
        "score": clamp_score(audit.get("score")),
        "scoreDisplayMode": audit.get("scoreDisplayMode"),
    }
    for field_name in AUDIT_KEEP_FIELDS:
        if field_name in audit:
            normalized[field_name] = audit[field_name]
    return normalized
