"""Typed cache index structures."""

from __future__ import annotations

from typing import TypedDict


class CacheIndexRow(TypedDict):
    """Persisted metadata for a single cached report."""

    id: str
    url: str
    device: str
    categories: list[str]
    timestamp: int
    hash: str
    report_path: str


class CacheIndexPayload(TypedDict):
    """Top-level index document persisted beside the report payloads."""

    version: int
    entries: list[CacheIndexRow]
