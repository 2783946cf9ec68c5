"""Shared type aliases for perfaudit."""

from .cache import CacheIndexPayload, CacheIndexRow
from .common import JsonObject, JsonScalar, JsonValue

__all__ = [
    "CacheIndexPayload",
    "CacheIndexRow",
    "JsonObject",
    "JsonScalar",
    "JsonValue",
]
