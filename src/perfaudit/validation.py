"""Target descriptor validation and normalization.

Every collection path runs targets through here before touching the cache,
the browser pool or the audit engine.
"""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import urlsplit

from perfaudit.constants.targets import (
    DEFAULT_CATEGORIES,
    DEFAULT_DEVICE,
    VALID_CATEGORIES,
    VALID_DEVICES,
    VALID_URL_SCHEMES,
)
from perfaudit.exceptions import ValidationError
from perfaudit.model import Target


def build_target(
    url: str,
    device: str = DEFAULT_DEVICE,
    categories: Iterable[str] | None = None,
) -> Target:
    """Validate raw inputs and return a normalized ``Target``."""
    return Target(
        url=_normalize_url(url),
        device=_normalize_device(device),  # type: ignore[arg-type]
        categories=_normalize_categories(DEFAULT_CATEGORIES if categories is None else categories),
    )


def validate_target(target: Target) -> Target:
    """Re-validate a ``Target`` that may have been constructed directly."""
    if not isinstance(target, Target):
        raise ValidationError("target", f"expected Target, got {type(target).__name__}")
    return build_target(target.url, target.device, target.categories)


def _normalize_url(url: object) -> str:
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("url", "must be a non-empty string")
    cleaned = url.strip()
    try:
        parts = urlsplit(cleaned)
    except ValueError as exc:
        raise ValidationError("url", f"invalid URL format: {cleaned}") from exc
    if parts.scheme.lower() not in VALID_URL_SCHEMES:
        raise ValidationError("url", f"scheme must be one of {sorted(VALID_URL_SCHEMES)}: {cleaned}")
    if not parts.hostname:
        raise ValidationError("url", f"missing host: {cleaned}")
    return cleaned


def _normalize_device(device: object) -> str:
    if not isinstance(device, str) or device not in VALID_DEVICES:
        raise ValidationError("device", f"must be one of {sorted(VALID_DEVICES)}, got {device!r}")
    return device


def _normalize_categories(categories: Iterable[str]) -> tuple[str, ...]:
    if isinstance(categories, str):
        raise ValidationError("categories", "must be a list of category names, not a string")
    normalized: set[str] = set()
    for category in categories:
        if not isinstance(category, str) or category not in VALID_CATEGORIES:
            raise ValidationError(
                "categories",
                f"unknown category {category!r}; valid categories: {sorted(VALID_CATEGORIES)}",
            )
        normalized.add(category)
    if not normalized:
        raise ValidationError("categories", "at least one category is required")
    return tuple(sorted(normalized))
