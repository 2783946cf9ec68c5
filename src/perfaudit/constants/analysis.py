"""Thresholds and audit ids used by the critical path analyzer."""

from __future__ import annotations

from typing import Literal

type Impact = Literal["critical", "high", "medium", "low"]
type Priority = Literal["high", "medium", "low"]
type SuggestionKind = Literal["preload", "prefetch", "inline", "defer"]

CRITICAL_CHAINS_AUDIT: str = "critical-request-chains"
NETWORK_REQUESTS_AUDIT: str = "network-requests"
PAINT_METRIC_AUDIT: str = "largest-contentful-paint"
PAINT_ELEMENT_AUDIT: str = "largest-contentful-paint-element"

CRITICAL_DURATION_MS: float = 2000.0
HIGH_DURATION_MS: float = 1000.0
MEDIUM_DURATION_MS: float = 500.0
LARGE_TRANSFER_BYTES: int = 500_000
DEEP_CHAIN_DEPTH: int = 5

IMPACT_RANK: dict[str, int] = {"low": 0, "medium": 1, "high": 2, "critical": 3}
PRIORITY_ORDER: dict[str, int] = {"high": 0, "medium": 1, "low": 2}

LATE_PAINT_START_MS: float = 1000.0
PRELOAD_LEAD_MS: float = 500.0
MIN_PRELOAD_SAVING_MS: float = 1000.0
UNCHAINED_PRELOAD_SAVING_MS: float = 2000.0
INLINE_MAX_DEPTH: int = 1
DEFER_MAX_DEPTH: int = 2
PREFETCH_MIN_DEPTH: int = 5

INLINE_SAVING_RATIO: float = 0.5
DEFER_SAVING_RATIO: float = 0.3
PREFETCH_SAVING_RATIO: float = 0.2

RESOURCE_TYPE_PATTERNS: tuple[tuple[str, str], ...] = (
    (r"\.css$", "Stylesheet"),
    (r"\.m?js$", "Script"),
    (r"\.(png|jpe?g|gif|webp|avif|svg)$", "Image"),
    (r"\.(woff2?|ttf|otf)$", "Font"),
)

# Inline resource references inside a paint element's HTML snippet.
SNIPPET_SRC_PATTERN: str = r"""src=["']([^"']+)["']"""
SNIPPET_CSS_URL_PATTERN: str = r"""url\(["']?([^"')]+)["']?\)"""
