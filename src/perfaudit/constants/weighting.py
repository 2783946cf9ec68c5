"""Constants for weighted issue ranking."""

from __future__ import annotations

TOP_ISSUES_DEFAULT_LIMIT: int = 10
UNKNOWN_CATEGORY: str = "unknown"

CRITICAL_PERFORMANCE_IMPACT: float = 5.0
HEAVY_PERFORMANCE_IMPACT: float = 20.0
HEAVY_CATEGORY_IMPACT: float = 10.0
QUICK_WIN_MIN_SAVINGS: float = 1000.0
QUICK_WIN_MIN_IMPACT: float = 2.0

# Audit id fragments mapped to recommendation codes, checked in order.
AUDIT_FAMILY_RECOMMENDATIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("optimize-paint", ("largest-contentful-paint",)),
    ("fix-layout-shift", ("cumulative-layout-shift",)),
    ("reduce-blocking-time", ("total-blocking-time",)),
    ("remove-unused-code", ("unused",)),
)
RESOURCE_FAMILY_RECOMMENDATIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("optimize-images", ("image", "webp", "responsive")),
    ("optimize-css", ("css", "style")),
    ("optimize-javascript", ("javascript", "script")),
)

CRITICAL_PERFORMANCE_RECOMMENDATION: str = "address-performance-first"
QUICK_WINS_RECOMMENDATION: str = "quick-wins"

# (category, impact threshold, recommendation code)
HEAVY_CATEGORY_RECOMMENDATIONS: tuple[tuple[str, float, str], ...] = (
    ("performance", HEAVY_PERFORMANCE_IMPACT, "focus-performance"),
    ("accessibility", HEAVY_CATEGORY_IMPACT, "improve-accessibility"),
    ("seo", HEAVY_CATEGORY_IMPACT, "improve-seo"),
)
