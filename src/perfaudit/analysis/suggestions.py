"""Rule-table optimization suggestions."""

from __future__ import annotations

from collections.abc import Sequence

from perfaudit.constants.analysis import (
    DEFER_MAX_DEPTH,
    DEFER_SAVING_RATIO,
    INLINE_MAX_DEPTH,
    INLINE_SAVING_RATIO,
    LATE_PAINT_START_MS,
    MIN_PRELOAD_SAVING_MS,
    PREFETCH_MIN_DEPTH,
    PREFETCH_SAVING_RATIO,
    PRELOAD_LEAD_MS,
    PRIORITY_ORDER,
    UNCHAINED_PRELOAD_SAVING_MS,
)
from perfaudit.model import RequestChainNode, Suggestion


def _preload(url: str, saving_ms: float) -> Suggestion:
    return Suggestion(
        kind="preload",
        resource=url,
        potential_saving_ms=saving_ms,
        priority="high",
        recommendation=f'Add <link rel="preload" as="image" href="{url}"> to the document head',
    )


def paint_preload(
    paint_url: str | None,
    timeline: Sequence[RequestChainNode],
    critical_path: Sequence[RequestChainNode],
) -> Suggestion | None:
    """Preload suggestion for a paint resource that starts late or sits outside the chains."""
    if paint_url is None:
        return None
    paint_node = next((node for node in timeline if node.url == paint_url), None)
    if paint_node is not None:
        if paint_node.start_offset_ms > LATE_PAINT_START_MS:
            return _preload(paint_url, max(paint_node.start_offset_ms - PRELOAD_LEAD_MS, MIN_PRELOAD_SAVING_MS))
        return None
    if critical_path:
        return _preload(paint_url, UNCHAINED_PRELOAD_SAVING_MS)
    return None


def node_suggestions(node: RequestChainNode) -> list[Suggestion]:
    resource_type = node.resource_type.lower()
    found: list[Suggestion] = []

    if resource_type == "stylesheet" and node.depth <= INLINE_MAX_DEPTH:
        found.append(
            Suggestion(
                kind="inline",
                resource=node.url,
                potential_saving_ms=node.duration_ms * INLINE_SAVING_RATIO,
                priority="medium",
                recommendation=f"Inline the critical CSS from {node.url}",
            )
        )
    if resource_type == "script" and node.depth <= DEFER_MAX_DEPTH and not node.on_critical_path:
        found.append(
            Suggestion(
                kind="defer",
                resource=node.url,
                potential_saving_ms=node.duration_ms * DEFER_SAVING_RATIO,
                priority="medium",
                recommendation=f"Add the defer attribute to {node.url} if it is not needed for first render",
            )
        )
    if node.depth >= PREFETCH_MIN_DEPTH:
        found.append(
            Suggestion(
                kind="prefetch",
                resource=node.url,
                potential_saving_ms=node.duration_ms * PREFETCH_SAVING_RATIO,
                priority="low",
                recommendation=f"Prefetch {node.url} to shorten the request chain",
            )
        )
    return found


def build_suggestions(
    paint_url: str | None,
    timeline: Sequence[RequestChainNode],
    critical_path: Sequence[RequestChainNode],
) -> tuple[Suggestion, ...]:
    """Suggestions for every request in ``timeline``, sorted high to low priority.

    The sort is stable, so suggestions of equal priority keep timeline order.
    """
    found: list[Suggestion] = []
    preload = paint_preload(paint_url, timeline, critical_path)
    if preload is not None:
        found.append(preload)
    for node in timeline:
        found.extend(node_suggestions(node))
    found.sort(key=lambda suggestion: PRIORITY_ORDER[suggestion.priority])
    return tuple(found)
