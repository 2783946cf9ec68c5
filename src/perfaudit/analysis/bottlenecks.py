"""Severity tiers for critical path nodes."""

from __future__ import annotations

from collections.abc import Iterable

from perfaudit.constants.analysis import (
    CRITICAL_DURATION_MS,
    DEEP_CHAIN_DEPTH,
    HIGH_DURATION_MS,
    IMPACT_RANK,
    LARGE_TRANSFER_BYTES,
    MEDIUM_DURATION_MS,
    Impact,
)
from perfaudit.model import Bottleneck, RequestChainNode


def _raise_to(current: Impact, floor: Impact) -> Impact:
    return floor if IMPACT_RANK[floor] > IMPACT_RANK[current] else current


def classify_node(node: RequestChainNode) -> tuple[Impact, list[str]]:
    """Return the highest tier any signal triggers and the reasons behind it."""
    impact: Impact = "low"
    reasons: list[str] = []

    if node.duration_ms > CRITICAL_DURATION_MS:
        impact = "critical"
        reasons.append("Extremely long load time")
    elif node.duration_ms > HIGH_DURATION_MS:
        impact = "high"
        reasons.append("Long load time")
    elif node.duration_ms > MEDIUM_DURATION_MS:
        impact = "medium"
        reasons.append("Moderate load time")

    if node.transfer_size > LARGE_TRANSFER_BYTES:
        impact = _raise_to(impact, "high")
        reasons.append("Large resource size")

    if node.depth > DEEP_CHAIN_DEPTH:
        impact = _raise_to(impact, "medium")
        reasons.append("Deep in request chain")

    return impact, reasons


def find_bottlenecks(nodes: Iterable[RequestChainNode]) -> tuple[Bottleneck, ...]:
    """Nodes above the ``low`` tier, most severe first, ties in input order."""
    found: list[Bottleneck] = []
    for node in nodes:
        impact, reasons = classify_node(node)
        if impact == "low":
            continue
        found.append(
            Bottleneck(
                url=node.url,
                duration_ms=node.duration_ms,
                transfer_size=node.transfer_size,
                depth=node.depth,
                impact=impact,
                reason=", ".join(reasons),
            )
        )
    found.sort(key=lambda bottleneck: -IMPACT_RANK[bottleneck.impact])
    return tuple(found)
