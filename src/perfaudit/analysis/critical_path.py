"""Critical path analysis of one stored report.

The request chains are flattened into an explicit graph, the node behind the
largest visual paint is located, and the path is taken to be that node plus
every request it is reachable from. Requests that only descend from the paint
resource, or sit on unrelated branches, are left off the path. When no paint
resource can be matched to a request, every request is reported and the
result is flagged as a fallback.
"""

from __future__ import annotations

import logging

from perfaudit.analysis.bottlenecks import find_bottlenecks
from perfaudit.analysis.chain_graph import RequestGraph, build_request_graph
from perfaudit.analysis.paint_resource import find_paint_element, find_paint_resource_url
from perfaudit.analysis.report_access import audit_details, audit_items, get_audit, number_or_zero
from perfaudit.analysis.suggestions import build_suggestions
from perfaudit.constants.analysis import CRITICAL_CHAINS_AUDIT, NETWORK_REQUESTS_AUDIT, PAINT_METRIC_AUDIT
from perfaudit.model import CriticalPathAnalysis, RequestChainNode
from perfaudit.types import JsonObject

logger = logging.getLogger(__name__)


def _timeline(graph: RequestGraph, on_path: set[int]) -> list[RequestChainNode]:
    """Every graph node placed on a timeline starting at the earliest request."""
    if not graph.nodes:
        return []
    origin = min(node.start_ms for node in graph.nodes.values())
    ordered = sorted(graph.nodes.values(), key=lambda node: (node.start_ms, node.url))
    return [
        RequestChainNode(
            url=node.url,
            start_time_ms=node.start_ms,
            end_time_ms=node.end_ms,
            duration_ms=node.duration_ms,
            start_offset_ms=node.start_ms - origin,
            transfer_size=node.transfer_size,
            depth=node.depth,
            resource_type=node.resource_type,
            on_critical_path=node.node_id in on_path,
        )
        for node in ordered
    ]


def analyze_critical_path(report: JsonObject) -> CriticalPathAnalysis:
    """Reconstruct the request chain gating the largest paint and rank its costs.

    Identical input always yields an identical result.
    """
    graph = build_request_graph(
        audit_details(report, CRITICAL_CHAINS_AUDIT).get("chains"),
        audit_items(report, NETWORK_REQUESTS_AUDIT),
    )
    paint_url = find_paint_resource_url(report)
    paint_node = graph.node_for_url(paint_url) if paint_url else None

    if paint_node is not None:
        on_path = graph.ancestors_of(paint_node.node_id)
        timeline = _timeline(graph, on_path)
        critical_path = [node for node in timeline if node.on_critical_path]
        fallback = False
    else:
        if paint_url:
            logger.debug("Paint resource %s is not in the request chains", paint_url)
        timeline = _timeline(graph, set())
        critical_path = list(timeline)
        fallback = True

    return CriticalPathAnalysis(
        paint_element=find_paint_element(report),
        paint_time_ms=number_or_zero(get_audit(report, PAINT_METRIC_AUDIT).get("numericValue")),
        paint_resource_url=paint_url,
        critical_path=tuple(critical_path),
        chain_depth=max((node.depth for node in critical_path), default=0),
        total_duration_ms=max((node.start_offset_ms + node.duration_ms for node in critical_path), default=0.0),
        total_transfer_size=sum(node.transfer_size for node in critical_path),
        bottlenecks=find_bottlenecks(critical_path),
        suggestions=build_suggestions(paint_url, timeline, critical_path),
        fallback=fallback,
    )
