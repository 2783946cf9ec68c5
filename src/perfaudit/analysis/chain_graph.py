"""Explicit request graph rebuilt from the nested critical-chain tree.

Nodes are keyed by URL. A URL that appears under several parents becomes a
single node with several incoming edges, so the graph can contain cycles;
every traversal here tracks what it has already visited.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from perfaudit.analysis.report_access import as_dict, number_or_zero
from perfaudit.constants.analysis import RESOURCE_TYPE_PATTERNS

_COMPILED_TYPE_PATTERNS = tuple(
    (re.compile(pattern, re.IGNORECASE), name) for pattern, name in RESOURCE_TYPE_PATTERNS
)


@dataclass
class GraphNode:
    """One request in the graph. Times are milliseconds."""

    node_id: int
    url: str
    start_ms: float
    end_ms: float
    transfer_size: int
    depth: int
    resource_type: str
    children: list[int] = field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        return max(0.0, self.end_ms - self.start_ms)


@dataclass
class RequestGraph:
    """Id-indexed request nodes plus root ids in chain order."""

    nodes: dict[int, GraphNode] = field(default_factory=dict)
    roots: list[int] = field(default_factory=list)
    ids_by_url: dict[str, int] = field(default_factory=dict)

    def node_for_url(self, url: str) -> GraphNode | None:
        node_id = self.ids_by_url.get(url)
        return None if node_id is None else self.nodes[node_id]

    def parents(self) -> dict[int, list[int]]:
        """Reverse adjacency: child id to parent ids."""
        reverse: dict[int, list[int]] = {node_id: [] for node_id in self.nodes}
        for node in self.nodes.values():
            for child_id in node.children:
                reverse[child_id].append(node.node_id)
        return reverse

    def ancestors_of(self, node_id: int) -> set[int]:
        """Ids of every node from which ``node_id`` is reachable, itself included."""
        reverse = self.parents()
        seen = {node_id}
        stack = [node_id]
        while stack:
            current = stack.pop()
            for parent_id in reverse.get(current, ()):
                if parent_id not in seen:
                    seen.add(parent_id)
                    stack.append(parent_id)
        return seen


def guess_resource_type(url: str, depth: int) -> str:
    """Infer a resource type from the URL extension; chain roots are documents."""
    if depth == 0:
        return "Document"
    path = urlsplit(url).path
    for pattern, name in _COMPILED_TYPE_PATTERNS:
        if pattern.search(path):
            return name
    return "Other"


def build_request_graph(chains: object, network_records: list[dict[str, Any]]) -> RequestGraph:
    """Flatten ``critical-request-chains`` details into a ``RequestGraph``.

    Chain request times are seconds; they are converted to milliseconds.
    Transfer size and resource type fall back to the network-request record
    for the same URL.
    """
    records_by_url: dict[str, dict[str, Any]] = {}
    for record in network_records:
        url = record.get("url")
        if isinstance(url, str) and url not in records_by_url:
            records_by_url[url] = record

    graph = RequestGraph()

    def add(chain_node: object, depth: int, parent_id: int | None) -> None:
        chain_node = as_dict(chain_node)
        request = as_dict(chain_node.get("request"))
        url = request.get("url")
        if not isinstance(url, str) or not url:
            return

        node_id = graph.ids_by_url.get(url)
        if node_id is None:
            node_id = len(graph.nodes)
            record = records_by_url.get(url, {})
            size = request.get("transferSize")
            if size is None:
                size = record.get("transferSize")
            resource_type = record.get("resourceType")
            if not isinstance(resource_type, str) or not resource_type:
                resource_type = guess_resource_type(url, depth)
            graph.nodes[node_id] = GraphNode(
                node_id=node_id,
                url=url,
                start_ms=number_or_zero(request.get("startTime")) * 1000,
                end_ms=number_or_zero(request.get("endTime")) * 1000,
                transfer_size=int(number_or_zero(size)),
                depth=depth,
                resource_type=resource_type,
            )
            graph.ids_by_url[url] = node_id
            if parent_id is None:
                graph.roots.append(node_id)
        else:
            node = graph.nodes[node_id]
            node.depth = min(node.depth, depth)

        if parent_id is not None and parent_id != node_id:
            siblings = graph.nodes[parent_id].children
            if node_id not in siblings:
                siblings.append(node_id)

        for child in as_dict(chain_node.get("children")).values():
            add(child, depth + 1, node_id)

    for root in as_dict(chains).values():
        add(root, 0, None)
    return graph
