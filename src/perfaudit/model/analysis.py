"""Frozen dataclasses produced by report analysis."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from perfaudit.constants.analysis import Impact, Priority, SuggestionKind
from perfaudit.types import JsonObject


@dataclass(frozen=True)
class RequestChainNode:
    """One network request placed on the reconstructed chain timeline."""

    url: str
    start_time_ms: float
    end_time_ms: float
    duration_ms: float
    start_offset_ms: float
    transfer_size: int
    depth: int
    resource_type: str
    on_critical_path: bool


@dataclass(frozen=True)
class PaintElement:
    """The element reported as the largest visual paint."""

    selector: str
    url: str | None
    node_label: str | None


@dataclass(frozen=True)
class Bottleneck:
    """A critical path node that crossed at least one severity threshold."""

    url: str
    duration_ms: float
    transfer_size: int
    depth: int
    impact: Impact
    reason: str


@dataclass(frozen=True)
class Suggestion:
    """A rule-table optimization suggestion for one resource."""

    kind: SuggestionKind
    resource: str
    potential_saving_ms: float
    priority: Priority
    recommendation: str


@dataclass(frozen=True)
class CriticalPathAnalysis:
    """Result of analyzing one report's request chains against its paint event."""

    paint_element: PaintElement | None
    paint_time_ms: float
    paint_resource_url: str | None
    critical_path: tuple[RequestChainNode, ...]
    chain_depth: int
    total_duration_ms: float
    total_transfer_size: int
    bottlenecks: tuple[Bottleneck, ...]
    suggestions: tuple[Suggestion, ...]
    fallback: bool

    def to_dict(self) -> JsonObject:
        """Serialize to a JSON-compatible dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class IssueMetrics:
    """Numeric context attached to a weighted issue."""

    value: float | None = None
    unit: str | None = None
    savings: float | None = None
    savings_unit: str | None = None


@dataclass(frozen=True)
class WeightedIssue:
    """One failing audit ranked by its weighted impact."""

    audit_id: str
    title: str
    description: str
    score: float
    weight: float
    weighted_impact: float
    category: str
    metrics: IssueMetrics | None = None


@dataclass(frozen=True)
class CategoryTotal:
    """Aggregate weight and impact of the failing audits in one category."""

    total_weight: float
    total_impact: float
    issue_count: int


@dataclass(frozen=True)
class IssueRanking:
    """Top weighted issues plus per-category aggregates."""

    items: tuple[WeightedIssue, ...]
    category_totals: dict[str, CategoryTotal]
    total_weighted_impact: float
    max_possible_impact: float
    impact_percentage: float
    recommendations: tuple[str, ...]

    def to_dict(self) -> JsonObject:
        """Serialize to a JSON-compatible dictionary."""
        return asdict(self)
