"""Core data models for perfaudit."""

from .analysis import (
    Bottleneck,
    CategoryTotal,
    CriticalPathAnalysis,
    IssueMetrics,
    IssueRanking,
    PaintElement,
    RequestChainNode,
    Suggestion,
    WeightedIssue,
)
from .entities import BatchResult, CacheEntry, CollectResult, FailedTarget, Target

__all__ = [
    "BatchResult",
    "Bottleneck",
    "CacheEntry",
    "CategoryTotal",
    "CollectResult",
    "CriticalPathAnalysis",
    "FailedTarget",
    "IssueMetrics",
    "IssueRanking",
    "PaintElement",
    "RequestChainNode",
    "Suggestion",
    "Target",
    "WeightedIssue",
]
