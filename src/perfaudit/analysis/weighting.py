"""Weighted ranking of failing audits."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from perfaudit.analysis.report_access import as_dict, as_list, optional_number
from perfaudit.constants.weighting import (
    AUDIT_FAMILY_RECOMMENDATIONS,
    CRITICAL_PERFORMANCE_IMPACT,
    CRITICAL_PERFORMANCE_RECOMMENDATION,
    HEAVY_CATEGORY_RECOMMENDATIONS,
    QUICK_WIN_MIN_IMPACT,
    QUICK_WIN_MIN_SAVINGS,
    QUICK_WINS_RECOMMENDATION,
    RESOURCE_FAMILY_RECOMMENDATIONS,
    TOP_ISSUES_DEFAULT_LIMIT,
    UNKNOWN_CATEGORY,
)
from perfaudit.model import CategoryTotal, IssueMetrics, IssueRanking, WeightedIssue
from perfaudit.types import JsonObject


def _category_membership(report: JsonObject) -> dict[str, tuple[str, float]]:
    """Map audit id to (first category listing it, first nonzero weight)."""
    membership: dict[str, tuple[str, float]] = {}
    for category_id, category in as_dict(report.get("categories")).items():
        for ref in as_list(as_dict(category).get("auditRefs")):
            ref = as_dict(ref)
            audit_id = ref.get("id")
            if not isinstance(audit_id, str):
                continue
            weight = optional_number(ref.get("weight")) or 0.0
            if audit_id not in membership:
                membership[audit_id] = (str(category_id), weight)
            elif membership[audit_id][1] == 0.0 and weight:
                membership[audit_id] = (membership[audit_id][0], weight)
    return membership


def _metrics(audit: dict[str, Any]) -> IssueMetrics | None:
    value = optional_number(audit.get("numericValue"))
    unit: str | None = None
    if value is not None:
        raw_unit = audit.get("numericUnit")
        unit = raw_unit if isinstance(raw_unit, str) and raw_unit else "ms"
    details = as_dict(audit.get("details"))
    savings: float | None = None
    savings_unit: str | None = None
    savings_ms = optional_number(details.get("overallSavingsMs"))
    savings_bytes = optional_number(details.get("overallSavingsBytes"))
    if savings_ms:
        savings, savings_unit = savings_ms, "ms"
    elif savings_bytes:
        savings, savings_unit = savings_bytes, "bytes"
    if value is None and savings is None:
        return None
    return IssueMetrics(
        value=value,
        unit=unit,
        savings=savings,
        savings_unit=savings_unit,
    )


def _recommendations(top: Sequence[WeightedIssue], totals: dict[str, CategoryTotal]) -> tuple[str, ...]:
    codes: list[str] = []

    performance = [issue for issue in top if issue.category == "performance"]
    if performance and performance[0].weighted_impact > CRITICAL_PERFORMANCE_IMPACT:
        codes.append(CRITICAL_PERFORMANCE_RECOMMENDATION)

    for code, fragments in AUDIT_FAMILY_RECOMMENDATIONS:
        if any(fragment in issue.audit_id for issue in top for fragment in fragments):
            codes.append(code)

    for category, threshold, code in HEAVY_CATEGORY_RECOMMENDATIONS:
        total = totals.get(category)
        if total is not None and total.total_impact > threshold:
            codes.append(code)

    quick_wins = [
        issue
        for issue in top
        if issue.metrics is not None
        and issue.metrics.savings is not None
        and issue.metrics.savings > QUICK_WIN_MIN_SAVINGS
        and issue.weighted_impact > QUICK_WIN_MIN_IMPACT
    ]
    if quick_wins:
        codes.append(QUICK_WINS_RECOMMENDATION)

    for code, fragments in RESOURCE_FAMILY_RECOMMENDATIONS:
        if any(fragment in issue.audit_id for issue in top for fragment in fragments):
            codes.append(code)

    return tuple(codes)


def rank_issues(
    report: JsonObject,
    top_n: int = TOP_ISSUES_DEFAULT_LIMIT,
    min_weight: float = 0.0,
) -> IssueRanking:
    """Rank failing audits by ``(1 - score) * weight``.

    Only audits with a numeric score below 1 that some category references are
    considered. Ties in impact are broken by audit id. Totals cover every
    qualifying audit, not just the top ``top_n``.
    """
    if top_n < 0:
        raise ValueError("top_n must be non-negative")
    membership = _category_membership(report)

    issues: list[WeightedIssue] = []
    for audit_id, audit in as_dict(report.get("audits")).items():
        audit = as_dict(audit)
        score = optional_number(audit.get("score"))
        if score is None or score >= 1 or audit_id not in membership:
            continue
        category, weight = membership[audit_id]
        if weight < min_weight:
            continue
        title = audit.get("title")
        description = audit.get("description")
        issues.append(
            WeightedIssue(
                audit_id=audit_id,
                title=title if isinstance(title, str) and title else audit_id,
                description=description if isinstance(description, str) else "",
                score=score,
                weight=weight,
                weighted_impact=(1 - score) * weight,
                category=category or UNKNOWN_CATEGORY,
                metrics=_metrics(audit),
            )
        )

    issues.sort(key=lambda issue: (-issue.weighted_impact, issue.audit_id))

    weights: dict[str, float] = {}
    impacts: dict[str, float] = {}
    counts: dict[str, int] = {}
    for issue in issues:
        weights[issue.category] = weights.get(issue.category, 0.0) + issue.weight
        impacts[issue.category] = impacts.get(issue.category, 0.0) + issue.weighted_impact
        counts[issue.category] = counts.get(issue.category, 0) + 1
    totals = {
        category: CategoryTotal(total_weight=weights[category], total_impact=impacts[category], issue_count=count)
        for category, count in sorted(counts.items())
    }

    total_impact = sum(issue.weighted_impact for issue in issues)
    max_impact = sum(issue.weight for issue in issues)
    top = tuple(issues[:top_n])
    return IssueRanking(
        items=top,
        category_totals=totals,
        total_weighted_impact=total_impact,
        max_possible_impact=max_impact,
        impact_percentage=(total_impact / max_impact) * 100 if max_impact > 0 else 0.0,
        recommendations=_recommendations(top, totals),
    )
