"""Income diversification scoring.

The overall score adds four components, each worth at most a quarter of the
scale with the default weights:

* the number of distinct sources (5 points each, capped at 25),
* how little the largest source dominates, ``(100 - primary) / 4``,
* stability, from how regularly each source pays,
* growth potential, from the kind of income each source is.

Stability and growth are averages weighted by each record's share of monthly
income. The weights are user-visible and live in
:class:`~fintrack.backend.config.schema.DiversificationWeights`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from fintrack.backend.config.schema import DiversificationWeights

from .recurrence import record_monthly_equivalent
from .records import IncomeRecord
from .results import DiversificationMetrics, SourceShare
from .utils import clamp, share_of, weighted_average

PASSIVE_KEYWORDS = ("passive", "investment")

_DEFAULT_WEIGHTS = DiversificationWeights()


@dataclass(slots=True)
class _SourceTotals:
    category: str
    monthly_amount: float = 0.0
    records: list[tuple[IncomeRecord, float]] = field(default_factory=list)


def _matching_key(category: str, table: Mapping[str, float]) -> str | None:
    if category in table:
        return category
    for key in table:
        if key in category:
            return key
    return None


def _is_passive(name: str, category: str) -> bool:
    labels = (name.lower(), category)
    return any(keyword in label for keyword in PASSIVE_KEYWORDS for label in labels)


def _contribution(
    category: str, percentage: float, weights: DiversificationWeights
) -> float:
    key = _matching_key(category, weights.contribution_multipliers)
    if key is not None:
        return percentage * weights.contribution_multipliers[key]
    if category == "primary" and percentage > weights.dominant_primary_threshold:
        return percentage * weights.dominant_primary_multiplier
    return percentage


def _recommendations(
    source_count: int,
    primary_dependency: float,
    overall: float,
    has_passive: bool,
) -> list[str]:
    recommendations: list[str] = []
    if source_count < 3:
        recommendations.append(
            "Add more income sources: aim for at least 3-5 different streams"
        )
    if source_count == 0:
        return recommendations

    if primary_dependency > 70:
        recommendations.append(
            "Reduce reliance on your primary income: your largest source provides "
            f"{round(primary_dependency)}% of total income"
        )
    if not has_passive:
        recommendations.append(
            "Add passive income streams to improve long-term financial resilience"
        )
    if source_count >= 3 and primary_dependency < 60 and overall < 70:
        recommendations.append("Balance your income sources more evenly")
    return recommendations


def score(
    income_records: Sequence[IncomeRecord],
    weights: DiversificationWeights | None = None,
) -> DiversificationMetrics:
    """Score how well income is spread across sources."""

    weights = weights or _DEFAULT_WEIGHTS

    sources: dict[str, _SourceTotals] = {}
    for record in income_records:
        monthly = record_monthly_equivalent(record)
        totals = sources.setdefault(record.source_name, _SourceTotals(record.category))
        totals.monthly_amount += monthly
        totals.records.append((record, monthly))

    total_income = sum(totals.monthly_amount for totals in sources.values())
    active = {
        name: totals for name, totals in sources.items() if totals.monthly_amount > 0
    }

    if total_income <= 0 or not active:
        return DiversificationMetrics(
            overall_score=0.0,
            source_count=0,
            primary_dependency_pct=0.0,
            stability_score=0.0,
            growth_potential=0.0,
            breakdown=(),
            recommendations=tuple(_recommendations(0, 0.0, 0.0, False)),
        )

    breakdown = [
        SourceShare(
            source_name=name,
            monthly_amount=totals.monthly_amount,
            percentage=share_of(totals.monthly_amount, total_income),
            score_contribution=_contribution(
                totals.category,
                share_of(totals.monthly_amount, total_income),
                weights,
            ),
        )
        for name, totals in active.items()
    ]
    breakdown.sort(key=lambda entry: entry.percentage, reverse=True)

    weighted_records = [
        (record, monthly)
        for totals in active.values()
        for record, monthly in totals.records
    ]
    scale = weights.points_scale
    stability = weighted_average(
        (weights.stability_points.get(record.recurrence.value, 0.0), monthly)
        for record, monthly in weighted_records
    ) / scale * 100

    def _growth_points(record: IncomeRecord) -> float:
        key = _matching_key(record.category, weights.growth_points)
        if key is None:
            return weights.default_growth_points
        return weights.growth_points[key]

    growth = weighted_average(
        (_growth_points(record), monthly) for record, monthly in weighted_records
    ) / scale * 100

    source_count = len(breakdown)
    primary_dependency = breakdown[0].percentage
    divisor = weights.component_divisor
    overall = clamp(
        min(source_count * weights.source_count_points, weights.source_count_cap)
        + (100 - primary_dependency) / divisor
        + stability / divisor
        + growth / divisor,
        0.0,
        100.0,
    )

    has_passive = any(
        _is_passive(name, totals.category) for name, totals in active.items()
    )

    return DiversificationMetrics(
        overall_score=overall,
        source_count=source_count,
        primary_dependency_pct=primary_dependency,
        stability_score=clamp(stability, 0.0, 100.0),
        growth_potential=clamp(growth, 0.0, 100.0),
        breakdown=tuple(breakdown),
        recommendations=tuple(
            _recommendations(source_count, primary_dependency, overall, has_passive)
        ),
    )


__all__ = ["PASSIVE_KEYWORDS", "score"]
