"""Unit tests for the income diversification scorer."""

from __future__ import annotations

import pytest

from fintrack.backend.calculators import IncomeRecord, score_diversification
from fintrack.backend.config.year_config import DiversificationWeights


def _record(name: str, amount: float, **extra: object) -> IncomeRecord:
    return IncomeRecord.model_validate({"source_name": name, "amount": amount, **extra})


@pytest.fixture()
def mixed_income() -> list[IncomeRecord]:
    return [
        _record("Salary", 6_000),
        _record("Freelance", 2_000, category="side-hustle"),
        _record("Dividends", 3_000, recurrence="quarterly", category="investment"),
    ]


def test_empty_income_scores_zero() -> None:
    metrics = score_diversification([])

    assert metrics.overall_score == 0
    assert metrics.source_count == 0
    assert metrics.breakdown == ()
    assert len(metrics.recommendations) == 1
    assert metrics.recommendations[0].startswith("Add more income sources")


def test_zero_amount_sources_are_ignored() -> None:
    metrics = score_diversification([_record("Paused gig", 0)])

    assert metrics.source_count == 0
    assert metrics.breakdown == ()


def test_mixed_income_components(mixed_income: list[IncomeRecord]) -> None:
    metrics = score_diversification(mixed_income)

    assert metrics.source_count == 3
    assert [entry.source_name for entry in metrics.breakdown] == [
        "Salary",
        "Freelance",
        "Dividends",
    ]
    assert metrics.primary_dependency_pct == pytest.approx(200 / 3)
    assert metrics.stability_score == pytest.approx(88_000 / 9_000 * 10)
    assert metrics.growth_potential == pytest.approx(48_000 / 9_000 * 10)
    assert metrics.overall_score == pytest.approx(
        15
        + (100 - 200 / 3) / 4
        + (88_000 / 9_000 * 10) / 4
        + (48_000 / 9_000 * 10) / 4
    )
    assert metrics.recommendations == ()


def test_score_contributions_apply_category_multipliers(
    mixed_income: list[IncomeRecord],
) -> None:
    contributions = {
        entry.source_name: entry.score_contribution
        for entry in score_diversification(mixed_income).breakdown
    }

    assert contributions["Salary"] == pytest.approx(200 / 3)
    assert contributions["Freelance"] == pytest.approx(2_000 / 9_000 * 100 * 1.2)
    assert contributions["Dividends"] == pytest.approx(1_000 / 9_000 * 100 * 1.5)


def test_breakdown_percentages_sum_to_one_hundred(
    mixed_income: list[IncomeRecord],
) -> None:
    metrics = score_diversification(mixed_income + [_record("Rental", 750, category="passive")])

    total = sum(entry.percentage for entry in metrics.breakdown)
    assert total == pytest.approx(100, abs=0.01)


def test_single_salary_triggers_recommendations() -> None:
    metrics = score_diversification([_record("Salary", 5_000)])

    assert metrics.overall_score == pytest.approx(37.5)
    assert metrics.primary_dependency_pct == pytest.approx(100)
    assert metrics.breakdown[0].score_contribution == pytest.approx(50)
    assert len(metrics.recommendations) == 3
    assert any("100%" in item for item in metrics.recommendations)
    assert any("passive" in item for item in metrics.recommendations)


def test_records_are_grouped_by_source_name() -> None:
    metrics = score_diversification(
        [_record("Salary", 4_000), _record("Salary", 2_000, recurrence="none")]
    )

    assert metrics.source_count == 1
    assert metrics.breakdown[0].monthly_amount == pytest.approx(6_000)
    assert metrics.stability_score == pytest.approx((10 * 4_000 + 2 * 2_000) / 6_000 * 10)


def test_even_but_unstable_income_suggests_balancing() -> None:
    records = [
        _record(name, 12_000, recurrence="annual", category="rental")
        for name in ("Lodge", "Cabin", "Barn", "Loft")
    ]

    metrics = score_diversification(records)

    assert metrics.overall_score < 70
    assert "Balance your income sources more evenly" in metrics.recommendations


def test_custom_weights_change_the_score(mixed_income: list[IncomeRecord]) -> None:
    weights = DiversificationWeights(default_growth_points=10)

    default = score_diversification(mixed_income)
    boosted = score_diversification(mixed_income, weights)

    assert boosted.growth_potential > default.growth_potential
    assert boosted.overall_score > default.overall_score


def test_scoring_is_idempotent(mixed_income: list[IncomeRecord]) -> None:
    assert score_diversification(mixed_income) == score_diversification(mixed_income)
