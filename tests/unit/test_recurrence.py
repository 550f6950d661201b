"""Unit tests for recurrence normalisation."""

from __future__ import annotations

import math

import pytest

from fintrack.backend.calculators import (
    IncomeRecord,
    InvalidAmount,
    Recurrence,
    UnsupportedFrequency,
    annual_equivalent,
    monthly_equivalent,
    parse_recurrence,
)
from fintrack.backend.calculators.recurrence import (
    record_amount,
    record_monthly_equivalent,
)


def test_quarterly_amount_is_spread_over_three_months() -> None:
    assert monthly_equivalent(1200, "quarterly") == pytest.approx(400)


@pytest.mark.parametrize(
    ("recurrence", "expected"),
    [
        ("weekly", 100 * 52 / 12),
        ("bi_weekly", 100 * 26 / 12),
        ("monthly", 100),
        ("semi_annual", 100 / 6),
        ("annual", 100 / 12),
        ("none", 100),
    ],
)
def test_monthly_equivalent_factors(recurrence: str, expected: float) -> None:
    assert monthly_equivalent(100, recurrence) == pytest.approx(expected)


@pytest.mark.parametrize("amount", [0.01, 1, 999.99, 120_000, 1e9])
def test_annual_amount_round_trips_through_twelve_months(amount: float) -> None:
    assert monthly_equivalent(amount, "annual") * 12 == pytest.approx(amount)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("bi-weekly", Recurrence.BI_WEEKLY),
        ("Biweekly", Recurrence.BI_WEEKLY),
        ("yearly", Recurrence.ANNUAL),
        ("annually", Recurrence.ANNUAL),
        ("semi-annual", Recurrence.SEMI_ANNUAL),
        ("one-time", Recurrence.NONE),
        (Recurrence.MONTHLY, Recurrence.MONTHLY),
    ],
)
def test_parse_recurrence_accepts_legacy_spellings(raw: object, expected: Recurrence) -> None:
    assert parse_recurrence(raw) is expected


def test_unknown_recurrence_is_rejected() -> None:
    with pytest.raises(UnsupportedFrequency):
        monthly_equivalent(100, "daily")


@pytest.mark.parametrize("amount", [-1, math.nan, math.inf, "abc"])
def test_invalid_amounts_are_rejected(amount: object) -> None:
    with pytest.raises(InvalidAmount):
        monthly_equivalent(amount, "monthly")  # type: ignore[arg-type]


def test_annual_equivalent_leaves_one_time_amounts_unchanged() -> None:
    assert annual_equivalent(500, "none") == pytest.approx(500)
    assert annual_equivalent(500, "monthly") == pytest.approx(6_000)
    assert annual_equivalent(1_000, "weekly") == pytest.approx(52_000)


def test_record_amount_nets_deductions_and_clamps_at_zero() -> None:
    record = IncomeRecord(
        source_name="Salary",
        amount=4_000,
        deductions=[{"name": "401k", "amount": 500}],
    )
    overdrawn = IncomeRecord(
        source_name="Stipend",
        amount=100,
        deductions=[{"name": "Fees", "amount": 250}],
    )

    assert record_amount(record) == pytest.approx(3_500)
    assert record_amount(overdrawn) == 0.0
    assert record_monthly_equivalent(record) == pytest.approx(3_500)


def test_record_monthly_equivalent_uses_current_values() -> None:
    record = IncomeRecord(source_name="Consulting", amount=3_000, recurrence="quarterly")
    first = record_monthly_equivalent(record)
    updated = record.model_copy(update={"amount": 6_000})

    assert first == pytest.approx(1_000)
    assert record_monthly_equivalent(updated) == pytest.approx(2_000)
