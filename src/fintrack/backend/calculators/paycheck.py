"""Paycheck simulation and tax impact predictions."""

from __future__ import annotations

import math
from collections.abc import Sequence

from fintrack.backend.config.schema import TaxBracket

from .errors import InvalidAmount, InvalidSalary
from .records import Deduction, DeductionSet
from .results import SimulationResult, TaxImpactPrediction
from .tax import compute_tax
from .utils import is_invalid_amount


def _check_deductions(deductions: Sequence[Deduction]) -> None:
    for deduction in deductions:
        if is_invalid_amount(deduction.amount):
            raise InvalidAmount(
                f"Deduction '{deduction.name}' must be a non-negative amount"
            )


def simulate(
    base_salary: float,
    deductions: DeductionSet,
    brackets: Sequence[TaxBracket],
) -> SimulationResult:
    """Estimate take-home pay for ``base_salary``.

    Pre-tax deductions reduce the taxable income, which is clamped at zero when
    they exceed the salary. Post-tax deductions come out of what remains after
    tax, so take-home pay may be negative when they are large.
    """

    if not math.isfinite(base_salary) or base_salary <= 0:
        raise InvalidSalary(f"Base salary must be positive, got {base_salary!r}")

    _check_deductions(deductions.pre_tax)
    _check_deductions(deductions.post_tax)

    pre_tax_total = deductions.pre_tax_total
    post_tax_total = deductions.post_tax_total

    taxable_income = base_salary - pre_tax_total
    if taxable_income < 0:
        taxable_income = 0.0

    tax = compute_tax(taxable_income, brackets)
    take_home = taxable_income - tax.total_tax - post_tax_total

    return SimulationResult(
        base_salary=base_salary,
        deductions=deductions,
        pre_tax_total=pre_tax_total,
        post_tax_total=post_tax_total,
        taxable_income=taxable_income,
        tax=tax,
        take_home=take_home,
    )


def predict_tax_impact(
    scenario: str,
    current_income: float,
    predicted_income: float,
    brackets: Sequence[TaxBracket],
) -> TaxImpactPrediction:
    """Compare the tax owed on two incomes under the same bracket table."""

    for label, amount in (
        ("current_income", current_income),
        ("predicted_income", predicted_income),
    ):
        if is_invalid_amount(amount):
            raise InvalidAmount(f"{label} must be a non-negative amount")

    current = compute_tax(current_income, brackets)
    predicted = compute_tax(predicted_income, brackets)

    return TaxImpactPrediction(
        scenario=scenario,
        current_income=current_income,
        predicted_income=predicted_income,
        current_tax_burden=current.total_tax,
        predicted_tax_burden=predicted.total_tax,
    )


__all__ = ["predict_tax_impact", "simulate"]
