"""Progressive tax bracket calculator."""

from __future__ import annotations

import math
from collections.abc import Sequence

from fintrack.backend.config.schema import TaxBracket, describe_bracket_issues

from .errors import InvalidAmount, InvalidBracketTable
from .results import AppliedBracket, TaxComputation


def validate_bracket_table(brackets: Sequence[TaxBracket]) -> None:
    """Raise ``InvalidBracketTable`` unless ``brackets`` partition ``[0, inf)``."""

    issues = describe_bracket_issues(brackets)
    if issues:
        raise InvalidBracketTable("Invalid tax bracket table: " + "; ".join(issues))


def compute_tax(taxable_income: float, brackets: Sequence[TaxBracket]) -> TaxComputation:
    """Apply the marginal ``brackets`` to ``taxable_income``.

    The table is validated on every call; no default table is substituted.
    Non-positive income yields zero tax and an empty breakdown.
    """

    validate_bracket_table(brackets)
    if not math.isfinite(taxable_income):
        raise InvalidAmount(f"Taxable income must be a finite number, got {taxable_income!r}")

    if taxable_income <= 0:
        return TaxComputation(
            taxable_income=taxable_income, total_tax=0.0, applied_brackets=()
        )

    remaining = taxable_income
    total = 0.0
    applied: list[AppliedBracket] = []

    for bracket in brackets:
        if remaining <= 0:
            break

        income_in_bracket = min(remaining, bracket.width)
        if income_in_bracket <= 0:
            continue

        tax = income_in_bracket * bracket.rate
        total += tax
        remaining -= income_in_bracket
        applied.append(
            AppliedBracket(
                rate=bracket.rate,
                taxable_amount=income_in_bracket,
                amount=tax,
                lower_bound=bracket.lower_bound,
                upper_bound=bracket.upper_bound,
            )
        )

    return TaxComputation(
        taxable_income=taxable_income,
        total_tax=total,
        applied_brackets=tuple(applied),
    )


def flat_rate_table(rate: float) -> tuple[TaxBracket, ...]:
    """Return a single unbounded bracket taxing everything at ``rate``.

    Callers that lack a bracket table use this as their documented fallback
    before invoking :func:`compute_tax`.
    """

    return (TaxBracket(lower_bound=0.0, upper_bound=None, rate=rate),)


__all__ = ["compute_tax", "flat_rate_table", "validate_bracket_table"]
