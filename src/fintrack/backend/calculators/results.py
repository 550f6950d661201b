"""Result objects returned by the analytics calculators.

Every result is a frozen dataclass constructed fresh for one call. Derived
figures are properties so they always agree with the stored totals, and
``as_dict`` produces the rounded JSON payload served by the API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .records import DeductionSet
from .utils import (
    format_currency,
    format_percentage,
    round_currency,
    round_percentage,
    round_rate,
    share_of,
)


@dataclass(frozen=True, slots=True)
class AppliedBracket:
    """Portion of taxable income that fell into a single bracket."""

    rate: float
    taxable_amount: float
    amount: float
    lower_bound: float
    upper_bound: float | None

    @property
    def rate_label(self) -> str:
        return format_percentage(self.rate)

    @property
    def range_label(self) -> str:
        return f"{format_currency(self.lower_bound)} - {format_currency(self.upper_bound)}"

    def as_dict(self) -> dict[str, Any]:
        return {
            "rate": self.rate,
            "rate_label": self.rate_label,
            "taxable_amount": round_currency(self.taxable_amount),
            "amount": round_currency(self.amount),
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "range": self.range_label,
        }


@dataclass(frozen=True, slots=True)
class TaxComputation:
    taxable_income: float
    total_tax: float
    applied_brackets: tuple[AppliedBracket, ...]

    @property
    def effective_rate(self) -> float:
        if self.taxable_income <= 0:
            return 0.0
        return self.total_tax / self.taxable_income

    @property
    def marginal_rate(self) -> float:
        if not self.applied_brackets:
            return 0.0
        return self.applied_brackets[-1].rate

    def as_dict(self) -> dict[str, Any]:
        return {
            "taxable_income": round_currency(self.taxable_income),
            "total_tax": round_currency(self.total_tax),
            "effective_rate": round_rate(self.effective_rate),
            "marginal_rate": self.marginal_rate,
            "applied_brackets": [entry.as_dict() for entry in self.applied_brackets],
        }


@dataclass(frozen=True, slots=True)
class SimulationResult:
    """Take-home estimate for a single paycheck."""

    base_salary: float
    deductions: DeductionSet
    pre_tax_total: float
    post_tax_total: float
    taxable_income: float
    tax: TaxComputation
    take_home: float

    @property
    def total_tax(self) -> float:
        return self.tax.total_tax

    @property
    def applied_brackets(self) -> tuple[AppliedBracket, ...]:
        return self.tax.applied_brackets

    @property
    def effective_tax_rate(self) -> float:
        return self.total_tax / self.base_salary if self.base_salary > 0 else 0.0

    def as_dict(self) -> dict[str, Any]:
        return {
            "base_salary": round_currency(self.base_salary),
            "deductions": self.deductions.model_dump(mode="json"),
            "pre_tax_total": round_currency(self.pre_tax_total),
            "post_tax_total": round_currency(self.post_tax_total),
            "taxable_income": round_currency(self.taxable_income),
            "total_tax": round_currency(self.total_tax),
            "effective_tax_rate": round_rate(self.effective_tax_rate),
            "applied_brackets": [entry.as_dict() for entry in self.applied_brackets],
            "take_home": round_currency(self.take_home),
        }


@dataclass(frozen=True, slots=True)
class TaxImpactPrediction:
    scenario: str
    current_income: float
    predicted_income: float
    current_tax_burden: float
    predicted_tax_burden: float

    @property
    def difference(self) -> float:
        return self.predicted_tax_burden - self.current_tax_burden

    def as_dict(self) -> dict[str, Any]:
        return {
            "scenario": self.scenario,
            "current_income": round_currency(self.current_income),
            "predicted_income": round_currency(self.predicted_income),
            "current_tax_burden": round_currency(self.current_tax_burden),
            "predicted_tax_burden": round_currency(self.predicted_tax_burden),
            "difference": round_currency(self.difference),
        }


@dataclass(frozen=True, slots=True)
class MonthPoint:
    month: str
    income: float
    expenses: float

    @property
    def net(self) -> float:
        return self.income - self.expenses

    def as_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "income": round_currency(self.income),
            "expenses": round_currency(self.expenses),
            "net": round_currency(self.net),
        }


@dataclass(frozen=True, slots=True)
class MonthOverMonth:
    """Percentage change between the last two trend points."""

    income_delta: float = 0.0
    expenses_delta: float = 0.0

    def as_dict(self) -> dict[str, Any]:
        return {
            "income_delta": round_percentage(self.income_delta),
            "expenses_delta": round_percentage(self.expenses_delta),
        }


@dataclass(frozen=True, slots=True)
class CashflowForecast:
    projected_income: float
    projected_expenses: float
    monthly_trend: tuple[MonthPoint, ...]
    month_over_month: MonthOverMonth

    @property
    def net_cashflow(self) -> float:
        return self.projected_income - self.projected_expenses

    @property
    def savings_rate(self) -> float:
        return share_of(self.net_cashflow, self.projected_income)

    def as_dict(self) -> dict[str, Any]:
        return {
            "projected_income": round_currency(self.projected_income),
            "projected_expenses": round_currency(self.projected_expenses),
            "net_cashflow": round_currency(self.net_cashflow),
            "savings_rate": round_percentage(self.savings_rate),
            "monthly_trend": [point.as_dict() for point in self.monthly_trend],
            "month_over_month": self.month_over_month.as_dict(),
        }


@dataclass(frozen=True, slots=True)
class SourceShare:
    source_name: str
    monthly_amount: float
    percentage: float
    score_contribution: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "source_name": self.source_name,
            "monthly_amount": round_currency(self.monthly_amount),
            "percentage": round_rate(self.percentage),
            "score_contribution": round_percentage(self.score_contribution),
        }


@dataclass(frozen=True, slots=True)
class DiversificationMetrics:
    overall_score: float
    source_count: int
    primary_dependency_pct: float
    stability_score: float
    growth_potential: float
    breakdown: tuple[SourceShare, ...]
    recommendations: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "overall_score": round_percentage(self.overall_score),
            "source_count": self.source_count,
            "primary_dependency_pct": round_percentage(self.primary_dependency_pct),
            "stability_score": round_percentage(self.stability_score),
            "growth_potential": round_percentage(self.growth_potential),
            "breakdown": [entry.as_dict() for entry in self.breakdown],
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True, slots=True)
class AssetClassBucket:
    asset_class: str
    value: float
    holding_count: int
    current_allocation_pct: float
    target_allocation_pct: float | None = None

    @property
    def drift_pct(self) -> float | None:
        if self.target_allocation_pct is None:
            return None
        return self.current_allocation_pct - self.target_allocation_pct

    def as_dict(self) -> dict[str, Any]:
        drift = self.drift_pct
        return {
            "asset_class": self.asset_class,
            "value": round_currency(self.value),
            "holding_count": self.holding_count,
            "current_allocation_pct": round_rate(self.current_allocation_pct),
            "target_allocation_pct": self.target_allocation_pct,
            "drift_pct": round_percentage(drift) if drift is not None else None,
        }


@dataclass(frozen=True, slots=True)
class PortfolioPerformance:
    total_value: float
    total_cost: float
    weighted_expense_ratio: float
    weighted_dividend_yield: float

    @property
    def total_gain(self) -> float:
        return self.total_value - self.total_cost

    @property
    def total_gain_pct(self) -> float:
        return share_of(self.total_gain, self.total_cost)

    @property
    def annual_fees(self) -> float:
        return self.total_value * self.weighted_expense_ratio / 100

    @property
    def annual_dividends(self) -> float:
        return self.total_value * self.weighted_dividend_yield / 100

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_value": round_currency(self.total_value),
            "total_cost": round_currency(self.total_cost),
            "total_gain": round_currency(self.total_gain),
            "total_gain_pct": round_percentage(self.total_gain_pct),
            "weighted_expense_ratio": round_rate(self.weighted_expense_ratio),
            "weighted_dividend_yield": round_rate(self.weighted_dividend_yield),
            "annual_fees": round_currency(self.annual_fees),
            "annual_dividends": round_currency(self.annual_dividends),
        }


@dataclass(frozen=True, slots=True)
class TaxEfficiencyReport:
    taxable_value: float
    tax_deferred_value: float
    tax_free_value: float
    efficiency_score: float
    recommendations: tuple[str, ...] = ()

    @property
    def total_value(self) -> float:
        return self.taxable_value + self.tax_deferred_value + self.tax_free_value

    @property
    def tax_advantaged_pct(self) -> float:
        return share_of(self.tax_deferred_value + self.tax_free_value, self.total_value)

    def as_dict(self) -> dict[str, Any]:
        return {
            "taxable_value": round_currency(self.taxable_value),
            "tax_deferred_value": round_currency(self.tax_deferred_value),
            "tax_free_value": round_currency(self.tax_free_value),
            "tax_advantaged_pct": round_percentage(self.tax_advantaged_pct),
            "efficiency_score": round_percentage(self.efficiency_score),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True, slots=True)
class CorrelationMatrix:
    assets: tuple[str, ...]
    matrix: tuple[tuple[float, ...], ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "assets": list(self.assets),
            "matrix": [list(row) for row in self.matrix],
        }


@dataclass(frozen=True, slots=True)
class RebalancingAction:
    asset_class: str
    current_value: float
    target_value: float
    current_pct: float
    target_pct: float
    action: str

    @property
    def amount(self) -> float:
        return abs(self.target_value - self.current_value)

    def as_dict(self) -> dict[str, Any]:
        return {
            "asset_class": self.asset_class,
            "current_value": round_currency(self.current_value),
            "target_value": round_currency(self.target_value),
            "current_pct": round_percentage(self.current_pct),
            "target_pct": round_percentage(self.target_pct),
            "action": self.action,
            "amount": round_currency(self.amount),
        }


@dataclass(frozen=True, slots=True)
class HarvestingOpportunity:
    holding: str
    asset_class: str
    unrealized_loss: float
    potential_tax_savings: float
    alternatives: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "holding": self.holding,
            "asset_class": self.asset_class,
            "unrealized_loss": round_currency(self.unrealized_loss),
            "potential_tax_savings": round_currency(self.potential_tax_savings),
            "alternatives": list(self.alternatives),
        }


@dataclass(frozen=True, slots=True)
class DividendProjection:
    year: int
    dividend_amount: float
    cumulative_dividends: float
    portfolio_value: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "dividend_amount": round_currency(self.dividend_amount),
            "cumulative_dividends": round_currency(self.cumulative_dividends),
            "portfolio_value": round_currency(self.portfolio_value),
        }


@dataclass(frozen=True, slots=True)
class FeeComparison:
    """Cost of a holding next to a cheaper fund tracking the same market."""

    holding: str
    alternative: str
    expense_ratio: float
    alternative_expense_ratio: float
    current_fee: float
    alternative_fee: float
    projected_impact: float
    projection_years: int

    @property
    def annual_savings(self) -> float:
        return self.current_fee - self.alternative_fee

    def as_dict(self) -> dict[str, Any]:
        return {
            "holding": self.holding,
            "alternative": self.alternative,
            "expense_ratio": self.expense_ratio,
            "alternative_expense_ratio": self.alternative_expense_ratio,
            "current_fee": round_currency(self.current_fee),
            "alternative_fee": round_currency(self.alternative_fee),
            "annual_savings": round_currency(self.annual_savings),
            "projected_impact": round_currency(self.projected_impact),
            "projection_years": self.projection_years,
        }


__all__ = [
    "AppliedBracket",
    "AssetClassBucket",
    "CashflowForecast",
    "CorrelationMatrix",
    "DiversificationMetrics",
    "DividendProjection",
    "FeeComparison",
    "HarvestingOpportunity",
    "MonthOverMonth",
    "MonthPoint",
    "PortfolioPerformance",
    "RebalancingAction",
    "SimulationResult",
    "SourceShare",
    "TaxComputation",
    "TaxEfficiencyReport",
    "TaxImpactPrediction",
]
