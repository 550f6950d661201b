"""Pure financial analytics calculators."""

from .cashflow import forecast, is_active
from .diversification import score as score_diversification
from .errors import (
    AnalyticsError,
    InvalidAmount,
    InvalidBracketTable,
    InvalidHorizon,
    InvalidSalary,
    UnsupportedFrequency,
)
from .paycheck import predict_tax_impact, simulate
from .portfolio import (
    allocate,
    correlate,
    fee_comparisons,
    performance,
    project_dividends,
    rebalance,
    tax_efficiency,
    tax_loss_harvesting,
)
from .records import (
    AssetClass,
    Deduction,
    DeductionSet,
    ExpenseRecord,
    IncomeRecord,
    InvestmentHolding,
    Recurrence,
    TaxClass,
    TaxLocation,
)
from .recurrence import annual_equivalent, monthly_equivalent, parse_recurrence
from .tax import compute_tax, flat_rate_table, validate_bracket_table
from .utils import format_percentage, round_currency, round_rate

__all__ = [
    "AnalyticsError",
    "AssetClass",
    "Deduction",
    "DeductionSet",
    "ExpenseRecord",
    "IncomeRecord",
    "InvalidAmount",
    "InvalidBracketTable",
    "InvalidHorizon",
    "InvalidSalary",
    "InvestmentHolding",
    "Recurrence",
    "TaxClass",
    "TaxLocation",
    "UnsupportedFrequency",
    "allocate",
    "annual_equivalent",
    "compute_tax",
    "correlate",
    "fee_comparisons",
    "flat_rate_table",
    "forecast",
    "format_percentage",
    "is_active",
    "monthly_equivalent",
    "parse_recurrence",
    "performance",
    "predict_tax_impact",
    "project_dividends",
    "rebalance",
    "round_currency",
    "round_rate",
    "score_diversification",
    "simulate",
    "tax_efficiency",
    "tax_loss_harvesting",
    "validate_bracket_table",
]
