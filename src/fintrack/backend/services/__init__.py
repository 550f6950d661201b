"""Service-layer helpers for the FinTrack analytics API."""

from .analytics_service import (
    analyse_allocation,
    analyse_correlation,
    analyse_performance,
    analyse_tax_efficiency,
    calculate_tax,
    calculate_tax_impact,
    compare_fees,
    find_harvesting_opportunities,
    forecast_cashflow,
    plan_rebalancing,
    project_dividend_income,
    score_income_diversification,
    simulate_paycheck,
)
from .request_parser import parse_json_payload
from .response_builder import build_analytics_response

__all__ = [
    "analyse_allocation",
    "analyse_correlation",
    "analyse_performance",
    "analyse_tax_efficiency",
    "build_analytics_response",
    "calculate_tax",
    "calculate_tax_impact",
    "compare_fees",
    "find_harvesting_opportunities",
    "forecast_cashflow",
    "parse_json_payload",
    "plan_rebalancing",
    "project_dividend_income",
    "score_income_diversification",
    "simulate_paycheck",
]
