"""REST endpoints for portfolio analytics."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from fintrack.backend.services import (
    analyse_allocation,
    analyse_correlation,
    analyse_performance,
    analyse_tax_efficiency,
    build_analytics_response,
    compare_fees,
    find_harvesting_opportunities,
    parse_json_payload,
    plan_rebalancing,
    project_dividend_income,
)

blueprint = Blueprint("portfolio", __name__, url_prefix="/api/v1/portfolio")


@blueprint.post("/allocation")
def create_allocation() -> tuple[Any, int]:
    return build_analytics_response(analyse_allocation(parse_json_payload(request)))


@blueprint.post("/performance")
def create_performance() -> tuple[Any, int]:
    return build_analytics_response(analyse_performance(parse_json_payload(request)))


@blueprint.post("/tax-efficiency")
def create_tax_efficiency() -> tuple[Any, int]:
    return build_analytics_response(analyse_tax_efficiency(parse_json_payload(request)))


@blueprint.post("/correlation")
def create_correlation() -> tuple[Any, int]:
    """Return heuristic correlations derived from asset classes, not price history."""

    return build_analytics_response(analyse_correlation(parse_json_payload(request)))


@blueprint.post("/rebalancing")
def create_rebalancing() -> tuple[Any, int]:
    return build_analytics_response(plan_rebalancing(parse_json_payload(request)))


@blueprint.post("/tax-loss-harvesting")
def create_harvesting() -> tuple[Any, int]:
    return build_analytics_response(
        find_harvesting_opportunities(parse_json_payload(request))
    )


@blueprint.post("/dividends")
def create_dividend_projection() -> tuple[Any, int]:
    return build_analytics_response(project_dividend_income(parse_json_payload(request)))


@blueprint.post("/fees")
def create_fee_comparison() -> tuple[Any, int]:
    return build_analytics_response(compare_fees(parse_json_payload(request)))
