"""REST endpoints for tax and paycheck calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from fintrack.backend.services import (
    build_analytics_response,
    calculate_tax,
    calculate_tax_impact,
    parse_json_payload,
    simulate_paycheck,
)

blueprint = Blueprint("tax", __name__, url_prefix="/api/v1")


@blueprint.post("/tax/calculations")
def create_tax_calculation() -> tuple[Any, int]:
    """Apply progressive brackets to the submitted taxable income."""

    payload = parse_json_payload(request)
    return build_analytics_response(calculate_tax(payload))


@blueprint.post("/tax/impact")
def create_tax_impact() -> tuple[Any, int]:
    """Compare the tax owed on a current and a predicted income."""

    payload = parse_json_payload(request)
    return build_analytics_response(calculate_tax_impact(payload))


@blueprint.post("/paycheck/simulations")
def create_paycheck_simulation() -> tuple[Any, int]:
    """Estimate take-home pay for a salary and its deductions."""

    payload = parse_json_payload(request)
    return build_analytics_response(simulate_paycheck(payload))
