"""REST endpoints for cashflow forecasts and income diversification."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from fintrack.backend.services import (
    build_analytics_response,
    forecast_cashflow,
    parse_json_payload,
    score_income_diversification,
)

blueprint = Blueprint("income", __name__, url_prefix="/api/v1")


@blueprint.post("/cashflow/forecast")
def create_cashflow_forecast() -> tuple[Any, int]:
    payload = parse_json_payload(request)
    return build_analytics_response(forecast_cashflow(payload))


@blueprint.post("/income/diversification")
def create_diversification_score() -> tuple[Any, int]:
    payload = parse_json_payload(request)
    return build_analytics_response(score_income_diversification(payload))
