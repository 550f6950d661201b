"""Orchestrate request validation, configuration lookups, and analytics calls.

The calculators are pure functions that never substitute defaults. This
service is where request payloads are validated, the year's configuration is
resolved, and documented fallbacks are applied: the configured bracket table
when a request omits one, the configured weights and thresholds otherwise.
Profiling hooks live here too, so routes only need a single entry point per
operation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import date
from time import perf_counter
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from fintrack.backend.app.models import (
    AllocationRequest,
    CashflowRequest,
    DiversificationRequest,
    DividendProjectionRequest,
    FeeComparisonRequest,
    HarvestingRequest,
    HoldingsRequest,
    PaycheckRequest,
    RebalancingRequest,
    TaxCalculationRequest,
    TaxImpactRequest,
    format_validation_error,
)
from fintrack.backend.calculators import (
    allocate,
    compute_tax,
    correlate,
    fee_comparisons,
    forecast,
    performance,
    predict_tax_impact,
    project_dividends,
    rebalance,
    score_diversification,
    simulate,
    tax_efficiency,
    tax_loss_harvesting,
)
from fintrack.backend.config.year_config import (
    TaxBracket,
    YearConfiguration,
    default_year,
    load_year_configuration,
)

_LOGGER = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("FINTRACK_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None) -> Iterator[None]:
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


@contextmanager
def _profiled(operation: str) -> Iterator[dict[str, float] | None]:
    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None
    yield timings
    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "%s timings (ms): %s",
            operation,
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )


def _validate(model: type[_ModelT], payload: Mapping[str, Any] | BaseModel) -> _ModelT:
    if isinstance(payload, model):
        return payload
    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a mapping")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def _configuration(year: int | None) -> YearConfiguration:
    """Load the configuration for ``year`` or the latest supported year.

    Unknown years surface as ``FileNotFoundError`` so the HTTP layer can answer
    with 404.
    """

    return load_year_configuration(year if year is not None else default_year())


def _resolve_brackets(
    brackets: list[TaxBracket] | None, config: YearConfiguration
) -> tuple[list[TaxBracket], str]:
    if brackets is not None:
        return brackets, "request"

    _LOGGER.info(
        "No brackets supplied; using the %s %s %s table for %s",
        config.tax.country,
        config.tax.region,
        config.tax.filing_status,
        config.year,
    )
    return list(config.tax.brackets), "configuration"


def _bracket_meta(config: YearConfiguration, source: str) -> dict[str, Any]:
    return {
        "year": config.year,
        "brackets_source": source,
        "filing_status": config.tax.filing_status,
    }


def calculate_tax(payload: Mapping[str, Any] | TaxCalculationRequest) -> dict[str, Any]:
    """Apply progressive brackets to a taxable income."""

    request = _validate(TaxCalculationRequest, payload)
    config = _configuration(request.year)
    brackets, source = _resolve_brackets(request.brackets, config)

    with _profiled("calculate_tax") as timings:
        with _profile_section("compute_tax", timings):
            computation = compute_tax(request.taxable_income, brackets)

    return {**computation.as_dict(), "meta": _bracket_meta(config, source)}


def calculate_tax_impact(payload: Mapping[str, Any] | TaxImpactRequest) -> dict[str, Any]:
    """Compare the tax burden of a current and predicted income."""

    request = _validate(TaxImpactRequest, payload)
    config = _configuration(request.year)
    brackets, source = _resolve_brackets(request.brackets, config)

    with _profiled("calculate_tax_impact") as timings:
        with _profile_section("predict_tax_impact", timings):
            prediction = predict_tax_impact(
                request.scenario,
                request.current_income,
                request.predicted_income,
                brackets,
            )

    return {**prediction.as_dict(), "meta": _bracket_meta(config, source)}


def simulate_paycheck(payload: Mapping[str, Any] | PaycheckRequest) -> dict[str, Any]:
    """Estimate take-home pay for a salary and its deductions."""

    request = _validate(PaycheckRequest, payload)
    config = _configuration(request.year)
    brackets, source = _resolve_brackets(request.brackets, config)

    with _profiled("simulate_paycheck") as timings:
        with _profile_section("simulate", timings):
            result = simulate(request.base_salary, request.deductions, brackets)

    return {**result.as_dict(), "meta": _bracket_meta(config, source)}


def forecast_cashflow(payload: Mapping[str, Any] | CashflowRequest) -> dict[str, Any]:
    """Project monthly cashflow from income and expense records."""

    request = _validate(CashflowRequest, payload)
    config = _configuration(request.year)

    horizon = request.horizon_months
    if horizon is None:
        horizon = config.income.forecast_horizon_months
    as_of = request.as_of or date.today()

    with _profiled("forecast_cashflow") as timings:
        with _profile_section("forecast", timings):
            result = forecast(request.income, request.expenses, horizon, as_of=as_of)

    return {
        **result.as_dict(),
        "meta": {"as_of": as_of.isoformat(), "horizon_months": horizon},
    }


def score_income_diversification(
    payload: Mapping[str, Any] | DiversificationRequest,
) -> dict[str, Any]:
    """Score how evenly income is spread across sources."""

    request = _validate(DiversificationRequest, payload)
    config = _configuration(request.year)

    with _profiled("score_income_diversification") as timings:
        with _profile_section("score", timings):
            metrics = score_diversification(
                request.income, config.income.diversification
            )

    return metrics.as_dict()


def _resolve_targets(
    targets: Mapping[str, float] | None,
    risk_profile: str | None,
    config: YearConfiguration,
) -> Mapping[str, float] | None:
    if targets is not None:
        return targets
    if risk_profile is None:
        return None
    try:
        profile = config.portfolio.get_profile(risk_profile)
    except KeyError as exc:
        raise ValueError(f"Unknown risk profile '{risk_profile}'") from exc
    return profile.target_allocations


def analyse_allocation(payload: Mapping[str, Any] | AllocationRequest) -> dict[str, Any]:
    """Group holdings by asset class, optionally against target weights."""

    request = _validate(AllocationRequest, payload)
    config = _configuration(request.year)
    targets = _resolve_targets(request.targets, request.risk_profile, config)

    with _profiled("analyse_allocation") as timings:
        with _profile_section("allocate", timings):
            buckets = allocate(request.holdings, targets)

    return {"allocation": [bucket.as_dict() for bucket in buckets]}


def analyse_performance(payload: Mapping[str, Any] | HoldingsRequest) -> dict[str, Any]:
    request = _validate(HoldingsRequest, payload)
    with _profiled("analyse_performance") as timings:
        with _profile_section("performance", timings):
            result = performance(request.holdings)
    return result.as_dict()


def analyse_tax_efficiency(payload: Mapping[str, Any] | HoldingsRequest) -> dict[str, Any]:
    request = _validate(HoldingsRequest, payload)
    config = _configuration(request.year)
    with _profiled("analyse_tax_efficiency") as timings:
        with _profile_section("tax_efficiency", timings):
            report = tax_efficiency(request.holdings, config.portfolio.tax_location)
    return report.as_dict()


def analyse_correlation(payload: Mapping[str, Any] | HoldingsRequest) -> dict[str, Any]:
    """Return the heuristic correlation matrix for the submitted holdings."""

    request = _validate(HoldingsRequest, payload)
    config = _configuration(request.year)
    with _profiled("analyse_correlation") as timings:
        with _profile_section("correlate", timings):
            matrix = correlate(request.holdings, config.portfolio.correlation)
    return {**matrix.as_dict(), "method": "asset_class_heuristic"}


def plan_rebalancing(payload: Mapping[str, Any] | RebalancingRequest) -> dict[str, Any]:
    """Suggest trades that move holdings back towards their targets."""

    request = _validate(RebalancingRequest, payload)
    config = _configuration(request.year)
    targets = _resolve_targets(request.targets, request.risk_profile, config) or {}
    threshold = (
        request.threshold
        if request.threshold is not None
        else config.portfolio.rebalance_threshold
    )

    with _profiled("plan_rebalancing") as timings:
        with _profile_section("rebalance", timings):
            actions = rebalance(request.holdings, targets, threshold)

    return {
        "actions": [action.as_dict() for action in actions],
        "threshold": threshold,
    }


def find_harvesting_opportunities(
    payload: Mapping[str, Any] | HarvestingRequest,
) -> dict[str, Any]:
    request = _validate(HarvestingRequest, payload)
    config = _configuration(request.year)
    tax_rate = (
        request.tax_rate
        if request.tax_rate is not None
        else config.portfolio.harvesting_tax_rate
    )

    with _profiled("find_harvesting_opportunities") as timings:
        with _profile_section("tax_loss_harvesting", timings):
            opportunities = tax_loss_harvesting(request.holdings, tax_rate)

    return {
        "opportunities": [entry.as_dict() for entry in opportunities],
        "tax_rate": tax_rate,
    }


def project_dividend_income(
    payload: Mapping[str, Any] | DividendProjectionRequest,
) -> dict[str, Any]:
    request = _validate(DividendProjectionRequest, payload)
    config = _configuration(request.year)
    growth_rate = (
        request.growth_rate
        if request.growth_rate is not None
        else config.portfolio.dividend_growth_rate
    )

    with _profiled("project_dividend_income") as timings:
        with _profile_section("project_dividends", timings):
            projections = project_dividends(
                request.holdings, request.years, growth_rate
            )

    return {
        "projections": [entry.as_dict() for entry in projections],
        "growth_rate": growth_rate,
    }



def compare_fees(payload: Mapping[str, Any] | FeeComparisonRequest) -> dict[str, Any]:
    """Compare fee-bearing holdings against lower-cost alternatives."""

    request = _validate(FeeComparisonRequest, payload)
    config = _configuration(request.year)
    growth_rate = (
        request.growth_rate
        if request.growth_rate is not None
        else config.portfolio.fee_growth_rate
    )
    years = (
        request.years
        if request.years is not None
        else config.portfolio.fee_projection_years
    )

    with _profiled("compare_fees") as timings:
        with _profile_section("fee_comparisons", timings):
            comparisons = fee_comparisons(request.holdings, growth_rate, years)

    return {
        "comparisons": [entry.as_dict() for entry in comparisons],
        "growth_rate": growth_rate,
        "years": years,
    }

__all__ = [
    "analyse_allocation",
    "analyse_correlation",
    "analyse_performance",
    "analyse_tax_efficiency",
    "calculate_tax",
    "calculate_tax_impact",
    "compare_fees",
    "find_harvesting_opportunities",
    "forecast_cashflow",
    "plan_rebalancing",
    "project_dividend_income",
    "score_income_diversification",
    "simulate_paycheck",
]
