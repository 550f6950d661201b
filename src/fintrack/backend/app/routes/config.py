"""Expose configuration metadata consumed by API clients.

These endpoints surface the YAML-backed year configuration so that clients can
show the default bracket table and the available risk profiles without
duplicating them.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from fintrack.backend.app.http import ProblemResponse, problem_response
from fintrack.backend.calculators.utils import format_currency, format_percentage
from fintrack.backend.config.year_config import (
    TaxBracket,
    YearConfiguration,
    available_years,
    load_manifest,
    load_year_configuration,
)
from fintrack.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def _load_year(year: int) -> YearConfiguration | ProblemResponse:
    try:
        return load_year_configuration(year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc))


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


def _serialise_bracket(bracket: TaxBracket) -> dict[str, Any]:
    return {
        "lower": bracket.lower_bound,
        "upper": bracket.upper_bound,
        "rate": bracket.rate,
        "rate_label": format_percentage(bracket.rate),
        "range": (
            f"{format_currency(bracket.lower_bound)} - "
            f"{format_currency(bracket.upper_bound)}"
        ),
    }


def _serialise_year(year: int) -> dict[str, Any]:
    config = load_year_configuration(year)
    entry = load_manifest().get_entry(year)
    return {
        "year": year,
        "status": entry.status,
        "meta": dict(config.meta),
        "country": config.tax.country,
        "region": config.tax.region,
        "filing_status": config.tax.filing_status,
        "bracket_count": len(config.tax.brackets),
        "risk_profiles": [profile.id for profile in config.portfolio.risk_profiles],
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return all configured years with lightweight metadata."""

    metadata = get_configuration_metadata()
    payload = {
        "years": [_serialise_year(year) for year in available_years()],
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>/tax-brackets")
def get_tax_brackets(year: int) -> tuple[Any, int]:
    """Return the default bracket table configured for ``year``."""

    config = _load_year(year)
    if isinstance(config, ProblemResponse):
        return config.to_response()

    payload = {
        "year": year,
        "country": config.tax.country,
        "region": config.tax.region,
        "filing_status": config.tax.filing_status,
        "brackets": [_serialise_bracket(bracket) for bracket in config.tax.brackets],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>/risk-profiles")
def get_risk_profiles(year: int) -> tuple[Any, int]:
    """Return the named target allocations configured for ``year``."""

    config = _load_year(year)
    if isinstance(config, ProblemResponse):
        return config.to_response()

    profiles = [
        {
            "id": profile.id,
            "name": profile.name,
            "description": profile.description,
            "target_allocations": dict(profile.target_allocations),
            "expected_return": profile.expected_return,
            "expected_risk": profile.expected_risk,
        }
        for profile in config.portfolio.risk_profiles
    ]
    return jsonify({"year": year, "risk_profiles": profiles}), 200
