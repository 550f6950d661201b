"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Iterable, Mapping, Sequence

from .year_config import (
    CorrelationBands,
    DiversificationWeights,
    PortfolioConfig,
    RiskProfile,
    TaxTableConfig,
    YearConfiguration,
    available_years,
    describe_bracket_issues,
    load_year_configuration,
)

_KNOWN_RECURRENCES = frozenset(
    {"none", "weekly", "bi_weekly", "monthly", "quarterly", "semi_annual", "annual"}
)
_KNOWN_ASSET_CLASSES = frozenset(
    {
        "stocks",
        "international_stocks",
        "bonds",
        "real_estate",
        "cash",
        "commodities",
        "crypto",
        "alternatives",
        "other",
    }
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_tax_table(table: TaxTableConfig) -> list[str]:
    return [
        _format_scope("tax.brackets", issue)
        for issue in describe_bracket_issues(table.brackets)
    ]


def _validate_diversification(weights: DiversificationWeights) -> list[str]:
    errors: list[str] = []
    scope = "income.diversification"

    missing = sorted(_KNOWN_RECURRENCES - set(weights.stability_points))
    if missing:
        errors.append(
            _format_scope(scope, f"stability points missing for recurrences: {missing}")
        )

    unknown = sorted(set(weights.stability_points) - _KNOWN_RECURRENCES)
    if unknown:
        errors.append(
            _format_scope(scope, f"stability points declared for unknown recurrences: {unknown}")
        )

    if weights.source_count_cap > 100 / weights.component_divisor:
        errors.append(
            _format_scope(
                scope,
                "source_count_cap exceeds the share a single component may contribute",
            )
        )

    return errors


def _validate_allocations(scope: str, allocations: Mapping[str, float]) -> list[str]:
    unknown = sorted(set(allocations) - _KNOWN_ASSET_CLASSES)
    if not unknown:
        return []
    return [_format_scope(scope, f"unknown asset classes: {unknown}")]


def _validate_profiles(profiles: Iterable[RiskProfile]) -> list[str]:
    errors: list[str] = []
    for profile in profiles:
        scope = f"portfolio.risk_profiles.{profile.id}"
        errors.extend(_validate_allocations(scope, profile.target_allocations))
        if not profile.name.strip():
            errors.append(_format_scope(scope, "name must be a non-empty string"))
    return errors


def _validate_correlation(bands: CorrelationBands) -> list[str]:
    errors: list[str] = []
    if bands.same_class.low < bands.default.high:
        errors.append(
            _format_scope(
                "portfolio.correlation",
                "same_class band should sit above the default band",
            )
        )
    if bands.stock_bond.high > bands.default.low:
        errors.append(
            _format_scope(
                "portfolio.correlation",
                "stock_bond band should sit below the default band",
            )
        )
    return errors


def _validate_portfolio(portfolio: PortfolioConfig) -> list[str]:
    errors: list[str] = []
    if not portfolio.risk_profiles:
        errors.append(_format_scope("portfolio.risk_profiles", "no risk profiles defined"))
    errors.extend(_validate_profiles(portfolio.risk_profiles))
    errors.extend(_validate_correlation(portfolio.correlation))
    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []

    errors.extend(_validate_tax_table(config.tax))
    errors.extend(_validate_diversification(config.income.diversification))
    errors.extend(_validate_portfolio(config.portfolio))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate configured tax years and analytics defaults."
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except FileNotFoundError as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
