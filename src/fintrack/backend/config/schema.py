"""Pydantic models describing the analytics configuration schema."""

from __future__ import annotations

import math
from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class TaxBracket(ImmutableModel):
    """A single marginal bracket; ``upper_bound`` of ``None`` is unbounded.

    Rows persisted by the web application use ``income_from``/``income_to``
    and a percentage ``tax_rate``; those are accepted and converted so callers
    can hand stored rows straight to the calculator.
    """

    lower_bound: float = Field(alias="lower")
    upper_bound: float | None = Field(default=None, alias="upper")
    rate: float

    @model_validator(mode="before")
    @classmethod
    def _coerce_stored_columns(cls, data: Any) -> Any:
        if not isinstance(data, Mapping) or "tax_rate" not in data:
            return data

        prepared = dict(data)
        prepared["rate"] = float(prepared.pop("tax_rate")) / 100
        if "income_from" in prepared:
            prepared["lower"] = prepared.pop("income_from")
        if "income_to" in prepared:
            prepared["upper"] = prepared.pop("income_to")
        return prepared

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is None

    @property
    def width(self) -> float:
        if self.upper_bound is None:
            return math.inf
        return self.upper_bound - self.lower_bound


def describe_bracket_issues(brackets: Sequence[TaxBracket]) -> list[str]:
    """Return every structural problem found in ``brackets``.

    A valid table starts at zero, is ascending and contiguous, uses rates
    expressed as fractions between 0 and 1, and ends with a single unbounded
    bracket.
    """

    if not brackets:
        return ["at least one tax bracket must be defined"]

    issues: list[str] = []
    if brackets[0].lower_bound != 0:
        issues.append("the first bracket must start at 0")

    previous_upper: float | None = None
    last_index = len(brackets) - 1
    for index, bracket in enumerate(brackets):
        label = f"bracket {index + 1}"
        bounds = (bracket.lower_bound, bracket.upper_bound)
        if any(bound is not None and math.isnan(bound) for bound in bounds):
            issues.append(f"{label}: bounds must be numbers")
            previous_upper = bracket.upper_bound
            continue

        rate = bracket.rate
        if math.isnan(rate) or rate < 0:
            issues.append(f"{label}: rate must be non-negative")
        elif rate > 1:
            issues.append(f"{label}: rate {rate} must be a fraction between 0 and 1")

        if index > 0:
            if previous_upper is None:
                issues.append(f"{label}: follows an unbounded bracket")
            elif bracket.lower_bound < previous_upper:
                issues.append(f"{label}: overlaps the previous bracket")
            elif bracket.lower_bound > previous_upper:
                issues.append(f"{label}: leaves a gap after {previous_upper}")

        upper = bracket.upper_bound
        if upper is not None and upper <= bracket.lower_bound:
            issues.append(f"{label}: upper bound must exceed the lower bound")
        if upper is not None and index == last_index:
            issues.append("the final bracket must have an open upper bound")

        previous_upper = upper

    return issues


class TaxTableConfig(ImmutableModel):
    """Default bracket table used when callers do not supply one."""

    country: str = "US"
    region: str = "Federal"
    filing_status: str = "single"
    brackets: Sequence[TaxBracket]

    @model_validator(mode="after")
    def _validate_table(self) -> TaxTableConfig:
        issues = describe_bracket_issues(self.brackets)
        if issues:
            raise ConfigurationError("Invalid tax bracket table: " + "; ".join(issues))
        return self


class DiversificationWeights(ImmutableModel):
    """Weights behind the income diversification score.

    The score is shown to users as an absolute number, so changing any value
    here changes user-visible results.
    """

    stability_points: Mapping[str, float] = Field(
        default_factory=lambda: {
            "weekly": 10.0,
            "bi_weekly": 10.0,
            "monthly": 10.0,
            "quarterly": 8.0,
            "semi_annual": 6.0,
            "annual": 5.0,
            "none": 2.0,
        }
    )
    growth_points: Mapping[str, float] = Field(
        default_factory=lambda: {
            "investment": 10.0,
            "side_hustle": 10.0,
            "passive": 8.0,
            "secondary": 6.0,
        }
    )
    default_growth_points: float = 3.0
    points_scale: float = 10.0
    source_count_points: float = 5.0
    source_count_cap: float = 25.0
    component_divisor: float = 4.0
    contribution_multipliers: Mapping[str, float] = Field(
        default_factory=lambda: {
            "passive": 1.5,
            "investment": 1.5,
            "side_hustle": 1.2,
        }
    )
    dominant_primary_threshold: float = 70.0
    dominant_primary_multiplier: float = 0.5

    @model_validator(mode="after")
    def _validate_weights(self) -> DiversificationWeights:
        for value in (*self.stability_points.values(), *self.growth_points.values()):
            if value < 0 or value > self.points_scale:
                raise ConfigurationError(
                    "Diversification points must lie between 0 and the points scale"
                )
        if self.component_divisor <= 0:
            raise ConfigurationError("component_divisor must be positive")
        return self


class TaxLocationScores(ImmutableModel):
    """Per-location efficiency scores and recommendation thresholds."""

    taxable: float = 0.5
    tax_deferred: float = 0.8
    tax_free: float = 1.0
    min_tax_advantaged_share: float = 0.5
    income_heavy_classes: Sequence[str] = ("bonds", "real_estate")
    growth_classes: Sequence[str] = ("stocks", "international_stocks")

    @model_validator(mode="after")
    def _validate_scores(self) -> TaxLocationScores:
        for value in (self.taxable, self.tax_deferred, self.tax_free):
            if value < 0 or value > 1:
                raise ConfigurationError("Tax location scores must lie between 0 and 1")
        if not 0 <= self.min_tax_advantaged_share <= 1:
            raise ConfigurationError("min_tax_advantaged_share must lie between 0 and 1")
        return self

    def score_for(self, location: str) -> float:
        return float(getattr(self, location, self.taxable))


class CorrelationBand(ImmutableModel):
    """Inclusive range a synthetic correlation value is drawn from."""

    low: float
    high: float

    @model_validator(mode="before")
    @classmethod
    def _coerce_pair(cls, data: Any) -> Any:
        if isinstance(data, Sequence) and not isinstance(data, str):
            low, high = data
            return {"low": low, "high": high}
        return data

    @model_validator(mode="after")
    def _validate_range(self) -> CorrelationBand:
        if not -1 <= self.low <= self.high <= 1:
            raise ConfigurationError("Correlation bands must satisfy -1 <= low <= high <= 1")
        return self


class CorrelationBands(ImmutableModel):
    """Bands used by the declared correlation heuristic."""

    same_class: CorrelationBand = CorrelationBand(low=0.7, high=0.95)
    stock_bond: CorrelationBand = CorrelationBand(low=-0.2, high=0.2)
    real_estate: CorrelationBand = CorrelationBand(low=0.3, high=0.7)
    default: CorrelationBand = CorrelationBand(low=0.5, high=0.5)


class RiskProfile(ImmutableModel):
    """Named target allocation keyed by asset class."""

    id: str
    name: str
    description: str = ""
    target_allocations: Mapping[str, float]
    expected_return: float | None = None
    expected_risk: float | None = None

    @field_validator("target_allocations", mode="before")
    @classmethod
    def _coerce_allocations(cls, value: Any) -> Mapping[str, float]:
        if isinstance(value, Mapping):
            return {str(key): float(val) for key, val in value.items()}
        raise ConfigurationError("Risk profile 'target_allocations' must be a mapping")

    @model_validator(mode="after")
    def _validate_allocations(self) -> RiskProfile:
        if any(value < 0 for value in self.target_allocations.values()):
            raise ConfigurationError(f"Risk profile '{self.id}' has negative targets")
        total = sum(self.target_allocations.values())
        if abs(total - 100) > 0.01:
            raise ConfigurationError(
                f"Risk profile '{self.id}' targets must sum to 100 (found {total})"
            )
        return self


class PortfolioConfig(ImmutableModel):
    """Portfolio analytics defaults."""

    risk_profiles: Sequence[RiskProfile] = Field(default_factory=tuple)
    tax_location: TaxLocationScores = TaxLocationScores()
    correlation: CorrelationBands = CorrelationBands()
    rebalance_threshold: float = 5.0
    harvesting_tax_rate: float = 0.15
    dividend_growth_rate: float = 0.05
    fee_growth_rate: float = 0.07
    fee_projection_years: int = 10

    @model_validator(mode="after")
    def _validate_profiles(self) -> PortfolioConfig:
        seen: set[str] = set()
        for profile in self.risk_profiles:
            if profile.id in seen:
                raise ConfigurationError(f"Duplicate risk profile '{profile.id}'")
            seen.add(profile.id)
        if self.rebalance_threshold < 0:
            raise ConfigurationError("rebalance_threshold must be non-negative")
        if not 0 <= self.harvesting_tax_rate <= 1:
            raise ConfigurationError("harvesting_tax_rate must lie between 0 and 1")
        if self.dividend_growth_rate <= -1 or self.fee_growth_rate <= -1:
            raise ConfigurationError("growth rates must be greater than -1")
        if self.fee_projection_years < 0:
            raise ConfigurationError("fee_projection_years must be non-negative")
        return self

    def get_profile(self, profile_id: str) -> RiskProfile:
        for profile in self.risk_profiles:
            if profile.id == profile_id:
                return profile
        raise KeyError(profile_id)


class IncomeConfig(ImmutableModel):
    """Income analytics defaults."""

    diversification: DiversificationWeights = DiversificationWeights()
    forecast_horizon_months: int = 6

    @model_validator(mode="after")
    def _validate_horizon(self) -> IncomeConfig:
        if self.forecast_horizon_months < 0:
            raise ConfigurationError("forecast_horizon_months must be non-negative")
        return self


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year configuration."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    tax: TaxTableConfig
    income: IncomeConfig = IncomeConfig()
    portfolio: PortfolioConfig = PortfolioConfig()

    @model_validator(mode="before")
    @classmethod
    def _prepare_sections(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        if not isinstance(prepared.get("tax"), Mapping):
            raise ConfigurationError("Configuration must include a 'tax' section")

        for section in ("income", "portfolio"):
            if prepared.get(section) is None:
                prepared.pop(section, None)
        return prepared


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "ConfigurationError",
    "CorrelationBand",
    "CorrelationBands",
    "DiversificationWeights",
    "ImmutableModel",
    "IncomeConfig",
    "PortfolioConfig",
    "RiskProfile",
    "TaxBracket",
    "TaxLocationScores",
    "TaxTableConfig",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "YearConfiguration",
    "describe_bracket_issues",
]
