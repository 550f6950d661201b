"""Pydantic models describing the public API surface."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from fintrack.backend.calculators.records import (
    Deduction,
    DeductionSet,
    ExpenseRecord,
    IncomeRecord,
    InvestmentHolding,
)
from fintrack.backend.config.year_config import TaxBracket

__all__ = [
    "AllocationRequest",
    "CashflowRequest",
    "DiversificationRequest",
    "DividendProjectionRequest",
    "FeeComparisonRequest",
    "HarvestingRequest",
    "HoldingsRequest",
    "PaycheckRequest",
    "RebalancingRequest",
    "TaxCalculationRequest",
    "TaxImpactRequest",
    "format_validation_error",
]


class _RequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int | None = Field(default=None, ge=0)


class _BracketRequest(_RequestModel):
    """Requests that accept an explicit bracket table or fall back to the year's."""

    brackets: list[TaxBracket] | None = None


class TaxCalculationRequest(_BracketRequest):
    """Payload accepted by the tax calculation endpoint."""

    taxable_income: float


class TaxImpactRequest(_BracketRequest):
    """Compare tax owed on the current and a predicted income."""

    scenario: str = "custom"
    current_income: float = Field(..., ge=0)
    predicted_income: float = Field(..., ge=0)


class PaycheckRequest(_BracketRequest):
    """Salary and deductions submitted to the paycheck simulator.

    ``deductions`` may be given either as ``{"pre_tax": [...], "post_tax": [...]}``
    or as a flat list where each entry names its own ``tax_class``.
    """

    base_salary: float
    deductions: DeductionSet = Field(default_factory=DeductionSet)

    @field_validator("deductions", mode="before")
    @classmethod
    def _partition_flat_list(cls, value: Any) -> Any:
        if value is None:
            return DeductionSet()
        if isinstance(value, Sequence) and not isinstance(value, str):
            return DeductionSet.from_deductions(
                Deduction.model_validate(entry) for entry in value
            )
        return value


class CashflowRequest(_RequestModel):
    """Income and expense records to project forward."""

    income: list[IncomeRecord] = Field(default_factory=list)
    expenses: list[ExpenseRecord] = Field(default_factory=list)
    horizon_months: int | None = None
    as_of: date | None = None


class DiversificationRequest(_RequestModel):
    income: list[IncomeRecord] = Field(default_factory=list)


class HoldingsRequest(_RequestModel):
    """Base payload for portfolio endpoints."""

    holdings: list[InvestmentHolding] = Field(default_factory=list)


class _TargetedHoldingsRequest(HoldingsRequest):
    targets: dict[str, float] | None = None
    risk_profile: str | None = None

    @field_validator("targets", mode="before")
    @classmethod
    def _ensure_mapping(cls, value: Any) -> Any:
        if value is None or isinstance(value, Mapping):
            return value
        raise TypeError("Targets must be an object mapping asset classes to percentages")


class AllocationRequest(_TargetedHoldingsRequest):
    pass


class RebalancingRequest(_TargetedHoldingsRequest):
    threshold: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _require_targets(self) -> RebalancingRequest:
        if self.targets is None and self.risk_profile is None:
            raise ValueError("Provide either 'targets' or 'risk_profile'")
        return self


class HarvestingRequest(HoldingsRequest):
    tax_rate: float | None = Field(default=None, ge=0, le=1)


class DividendProjectionRequest(HoldingsRequest):
    years: int = Field(default=10, ge=0, le=100)
    growth_rate: float | None = None


class FeeComparisonRequest(HoldingsRequest):
    """Holdings to compare against cheaper funds; omitted values use the year's defaults."""

    years: int | None = Field(default=None, ge=0, le=100)
    growth_rate: float | None = None


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid request payload: {details}"
