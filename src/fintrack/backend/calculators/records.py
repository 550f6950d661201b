"""Input records consumed by the analytics calculators.

Records are frozen pydantic models built fresh for each calculation. They carry
no back-references to storage; the application layer fetches and validates the
collections, then hands them to the calculators.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from fintrack.backend.config.schema import ImmutableModel


class Recurrence(str, Enum):
    """How often an income or expense repeats."""

    NONE = "none"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"

    @property
    def is_recurring(self) -> bool:
        return self is not Recurrence.NONE


# Spellings stored by older versions of the web application.
RECURRENCE_ALIASES: Mapping[str, str] = {
    "one_time": "none",
    "one-time": "none",
    "once": "none",
    "bi-weekly": "bi_weekly",
    "biweekly": "bi_weekly",
    "fortnightly": "bi_weekly",
    "semi-annual": "semi_annual",
    "semiannual": "semi_annual",
    "annually": "annual",
    "yearly": "annual",
}


def canonical_recurrence_tag(value: Any) -> Any:
    """Map legacy recurrence spellings onto the enum values."""

    if isinstance(value, Recurrence) or not isinstance(value, str):
        return value
    key = value.strip().lower()
    return RECURRENCE_ALIASES.get(key, key)


def _slug(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return value.strip().lower().replace("-", "_").replace(" ", "_")


class TaxClass(str, Enum):
    PRE_TAX = "pre_tax"
    POST_TAX = "post_tax"


class AssetClass(str, Enum):
    """Asset classes understood by the portfolio analytics."""

    STOCKS = "stocks"
    INTERNATIONAL_STOCKS = "international_stocks"
    BONDS = "bonds"
    REAL_ESTATE = "real_estate"
    CASH = "cash"
    COMMODITIES = "commodities"
    CRYPTO = "crypto"
    ALTERNATIVES = "alternatives"
    OTHER = "other"

    @property
    def is_stock(self) -> bool:
        return self in {AssetClass.STOCKS, AssetClass.INTERNATIONAL_STOCKS}


ASSET_CLASS_ALIASES: Mapping[str, str] = {
    "stock": "stocks",
    "us_stocks": "stocks",
    "equities": "stocks",
    "shares": "stocks",
    "international_stock": "international_stocks",
    "bond": "bonds",
    "us_bonds": "bonds",
    "bills": "bonds",
    "reit": "real_estate",
    "reits": "real_estate",
    "alternative": "alternatives",
}


class TaxLocation(str, Enum):
    """Tax treatment of the account a holding sits in."""

    TAXABLE = "taxable"
    TAX_DEFERRED = "tax_deferred"
    TAX_FREE = "tax_free"


class Deduction(ImmutableModel):
    """A named payroll or income deduction."""

    name: str
    amount: float
    tax_class: TaxClass = TaxClass.PRE_TAX

    @field_validator("tax_class", mode="before")
    @classmethod
    def _normalise_tax_class(cls, value: Any) -> Any:
        return _slug(value)


class DeductionSet(ImmutableModel):
    """Deductions applied by the paycheck simulator, split by tax class."""

    pre_tax: tuple[Deduction, ...] = ()
    post_tax: tuple[Deduction, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _default_tax_classes(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        prepared = dict(data)
        for key in ("pre_tax", "post_tax"):
            entries = prepared.get(key)
            if entries is None:
                prepared.pop(key, None)
                continue
            prepared[key] = [
                {"tax_class": key, **entry} if isinstance(entry, Mapping) else entry
                for entry in entries
            ]
        return prepared

    @model_validator(mode="after")
    def _check_tax_classes(self) -> DeductionSet:
        for deduction in self.pre_tax:
            if deduction.tax_class is not TaxClass.PRE_TAX:
                raise ValueError(f"Deduction '{deduction.name}' is listed as pre-tax")
        for deduction in self.post_tax:
            if deduction.tax_class is not TaxClass.POST_TAX:
                raise ValueError(f"Deduction '{deduction.name}' is listed as post-tax")
        return self

    @classmethod
    def from_deductions(cls, deductions: Iterable[Deduction]) -> DeductionSet:
        """Partition a flat list of deductions by their tax class."""

        pre_tax: list[Deduction] = []
        post_tax: list[Deduction] = []
        for deduction in deductions:
            if deduction.tax_class is TaxClass.POST_TAX:
                post_tax.append(deduction)
            else:
                pre_tax.append(deduction)
        return cls(pre_tax=tuple(pre_tax), post_tax=tuple(post_tax))

    @property
    def pre_tax_total(self) -> float:
        return sum(deduction.amount for deduction in self.pre_tax)

    @property
    def post_tax_total(self) -> float:
        return sum(deduction.amount for deduction in self.post_tax)


class _ScheduledRecord(ImmutableModel):
    amount: float
    recurrence: Recurrence = Recurrence.MONTHLY
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("recurrence", mode="before")
    @classmethod
    def _normalise_recurrence(cls, value: Any) -> Any:
        return canonical_recurrence_tag(value)

    @model_validator(mode="after")
    def _check_window(self) -> _ScheduledRecord:
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.end_date < self.start_date
        ):
            raise ValueError("end_date cannot be earlier than start_date")
        return self


class IncomeRecord(_ScheduledRecord):
    """A recurring or one-time income source.

    ``amount`` is the gross payment per occurrence; attached deductions are
    netted off before the figure is normalised to a monthly equivalent.
    """

    source_name: str
    category: str = "primary"
    tax_class: TaxClass = TaxClass.PRE_TAX
    deductions: tuple[Deduction, ...] = ()

    @field_validator("category", "tax_class", mode="before")
    @classmethod
    def _normalise_labels(cls, value: Any) -> Any:
        return _slug(value)

    @property
    def deductions_total(self) -> float:
        return sum(deduction.amount for deduction in self.deductions)


class ExpenseRecord(_ScheduledRecord):
    """A recurring bill or a one-off expense."""

    name: str
    category: str = "general"

    @field_validator("category", mode="before")
    @classmethod
    def _normalise_category(cls, value: Any) -> Any:
        return _slug(value)


class InvestmentHolding(ImmutableModel):
    """A single position in an investment account.

    ``expense_ratio`` and ``dividend_yield`` are percentages, so ``0.03`` reads
    as 0.03% a year.
    """

    name: str
    ticker: str | None = None
    value: float
    cost_basis: float
    asset_class: AssetClass = AssetClass.OTHER
    tax_location: TaxLocation = Field(default=TaxLocation.TAXABLE, alias="account_type")
    expense_ratio: float | None = None
    dividend_yield: float | None = None

    @field_validator("asset_class", mode="before")
    @classmethod
    def _normalise_asset_class(cls, value: Any) -> Any:
        slug = _slug(value)
        if isinstance(slug, str):
            return ASSET_CLASS_ALIASES.get(slug, slug)
        return slug

    @field_validator("tax_location", mode="before")
    @classmethod
    def _normalise_location(cls, value: Any) -> Any:
        return _slug(value)

    @property
    def label(self) -> str:
        return self.ticker or self.name


__all__ = [
    "ASSET_CLASS_ALIASES",
    "AssetClass",
    "Deduction",
    "DeductionSet",
    "ExpenseRecord",
    "IncomeRecord",
    "InvestmentHolding",
    "RECURRENCE_ALIASES",
    "Recurrence",
    "TaxClass",
    "TaxLocation",
    "canonical_recurrence_tag",
]
