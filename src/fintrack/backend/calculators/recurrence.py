"""Normalise recurring amounts to monthly equivalents."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from .errors import InvalidAmount, UnsupportedFrequency
from .records import ExpenseRecord, IncomeRecord, Recurrence, canonical_recurrence_tag
from .utils import is_invalid_amount

MONTHLY_FACTORS = MappingProxyType(
    {
        Recurrence.WEEKLY: 52 / 12,
        Recurrence.BI_WEEKLY: 26 / 12,
        Recurrence.MONTHLY: 1.0,
        Recurrence.QUARTERLY: 1 / 3,
        Recurrence.SEMI_ANNUAL: 1 / 6,
        Recurrence.ANNUAL: 1 / 12,
        # One-time amounts land in full in the month they occur.
        Recurrence.NONE: 1.0,
    }
)


def parse_recurrence(value: Any) -> Recurrence:
    """Return the :class:`Recurrence` for ``value`` or raise ``UnsupportedFrequency``."""

    tag = canonical_recurrence_tag(value)
    try:
        return Recurrence(tag)
    except ValueError as exc:
        raise UnsupportedFrequency(f"Unsupported recurrence: {value!r}") from exc


def _validated_amount(amount: float) -> float:
    try:
        value = float(amount)
    except (TypeError, ValueError) as exc:
        raise InvalidAmount(f"Amount must be a number, got {amount!r}") from exc
    if is_invalid_amount(value):
        raise InvalidAmount(f"Amount must be a non-negative number, got {amount!r}")
    return value


def monthly_equivalent(amount: float, recurrence: Recurrence | str) -> float:
    """Convert ``amount`` paid at ``recurrence`` into a per-month figure."""

    value = _validated_amount(amount)
    return value * MONTHLY_FACTORS[parse_recurrence(recurrence)]


def annual_equivalent(amount: float, recurrence: Recurrence | str) -> float:
    """Convert ``amount`` into a per-year figure; one-time amounts stay as-is."""

    frequency = parse_recurrence(recurrence)
    monthly = monthly_equivalent(amount, frequency)
    if frequency is Recurrence.NONE:
        return monthly
    return monthly * 12


def record_amount(record: IncomeRecord | ExpenseRecord) -> float:
    """Return the per-occurrence amount of ``record`` after its own deductions.

    Deductions larger than the gross amount leave nothing to normalise rather
    than producing a negative income.
    """

    amount = _validated_amount(record.amount)
    if isinstance(record, IncomeRecord):
        for deduction in record.deductions:
            _validated_amount(deduction.amount)
        amount -= record.deductions_total
    return amount if amount > 0 else 0.0


def record_monthly_equivalent(record: IncomeRecord | ExpenseRecord) -> float:
    """Monthly equivalent of a record, recomputed from its current values."""

    return monthly_equivalent(record_amount(record), record.recurrence)


__all__ = [
    "MONTHLY_FACTORS",
    "annual_equivalent",
    "monthly_equivalent",
    "parse_recurrence",
    "record_amount",
    "record_monthly_equivalent",
]
