"""Cashflow forecasting over normalised income and expense records."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta

from .errors import InvalidHorizon
from .recurrence import record_monthly_equivalent
from .records import ExpenseRecord, IncomeRecord, Recurrence
from .results import CashflowForecast, MonthOverMonth, MonthPoint

_Record = IncomeRecord | ExpenseRecord


def _add_months(month_start: date, count: int) -> date:
    index = month_start.year * 12 + month_start.month - 1 + count
    return date(index // 12, index % 12 + 1, 1)


def _occurrence(record: _Record, as_of: date) -> date:
    # Undated one-off entries are treated as happening now.
    return record.start_date or as_of


def is_active(record: _Record, as_of: date) -> bool:
    """Return ``True`` when ``record`` contributes to the month containing ``as_of``."""

    if record.recurrence is Recurrence.NONE:
        occurred = _occurrence(record, as_of)
        return (occurred.year, occurred.month) == (as_of.year, as_of.month)

    if record.start_date is not None and record.start_date > as_of:
        return False
    if record.end_date is not None and record.end_date < as_of:
        return False
    return True


def _active_in_month(record: _Record, first: date, last: date, as_of: date) -> bool:
    if record.recurrence is Recurrence.NONE:
        return first <= _occurrence(record, as_of) <= last

    if record.start_date is not None and record.start_date > last:
        return False
    if record.end_date is not None and record.end_date < first:
        return False
    return True


def _percent_change(previous: float, current: float) -> float:
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def forecast(
    income_records: Sequence[IncomeRecord],
    expense_records: Sequence[ExpenseRecord],
    horizon_months: int,
    *,
    as_of: date,
) -> CashflowForecast:
    """Project monthly income, expenses and savings from ``as_of`` onwards.

    Recurring records are replayed at a constant monthly equivalent for every
    month their start/end window overlaps. One-time records only count in the
    month they occur in.
    """

    if horizon_months < 0:
        raise InvalidHorizon(f"Forecast horizon must be non-negative, got {horizon_months}")

    incomes = [(record, record_monthly_equivalent(record)) for record in income_records]
    expenses = [(record, record_monthly_equivalent(record)) for record in expense_records]

    projected_income = sum(amount for record, amount in incomes if is_active(record, as_of))
    projected_expenses = sum(
        amount for record, amount in expenses if is_active(record, as_of)
    )

    first_month = as_of.replace(day=1)
    trend: list[MonthPoint] = []
    for offset in range(horizon_months):
        first = _add_months(first_month, offset)
        last = _add_months(first_month, offset + 1) - timedelta(days=1)
        trend.append(
            MonthPoint(
                month=first.strftime("%Y-%m"),
                income=sum(
                    amount
                    for record, amount in incomes
                    if _active_in_month(record, first, last, as_of)
                ),
                expenses=sum(
                    amount
                    for record, amount in expenses
                    if _active_in_month(record, first, last, as_of)
                ),
            )
        )

    month_over_month = MonthOverMonth()
    if len(trend) >= 2:
        previous, current = trend[-2], trend[-1]
        month_over_month = MonthOverMonth(
            income_delta=_percent_change(previous.income, current.income),
            expenses_delta=_percent_change(previous.expenses, current.expenses),
        )

    return CashflowForecast(
        projected_income=projected_income,
        projected_expenses=projected_expenses,
        monthly_trend=tuple(trend),
        month_over_month=month_over_month,
    )


__all__ = ["forecast", "is_active"]
