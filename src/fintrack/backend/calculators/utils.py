"""Utility helpers for calculator modules."""

from __future__ import annotations

import math
from collections.abc import Iterable


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for the fraction ``value``."""

    percentage = round(value * 100, 6)
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def format_currency(value: float | None) -> str:
    """Return a dollar label for ``value``; ``None`` renders as unbounded."""

    if value is None or math.isinf(value):
        return "∞"
    if float(int(value)) == value:
        return f"${int(value):,}"
    return f"${value:,.2f}"


def share_of(part: float, whole: float) -> float:
    """Return ``part`` as a percentage of ``whole``, or 0 for an empty whole."""

    if whole <= 0:
        return 0.0
    return part / whole * 100


def weighted_average(pairs: Iterable[tuple[float, float]]) -> float:
    """Average ``(value, weight)`` pairs, returning 0 when the weights sum to 0."""

    total_weight = 0.0
    total = 0.0
    for value, weight in pairs:
        total += value * weight
        total_weight += weight
    if total_weight <= 0:
        return 0.0
    return total / total_weight


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def is_invalid_amount(value: float) -> bool:
    """Return ``True`` for negative, NaN or infinite monetary inputs."""

    return not math.isfinite(value) or value < 0


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)


def round_percentage(value: float) -> float:
    """Round percentages expressed on a 0-100 scale to two decimals."""

    return round(value, 2)


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)


__all__ = [
    "clamp",
    "format_currency",
    "format_percentage",
    "is_invalid_amount",
    "round_currency",
    "round_percentage",
    "round_rate",
    "share_of",
    "weighted_average",
]
