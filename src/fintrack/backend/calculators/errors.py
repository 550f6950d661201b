"""Domain errors raised by the analytics calculators."""

from __future__ import annotations


class AnalyticsError(ValueError):
    """Base class for validation failures raised during a calculation."""


class InvalidAmount(AnalyticsError):
    """A monetary input was negative or not a number."""


class UnsupportedFrequency(AnalyticsError):
    """A recurrence tag is not one of the supported frequencies."""


class InvalidBracketTable(AnalyticsError):
    """A tax bracket table is empty, non-contiguous, or has invalid rates."""


class InvalidSalary(AnalyticsError):
    """A base salary was zero, negative, or not a number."""


class InvalidHorizon(AnalyticsError):
    """A forecast horizon was negative."""


__all__ = [
    "AnalyticsError",
    "InvalidAmount",
    "InvalidBracketTable",
    "InvalidHorizon",
    "InvalidSalary",
    "UnsupportedFrequency",
]
