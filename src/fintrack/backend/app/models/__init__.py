"""Request models shared by the analytics routes and services.

Inputs are validated with Pydantic before they reach the calculators; results
come back as the calculators' frozen dataclasses and are serialised through
their ``as_dict`` helpers.
"""

from __future__ import annotations

from .api import (
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
