"""Portfolio analytics over a list of investment holdings."""

from __future__ import annotations

import hashlib
import math
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from fintrack.backend.config.schema import (
    CorrelationBand,
    CorrelationBands,
    TaxLocationScores,
)

from .errors import InvalidAmount, InvalidHorizon
from .records import ASSET_CLASS_ALIASES, AssetClass, InvestmentHolding, TaxLocation
from .results import (
    AssetClassBucket,
    CorrelationMatrix,
    DividendProjection,
    FeeComparison,
    HarvestingOpportunity,
    PortfolioPerformance,
    RebalancingAction,
    TaxEfficiencyReport,
)
from .utils import is_invalid_amount, share_of, weighted_average

# Similar but not substantially identical funds offered after a harvest sale.
HARVEST_ALTERNATIVES = MappingProxyType(
    {
        "VTI": ("ITOT", "SCHB", "SPLG"),
        "VXUS": ("IXUS", "SPDW", "SCHF"),
        "BND": ("AGG", "SCHZ", "IUSB"),
        "VNQ": ("SCHH", "IYR", "RWR"),
    }
)

# Cheaper funds tracking the same market, with their expense ratio in percent.
LOWER_COST_ALTERNATIVES = MappingProxyType(
    {
        "VTI": ("Fidelity ZERO Total Market Index Fund (FZROX)", 0.0),
        "VXUS": ("Fidelity ZERO International Index Fund (FZILX)", 0.0),
        "BND": ("Schwab U.S. Aggregate Bond ETF (SCHZ)", 0.03),
        "VNQ": ("Schwab U.S. REIT ETF (SCHH)", 0.07),
    }
)

_DEFAULT_SCORES = TaxLocationScores()
_DEFAULT_BANDS = CorrelationBands()


def _checked(holdings: Sequence[InvestmentHolding]) -> Sequence[InvestmentHolding]:
    for holding in holdings:
        if is_invalid_amount(holding.value):
            raise InvalidAmount(f"Holding '{holding.label}' has an invalid value")
        if is_invalid_amount(holding.cost_basis):
            raise InvalidAmount(f"Holding '{holding.label}' has an invalid cost basis")
        for field_name in ("expense_ratio", "dividend_yield"):
            ratio = getattr(holding, field_name)
            if ratio is not None and is_invalid_amount(ratio):
                raise InvalidAmount(f"Holding '{holding.label}' has an invalid {field_name}")
    return holdings


def _check_projection(years: int, growth_rate: float) -> None:
    if years < 0:
        raise InvalidHorizon(f"Projection length must be non-negative, got {years}")
    if not math.isfinite(growth_rate) or growth_rate <= -1:
        raise InvalidAmount(f"Growth rate must be a number above -1, got {growth_rate!r}")


def _total_value(holdings: Sequence[InvestmentHolding]) -> float:
    return sum(holding.value for holding in holdings)


def _asset_key(value: AssetClass | str) -> str:
    if isinstance(value, AssetClass):
        return value.value
    slug = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    return ASSET_CLASS_ALIASES.get(slug, slug)


def _normalise_targets(targets: Mapping[str, float]) -> dict[str, float]:
    normalised: dict[str, float] = {}
    for key, value in targets.items():
        if is_invalid_amount(value):
            raise InvalidAmount(f"Target allocation for '{key}' must be non-negative")
        asset_class = _asset_key(key)
        normalised[asset_class] = normalised.get(asset_class, 0.0) + value
    return normalised


def allocate(
    holdings: Sequence[InvestmentHolding],
    targets: Mapping[str, float] | None = None,
) -> list[AssetClassBucket]:
    """Group holdings by asset class in first-seen order.

    Allocation percentages sum to 100 when the portfolio has value and are all
    zero otherwise. ``targets`` maps asset classes to target percentages.
    """

    _checked(holdings)
    total = _total_value(holdings)
    target_map = _normalise_targets(targets) if targets is not None else None

    values: dict[str, float] = {}
    counts: dict[str, int] = {}
    for holding in holdings:
        key = holding.asset_class.value
        values[key] = values.get(key, 0.0) + holding.value
        counts[key] = counts.get(key, 0) + 1

    return [
        AssetClassBucket(
            asset_class=key,
            value=value,
            holding_count=counts[key],
            current_allocation_pct=share_of(value, total),
            target_allocation_pct=(
                target_map.get(key, 0.0) if target_map is not None else None
            ),
        )
        for key, value in values.items()
    ]


def performance(holdings: Sequence[InvestmentHolding]) -> PortfolioPerformance:
    """Summarise gains and value-weighted fee and dividend ratios."""

    _checked(holdings)
    return PortfolioPerformance(
        total_value=_total_value(holdings),
        total_cost=sum(holding.cost_basis for holding in holdings),
        weighted_expense_ratio=weighted_average(
            (holding.expense_ratio or 0.0, holding.value) for holding in holdings
        ),
        weighted_dividend_yield=weighted_average(
            (holding.dividend_yield or 0.0, holding.value) for holding in holdings
        ),
    )


def tax_efficiency(
    holdings: Sequence[InvestmentHolding],
    scores: TaxLocationScores | None = None,
) -> TaxEfficiencyReport:
    """Score how well holdings are placed across account tax treatments."""

    scores = scores or _DEFAULT_SCORES
    _checked(holdings)

    by_location = {location: 0.0 for location in TaxLocation}
    for holding in holdings:
        by_location[holding.tax_location] += holding.value

    if not holdings or _total_value(holdings) <= 0:
        return TaxEfficiencyReport(
            taxable_value=by_location[TaxLocation.TAXABLE],
            tax_deferred_value=by_location[TaxLocation.TAX_DEFERRED],
            tax_free_value=by_location[TaxLocation.TAX_FREE],
            efficiency_score=0.0,
        )

    efficiency = weighted_average(
        (scores.score_for(holding.tax_location.value), holding.value)
        for holding in holdings
    ) * 100

    recommendations: list[str] = []
    income_heavy_in_taxable = [
        holding.label
        for holding in holdings
        if holding.asset_class.value in scores.income_heavy_classes
        and holding.tax_location is TaxLocation.TAXABLE
    ]
    if income_heavy_in_taxable:
        recommendations.append(
            "Consider moving bonds and REITs to tax-deferred accounts ("
            + ", ".join(income_heavy_in_taxable)
            + ")"
        )

    growth_in_tax_free = any(
        holding.asset_class.value in scores.growth_classes
        and holding.tax_location is TaxLocation.TAX_FREE
        for holding in holdings
    )
    if not growth_in_tax_free and by_location[TaxLocation.TAX_FREE] > 0:
        recommendations.append("Consider moving growth stocks to tax-free accounts")

    advantaged_pct = share_of(
        by_location[TaxLocation.TAX_DEFERRED] + by_location[TaxLocation.TAX_FREE],
        _total_value(holdings),
    )
    if advantaged_pct < scores.min_tax_advantaged_share * 100:
        recommendations.append(
            "Increase your tax-deferred allocation: only "
            f"{round(advantaged_pct)}% of the portfolio is in tax-advantaged accounts"
        )

    return TaxEfficiencyReport(
        taxable_value=by_location[TaxLocation.TAXABLE],
        tax_deferred_value=by_location[TaxLocation.TAX_DEFERRED],
        tax_free_value=by_location[TaxLocation.TAX_FREE],
        efficiency_score=efficiency,
        recommendations=tuple(recommendations),
    )


def _pair_fraction(first: str, second: str) -> float:
    ordered = "\x00".join(sorted((first, second)))
    digest = hashlib.sha256(ordered.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") / 2**64


def _band_for(
    first: InvestmentHolding, second: InvestmentHolding, bands: CorrelationBands
) -> CorrelationBand:
    if first.asset_class is second.asset_class:
        return bands.same_class
    classes = {first.asset_class, second.asset_class}
    if AssetClass.BONDS in classes and any(item.is_stock for item in classes):
        return bands.stock_bond
    if AssetClass.REAL_ESTATE in classes:
        return bands.real_estate
    return bands.default


def correlate(
    holdings: Sequence[InvestmentHolding],
    bands: CorrelationBands | None = None,
) -> CorrelationMatrix:
    """Build a synthetic correlation matrix from asset class pairings.

    These are heuristic values, not statistics computed from price history.
    The position inside each band comes from a hash of the two labels, so the
    same holdings always produce the same symmetric matrix.
    """

    bands = bands or _DEFAULT_BANDS
    _checked(holdings)

    size = len(holdings)
    rows: list[list[float]] = [[0.0] * size for _ in range(size)]
    for i, first in enumerate(holdings):
        rows[i][i] = 1.0
        for j in range(i + 1, size):
            second = holdings[j]
            band = _band_for(first, second, bands)
            fraction = _pair_fraction(first.label, second.label)
            value = round(band.low + (band.high - band.low) * fraction, 2)
            rows[i][j] = value
            rows[j][i] = value

    return CorrelationMatrix(
        assets=tuple(holding.label for holding in holdings),
        matrix=tuple(tuple(row) for row in rows),
    )


def rebalance(
    holdings: Sequence[InvestmentHolding],
    targets: Mapping[str, float],
    threshold: float = 5.0,
) -> list[RebalancingAction]:
    """Suggest buy, sell or hold for every asset class held or targeted.

    A class is bought when its allocation is more than ``threshold``
    percentage points below target and sold when it is that far above.
    """

    if is_invalid_amount(threshold):
        raise InvalidAmount("Rebalancing threshold must be non-negative")

    target_map = _normalise_targets(targets)
    buckets = allocate(holdings)
    total = _total_value(holdings)

    current = {bucket.asset_class: bucket for bucket in buckets}
    classes = list(current) + [key for key in target_map if key not in current]

    actions: list[RebalancingAction] = []
    for key in classes:
        bucket = current.get(key)
        current_pct = bucket.current_allocation_pct if bucket else 0.0
        target_pct = target_map.get(key, 0.0)

        if current_pct < target_pct - threshold:
            action = "buy"
        elif current_pct > target_pct + threshold:
            action = "sell"
        else:
            action = "hold"

        actions.append(
            RebalancingAction(
                asset_class=key,
                current_value=bucket.value if bucket else 0.0,
                target_value=total * target_pct / 100,
                current_pct=current_pct,
                target_pct=target_pct,
                action=action,
            )
        )
    return actions


def tax_loss_harvesting(
    holdings: Sequence[InvestmentHolding],
    tax_rate: float = 0.15,
) -> list[HarvestingOpportunity]:
    """List taxable holdings trading below cost, largest savings first."""

    if is_invalid_amount(tax_rate) or tax_rate > 1:
        raise InvalidAmount(f"Tax rate must be a fraction between 0 and 1, got {tax_rate}")
    _checked(holdings)

    opportunities = [
        HarvestingOpportunity(
            holding=holding.label,
            asset_class=holding.asset_class.value,
            unrealized_loss=holding.cost_basis - holding.value,
            potential_tax_savings=(holding.cost_basis - holding.value) * tax_rate,
            alternatives=HARVEST_ALTERNATIVES.get((holding.ticker or "").upper(), ()),
        )
        for holding in holdings
        if holding.tax_location is TaxLocation.TAXABLE
        and holding.value < holding.cost_basis
    ]
    opportunities.sort(key=lambda item: item.potential_tax_savings, reverse=True)
    return opportunities


def project_dividends(
    holdings: Sequence[InvestmentHolding],
    years: int = 10,
    growth_rate: float = 0.05,
) -> list[DividendProjection]:
    """Project dividend income assuming value and payouts grow together."""

    _check_projection(years, growth_rate)
    _checked(holdings)

    portfolio_value = _total_value(holdings)
    dividend_amount = sum(
        holding.value * (holding.dividend_yield or 0.0) / 100 for holding in holdings
    )

    projections: list[DividendProjection] = []
    cumulative = 0.0
    for year in range(1, years + 1):
        portfolio_value *= 1 + growth_rate
        dividend_amount *= 1 + growth_rate
        cumulative += dividend_amount
        projections.append(
            DividendProjection(
                year=year,
                dividend_amount=dividend_amount,
                cumulative_dividends=cumulative,
                portfolio_value=portfolio_value,
            )
        )
    return projections


def fee_comparisons(
    holdings: Sequence[InvestmentHolding],
    growth_rate: float = 0.07,
    years: int = 10,
) -> list[FeeComparison]:
    """Compare fee-bearing holdings against cheaper funds for the same market.

    Only holdings with a positive expense ratio and a known alternative are
    listed. ``projected_impact`` is how much more the alternative would be worth
    after ``years`` of ``growth_rate`` growth net of fees; the list is sorted by
    it, largest first.
    """

    _check_projection(years, growth_rate)
    _checked(holdings)

    comparisons: list[FeeComparison] = []
    for holding in holdings:
        alternative = LOWER_COST_ALTERNATIVES.get((holding.ticker or "").upper())
        if alternative is None or not holding.expense_ratio:
            continue
        name, alternative_ratio = alternative

        current_value = alternative_value = holding.value
        for _ in range(years):
            current_value *= (1 + growth_rate) * (1 - holding.expense_ratio / 100)
            alternative_value *= (1 + growth_rate) * (1 - alternative_ratio / 100)

        comparisons.append(
            FeeComparison(
                holding=holding.label,
                alternative=name,
                expense_ratio=holding.expense_ratio,
                alternative_expense_ratio=alternative_ratio,
                current_fee=holding.value * holding.expense_ratio / 100,
                alternative_fee=holding.value * alternative_ratio / 100,
                projected_impact=alternative_value - current_value,
                projection_years=years,
            )
        )

    comparisons.sort(key=lambda item: item.projected_impact, reverse=True)
    return comparisons

__all__ = [
    "HARVEST_ALTERNATIVES",
    "LOWER_COST_ALTERNATIVES",
    "allocate",
    "correlate",
    "fee_comparisons",
    "performance",
    "project_dividends",
    "rebalance",
    "tax_efficiency",
    "tax_loss_harvesting",
]
