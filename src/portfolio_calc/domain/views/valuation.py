"""View models for asset and portfolio valuation."""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from portfolio_calc.core.money import ZERO, coerce_decimal, engine_context, percent_of
from portfolio_calc.domain.models import AssetCategory, DiversificationLevel, LiquidityTier

ONE = Decimal("1")
HUNDRED = Decimal("100")

# Sub-score weights of the diversification score (they sum to 100)
CONCENTRATION_WEIGHT = Decimal("35")
CATEGORY_BALANCE_WEIGHT = Decimal("35")
ASSET_SPREAD_WEIGHT = Decimal("30")

LIQUIDITY_TIERS: dict[AssetCategory, LiquidityTier] = {
    AssetCategory.SAVINGS: LiquidityTier.INSTANT,
    AssetCategory.EQUITY: LiquidityTier.MARKET,
    AssetCategory.CRYPTO: LiquidityTier.MARKET,
}


def liquidity_tier_of(category: AssetCategory) -> LiquidityTier:
    """Savings are instant, listed assets market-liquid, everything else locked."""
    return LIQUIDITY_TIERS.get(category, LiquidityTier.LOCKED)


def _round_score(value: Decimal) -> int:
    return int(value.quantize(ONE, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class AssetValuation:
    """
    Valuation of one holding.

    current_value is None when the value is unknown; error_code then says why.
    """

    asset_id: str
    category: AssetCategory
    current_value: Optional[Decimal]
    invested_value: Decimal
    error_code: Optional[str] = None

    @property
    def is_known(self) -> bool:
        return self.current_value is not None

    @property
    def gain(self) -> Optional[Decimal]:
        if self.current_value is None:
            return None
        return self.current_value - self.invested_value


@dataclass
class CategoryAllocation:
    """Single category in the allocation breakdown."""

    category: AssetCategory
    current_value: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class DiversificationScore:
    """
    Diversification on a 0-100 scale.

    concentration and category_balance are 35 * (1 - HHI) over holding and
    category weights; asset_spread is 30 * (1 - 1 / sqrt(holding count)).
    """

    concentration: int
    category_balance: int
    asset_spread: int

    @property
    def total(self) -> int:
        return self.concentration + self.category_balance + self.asset_spread

    @property
    def level(self) -> DiversificationLevel:
        if self.total >= 70:
            return DiversificationLevel.GOOD
        if self.total >= 50:
            return DiversificationLevel.MODERATE
        return DiversificationLevel.LOW


@dataclass(frozen=True)
class LiquidityBucket:
    """Known value held in one liquidity tier."""

    tier: LiquidityTier
    current_value: Decimal
    percentage: Decimal


@dataclass
class PortfolioValuation:
    """
    Portfolio totals over holdings with a known value.

    is_partial is True when at least one holding could not be valued;
    totals then cover known holdings only and must be shown as partial.
    The same holds for every derived metric below.
    """

    holdings: list[AssetValuation] = field(default_factory=list)
    allocation: list[CategoryAllocation] = field(default_factory=list)
    total_current_value: Decimal = field(default_factory=lambda: Decimal("0"))
    total_invested_value: Decimal = field(default_factory=lambda: Decimal("0"))
    unknown_asset_ids: list[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.unknown_asset_ids)

    @property
    def known_holdings(self) -> list[AssetValuation]:
        return [h for h in self.holdings if h.is_known]

    @property
    def largest_holding_weight(self) -> Decimal:
        """Percentage of the known total held in the single largest holding."""
        values = [h.current_value for h in self.known_holdings]
        if not values or self.total_current_value <= 0:
            return ZERO
        with engine_context():
            return percent_of(max(values), self.total_current_value)

    @property
    def diversification(self) -> DiversificationScore:
        total = self.total_current_value
        if total <= 0:
            return DiversificationScore(concentration=0, category_balance=0, asset_spread=0)

        with engine_context():
            asset_hhi = sum(((h.current_value / total) ** 2 for h in self.known_holdings), ZERO)
            category_hhi = sum(((a.percentage / HUNDRED) ** 2 for a in self.allocation), ZERO)
            count = Decimal(max(len(self.known_holdings), 1))
            spread = ASSET_SPREAD_WEIGHT * (ONE - ONE / count.sqrt())
            return DiversificationScore(
                concentration=_round_score(CONCENTRATION_WEIGHT * (ONE - asset_hhi)),
                category_balance=_round_score(CATEGORY_BALANCE_WEIGHT * (ONE - category_hhi)),
                asset_spread=_round_score(spread),
            )

    @property
    def liquidity(self) -> list[LiquidityBucket]:
        """Known value per tier, always in INSTANT, MARKET, LOCKED order."""
        by_tier = {tier: ZERO for tier in LiquidityTier}
        for allocation in self.allocation:
            by_tier[liquidity_tier_of(allocation.category)] += allocation.current_value

        total = self.total_current_value
        buckets = []
        with engine_context():
            for tier, value in by_tier.items():
                percentage = percent_of(value, total) if total > 0 else ZERO
                buckets.append(
                    LiquidityBucket(tier=tier, current_value=value, percentage=percentage)
                )
        return buckets

    def liquid_value(self, instant_only: bool = False) -> Decimal:
        tiers = {LiquidityTier.INSTANT}
        if not instant_only:
            tiers.add(LiquidityTier.MARKET)
        return sum((b.current_value for b in self.liquidity if b.tier in tiers), ZERO)

    def emergency_months(self, monthly_expense: Decimal, instant_only: bool = False) -> Decimal:
        """
        Months of expenses covered by liquid holdings.

        instant_only restricts coverage to savings; otherwise market-liquid
        holdings count too. Zero when no expense is given.
        """
        monthly_expense = coerce_decimal(monthly_expense)
        if monthly_expense <= 0:
            return ZERO
        with engine_context():
            months = self.liquid_value(instant_only) / monthly_expense
            return months.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
