"""View models for engine outputs."""

from portfolio_calc.domain.views.returns import XirrResult, CashFlowLine, CashFlowBreakdown
from portfolio_calc.domain.views.gains import (
    LedgerReplay,
    LotGain,
    GainBuckets,
    TaxRateTable,
    TaxEstimate,
    InterestTaxSplit,
)
from portfolio_calc.domain.views.fixed_income import (
    FixedIncomeValue,
    ScheduleEntry,
    ScheduleSummary,
    RecurringDepositSchedule,
    FixedIncomeValuation,
)
from portfolio_calc.domain.views.projection import (
    ProjectionResult,
    GoalLinkProgress,
    GoalProgressView,
)
from portfolio_calc.domain.views.valuation import (
    AssetValuation,
    CategoryAllocation,
    DiversificationScore,
    LiquidityBucket,
    PortfolioValuation,
    liquidity_tier_of,
)

__all__ = [
    "XirrResult",
    "CashFlowLine",
    "CashFlowBreakdown",
    "LedgerReplay",
    "LotGain",
    "GainBuckets",
    "TaxRateTable",
    "TaxEstimate",
    "InterestTaxSplit",
    "FixedIncomeValue",
    "ScheduleEntry",
    "ScheduleSummary",
    "RecurringDepositSchedule",
    "FixedIncomeValuation",
    "ProjectionResult",
    "GoalLinkProgress",
    "GoalProgressView",
    "AssetValuation",
    "CategoryAllocation",
    "DiversificationScore",
    "LiquidityBucket",
    "PortfolioValuation",
    "liquidity_tier_of",
]
