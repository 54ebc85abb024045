"""Domain models package."""

from portfolio_calc.domain.models.enums import (
    TransactionType,
    CashFlowKind,
    GainTerm,
    CompoundingFrequency,
    AssetCategory,
    FixedIncomeType,
    Metal,
    ScheduleStatus,
    LiquidityTier,
    DiversificationLevel,
    GoalLinkType,
    AllocationMode,
    GoalProgressMode,
)
from portfolio_calc.domain.models.transaction import Transaction, CashFlow
from portfolio_calc.domain.models.lot import Lot, RealizedLotGain
from portfolio_calc.domain.models.instrument import (
    InstrumentConfig,
    RECURRING_DEPOSIT_TYPES,
    compounding_for,
)
from portfolio_calc.domain.models.holding import (
    AssetHolding,
    EquityHolding,
    FixedIncomeHolding,
    MetalHolding,
    RealEstateHolding,
    ManualHolding,
    PriceQuote,
    normalize_symbol,
)
from portfolio_calc.domain.models.goal import Goal, GoalLink

__all__ = [
    "TransactionType",
    "CashFlowKind",
    "GainTerm",
    "CompoundingFrequency",
    "AssetCategory",
    "FixedIncomeType",
    "Metal",
    "ScheduleStatus",
    "LiquidityTier",
    "DiversificationLevel",
    "GoalLinkType",
    "AllocationMode",
    "GoalProgressMode",
    "Transaction",
    "CashFlow",
    "Lot",
    "RealizedLotGain",
    "InstrumentConfig",
    "RECURRING_DEPOSIT_TYPES",
    "compounding_for",
    "AssetHolding",
    "EquityHolding",
    "FixedIncomeHolding",
    "MetalHolding",
    "RealEstateHolding",
    "ManualHolding",
    "PriceQuote",
    "normalize_symbol",
    "Goal",
    "GoalLink",
]
