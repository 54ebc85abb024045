"""Domain layer - pure business models with no external dependencies."""

from portfolio_calc.domain.models import (
    Transaction,
    CashFlow,
    Lot,
    RealizedLotGain,
    InstrumentConfig,
    TransactionType,
    CashFlowKind,
    GainTerm,
    CompoundingFrequency,
    AssetCategory,
    FixedIncomeType,
)

__all__ = [
    "Transaction",
    "CashFlow",
    "Lot",
    "RealizedLotGain",
    "InstrumentConfig",
    "TransactionType",
    "CashFlowKind",
    "GainTerm",
    "CompoundingFrequency",
    "AssetCategory",
    "FixedIncomeType",
]
