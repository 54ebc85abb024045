"""Enumerations for domain models."""

from enum import Enum


class TransactionType(str, Enum):
    """Types of historical transactions consumed by the engine."""

    BUY = "BUY"
    SELL = "SELL"
    DEPOSIT = "DEPOSIT"


class CashFlowKind(str, Enum):
    """Label attached to a derived cash flow."""

    INVESTMENT = "INVESTMENT"
    REDEMPTION = "REDEMPTION"
    TERMINAL_VALUE = "TERMINAL_VALUE"


class GainTerm(str, Enum):
    """Holding-period classification of a lot."""

    LONG_TERM = "LONG_TERM"
    SHORT_TERM = "SHORT_TERM"


class CompoundingFrequency(int, Enum):
    """Compounding periods per year."""

    ANNUAL = 1
    HALF_YEARLY = 2
    QUARTERLY = 4
    MONTHLY = 12
    DAILY = 365


class AssetCategory(str, Enum):
    """Instrument categories; valuation is resolved per category."""

    EQUITY = "EQUITY"
    FIXED_INCOME = "FIXED_INCOME"
    PHYSICAL = "PHYSICAL"
    REAL_ESTATE = "REAL_ESTATE"
    SAVINGS = "SAVINGS"
    CRYPTO = "CRYPTO"
    INSURANCE = "INSURANCE"
    OTHER = "OTHER"


class FixedIncomeType(str, Enum):
    """Fixed-income instrument types with known scheme rules."""

    PPF = "PPF"
    FD = "FD"
    RD = "RD"
    NSC = "NSC"
    KVP = "KVP"
    EPF = "EPF"
    VPF = "VPF"
    SSY = "SSY"


class Metal(str, Enum):
    GOLD = "GOLD"
    SILVER = "SILVER"


class ScheduleStatus(str, Enum):
    """Status of a recurring-deposit schedule period."""

    COMPLETED = "COMPLETED"
    CURRENT = "CURRENT"


class LiquidityTier(str, Enum):
    """How quickly a category can be turned into cash."""

    INSTANT = "INSTANT"  # Savings
    MARKET = "MARKET"  # Sold at market price within days
    LOCKED = "LOCKED"  # Deposits, property, metal, insurance


class DiversificationLevel(str, Enum):
    GOOD = "GOOD"
    MODERATE = "MODERATE"
    LOW = "LOW"


class GoalLinkType(str, Enum):
    """FUNDING links count toward progress; TRACKING links are informational."""

    FUNDING = "FUNDING"
    TRACKING = "TRACKING"


class AllocationMode(str, Enum):
    PERCENT = "PERCENT"
    FIXED_AMOUNT = "FIXED_AMOUNT"


class GoalProgressMode(str, Enum):
    """How a goal's current value is derived."""

    AUTO = "AUTO"  # Linked assets only
    MANUAL = "MANUAL"  # Manually entered amount only
    HYBRID = "HYBRID"  # Linked assets plus manual amount
