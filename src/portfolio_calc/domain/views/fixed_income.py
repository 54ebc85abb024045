"""View models for fixed-income valuation and deposit schedules."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from portfolio_calc.domain.models import ScheduleStatus


@dataclass(frozen=True)
class FixedIncomeValue:
    """Compounded value of a set of deposits."""

    principal: Decimal
    current_value: Decimal
    interest: Decimal

    @property
    def interest_percent(self) -> Decimal:
        if self.principal <= 0:
            return Decimal("0")
        return (self.interest / self.principal * 100).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class ScheduleEntry:
    """
    One compounding period of a recurring-deposit schedule.

    For the CURRENT period interest_accrued is earned but not yet credited,
    so closing_balance excludes it.
    """

    label: str
    period_start: date
    period_end: date
    status: ScheduleStatus
    opening_balance: Decimal
    deposits: Decimal
    interest_accrued: Decimal
    interest_credited: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class ScheduleSummary:
    """Roll-up of a recurring-deposit schedule."""

    total_deposited: Decimal
    total_interest: Decimal  # Credited interest only
    current_value: Decimal  # Credited balance, interest-inclusive
    current_fy_accrued_interest: Decimal
    estimated_value: Decimal  # current_value + accrued interest

    @property
    def interest_percent(self) -> Decimal:
        if self.total_deposited <= 0:
            return Decimal("0")
        return (self.total_interest / self.total_deposited * 100).quantize(Decimal("0.01"))


@dataclass
class RecurringDepositSchedule:
    periods: list[ScheduleEntry] = field(default_factory=list)
    summary: Optional[ScheduleSummary] = None


@dataclass(frozen=True)
class FixedIncomeValuation:
    """Per-instrument fixed-income result as shown to callers."""

    principal: Decimal
    current_value: Decimal
    interest: Decimal
    needs_transactions: bool = False
    estimated_value: Optional[Decimal] = None
    current_fy_accrued_interest: Optional[Decimal] = None
    schedule: Optional[RecurringDepositSchedule] = None

    @property
    def interest_percent(self) -> Decimal:
        if self.principal <= 0:
            return Decimal("0")
        return (self.interest / self.principal * 100).quantize(Decimal("0.01"))
