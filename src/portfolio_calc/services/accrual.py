"""
Accrual rules for recurring-deposit schedules.

A rule decides how time is cut into crediting periods and how much
interest a period earns. The default rule follows the Indian small-savings
convention (PPF and similar): fiscal years from April to March, monthly
interest on the lowest balance between the 5th and the last day of the
month, credited once at the end of the fiscal year.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Sequence

from portfolio_calc.core.dates import add_months, fiscal_year_of, month_end
from portfolio_calc.core.money import ZERO


@dataclass(frozen=True)
class AccrualPeriod:
    """One crediting period of a schedule."""

    label: str
    start: date
    end: date

    def month_starts(self) -> list[date]:
        months = []
        current = self.start
        while current <= self.end:
            months.append(current)
            current = add_months(current, 1)
        return months


@dataclass(frozen=True)
class BalanceChange:
    """Signed change to a deposit balance: deposits positive, withdrawals negative."""

    change_date: date
    amount: Decimal


class AccrualRule(ABC):
    """Strategy for period boundaries and per-period interest."""

    @abstractmethod
    def periods(self, first_date: date, as_of: date) -> list[AccrualPeriod]:
        """Return consecutive periods covering first_date through as_of."""

    @abstractmethod
    def accrue(
        self,
        opening_balance: Decimal,
        changes: Sequence[BalanceChange],
        period: AccrualPeriod,
        annual_rate: Decimal,
        as_of: date,
    ) -> Decimal:
        """
        Return interest earned in period up to as_of.

        annual_rate is a percentage; changes are already limited to the period.
        """


class MinimumMonthlyBalanceRule(AccrualRule):
    """
    Fiscal-year periods with interest on the minimum monthly balance.

    A deposit made on or before cutoff_day counts for that month; a later
    deposit starts earning from the next month. A withdrawal anywhere in
    the month lowers that month's minimum. Only whole months that have
    ended on or before as_of accrue.
    """

    def __init__(self, cutoff_day: int = 5):
        self.cutoff_day = cutoff_day

    def periods(self, first_date: date, as_of: date) -> list[AccrualPeriod]:
        fiscal_year = fiscal_year_of(first_date)
        last = fiscal_year_of(as_of)
        periods = []
        while fiscal_year.start_year <= last.start_year:
            periods.append(
                AccrualPeriod(label=fiscal_year.label, start=fiscal_year.start, end=fiscal_year.end)
            )
            fiscal_year = fiscal_year.next()
        return periods

    def accrue(
        self,
        opening_balance: Decimal,
        changes: Sequence[BalanceChange],
        period: AccrualPeriod,
        annual_rate: Decimal,
        as_of: date,
    ) -> Decimal:
        monthly_rate = annual_rate / 100 / 12
        ordered = sorted(changes, key=lambda c: c.change_date)
        balance = opening_balance
        interest = ZERO

        for month_start in period.month_starts():
            last_day = month_end(month_start)
            cutoff = month_start.replace(day=self.cutoff_day)
            in_month = [c for c in ordered if month_start <= c.change_date <= last_day]

            for change in in_month:
                if change.change_date <= cutoff:
                    balance += change.amount
            minimum = balance
            for change in in_month:
                if change.change_date > cutoff:
                    balance += change.amount
                    minimum = min(minimum, balance)

            if last_day <= as_of:
                interest += max(ZERO, minimum) * monthly_rate
        return interest
