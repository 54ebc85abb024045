"""Fixed-income valuation: compound growth and recurring-deposit schedules."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from portfolio_calc.core.dates import DAYS_IN_YEAR, days_between, today_local
from portfolio_calc.core.exceptions import InvalidInputError
from portfolio_calc.core.money import (
    ZERO,
    coerce_decimal,
    engine_context,
    quantize_money,
)
from portfolio_calc.core.result import CalcResult, capture
from portfolio_calc.domain.models import (
    CompoundingFrequency,
    InstrumentConfig,
    ScheduleStatus,
    Transaction,
    TransactionType,
)
from portfolio_calc.domain.views import (
    FixedIncomeValuation,
    FixedIncomeValue,
    RecurringDepositSchedule,
    ScheduleEntry,
    ScheduleSummary,
)
from portfolio_calc.services.accrual import (
    AccrualRule,
    BalanceChange,
    MinimumMonthlyBalanceRule,
)

logger = logging.getLogger(__name__)

ONE = Decimal("1")


def _balance_change(txn: Transaction) -> Decimal:
    """Deposits (BUY/DEPOSIT) add to the balance; SELL is a withdrawal."""
    return txn.total_amount if txn.is_contribution else -txn.total_amount


class Compounder:
    """
    Values interest-bearing instruments.

    All arithmetic runs in Decimal under the engine context so repeated
    calls return identical results.
    """

    def __init__(self, rule: Optional[AccrualRule] = None):
        self.rule = rule or MinimumMonthlyBalanceRule()

    def value(
        self,
        transactions: Iterable[Transaction],
        annual_rate: Decimal,
        as_of: Optional[date] = None,
        frequency: CompoundingFrequency = CompoundingFrequency.ANNUAL,
    ) -> CalcResult[FixedIncomeValue]:
        """
        Compound each deposit forward to as_of.

        Each deposit grows as P * (1 + r/n) ** (n * days / 365). A SELL is
        compounded forward as a negative flow, which removes its principal
        from its date on without touching interest already earned.
        Transactions dated after as_of are ignored.
        """
        with engine_context():
            return capture(self._value, transactions, annual_rate, as_of, frequency)

    def schedule(
        self,
        transactions: Sequence[Transaction],
        annual_rate: Decimal,
        start_date: Optional[date] = None,
        as_of: Optional[date] = None,
        rule: Optional[AccrualRule] = None,
    ) -> CalcResult[RecurringDepositSchedule]:
        """Build the period-by-period schedule of a recurring-deposit instrument."""
        with engine_context():
            return capture(
                self._schedule, transactions, annual_rate, start_date, as_of, rule or self.rule
            )

    def value_instrument(
        self,
        config: InstrumentConfig,
        transactions: Sequence[Transaction] = (),
        principal: Optional[Decimal] = None,
        start_date: Optional[date] = None,
        as_of: Optional[date] = None,
    ) -> CalcResult[FixedIncomeValuation]:
        """
        Value one instrument using the contract its configuration calls for.

        - Recurring-deposit instruments with transactions use the schedule.
        - Recurring-deposit instruments without transactions on or before
          as_of report needs_transactions with principal only and no interest.
        - Other instruments compound their deposits; with no transactions a
          single deposit of principal at start_date is assumed.
        """
        with engine_context():
            return capture(
                self._value_instrument, config, transactions, principal, start_date, as_of
            )

    # -------------------------------------------------------------------------

    @staticmethod
    def _growth_factor(rate: Decimal, periods_per_year: Decimal, days: int) -> Decimal:
        if days <= 0 or rate == 0:
            return ONE
        exponent = periods_per_year * Decimal(days) / Decimal(DAYS_IN_YEAR)
        return (ONE + rate / periods_per_year) ** exponent

    def _value(
        self,
        transactions: Iterable[Transaction],
        annual_rate: Decimal,
        as_of: Optional[date],
        frequency: CompoundingFrequency,
    ) -> FixedIncomeValue:
        as_of = as_of or today_local()
        rate = coerce_decimal(annual_rate) / 100
        if rate < 0:
            raise InvalidInputError(f"Annual rate cannot be negative, got {annual_rate}")
        periods_per_year = Decimal(int(CompoundingFrequency(frequency)))

        principal = ZERO
        current_value = ZERO
        for txn in transactions:
            if txn.txn_date > as_of:
                continue
            amount = _balance_change(txn)
            principal += amount
            growth = self._growth_factor(rate, periods_per_year, days_between(txn.txn_date, as_of))
            current_value += amount * growth

        principal = quantize_money(principal)
        current_value = quantize_money(current_value)
        return FixedIncomeValue(
            principal=principal,
            current_value=current_value,
            interest=current_value - principal,
        )

    def _schedule(
        self,
        transactions: Sequence[Transaction],
        annual_rate: Decimal,
        start_date: Optional[date],
        as_of: Optional[date],
        rule: AccrualRule,
    ) -> RecurringDepositSchedule:
        as_of = as_of or today_local()
        rate = coerce_decimal(annual_rate)
        if rate < 0:
            raise InvalidInputError(f"Annual rate cannot be negative, got {annual_rate}")

        changes = [
            BalanceChange(txn.txn_date, _balance_change(txn))
            for txn in transactions
            if txn.txn_date <= as_of
        ]
        if not changes:
            raise InvalidInputError("A recurring-deposit schedule needs at least one deposit")

        first_date = min(c.change_date for c in changes)
        if start_date is not None and start_date < first_date:
            first_date = start_date

        entries: list[ScheduleEntry] = []
        opening = ZERO
        accrued_current = ZERO
        for period in rule.periods(first_date, as_of):
            in_period = [c for c in changes if period.start <= c.change_date <= period.end]
            deposits = sum((c.amount for c in in_period), ZERO)
            interest = quantize_money(rule.accrue(opening, in_period, period, rate, as_of))
            is_current = period.end >= as_of

            if is_current:
                credited = ZERO
                accrued_current = interest
            else:
                credited = interest
            closing = quantize_money(opening + deposits + credited)

            entries.append(
                ScheduleEntry(
                    label=period.label,
                    period_start=period.start,
                    period_end=period.end,
                    status=ScheduleStatus.CURRENT if is_current else ScheduleStatus.COMPLETED,
                    opening_balance=opening,
                    deposits=deposits,
                    interest_accrued=interest,
                    interest_credited=credited,
                    closing_balance=closing,
                )
            )
            opening = closing

        total_deposited = sum((e.deposits for e in entries), ZERO)
        total_interest = sum((e.interest_credited for e in entries), ZERO)
        current_value = entries[-1].closing_balance
        summary = ScheduleSummary(
            total_deposited=total_deposited,
            total_interest=total_interest,
            current_value=current_value,
            current_fy_accrued_interest=accrued_current,
            estimated_value=current_value + accrued_current,
        )
        logger.debug(
            "Built %d-period schedule; credited interest %s, accrued %s",
            len(entries),
            total_interest,
            accrued_current,
        )
        return RecurringDepositSchedule(periods=entries, summary=summary)

    def _value_instrument(
        self,
        config: InstrumentConfig,
        transactions: Sequence[Transaction],
        principal: Optional[Decimal],
        start_date: Optional[date],
        as_of: Optional[date],
    ) -> FixedIncomeValuation:
        if config.is_recurring_deposit:
            as_of = as_of or today_local()
            if not any(t.txn_date <= as_of for t in transactions):
                known_principal = quantize_money(coerce_decimal(principal))
                logger.warning(
                    "Recurring-deposit instrument has no transactions up to %s; "
                    "reporting principal only",
                    as_of,
                )
                return FixedIncomeValuation(
                    principal=known_principal,
                    current_value=known_principal,
                    interest=ZERO,
                    needs_transactions=True,
                )
            schedule = self._schedule(
                transactions, config.annual_rate, start_date, as_of, self.rule
            )
            summary = schedule.summary
            return FixedIncomeValuation(
                principal=summary.total_deposited,
                current_value=summary.current_value,
                interest=summary.total_interest,
                estimated_value=summary.estimated_value,
                current_fy_accrued_interest=summary.current_fy_accrued_interest,
                schedule=schedule,
            )

        if not transactions:
            if principal is None or start_date is None:
                raise InvalidInputError(
                    "Fixed-income instrument needs transactions or a principal and start date"
                )
            transactions = [
                Transaction(
                    txn_type=TransactionType.DEPOSIT,
                    txn_date=start_date,
                    total_amount=principal,
                )
            ]

        result = self._value(
            transactions, config.annual_rate, as_of, config.compounding_frequency
        )
        return FixedIncomeValuation(
            principal=result.principal,
            current_value=result.current_value,
            interest=result.interest,
        )
