"""
Goal projection and goal progress.

Projection inverts the compound-annuity formula

    FV(n) = PV * (1 + r) ** n + PMT * ((1 + r) ** n - 1) / r

with r the monthly rate, either for n (months to target, by bounded
binary search) or for PMT (required contribution, in closed form).
"""

import logging
from datetime import date
from decimal import ROUND_CEILING, Decimal
from typing import Iterable, Optional

from portfolio_calc.config.settings import EngineSettings, get_settings
from portfolio_calc.core.dates import add_months, months_until, today_local, whole_months_between
from portfolio_calc.core.exceptions import InvalidInputError, MissingPriceDataError
from portfolio_calc.core.money import (
    ZERO,
    coerce_decimal,
    engine_context,
    percent_of,
    quantize_money,
)
from portfolio_calc.core.result import CalcResult, capture
from portfolio_calc.domain.models import (
    AllocationMode,
    Goal,
    GoalLink,
    GoalLinkType,
    GoalProgressMode,
    Transaction,
)
from portfolio_calc.domain.views import GoalLinkProgress, GoalProgressView, ProjectionResult

logger = logging.getLogger(__name__)

ONE = Decimal("1")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = 12


def monthly_rate(annual_return_percent: Decimal) -> Decimal:
    """Convert an annual percentage (12 means 12% p.a.) to a monthly fraction."""
    return coerce_decimal(annual_return_percent) / HUNDRED / MONTHS_PER_YEAR


def future_value(
    present_value: Decimal,
    monthly_contribution: Decimal,
    rate: Decimal,
    months: int,
) -> Decimal:
    """Value after months of growth at rate with an end-of-month contribution."""
    present_value = coerce_decimal(present_value)
    monthly_contribution = coerce_decimal(monthly_contribution)
    rate = coerce_decimal(rate)
    with engine_context():
        if rate == 0:
            return present_value + monthly_contribution * months
        growth = (ONE + rate) ** months
        return present_value * growth + monthly_contribution * (growth - ONE) / rate


def average_monthly_contribution(
    transactions: Iterable[Transaction],
    as_of: Optional[date] = None,
) -> Decimal:
    """
    Net contributions per month since the first transaction.

    BUY/DEPOSIT count as contributions and SELL as withdrawals. The span
    is at least one month; no transactions gives zero.
    """
    as_of = as_of or today_local()
    history = [t for t in transactions if t.txn_date <= as_of]
    if not history:
        return ZERO
    with engine_context():
        net = sum((-t.signed_amount for t in history), ZERO)
        first = min(t.txn_date for t in history)
        months = max(1, whole_months_between(first, as_of))
        return quantize_money(net / months)


class GoalProjector:
    """Projects goal completion; every call recomputes from its arguments."""

    def __init__(self, settings: Optional[EngineSettings] = None):
        settings = settings or get_settings()
        self._horizon = settings.projection_horizon_months
        self._max_iterations = settings.projection_max_iterations
        self._negligible_rate = Decimal(str(settings.negligible_monthly_rate))
        self._on_track_tolerance = settings.on_track_tolerance

    def project(
        self,
        current_value: Decimal,
        target_amount: Decimal,
        avg_monthly_contribution: Decimal,
        annual_return_percent: Decimal,
        deadline: Optional[date] = None,
        as_of: Optional[date] = None,
        on_track_tolerance: Optional[Decimal] = None,
    ) -> CalcResult[ProjectionResult]:
        """
        Project months to target and, with a deadline, the required contribution.

        estimated_months_to_target is None without a positive contribution
        (unless the target is already met) or when the target lies beyond
        the projection horizon.
        """
        if on_track_tolerance is None:
            on_track_tolerance = self._on_track_tolerance
        with engine_context():
            return capture(
                self._project,
                coerce_decimal(current_value),
                coerce_decimal(target_amount),
                coerce_decimal(avg_monthly_contribution),
                coerce_decimal(annual_return_percent),
                deadline,
                as_of or today_local(),
                coerce_decimal(on_track_tolerance),
            )

    def goal_progress(self, goal: Goal, links: Iterable[GoalLink]) -> CalcResult[GoalProgressView]:
        """
        Current value and completion percentage of a goal.

        FUNDING links contribute part of their asset's value; TRACKING links
        are listed but never counted. Progress is capped at 100%.
        """
        with engine_context():
            return capture(self._goal_progress, goal, list(links))

    # -------------------------------------------------------------------------

    def _project(
        self,
        current_value: Decimal,
        target_amount: Decimal,
        contribution: Decimal,
        annual_return_percent: Decimal,
        deadline: Optional[date],
        as_of: date,
        tolerance: Decimal,
    ) -> ProjectionResult:
        if target_amount <= 0:
            raise InvalidInputError(f"Target amount must be positive, got {target_amount}")

        rate = monthly_rate(annual_return_percent)
        if rate <= -ONE:
            raise InvalidInputError(
                f"Annual return must be above -1200%, got {annual_return_percent}"
            )
        is_achieved = current_value >= target_amount
        months, exceeds_horizon = self._months_to_target(
            current_value, target_amount, contribution, rate
        )
        completion_date = add_months(as_of, months) if months is not None else None

        required = None
        is_overdue = False
        months_to_deadline = None
        if deadline is None:
            is_on_track = True if is_achieved else None
        elif deadline <= as_of:
            is_overdue = True
            is_on_track = is_achieved
        else:
            months_to_deadline = months_until(as_of, deadline)
            required = self._required_contribution(
                current_value, target_amount, rate, months_to_deadline
            )
            is_on_track = is_achieved or contribution >= required * tolerance

        return ProjectionResult(
            estimated_months_to_target=months,
            required_monthly_contribution=required,
            is_on_track=is_on_track,
            is_overdue=is_overdue,
            is_achieved=is_achieved,
            exceeds_horizon=exceeds_horizon,
            estimated_completion_date=completion_date,
            months_to_deadline=months_to_deadline,
        )

    def _months_to_target(
        self,
        current_value: Decimal,
        target_amount: Decimal,
        contribution: Decimal,
        rate: Decimal,
    ) -> tuple[Optional[int], bool]:
        """Return (months, exceeds_horizon)."""
        if current_value >= target_amount:
            return 0, False
        if contribution <= 0:
            return None, False

        if abs(rate) < self._negligible_rate:
            remaining = target_amount - current_value
            months = int((remaining / contribution).to_integral_value(rounding=ROUND_CEILING))
            if months > self._horizon:
                return None, True
            return months, False

        # FV is monotonic in n; below target at the horizon means never reached
        if future_value(current_value, contribution, rate, self._horizon) < target_amount:
            logger.warning("Goal target lies beyond the %d-month horizon", self._horizon)
            return None, True

        # FV(low) < target <= FV(high)
        low, high = 0, self._horizon
        for _ in range(self._max_iterations):
            if high - low <= 1:
                break
            middle = (low + high) // 2
            if future_value(current_value, contribution, rate, middle) >= target_amount:
                high = middle
            else:
                low = middle
        return high, False

    def _required_contribution(
        self,
        current_value: Decimal,
        target_amount: Decimal,
        rate: Decimal,
        months: int,
    ) -> Decimal:
        if abs(rate) < self._negligible_rate:
            required = (target_amount - current_value) / months
        else:
            growth = (ONE + rate) ** months
            required = (target_amount - current_value * growth) * rate / (growth - ONE)
        return quantize_money(max(ZERO, required))

    @staticmethod
    def _allocated_value(link: GoalLink) -> Decimal:
        if link.asset_value is None:
            raise MissingPriceDataError(f"value of linked asset {link.asset_id}")
        asset_value = coerce_decimal(link.asset_value)
        if link.allocation_mode == AllocationMode.FIXED_AMOUNT and link.fixed_allocation_amount:
            return min(coerce_decimal(link.fixed_allocation_amount), asset_value)
        return asset_value * coerce_decimal(link.allocation_percent) / HUNDRED

    def _goal_progress(self, goal: Goal, links: list[GoalLink]) -> GoalProgressView:
        uses_links = goal.progress_mode in (GoalProgressMode.AUTO, GoalProgressMode.HYBRID)

        linked_value = ZERO
        link_views = []
        for link in links:
            counts = link.link_type == GoalLinkType.FUNDING
            allocated = ZERO
            if counts and uses_links:
                allocated = self._allocated_value(link)
                linked_value += allocated
            elif counts and link.asset_value is not None:
                allocated = self._allocated_value(link)
            link_views.append(
                GoalLinkProgress(
                    asset_id=link.asset_id,
                    asset_value=link.asset_value,
                    allocated_value=quantize_money(allocated),
                    counts_toward_progress=counts and uses_links,
                )
            )

        manual_value = coerce_decimal(goal.manual_current_amount)
        if goal.progress_mode == GoalProgressMode.AUTO:
            current_value = linked_value
        elif goal.progress_mode == GoalProgressMode.MANUAL:
            current_value = manual_value
        else:
            current_value = linked_value + manual_value

        target = coerce_decimal(goal.target_amount)
        if target > 0:
            progress = min(percent_of(current_value, target), HUNDRED)
        else:
            progress = ZERO

        return GoalProgressView(
            goal_id=goal.goal_id,
            current_value=quantize_money(current_value),
            linked_assets_value=quantize_money(linked_value),
            manual_value=quantize_money(manual_value),
            progress_percent=progress,
            links=link_views,
        )
