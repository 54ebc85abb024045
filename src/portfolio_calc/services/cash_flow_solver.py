"""Cash flow solver for annualized internal rate of return (XIRR)."""

import logging
import math
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from portfolio_calc.config.settings import EngineSettings, get_settings
from portfolio_calc.core.dates import DAYS_IN_YEAR, today_local
from portfolio_calc.core.exceptions import (
    DegenerateCashFlowsError,
    InvalidInputError,
    MissingPriceDataError,
    NoConvergenceError,
)
from portfolio_calc.core.money import (
    ZERO,
    engine_context,
    percent_of,
    quantize_money,
    quantize_rate,
)
from portfolio_calc.core.result import CalcResult, capture
from portfolio_calc.domain.models import CashFlow, CashFlowKind, Transaction
from portfolio_calc.domain.views import CashFlowBreakdown, CashFlowLine, XirrResult

logger = logging.getLogger(__name__)

# Below this slope a Newton step is numerically meaningless
_MIN_SLOPE = 1e-12
# Bisection stops once the bracket is narrower than this
_MIN_BRACKET = 1e-12

# (years since first flow, amount)
_Point = tuple[float, float]


def build_cash_flows(
    transactions: Iterable[Transaction],
    current_value: Optional[Decimal],
    as_of: Optional[date] = None,
) -> list[CashFlow]:
    """
    Convert a transaction history plus a terminal valuation into signed cash flows.

    BUY/DEPOSIT are outflows, SELL is an inflow, and the current value is a
    final inflow on as_of. Transactions dated after as_of are ignored. An
    unknown current value (None) raises MissingPriceDataError rather than
    being treated as zero.
    """
    as_of = as_of or today_local()
    if current_value is None:
        raise MissingPriceDataError("current value for XIRR terminal flow")

    flows: list[CashFlow] = []
    for txn in transactions:
        if txn.txn_date > as_of:
            continue
        kind = CashFlowKind.INVESTMENT if txn.is_contribution else CashFlowKind.REDEMPTION
        flows.append(CashFlow(flow_date=txn.txn_date, amount=txn.signed_amount, kind=kind))

    if current_value > 0:
        flows.append(
            CashFlow(flow_date=as_of, amount=current_value, kind=CashFlowKind.TERMINAL_VALUE)
        )
    return flows


class CashFlowSolver:
    """
    Solver for the rate r with Σ CF_i / (1+r)^((d_i - d_0)/365) = 0.

    Newton's method from a fixed guess with the analytic derivative,
    falling back to bisection over a bounded bracket. Both loops have a
    fixed iteration cap, so worst-case cost does not depend on the input.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        settings = settings or get_settings()
        self._guess = settings.xirr_initial_guess
        self._max_iterations = settings.xirr_max_iterations
        self._tolerance = settings.xirr_tolerance
        self._lower = settings.xirr_lower_bound
        self._upper = settings.xirr_upper_bound
        self._bisection_iterations = settings.bisection_max_iterations

    def solve(self, cash_flows: Sequence[CashFlow]) -> CalcResult[XirrResult]:
        """Compute XIRR for arbitrary dated cash flows."""
        return capture(self._solve, cash_flows)

    def solve_transactions(
        self,
        transactions: Iterable[Transaction],
        current_value: Optional[Decimal],
        as_of: Optional[date] = None,
    ) -> CalcResult[XirrResult]:
        """Compute XIRR for a transaction history valued at current_value on as_of."""
        return capture(
            lambda: self._solve(build_cash_flows(transactions, current_value, as_of))
        )

    def breakdown(
        self,
        transactions: Sequence[Transaction],
        current_value: Optional[Decimal],
        as_of: Optional[date] = None,
    ) -> CalcResult[CashFlowBreakdown]:
        """
        Return the labelled flows and summary totals behind an XIRR figure.

        A failed solve does not fail the breakdown; the error code is
        reported in xirr_error instead.
        """
        with engine_context():
            return capture(self._breakdown, transactions, current_value, as_of)

    # -------------------------------------------------------------------------

    def _breakdown(
        self,
        transactions: Sequence[Transaction],
        current_value: Optional[Decimal],
        as_of: Optional[date],
    ) -> CashFlowBreakdown:
        flows = sorted(
            build_cash_flows(transactions, current_value, as_of),
            key=lambda f: f.flow_date,
        )
        view = CashFlowBreakdown(
            cash_flows=[CashFlowLine(f.flow_date, f.amount, f.kind) for f in flows],
            current_value=current_value,
            transaction_count=len(transactions),
        )
        for flow in flows:
            if flow.kind == CashFlowKind.INVESTMENT:
                view.total_invested += -flow.amount
            elif flow.kind == CashFlowKind.REDEMPTION:
                view.total_redeemed += flow.amount

        view.net_invested = view.total_invested - view.total_redeemed
        view.absolute_return = quantize_money(
            current_value + view.total_redeemed - view.total_invested
        )
        if view.total_invested > ZERO:
            view.absolute_return_percent = percent_of(view.absolute_return, view.total_invested)
        if flows:
            view.first_date = flows[0].flow_date
            view.last_date = flows[-1].flow_date

        result = capture(self._solve, flows)
        if result.ok:
            view.xirr_percent = result.value.percent
        else:
            view.xirr_error = result.error_code
        return view

    def _solve(self, cash_flows: Sequence[CashFlow]) -> XirrResult:
        points = self._prepare(cash_flows)
        scale = max(1.0, max(abs(amount) for _, amount in points))
        tolerance = self._tolerance * scale

        newton = self._newton(points, tolerance)
        if newton is not None:
            rate, iterations = newton
            logger.debug("XIRR converged by Newton in %d iterations: %.8f", iterations, rate)
            return XirrResult(rate=quantize_rate(rate), iterations=iterations, method="newton")

        logger.warning("Newton iteration did not converge; falling back to bisection")
        rate, iterations = self._bisect(points, tolerance)
        return XirrResult(rate=quantize_rate(rate), iterations=iterations, method="bisection")

    def _prepare(self, cash_flows: Sequence[CashFlow]) -> list[_Point]:
        """Validate flows and convert them to (years, amount) pairs."""
        if len(cash_flows) < 2:
            raise InvalidInputError("XIRR requires at least two cash flows")
        if not any(f.amount < 0 for f in cash_flows):
            raise DegenerateCashFlowsError("No outflow: every cash flow is non-negative")
        if not any(f.amount >= 0 for f in cash_flows):
            raise DegenerateCashFlowsError("No inflow: every cash flow is negative")

        ordered = sorted(cash_flows, key=lambda f: f.flow_date)
        first_date = ordered[0].flow_date
        if ordered[-1].flow_date == first_date:
            raise DegenerateCashFlowsError("All cash flows share one date; no time has elapsed")

        return [
            ((f.flow_date - first_date).days / DAYS_IN_YEAR, float(f.amount))
            for f in ordered
        ]

    @staticmethod
    def _npv(points: list[_Point], rate: float) -> float:
        log_growth = math.log1p(rate)
        return sum(amount * math.exp(-years * log_growth) for years, amount in points)

    @staticmethod
    def _npv_with_slope(points: list[_Point], rate: float) -> tuple[float, float]:
        log_growth = math.log1p(rate)
        value = 0.0
        slope = 0.0
        for years, amount in points:
            discounted = amount * math.exp(-years * log_growth)
            value += discounted
            slope -= years * discounted / (1.0 + rate)
        return value, slope

    def _newton(self, points: list[_Point], tolerance: float) -> Optional[tuple[float, int]]:
        """Return (rate, iterations) or None if Newton cannot finish."""
        rate = self._guess
        for iteration in range(1, self._max_iterations + 1):
            try:
                value, slope = self._npv_with_slope(points, rate)
            except OverflowError:
                return None
            if not math.isfinite(value):
                return None
            if abs(value) <= tolerance:
                return rate, iteration
            if not math.isfinite(slope) or abs(slope) < _MIN_SLOPE:
                return None

            candidate = rate - value / slope
            if not math.isfinite(candidate):
                return None
            if candidate <= -1.0:
                # (1+r)^t is undefined for r <= -1; move halfway to the boundary instead
                candidate = (rate - 1.0) / 2.0
            rate = candidate
        return None

    def _bisect(self, points: list[_Point], tolerance: float) -> tuple[float, int]:
        low, high = self._lower, self._upper
        try:
            value_low = self._npv(points, low)
            value_high = self._npv(points, high)
        except OverflowError as exc:
            raise NoConvergenceError("NPV overflowed at the bisection bounds") from exc

        if value_low == 0.0:
            return low, 0
        if value_high == 0.0:
            return high, 0
        if (value_low < 0) == (value_high < 0):
            raise NoConvergenceError(
                f"No sign change in NPV over [{low}, {high}]; no rate reconciles the cash flows"
            )

        middle = (low + high) / 2.0
        for iteration in range(1, self._bisection_iterations + 1):
            middle = (low + high) / 2.0
            value_middle = self._npv(points, middle)
            if abs(value_middle) <= tolerance or (high - low) / 2.0 < _MIN_BRACKET:
                return middle, iteration
            if (value_middle < 0) == (value_low < 0):
                low, value_low = middle, value_middle
            else:
                high = middle
        logger.warning("Bisection hit its iteration cap; returning bracket midpoint")
        return middle, self._bisection_iterations
