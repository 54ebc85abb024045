"""Service layer - calculation components."""

from portfolio_calc.services.cash_flow_solver import CashFlowSolver, build_cash_flows
from portfolio_calc.services.lot_ledger import LotLedger, TaxEstimator
from portfolio_calc.services.accrual import (
    AccrualPeriod,
    AccrualRule,
    BalanceChange,
    MinimumMonthlyBalanceRule,
)
from portfolio_calc.services.compounder import Compounder
from portfolio_calc.services.goal_projector import (
    GoalProjector,
    average_monthly_contribution,
    future_value,
    monthly_rate,
)
from portfolio_calc.services.valuation_service import ValuationService
from portfolio_calc.services.returns import absolute_return, cagr

__all__ = [
    "CashFlowSolver",
    "build_cash_flows",
    "LotLedger",
    "TaxEstimator",
    "AccrualPeriod",
    "AccrualRule",
    "BalanceChange",
    "MinimumMonthlyBalanceRule",
    "Compounder",
    "GoalProjector",
    "average_monthly_contribution",
    "future_value",
    "monthly_rate",
    "ValuationService",
    "absolute_return",
    "cagr",
]
