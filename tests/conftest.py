"""
Pytest configuration and fixtures for calculation engine tests.

This module provides:
- Settings isolation between tests
- Component fixtures (solver, ledger, compounder, projector, valuation)
- Factory helpers for transactions and cash flows
- Decimal and NPV assertion helpers
"""

import math
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import pytest

from portfolio_calc.config.settings import EngineSettings, reset_settings, set_settings
from portfolio_calc.core.dates import parse_date
from portfolio_calc.domain.models import CashFlow, Transaction, TransactionType
from portfolio_calc.services import (
    CashFlowSolver,
    Compounder,
    GoalProjector,
    LotLedger,
    TaxEstimator,
    ValuationService,
)


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings():
    """Give every test default settings, unaffected by the environment of other tests."""
    reset_settings()
    set_settings(EngineSettings(_env_file=None))
    yield
    reset_settings()


@pytest.fixture
def settings() -> EngineSettings:
    """Provide default engine settings."""
    return EngineSettings(_env_file=None)


@pytest.fixture
def valuation_date() -> date:
    """Fixed valuation date for deterministic tests."""
    return date(2024, 6, 1)


# =============================================================================
# COMPONENT FIXTURES
# =============================================================================


@pytest.fixture
def solver(settings) -> CashFlowSolver:
    return CashFlowSolver(settings)


@pytest.fixture
def ledger(settings) -> LotLedger:
    return LotLedger(settings)


@pytest.fixture
def tax_estimator(settings) -> TaxEstimator:
    return TaxEstimator(settings=settings)


@pytest.fixture
def compounder() -> Compounder:
    return Compounder()


@pytest.fixture
def projector(settings) -> GoalProjector:
    return GoalProjector(settings)


@pytest.fixture
def valuation_service(ledger, compounder) -> ValuationService:
    return ValuationService(ledger=ledger, compounder=compounder)


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def d(value: str) -> date:
    """Shorthand for an ISO date."""
    return parse_date(value)


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"


def create_buy(
    txn_date: str,
    quantity: Decimal,
    price: Decimal,
) -> Transaction:
    """Helper to create a BUY transaction; total_amount is quantity × price."""
    quantity = Decimal(str(quantity))
    price = Decimal(str(price))
    return Transaction(
        txn_type=TransactionType.BUY,
        txn_date=d(txn_date),
        total_amount=quantity * price,
        quantity=quantity,
        unit_price=price,
    )


def create_sell(
    txn_date: str,
    quantity: Decimal,
    price: Decimal,
) -> Transaction:
    """Helper to create a SELL transaction; total_amount is quantity × price."""
    quantity = Decimal(str(quantity))
    price = Decimal(str(price))
    return Transaction(
        txn_type=TransactionType.SELL,
        txn_date=d(txn_date),
        total_amount=quantity * price,
        quantity=quantity,
        unit_price=price,
    )


def create_deposit(txn_date: str, amount: Decimal) -> Transaction:
    """Helper to create a DEPOSIT transaction."""
    return Transaction(
        txn_type=TransactionType.DEPOSIT,
        txn_date=d(txn_date),
        total_amount=Decimal(str(amount)),
    )


def create_withdrawal(txn_date: str, amount: Decimal) -> Transaction:
    """Helper to create a fixed-income withdrawal (SELL without quantity)."""
    return Transaction(
        txn_type=TransactionType.SELL,
        txn_date=d(txn_date),
        total_amount=Decimal(str(amount)),
    )


def create_flows(*pairs: tuple[str, str]) -> list[CashFlow]:
    """Build cash flows from (iso_date, amount) pairs."""
    return [CashFlow(flow_date=d(day), amount=Decimal(amount)) for day, amount in pairs]


def npv_at(flows: Sequence[CashFlow], rate: Decimal, origin: Optional[date] = None) -> float:
    """Independent actual/365 NPV of flows at rate."""
    origin = origin or min(f.flow_date for f in flows)
    r = float(rate)
    return sum(
        float(f.amount) / math.pow(1.0 + r, (f.flow_date - origin).days / 365.0)
        for f in flows
    )
