"""View models for rate-of-return outputs."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from portfolio_calc.domain.models import CashFlowKind


@dataclass(frozen=True)
class XirrResult:
    """Annualized internal rate of return."""

    rate: Decimal  # Fraction: 0.1 == 10% p.a.
    iterations: int
    method: str  # "newton" or "bisection"

    @property
    def percent(self) -> Decimal:
        return (self.rate * 100).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class CashFlowLine:
    """One labelled flow in the XIRR diagnostic breakdown."""

    flow_date: date
    amount: Decimal
    kind: CashFlowKind


@dataclass
class CashFlowBreakdown:
    """Diagnostic projection of the flows behind an XIRR figure."""

    cash_flows: list[CashFlowLine] = field(default_factory=list)
    total_invested: Decimal = field(default_factory=lambda: Decimal("0"))
    total_redeemed: Decimal = field(default_factory=lambda: Decimal("0"))
    current_value: Decimal = field(default_factory=lambda: Decimal("0"))
    net_invested: Decimal = field(default_factory=lambda: Decimal("0"))
    absolute_return: Decimal = field(default_factory=lambda: Decimal("0"))
    absolute_return_percent: Optional[Decimal] = None
    first_date: Optional[date] = None
    last_date: Optional[date] = None
    transaction_count: int = 0
    xirr_percent: Optional[Decimal] = None
    xirr_error: Optional[str] = None  # Error code when XIRR could not be solved
