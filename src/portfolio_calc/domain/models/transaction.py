"""Transaction and CashFlow domain models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from portfolio_calc.core.exceptions import InvalidInputError
from portfolio_calc.core.money import coerce_decimal
from portfolio_calc.domain.models.enums import TransactionType, CashFlowKind


@dataclass(frozen=True)
class Transaction:
    """
    Historical transaction record (read-only input to the engine).

    - total_amount is always positive; direction is carried by txn_type
    - BUY/SELL carry quantity for lot replay
    - DEPOSIT adds principal to interest-bearing instruments
    """

    txn_type: TransactionType
    txn_date: date
    total_amount: Decimal
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    txn_id: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.txn_type, str) and not isinstance(self.txn_type, TransactionType):
            object.__setattr__(self, "txn_type", TransactionType(self.txn_type))
        object.__setattr__(self, "total_amount", coerce_decimal(self.total_amount))
        if self.quantity is not None:
            object.__setattr__(self, "quantity", coerce_decimal(self.quantity))
        if self.unit_price is not None:
            object.__setattr__(self, "unit_price", coerce_decimal(self.unit_price))

        if self.total_amount <= 0:
            raise InvalidInputError(
                f"{self.txn_type.value} total_amount must be positive, got {self.total_amount}"
            )
        if self.quantity is not None and self.quantity < 0:
            raise InvalidInputError(
                f"{self.txn_type.value} quantity cannot be negative, got {self.quantity}"
            )

    @property
    def is_contribution(self) -> bool:
        """Return True if money moved into the instrument (BUY or DEPOSIT)."""
        return self.txn_type in (TransactionType.BUY, TransactionType.DEPOSIT)

    @property
    def signed_amount(self) -> Decimal:
        """
        Cash impact from the investor's point of view.

        Negative = money out of pocket, positive = money received.
        """
        if self.txn_type == TransactionType.SELL:
            return self.total_amount
        return -self.total_amount

    @property
    def effective_unit_price(self) -> Optional[Decimal]:
        """Unit price if given, else total_amount / quantity when quantity is usable."""
        if self.unit_price is not None:
            return self.unit_price
        if self.quantity:
            return self.total_amount / self.quantity
        return None


@dataclass(frozen=True)
class CashFlow:
    """Signed, dated cash flow derived for a single calculation call."""

    flow_date: date
    amount: Decimal
    kind: Optional[CashFlowKind] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", coerce_decimal(self.amount))
