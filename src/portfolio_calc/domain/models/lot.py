"""FIFO lot domain models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from portfolio_calc.domain.models.enums import GainTerm


@dataclass
class Lot:
    """
    Surviving (unsold) slice of a BUY transaction.

    unit_cost is fixed at creation; quantity only decreases as SELLs
    are replayed against the lot.
    """

    acquisition_date: date
    quantity: Decimal
    unit_cost: Decimal

    @property
    def cost_basis(self) -> Decimal:
        """Return quantity × unit_cost."""
        return self.quantity * self.unit_cost

    def consume(self, requested: Decimal) -> Decimal:
        """Take up to requested units from this lot; return the units taken."""
        taken = min(requested, self.quantity)
        self.quantity -= taken
        return taken


@dataclass(frozen=True)
class RealizedLotGain:
    """Gain realized when a SELL consumed (part of) one lot."""

    acquisition_date: date
    disposal_date: date
    quantity: Decimal
    unit_cost: Decimal
    unit_proceeds: Decimal
    holding_days: int
    term: GainTerm

    @property
    def gain(self) -> Decimal:
        """Return quantity × (unit_proceeds - unit_cost); negative for a loss."""
        return self.quantity * (self.unit_proceeds - self.unit_cost)
