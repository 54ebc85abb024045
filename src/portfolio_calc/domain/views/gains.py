"""View models for lot replay, capital gains and tax estimates."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from portfolio_calc.domain.models import GainTerm, Lot, RealizedLotGain


def _zero() -> Decimal:
    return Decimal("0")


@dataclass
class LedgerReplay:
    """Open lots (oldest first) and realized slices after replaying a history."""

    lots: list[Lot] = field(default_factory=list)
    realized: list[RealizedLotGain] = field(default_factory=list)

    @property
    def open_quantity(self) -> Decimal:
        return sum((lot.quantity for lot in self.lots), Decimal("0"))

    @property
    def cost_basis(self) -> Decimal:
        return sum((lot.cost_basis for lot in self.lots), Decimal("0"))


@dataclass(frozen=True)
class LotGain:
    """Unrealized gain on one surviving lot."""

    acquisition_date: date
    quantity: Decimal
    unit_cost: Decimal
    current_price: Decimal
    holding_days: int
    term: GainTerm

    @property
    def gain(self) -> Decimal:
        return self.quantity * (self.current_price - self.unit_cost)


@dataclass
class GainBuckets:
    """
    Gains and losses aggregated by holding term.

    Losses are stored as positive magnitudes and never netted against gains.
    """

    long_term_gain: Decimal = field(default_factory=_zero)
    long_term_loss: Decimal = field(default_factory=_zero)
    short_term_gain: Decimal = field(default_factory=_zero)
    short_term_loss: Decimal = field(default_factory=_zero)
    lots: list[LotGain] = field(default_factory=list)

    @property
    def net_gain(self) -> Decimal:
        return (self.long_term_gain + self.short_term_gain) - (
            self.long_term_loss + self.short_term_loss
        )

    def add(self, term: GainTerm, amount: Decimal) -> None:
        """Route a signed amount into the matching gain or loss bucket."""
        if term == GainTerm.LONG_TERM:
            if amount > 0:
                self.long_term_gain += amount
            else:
                self.long_term_loss += -amount
        else:
            if amount > 0:
                self.short_term_gain += amount
            else:
                self.short_term_loss += -amount

    def merge(self, other: "GainBuckets") -> "GainBuckets":
        """Return a new bucket set summing self and other."""
        return GainBuckets(
            long_term_gain=self.long_term_gain + other.long_term_gain,
            long_term_loss=self.long_term_loss + other.long_term_loss,
            short_term_gain=self.short_term_gain + other.short_term_gain,
            short_term_loss=self.short_term_loss + other.short_term_loss,
            lots=[*self.lots, *other.lots],
        )


@dataclass(frozen=True)
class TaxRateTable:
    """Jurisdiction-specific capital gains rates, injected from configuration."""

    long_term_rate: Decimal
    short_term_rate: Decimal
    long_term_exemption: Decimal


@dataclass(frozen=True)
class TaxEstimate:
    """Estimated capital gains tax on gain buckets."""

    long_term_tax: Decimal
    short_term_tax: Decimal
    exemption_used: Decimal
    exemption_remaining: Decimal
    exemption_used_percent: Decimal

    @property
    def total_tax(self) -> Decimal:
        return self.long_term_tax + self.short_term_tax


@dataclass(frozen=True)
class InterestTaxSplit:
    """Fixed-income interest split by tax treatment."""

    taxable_interest: Decimal
    tax_exempt_interest: Decimal
