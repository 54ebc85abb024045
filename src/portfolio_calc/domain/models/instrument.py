"""Instrument configuration for interest-bearing assets."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from portfolio_calc.core.money import coerce_decimal
from portfolio_calc.domain.models.enums import CompoundingFrequency, FixedIncomeType

# Per-scheme compounding conventions (savings-type deposits compound quarterly)
_COMPOUNDING_BY_TYPE: dict[FixedIncomeType, CompoundingFrequency] = {
    FixedIncomeType.PPF: CompoundingFrequency.ANNUAL,
    FixedIncomeType.FD: CompoundingFrequency.QUARTERLY,
    FixedIncomeType.RD: CompoundingFrequency.QUARTERLY,
    FixedIncomeType.NSC: CompoundingFrequency.ANNUAL,
    FixedIncomeType.KVP: CompoundingFrequency.ANNUAL,
    FixedIncomeType.EPF: CompoundingFrequency.ANNUAL,
    FixedIncomeType.VPF: CompoundingFrequency.ANNUAL,
    FixedIncomeType.SSY: CompoundingFrequency.ANNUAL,
}

# Schemes that credit interest once per fiscal year on periodic deposits
RECURRING_DEPOSIT_TYPES: frozenset[FixedIncomeType] = frozenset(
    {
        FixedIncomeType.PPF,
        FixedIncomeType.EPF,
        FixedIncomeType.VPF,
        FixedIncomeType.SSY,
    }
)


def compounding_for(instrument_type: Optional[FixedIncomeType]) -> CompoundingFrequency:
    """Return the compounding convention for an instrument type (annual if unknown)."""
    if instrument_type is None:
        return CompoundingFrequency.ANNUAL
    return _COMPOUNDING_BY_TYPE.get(instrument_type, CompoundingFrequency.ANNUAL)


@dataclass(frozen=True)
class InstrumentConfig:
    """
    Static per-instrument metadata supplied by the caller.

    annual_rate is a percentage (7.1 means 7.1% p.a.).
    """

    annual_rate: Decimal
    compounding_frequency: CompoundingFrequency = CompoundingFrequency.ANNUAL
    is_recurring_deposit: bool = False
    instrument_type: Optional[FixedIncomeType] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "annual_rate", coerce_decimal(self.annual_rate))
        if not isinstance(self.compounding_frequency, CompoundingFrequency):
            object.__setattr__(
                self, "compounding_frequency", CompoundingFrequency(self.compounding_frequency)
            )

    @classmethod
    def for_instrument(
        cls,
        instrument_type: FixedIncomeType,
        annual_rate: Decimal,
    ) -> "InstrumentConfig":
        """Build a config using the scheme's default compounding and deposit rules."""
        instrument_type = FixedIncomeType(instrument_type)
        return cls(
            annual_rate=annual_rate,
            compounding_frequency=compounding_for(instrument_type),
            is_recurring_deposit=instrument_type in RECURRING_DEPOSIT_TYPES,
            instrument_type=instrument_type,
        )
