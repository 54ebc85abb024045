"""Asset holdings, one variant per instrument category."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from portfolio_calc.domain.models.enums import AssetCategory, Metal
from portfolio_calc.domain.models.instrument import InstrumentConfig
from portfolio_calc.domain.models.transaction import Transaction

GOLD_PURITY_FACTORS: dict[str, Decimal] = {
    "24K": Decimal("1.000"),
    "22K": Decimal("0.916"),
    "18K": Decimal("0.750"),
    "14K": Decimal("0.585"),
}

SILVER_PURITY_FACTORS: dict[str, Decimal] = {
    "999": Decimal("1.000"),
    "925": Decimal("0.925"),
    "900": Decimal("0.900"),
}


def normalize_symbol(symbol: Optional[str]) -> Optional[str]:
    """Normalize symbol: strip whitespace and uppercase; None or empty -> None."""
    if symbol is None:
        return None
    stripped = symbol.strip().upper()
    return stripped if stripped else None


@dataclass(frozen=True)
class PriceQuote:
    """Live or cached quote for one instrument."""

    price: Optional[Decimal]
    change_percent: Optional[Decimal] = None
    unavailable: bool = False

    @property
    def is_usable(self) -> bool:
        """A quote is usable only if available and strictly positive."""
        return not self.unavailable and self.price is not None and self.price > 0


@dataclass(frozen=True)
class EquityHolding:
    """Listed stock or fund valued from a quote keyed by its normalized symbol."""

    asset_id: str
    symbol: str
    transactions: tuple[Transaction, ...] = ()
    exchange: Optional[str] = None  # NSE, BSE; None for funds quoted by scheme code
    name: str = ""
    category: AssetCategory = field(default=AssetCategory.EQUITY, init=False)

    @property
    def price_key(self) -> str:
        symbol = normalize_symbol(self.symbol) or ""
        if self.exchange is None:
            return symbol
        suffix = "BO" if self.exchange.upper() == "BSE" else "NS"
        return f"{symbol}.{suffix}"


@dataclass(frozen=True)
class FixedIncomeHolding:
    """Interest-bearing instrument valued by compounding its deposits."""

    asset_id: str
    config: InstrumentConfig
    transactions: tuple[Transaction, ...] = ()
    principal: Optional[Decimal] = None
    start_date: Optional[date] = None
    name: str = ""
    category: AssetCategory = field(default=AssetCategory.FIXED_INCOME, init=False)


@dataclass(frozen=True)
class MetalHolding:
    """Physical gold or silver valued from the 24K (or fine) price per gram."""

    asset_id: str
    metal: Metal
    weight_grams: Decimal
    purity: str
    purchase_price: Optional[Decimal] = None
    name: str = ""
    category: AssetCategory = field(default=AssetCategory.PHYSICAL, init=False)

    @property
    def purity_factor(self) -> Decimal:
        factors = GOLD_PURITY_FACTORS if self.metal == Metal.GOLD else SILVER_PURITY_FACTORS
        return factors.get(self.purity, Decimal("1"))


@dataclass(frozen=True)
class RealEstateHolding:
    """Property valued by compounding its purchase price at an appreciation rate."""

    asset_id: str
    purchase_price: Decimal
    purchase_date: date
    appreciation_rate: Optional[Decimal] = None  # percent per year
    name: str = ""
    category: AssetCategory = field(default=AssetCategory.REAL_ESTATE, init=False)


@dataclass(frozen=True)
class ManualHolding:
    """Savings, crypto, insurance and other assets whose value is entered by hand."""

    asset_id: str
    category: AssetCategory
    current_value: Optional[Decimal]
    invested_value: Optional[Decimal] = None
    name: str = ""


AssetHolding = Union[
    EquityHolding,
    FixedIncomeHolding,
    MetalHolding,
    RealEstateHolding,
    ManualHolding,
]
