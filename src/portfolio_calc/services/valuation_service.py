"""Valuation of holdings by category and portfolio roll-up."""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional

from portfolio_calc.core.dates import DAYS_IN_YEAR, days_between, today_local
from portfolio_calc.core.exceptions import CalcError, MissingPriceDataError
from portfolio_calc.core.money import (
    ZERO,
    coerce_decimal,
    engine_context,
    percent_of,
    quantize_money,
)
from portfolio_calc.domain.models import (
    AssetHolding,
    EquityHolding,
    FixedIncomeHolding,
    ManualHolding,
    Metal,
    MetalHolding,
    PriceQuote,
    RealEstateHolding,
)
from portfolio_calc.domain.views import (
    AssetValuation,
    CategoryAllocation,
    PortfolioValuation,
)
from portfolio_calc.services.compounder import Compounder
from portfolio_calc.services.lot_ledger import LotLedger

logger = logging.getLogger(__name__)

ONE = Decimal("1")


class ValuationService:
    """
    Values holdings and rolls them up into portfolio totals.

    Each holding type has its own valuer. A holding whose value cannot be
    determined (no usable quote, no metal price, inconsistent history)
    is reported with current_value None and an error code, never as zero.
    """

    def __init__(
        self,
        ledger: Optional[LotLedger] = None,
        compounder: Optional[Compounder] = None,
    ):
        self.ledger = ledger or LotLedger()
        self.compounder = compounder or Compounder()
        self._valuers: dict[type, Callable] = {
            EquityHolding: self._value_equity,
            FixedIncomeHolding: self._value_fixed_income,
            MetalHolding: self._value_metal,
            RealEstateHolding: self._value_real_estate,
            ManualHolding: self._value_manual,
        }

    def value_holding(
        self,
        holding: AssetHolding,
        quotes: Optional[Mapping[str, PriceQuote]] = None,
        metal_prices: Optional[Mapping[Metal, Decimal]] = None,
        as_of: Optional[date] = None,
    ) -> AssetValuation:
        """
        Value one holding.

        quotes are keyed by price key (normalized symbol with exchange
        suffix); metal_prices hold the price per gram of pure metal.
        """
        valuer = self._valuers.get(type(holding))
        if valuer is None:
            raise TypeError(f"Unsupported holding type: {type(holding).__name__}")

        try:
            with engine_context():
                current_value, invested_value = valuer(
                    holding, quotes or {}, metal_prices or {}, as_of or today_local()
                )
        except CalcError as exc:
            logger.warning("Value unknown for %s: %s", holding.asset_id, exc.message)
            return AssetValuation(
                asset_id=holding.asset_id,
                category=holding.category,
                current_value=None,
                invested_value=ZERO,
                error_code=exc.code,
            )
        return AssetValuation(
            asset_id=holding.asset_id,
            category=holding.category,
            current_value=current_value,
            invested_value=invested_value,
        )

    def summarize(
        self,
        holdings: Iterable[AssetHolding],
        quotes: Optional[Mapping[str, PriceQuote]] = None,
        metal_prices: Optional[Mapping[Metal, Decimal]] = None,
        as_of: Optional[date] = None,
    ) -> PortfolioValuation:
        """
        Value every holding and compute totals and allocation.

        Totals and allocation percentages cover known values only; holdings
        that could not be valued are listed in unknown_asset_ids.
        """
        as_of = as_of or today_local()
        portfolio = PortfolioValuation()
        by_category: dict = defaultdict(lambda: ZERO)

        for holding in holdings:
            valuation = self.value_holding(holding, quotes, metal_prices, as_of)
            if not valuation.is_known:
                portfolio.unknown_asset_ids.append(holding.asset_id)
            else:
                portfolio.total_current_value += valuation.current_value
                portfolio.total_invested_value += valuation.invested_value
                by_category[valuation.category] += valuation.current_value
            portfolio.holdings.append(valuation)

        total = portfolio.total_current_value
        for category, value in by_category.items():
            percentage = ZERO
            if total > 0:
                percentage = percent_of(value, total)
            portfolio.allocation.append(
                CategoryAllocation(category=category, current_value=value, percentage=percentage)
            )
        portfolio.allocation.sort(key=lambda x: x.current_value, reverse=True)
        return portfolio

    # -------------------------------------------------------------------------

    def _value_equity(self, holding: EquityHolding, quotes, metal_prices, as_of):
        replay = self.ledger.replay(holding.transactions).unwrap()
        invested = quantize_money(replay.cost_basis)
        if replay.open_quantity == 0:
            return quantize_money(ZERO), invested

        quote = quotes.get(holding.price_key)
        if quote is None or not quote.is_usable:
            raise MissingPriceDataError(f"quote for {holding.price_key}")
        return quantize_money(replay.open_quantity * quote.price), invested

    def _value_fixed_income(self, holding: FixedIncomeHolding, quotes, metal_prices, as_of):
        valuation = self.compounder.value_instrument(
            holding.config,
            holding.transactions,
            principal=holding.principal,
            start_date=holding.start_date,
            as_of=as_of,
        ).unwrap()
        return valuation.current_value, valuation.principal

    def _value_metal(self, holding: MetalHolding, quotes, metal_prices, as_of):
        price_per_gram = metal_prices.get(holding.metal)
        if price_per_gram is None or price_per_gram <= 0:
            raise MissingPriceDataError(f"{Metal(holding.metal).value} price per gram")
        current = coerce_decimal(holding.weight_grams) * coerce_decimal(price_per_gram)
        current *= holding.purity_factor
        invested = coerce_decimal(holding.purchase_price)
        return quantize_money(current), quantize_money(invested)

    def _value_real_estate(self, holding: RealEstateHolding, quotes, metal_prices, as_of):
        purchase_price = coerce_decimal(holding.purchase_price)
        days = days_between(holding.purchase_date, as_of)
        if not holding.appreciation_rate or days <= 0:
            return quantize_money(purchase_price), quantize_money(purchase_price)

        rate = coerce_decimal(holding.appreciation_rate) / 100
        years = Decimal(days) / Decimal(DAYS_IN_YEAR)
        current = purchase_price * (ONE + rate) ** years
        return quantize_money(current), quantize_money(purchase_price)

    def _value_manual(self, holding: ManualHolding, quotes, metal_prices, as_of):
        if holding.current_value is None:
            raise MissingPriceDataError(f"current value of {holding.asset_id}")
        current = coerce_decimal(holding.current_value)
        invested = current if holding.invested_value is None else coerce_decimal(holding.invested_value)
        return quantize_money(current), quantize_money(invested)
