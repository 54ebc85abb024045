"""
FIFO lot ledger and capital gains classification.

Lots are replayed from transaction history on every call; the ledger keeps
no state between calls.
"""

import logging
from collections import deque
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from portfolio_calc.config.settings import EngineSettings, get_settings
from portfolio_calc.core.dates import days_between, today_local
from portfolio_calc.core.exceptions import (
    InsufficientQuantityError,
    InvalidInputError,
    MissingPriceDataError,
)
from portfolio_calc.core.money import ZERO, engine_context, percent_of, quantize_money
from portfolio_calc.core.result import CalcResult, capture
from portfolio_calc.domain.models import (
    FixedIncomeType,
    GainTerm,
    Lot,
    RealizedLotGain,
    Transaction,
    TransactionType,
)
from portfolio_calc.domain.views import (
    GainBuckets,
    InterestTaxSplit,
    LedgerReplay,
    LotGain,
    TaxEstimate,
    TaxRateTable,
)

logger = logging.getLogger(__name__)


class LotLedger:
    """
    Replays BUY/SELL history into open FIFO lots.

    Transactions are stable-sorted by date, so same-date transactions
    are applied in the order the caller supplied them.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        settings = settings or get_settings()
        self._long_term_days = settings.long_term_holding_days

    def replay(self, transactions: Iterable[Transaction]) -> CalcResult[LedgerReplay]:
        """
        Return surviving lots (oldest first) and the realized slices of every SELL.

        DEPOSIT transactions are not lot events and are skipped.
        """
        with engine_context():
            return capture(self._replay, transactions)

    def classify(
        self,
        lots: Iterable[Lot],
        current_price: Optional[Decimal],
        valuation_date: Optional[date] = None,
    ) -> CalcResult[GainBuckets]:
        """
        Bucket unrealized gains of open lots by holding term.

        A lot held for at least long_term_holding_days is long-term.
        An unknown price (None) is reported as MISSING_PRICE_DATA.
        """
        with engine_context():
            return capture(self._classify, lots, current_price, valuation_date)

    def realized_buckets(self, realized: Iterable[RealizedLotGain]) -> GainBuckets:
        """Roll realized lot slices up into gain/loss buckets."""
        buckets = GainBuckets()
        with engine_context():
            for item in realized:
                buckets.add(item.term, item.gain)
        return buckets

    def term_for(self, holding_days: int) -> GainTerm:
        if holding_days >= self._long_term_days:
            return GainTerm.LONG_TERM
        return GainTerm.SHORT_TERM

    # -------------------------------------------------------------------------

    def _replay(self, transactions: Iterable[Transaction]) -> LedgerReplay:
        queue: deque[Lot] = deque()
        realized: list[RealizedLotGain] = []

        # sorted() is stable: same-date rows keep input order
        for txn in sorted(transactions, key=lambda t: t.txn_date):
            if txn.txn_type == TransactionType.BUY:
                if not txn.quantity:
                    raise InvalidInputError(f"BUY on {txn.txn_date} has no quantity")
                queue.append(
                    Lot(
                        acquisition_date=txn.txn_date,
                        quantity=txn.quantity,
                        unit_cost=txn.total_amount / txn.quantity,
                    )
                )
            elif txn.txn_type == TransactionType.SELL:
                realized.extend(self._consume(queue, txn))

        lots = [Lot(lot.acquisition_date, lot.quantity, lot.unit_cost) for lot in queue]
        return LedgerReplay(lots=lots, realized=realized)

    def _consume(self, queue: deque, txn: Transaction) -> list[RealizedLotGain]:
        """Remove txn.quantity units from the front of the queue."""
        if not txn.quantity:
            raise InvalidInputError(f"SELL on {txn.txn_date} has no quantity")

        available = sum((lot.quantity for lot in queue), ZERO)
        if txn.quantity > available:
            raise InsufficientQuantityError(str(txn.quantity), str(available))

        unit_proceeds = txn.total_amount / txn.quantity
        remaining = txn.quantity
        slices: list[RealizedLotGain] = []
        while remaining > 0:
            lot = queue[0]
            taken = lot.consume(remaining)
            remaining -= taken
            holding_days = days_between(lot.acquisition_date, txn.txn_date)
            slices.append(
                RealizedLotGain(
                    acquisition_date=lot.acquisition_date,
                    disposal_date=txn.txn_date,
                    quantity=taken,
                    unit_cost=lot.unit_cost,
                    unit_proceeds=unit_proceeds,
                    holding_days=holding_days,
                    term=self.term_for(holding_days),
                )
            )
            if lot.quantity == 0:
                queue.popleft()
        return slices

    def _classify(
        self,
        lots: Iterable[Lot],
        current_price: Optional[Decimal],
        valuation_date: Optional[date],
    ) -> GainBuckets:
        if current_price is None:
            raise MissingPriceDataError("current price for gain classification")
        valuation_date = valuation_date or today_local()

        buckets = GainBuckets()
        for lot in lots:
            holding_days = days_between(lot.acquisition_date, valuation_date)
            lot_gain = LotGain(
                acquisition_date=lot.acquisition_date,
                quantity=lot.quantity,
                unit_cost=lot.unit_cost,
                current_price=current_price,
                holding_days=holding_days,
                term=self.term_for(holding_days),
            )
            buckets.lots.append(lot_gain)
            buckets.add(lot_gain.term, lot_gain.gain)
        return buckets


class TaxEstimator:
    """
    Capital gains tax and interest split from an injected rate table.

    Long-term tax applies to gross long-term gains above the annual
    exemption; losses are reported but not set off.
    """

    def __init__(
        self,
        rates: Optional[TaxRateTable] = None,
        exempt_interest_types: Optional[Iterable[str]] = None,
        settings: Optional[EngineSettings] = None,
    ):
        settings = settings or get_settings()
        self.rates = rates or TaxRateTable(
            long_term_rate=settings.ltcg_rate,
            short_term_rate=settings.stcg_rate,
            long_term_exemption=settings.ltcg_exemption,
        )
        types = exempt_interest_types
        if types is None:
            types = settings.tax_exempt_interest_types
        self._exempt_types = frozenset(str(t).upper() for t in types)

    def estimate(self, buckets: GainBuckets) -> TaxEstimate:
        """Return tax per term plus how much of the long-term exemption is used."""
        rates = self.rates
        with engine_context():
            taxable_long_term = max(ZERO, buckets.long_term_gain - rates.long_term_exemption)
            exemption_used = min(buckets.long_term_gain, rates.long_term_exemption)
            if rates.long_term_exemption > 0:
                used_percent = percent_of(exemption_used, rates.long_term_exemption)
            else:
                used_percent = ZERO
            return TaxEstimate(
                long_term_tax=quantize_money(taxable_long_term * rates.long_term_rate),
                short_term_tax=quantize_money(buckets.short_term_gain * rates.short_term_rate),
                exemption_used=quantize_money(exemption_used),
                exemption_remaining=quantize_money(
                    max(ZERO, rates.long_term_exemption - buckets.long_term_gain)
                ),
                exemption_used_percent=used_percent,
            )

    def is_tax_exempt(self, instrument_type: FixedIncomeType) -> bool:
        return FixedIncomeType(instrument_type).value in self._exempt_types

    def split_interest(
        self, interest_by_instrument: Iterable[tuple[FixedIncomeType, Decimal]]
    ) -> InterestTaxSplit:
        """Separate fixed-income interest into taxable and tax-exempt totals."""
        taxable = ZERO
        exempt = ZERO
        with engine_context():
            for instrument_type, interest in interest_by_instrument:
                if self.is_tax_exempt(instrument_type):
                    exempt += interest
                else:
                    taxable += interest
        return InterestTaxSplit(
            taxable_interest=quantize_money(taxable),
            tax_exempt_interest=quantize_money(exempt),
        )
