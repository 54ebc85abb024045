"""Simple return measures."""

from decimal import Decimal, InvalidOperation
from typing import Optional

from portfolio_calc.core.money import coerce_decimal, engine_context, percent_of

ONE = Decimal("1")


def cagr(begin_value: Decimal, end_value: Decimal, years: Decimal) -> Optional[Decimal]:
    """
    Compound annual growth rate as a percentage (12.5 means 12.5% p.a.).

    Returns None when undefined: non-positive begin value or period,
    or a negative end value.
    """
    begin_value = coerce_decimal(begin_value)
    end_value = coerce_decimal(end_value)
    years = coerce_decimal(years)
    if begin_value <= 0 or years <= 0 or end_value < 0:
        return None
    with engine_context():
        try:
            growth = (end_value / begin_value) ** (ONE / years)
        except InvalidOperation:
            return None
        return ((growth - ONE) * 100).quantize(Decimal("0.01"))


def absolute_return(invested: Decimal, current_value: Decimal) -> Optional[Decimal]:
    """(current - invested) / invested as a percentage; None when nothing was invested."""
    invested = coerce_decimal(invested)
    if invested <= 0:
        return None
    with engine_context():
        return percent_of(coerce_decimal(current_value) - invested, invested)
