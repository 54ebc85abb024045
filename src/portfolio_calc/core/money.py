"""Helpers for Decimal money arithmetic."""

from decimal import Decimal, ROUND_HALF_UP, Context, localcontext
from contextlib import contextmanager
from typing import Iterator

ZERO = Decimal("0")
CENT = Decimal("0.01")
RATE_PLACES = Decimal("0.00000001")

# Fixed arithmetic context so repeated calls give bit-identical results
ENGINE_CONTEXT = Context(prec=28, rounding=ROUND_HALF_UP)


def coerce_decimal(value) -> Decimal:
    """
    Normalize numeric values to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary expansion.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value: Decimal) -> Decimal:
    """Round a money amount to two places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def quantize_rate(value: float) -> Decimal:
    """Convert a float rate to a Decimal with eight places."""
    return Decimal(repr(value)).quantize(RATE_PLACES, rounding=ROUND_HALF_UP)


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """Return part / whole * 100 rounded to two places; whole must be non-zero."""
    return (part / whole * 100).quantize(CENT, rounding=ROUND_HALF_UP)


@contextmanager
def engine_context() -> Iterator[None]:
    """Run Decimal arithmetic under the engine's fixed precision."""
    with localcontext(ENGINE_CONTEXT):
        yield
