"""Boundary schemas for external records."""

from portfolio_calc.schemas.records import (
    TransactionRecord,
    PriceQuoteRecord,
    parse_transactions,
    parse_quotes,
)

__all__ = [
    "TransactionRecord",
    "PriceQuoteRecord",
    "parse_transactions",
    "parse_quotes",
]
