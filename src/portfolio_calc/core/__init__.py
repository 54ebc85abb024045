"""Core utilities and shared functionality."""

from portfolio_calc.core.exceptions import (
    AppError,
    CalcError,
    InvalidInputError,
    InsufficientQuantityError,
    NoConvergenceError,
    DegenerateCashFlowsError,
    MissingPriceDataError,
)
from portfolio_calc.core.result import CalcResult, capture
from portfolio_calc.core.money import (
    ZERO,
    CENT,
    coerce_decimal,
    quantize_money,
    quantize_rate,
    percent_of,
    engine_context,
)
from portfolio_calc.core.dates import (
    DAYS_IN_YEAR,
    FiscalYear,
    fiscal_year_of,
    today_local,
    parse_date,
    days_between,
    whole_months_between,
    months_until,
    add_months,
)

__all__ = [
    "AppError",
    "CalcError",
    "InvalidInputError",
    "InsufficientQuantityError",
    "NoConvergenceError",
    "DegenerateCashFlowsError",
    "MissingPriceDataError",
    "CalcResult",
    "capture",
    "ZERO",
    "CENT",
    "coerce_decimal",
    "quantize_money",
    "quantize_rate",
    "percent_of",
    "engine_context",
    "DAYS_IN_YEAR",
    "FiscalYear",
    "fiscal_year_of",
    "today_local",
    "parse_date",
    "days_between",
    "whole_months_between",
    "months_until",
    "add_months",
]
