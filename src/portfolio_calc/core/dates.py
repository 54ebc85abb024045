"""Date utilities for valuation dates and fiscal periods."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from portfolio_calc.config.settings import get_settings
from portfolio_calc.core.exceptions import InvalidInputError

DateLike = Union[date, datetime, str]

DAYS_IN_YEAR = 365

# Indian fiscal year: April to March
FISCAL_YEAR_START_MONTH = 4


def today_local(tz_name: Optional[str] = None) -> date:
    """Return today's date in the configured timezone."""
    tz = pytz.timezone(tz_name or get_settings().timezone)
    return datetime.now(tz).date()


def parse_date(value: DateLike) -> date:
    """
    Parse an ISO date string (or pass through a date/datetime) to a date.

    Raises InvalidInputError when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date_parser.isoparse(str(value)).date()
    except (ValueError, OverflowError) as exc:
        raise InvalidInputError(f"Invalid date: {value!r}") from exc


def days_between(start: date, end: date) -> int:
    """Return end - start in days (negative when end precedes start)."""
    return (end - start).days


def whole_months_between(start: date, end: date) -> int:
    """Return the number of complete calendar months from start to end (0 if end <= start)."""
    if end <= start:
        return 0
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def months_until(start: date, end: date) -> int:
    """Return contribution periods from start to end, counting a partial month as one."""
    if end <= start:
        return 0
    months = whole_months_between(start, end)
    if add_months(start, months) < end:
        months += 1
    return months


def add_months(value: date, months: int) -> date:
    """Shift a date by whole months, clamping to month end."""
    return value + relativedelta(months=months)


def month_end(value: date) -> date:
    """Return the last day of value's month."""
    return value + relativedelta(day=31)


@dataclass(frozen=True)
class FiscalYear:
    """A fiscal year running April 1 to March 31."""

    start_year: int

    @property
    def label(self) -> str:
        return f"{self.start_year}-{str(self.start_year + 1)[2:]}"

    @property
    def start(self) -> date:
        return date(self.start_year, FISCAL_YEAR_START_MONTH, 1)

    @property
    def end(self) -> date:
        return date(self.start_year + 1, FISCAL_YEAR_START_MONTH - 1, 31)

    def next(self) -> "FiscalYear":
        return FiscalYear(self.start_year + 1)

    def month_starts(self) -> list[date]:
        """First day of each of the twelve months, April first."""
        return [add_months(self.start, offset) for offset in range(12)]


def fiscal_year_of(value: date) -> FiscalYear:
    """Return the fiscal year containing value."""
    if value.month < FISCAL_YEAR_START_MONTH:
        return FiscalYear(value.year - 1)
    return FiscalYear(value.year)
