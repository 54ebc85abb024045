"""Explicit success/error container returned by engine components."""

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from portfolio_calc.core.exceptions import CalcError

T = TypeVar("T")


@dataclass(frozen=True)
class CalcResult(Generic[T]):
    """
    Outcome of a calculation: exactly one of value or error is set.

    Callers render an explanatory placeholder when ok is False; a failed
    calculation must never be shown as zero.
    """

    value: Optional[T] = None
    error: Optional[CalcError] = None

    @classmethod
    def success(cls, value: T) -> "CalcResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: CalcError) -> "CalcResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        """Return True if the calculation produced a value."""
        return self.error is None

    @property
    def error_code(self) -> Optional[str]:
        """Return the error code, or None on success."""
        return self.error.code if self.error else None

    def unwrap(self) -> T:
        """Return the value or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        return self.value if self.error is None else default  # type: ignore[return-value]


def capture(func: Callable[..., T], *args, **kwargs) -> CalcResult[T]:
    """
    Run func and wrap its outcome.

    Only CalcError subclasses are captured; any other exception is a
    programmer error and propagates.
    """
    try:
        return CalcResult.success(func(*args, **kwargs))
    except CalcError as exc:
        return CalcResult.failure(exc)
