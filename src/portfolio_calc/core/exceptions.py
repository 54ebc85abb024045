"""Engine exceptions."""


class AppError(Exception):
    """Base exception for engine errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class CalcError(AppError):
    """Expected domain condition reported through CalcResult, never re-raised by components."""


class InvalidInputError(CalcError):
    """Raised when a transaction or parameter is malformed or missing required fields."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_INPUT")


class InsufficientQuantityError(CalcError):
    """Raised when a SELL exceeds the open lot quantity."""

    def __init__(self, requested: str, available: str):
        super().__init__(
            f"Insufficient quantity: requested {requested}, available {available}",
            code="INSUFFICIENT_QUANTITY",
        )


class NoConvergenceError(CalcError):
    """Raised when the rate search finds no root within its bounds and iteration budget."""

    def __init__(self, message: str):
        super().__init__(message, code="NO_CONVERGENCE")


class DegenerateCashFlowsError(CalcError):
    """Raised when no rate can reconcile the cash flows (no sign change or no elapsed time)."""

    def __init__(self, message: str):
        super().__init__(message, code="DEGENERATE_CASH_FLOWS")


class MissingPriceDataError(CalcError):
    """Raised when a valuation needs a price that is missing or unavailable."""

    def __init__(self, subject: str):
        self.subject = subject
        super().__init__(f"Price data unavailable: {subject}", code="MISSING_PRICE_DATA")
