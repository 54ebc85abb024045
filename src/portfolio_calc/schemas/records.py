"""Pydantic schemas for records supplied by the storage and price layers."""

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from portfolio_calc.core.exceptions import InvalidInputError
from portfolio_calc.domain.models import PriceQuote, Transaction, TransactionType


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "record"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


class TransactionRecord(BaseModel):
    """Transaction row as stored by the CRUD layer."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(default=None, description="Storage identifier")
    type: TransactionType = Field(..., description="BUY, SELL or DEPOSIT")
    transaction_date: date = Field(..., description="ISO transaction date")
    quantity: Optional[Decimal] = Field(default=None, ge=0, description="Units (BUY/SELL)")
    price: Optional[Decimal] = Field(default=None, ge=0, description="Unit price")
    total_amount: Decimal = Field(..., gt=0, description="Absolute cash amount")

    @field_validator("type", mode="before")
    @classmethod
    def uppercase_type(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TransactionRecord":
        """Validate a raw mapping; validation failures raise InvalidInputError."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid transaction: {_validation_message(exc)}") from exc

    def to_domain(self) -> Transaction:
        return Transaction(
            txn_type=self.type,
            txn_date=self.transaction_date,
            total_amount=self.total_amount,
            quantity=self.quantity,
            unit_price=self.price,
            txn_id=self.id,
        )


class PriceQuoteRecord(BaseModel):
    """Live or cached quote as returned by the price layer."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    price: Optional[Decimal] = Field(default=None, description="Last traded price")
    change_percent: Optional[Decimal] = Field(
        default=None,
        alias="changePercent",
        description="Day change in percent",
    )
    unavailable: bool = Field(default=False, description="Set when the quote could not be fetched")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PriceQuoteRecord":
        """Validate a raw mapping; validation failures raise InvalidInputError."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidInputError(f"Invalid price quote: {_validation_message(exc)}") from exc

    def to_domain(self) -> PriceQuote:
        return PriceQuote(
            price=self.price,
            change_percent=self.change_percent,
            unavailable=self.unavailable,
        )


def parse_transactions(rows: Iterable[Mapping[str, Any]]) -> list[Transaction]:
    """Validate raw transaction rows and convert them to domain transactions."""
    return [TransactionRecord.from_mapping(row).to_domain() for row in rows]


def parse_quotes(quotes: Mapping[str, Mapping[str, Any]]) -> dict[str, PriceQuote]:
    """Validate a price-key to quote mapping."""
    return {key: PriceQuoteRecord.from_mapping(data).to_domain() for key, data in quotes.items()}
