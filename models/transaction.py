"""Transaction log models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TransactionKind(str, Enum):
    """Side of an executed trade."""

    BUY = "BUY"
    SELL = "SELL"


class TransactionRecord(BaseModel):
    """Single executed trade. Immutable once created.

    The total value is derived from quantity and unit price rather than
    stored, so the two can never disagree.
    """

    model_config = ConfigDict(frozen=True)

    kind: TransactionKind
    symbol: str
    quantity: int = Field(gt=0)
    price: float = Field(gt=0)  # Unit price at execution time
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def total_value(self) -> float:
        return self.quantity * self.price

    def __str__(self) -> str:
        return (
            f"{self.timestamp:%Y-%m-%d %H:%M:%S} | {self.kind.value} "
            f"{self.quantity} shares of {self.symbol} @ ${self.price:.2f} | "
            f"Total: ${self.total_value:.2f}"
        )
