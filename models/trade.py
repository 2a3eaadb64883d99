"""Ledger operation outcomes: TradeError and TradeResult."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel

from models.transaction import TransactionRecord


class TradeError(str, Enum):
    """Recoverable failure kinds reported back to the session."""

    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_SHARES = "insufficient_shares"
    SYMBOL_NOT_FOUND = "symbol_not_found"
    DECODE_FAILURE = "decode_failure"
    INVALID_QUANTITY = "invalid_quantity"
    INVALID_PRICE = "invalid_price"


class TradeResult(BaseModel):
    """Ledger response to a buy or sell request.

    A trade is either fully applied or fully rejected. When rejected,
    ``error`` names the kind and ``message`` explains it in terms the user
    can act on (e.g. how much cash is available).
    """

    status: Literal["accepted", "rejected"]
    error: TradeError | None = None
    transaction: TransactionRecord | None = None  # Set only when accepted
    message: str = ""

    @property
    def accepted(self) -> bool:
        return self.status == "accepted"

    @classmethod
    def rejected(cls, error: TradeError, message: str) -> TradeResult:
        return cls(status="rejected", error=error, message=message)
