"""Portfolio ledger: cash, holdings and the transaction log for one user.

The ledger validates and executes single buy/sell requests with
all-or-nothing semantics. Every outcome comes back as a ``TradeResult``;
rejected trades leave cash, holdings and the log exactly as they were.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping

from models.portfolio import PortfolioSnapshot
from models.trade import TradeError, TradeResult
from models.transaction import TransactionKind, TransactionRecord
from simulation.catalog import InstrumentCatalog, normalize_symbol

logger = logging.getLogger(__name__)

# Costs within this distance of the cash balance count as affordable.
CASH_TOLERANCE = 1e-9


def quantity_in_range(quantity: int) -> bool:
    """True if *quantity* can be priced in floating point without overflow."""
    try:
        float(quantity)
    except OverflowError:
        return False
    return True


class PortfolioLedger:
    """Stateful ledger that validates, executes, and records trades.

    Instantiate one ``PortfolioLedger`` per user session. The price of each
    trade is supplied by the caller (normally the catalog's current price at
    the time of the request); the ledger never looks it up itself.
    """

    def __init__(self, initial_cash: float) -> None:
        if not math.isfinite(initial_cash) or initial_cash < 0:
            raise ValueError(f"Initial cash must be a non-negative number, got {initial_cash}.")
        self._cash: float = float(initial_cash)
        self._holdings: dict[str, int] = {}
        self._transactions: list[TransactionRecord] = []

    @classmethod
    def restore(
        cls,
        cash: float,
        holdings: Mapping[str, int],
        transactions: Iterable[TransactionRecord],
    ) -> PortfolioLedger:
        """Rebuild a ledger from previously saved state.

        Zero holdings are dropped; negative ones raise ``ValueError``.
        """
        ledger = cls(cash)
        for symbol, quantity in holdings.items():
            if quantity < 0:
                raise ValueError(f"Negative holding for {symbol}: {quantity}.")
            if quantity:
                ledger._holdings[normalize_symbol(symbol)] = quantity
        ledger._transactions = list(transactions)
        return ledger

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def cash(self) -> float:
        return self._cash

    @property
    def holdings(self) -> dict[str, int]:
        """Copy of the current holdings (symbol -> positive share count)."""
        return dict(self._holdings)

    def get_portfolio(self) -> PortfolioSnapshot:
        """Return a snapshot of the current portfolio state."""
        return PortfolioSnapshot(cash=self._cash, holdings=dict(self._holdings))

    def transaction_log(self) -> list[TransactionRecord]:
        """Return every executed trade in chronological order."""
        return list(self._transactions)

    def buy(self, symbol: str, quantity: int, price: float) -> TradeResult:
        """Buy *quantity* shares of *symbol* at *price* each.

        Rejected with ``INSUFFICIENT_FUNDS`` if the cost exceeds the cash
        balance.
        """
        symbol = normalize_symbol(symbol)
        rejection = self._validate_request(symbol, quantity, price)
        if rejection is not None:
            return rejection

        cost = quantity * price
        if cost - self._cash > CASH_TOLERANCE:
            logger.info(
                "Rejected BUY %d %s: cost %.2f exceeds cash %.2f.",
                quantity, symbol, cost, self._cash,
            )
            return TradeResult.rejected(
                TradeError.INSUFFICIENT_FUNDS,
                f"Insufficient funds! Need ${cost:.2f}, available ${self._cash:.2f}.",
            )

        record = TransactionRecord(
            kind=TransactionKind.BUY, symbol=symbol, quantity=quantity, price=price
        )
        self._cash = max(0.0, self._cash - cost)
        self._holdings[symbol] = self._holdings.get(symbol, 0) + quantity
        return self._commit(record)

    def sell(self, symbol: str, quantity: int, price: float) -> TradeResult:
        """Sell *quantity* shares of *symbol* at *price* each.

        Rejected with ``INSUFFICIENT_SHARES`` if fewer shares are held
        (no holding counts as zero).
        """
        symbol = normalize_symbol(symbol)
        rejection = self._validate_request(symbol, quantity, price)
        if rejection is not None:
            return rejection

        held = self._holdings.get(symbol, 0)
        if quantity > held:
            logger.info(
                "Rejected SELL %d %s: only %d held.", quantity, symbol, held
            )
            return TradeResult.rejected(
                TradeError.INSUFFICIENT_SHARES,
                f"Insufficient shares! You own {held} shares of {symbol}.",
            )

        record = TransactionRecord(
            kind=TransactionKind.SELL, symbol=symbol, quantity=quantity, price=price
        )
        remaining = held - quantity
        if remaining == 0:
            del self._holdings[symbol]
        else:
            self._holdings[symbol] = remaining
        self._cash += quantity * price
        return self._commit(record)

    def position_values(self, catalog: InstrumentCatalog) -> dict[str, float]:
        """Market value of each holding at the catalog's current prices.

        Symbols missing from the catalog are skipped.
        """
        values: dict[str, float] = {}
        for symbol, quantity in self._holdings.items():
            instrument = catalog.lookup(symbol)
            if instrument is None:
                logger.warning("Held symbol %s is not in the catalog; skipping.", symbol)
                continue
            values[symbol] = quantity * instrument.current_price
        return values

    def total_value(self, catalog: InstrumentCatalog) -> float:
        """Cash plus the market value of all holdings present in *catalog*."""
        return self._cash + sum(self.position_values(catalog).values())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_request(symbol: str, quantity: int, price: float) -> TradeResult | None:
        """Return a rejection if the request itself is malformed, else ``None``."""
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            return TradeResult.rejected(
                TradeError.INVALID_QUANTITY,
                f"Quantity must be a positive whole number, got {quantity} for {symbol}.",
            )
        if not quantity_in_range(quantity):
            return TradeResult.rejected(
                TradeError.INVALID_QUANTITY,
                f"Quantity for {symbol} is too large.",
            )
        if not math.isfinite(price) or price <= 0:
            return TradeResult.rejected(
                TradeError.INVALID_PRICE,
                f"Price must be positive, got {price} for {symbol}.",
            )
        return None

    def _commit(self, record: TransactionRecord) -> TradeResult:
        """Append the record of an already-applied trade and report it."""
        self._transactions.append(record)
        verb = "bought" if record.kind is TransactionKind.BUY else "sold"
        logger.info(
            "%s %d %s @ %.2f; cash now %.2f.",
            record.kind.value, record.quantity, record.symbol, record.price, self._cash,
        )
        return TradeResult(
            status="accepted",
            transaction=record,
            message=f"Successfully {verb} {record.quantity} shares of {record.symbol}.",
        )
