"""Text persistence for a user's portfolio ledger.

One file holds one user's snapshot and is overwritten on every save::

    alice
    122.5
    HOLDINGS
    AAPL,5
    TRANSACTIONS
    BUY,AAPL,5,175.5,2024-03-15T10:00:00.123456

Fields are comma separated with no quoting, so symbols and usernames must not
contain commas or line breaks. The timestamp column is written for reference
but discarded on load: restored transactions are stamped with the load time.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

from models.trade import TradeError
from models.transaction import TransactionKind, TransactionRecord
from simulation.ledger import PortfolioLedger, quantity_in_range

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = "portfolio_data.txt"

HOLDINGS_MARKER = "HOLDINGS"
TRANSACTIONS_MARKER = "TRANSACTIONS"


class _DecodeError(ValueError):
    """Internal signal for a malformed save file; never escapes ``decode``."""


# ------------------------------------------------------------------
# Encoding
# ------------------------------------------------------------------

def encode(username: str, ledger: PortfolioLedger) -> str:
    """Serialise *ledger*, owned by *username*, to the text format."""
    lines = [username, repr(ledger.cash), HOLDINGS_MARKER]
    lines.extend(
        f"{symbol},{quantity}" for symbol, quantity in ledger.holdings.items()
    )
    lines.append(TRANSACTIONS_MARKER)
    lines.extend(
        f"{t.kind.value},{t.symbol},{t.quantity},{t.price!r},{t.timestamp.isoformat()}"
        for t in ledger.transaction_log()
    )
    return "\n".join(lines) + "\n"


# ------------------------------------------------------------------
# Decoding
# ------------------------------------------------------------------

def decode(text: str, expected_username: str) -> PortfolioLedger | None:
    """Parse *text* back into a fresh ledger.

    Returns ``None`` if the stored username differs from
    *expected_username* or if anything in the text is malformed. Nothing is
    returned until the whole text has parsed.
    """
    # encode() joins on "\n" only; other Unicode line breaks are field data.
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    if lines[-1] == "":
        lines.pop()
    if not lines:
        logger.warning("Save data is empty.")
        return None

    if lines[0] != expected_username:
        logger.info(
            "Save data belongs to '%s', not '%s'.", lines[0], expected_username
        )
        return None

    try:
        return _parse_body(lines[1:])
    except _DecodeError as exc:
        logger.warning(
            "%s: could not decode saved portfolio for '%s': %s",
            TradeError.DECODE_FAILURE.value,
            expected_username,
            exc,
        )
        return None


def _parse_body(lines: list[str]) -> PortfolioLedger:
    if not lines:
        raise _DecodeError("missing cash balance")
    cash = _parse_float(lines[0], "cash balance")
    if cash < 0:
        raise _DecodeError(f"negative cash balance {cash}")

    holdings: dict[str, int] = {}
    transactions: list[TransactionRecord] = []
    section: str | None = None

    for lineno, line in enumerate(lines[1:], start=3):
        if line == HOLDINGS_MARKER:
            if section is not None:
                raise _DecodeError(f"line {lineno}: unexpected {HOLDINGS_MARKER} marker")
            section = HOLDINGS_MARKER
            continue
        if line == TRANSACTIONS_MARKER:
            if section != HOLDINGS_MARKER:
                raise _DecodeError(f"line {lineno}: {TRANSACTIONS_MARKER} before {HOLDINGS_MARKER}")
            section = TRANSACTIONS_MARKER
            continue
        if not line.strip():
            continue

        if section == HOLDINGS_MARKER:
            symbol, quantity = _parse_holding(line, lineno)
            holdings[symbol] = quantity
        elif section == TRANSACTIONS_MARKER:
            transactions.append(_parse_transaction(line, lineno))
        else:
            raise _DecodeError(f"line {lineno}: data outside any section")

    if section != TRANSACTIONS_MARKER:
        raise _DecodeError("missing HOLDINGS or TRANSACTIONS section")

    return PortfolioLedger.restore(cash, holdings, transactions)


def _parse_holding(line: str, lineno: int) -> tuple[str, int]:
    parts = line.split(",")
    if len(parts) != 2:
        raise _DecodeError(f"line {lineno}: expected 'symbol,quantity', got {line!r}")
    symbol = parts[0].strip().upper()
    if not symbol:
        raise _DecodeError(f"line {lineno}: empty symbol")
    return symbol, _parse_quantity(parts[1], lineno)


def _parse_transaction(line: str, lineno: int) -> TransactionRecord:
    parts = line.split(",")
    if len(parts) < 4:
        raise _DecodeError(f"line {lineno}: expected at least 4 fields, got {len(parts)}")
    try:
        kind = TransactionKind(parts[0].strip())
    except ValueError:
        raise _DecodeError(f"line {lineno}: unknown transaction kind {parts[0]!r}") from None
    symbol = parts[1].strip().upper()
    if not symbol:
        raise _DecodeError(f"line {lineno}: empty symbol")
    quantity = _parse_quantity(parts[2], lineno)
    price = _parse_float(parts[3], f"line {lineno} price")
    if price <= 0:
        raise _DecodeError(f"line {lineno}: price must be positive, got {price}")
    # parts[4:] hold the saved timestamp, which is not restored.
    return TransactionRecord(kind=kind, symbol=symbol, quantity=quantity, price=price)


def _parse_quantity(raw: str, lineno: int) -> int:
    try:
        quantity = int(raw.strip())
    except ValueError:
        raise _DecodeError(f"line {lineno}: malformed quantity {raw!r}") from None
    if quantity <= 0:
        raise _DecodeError(f"line {lineno}: quantity must be positive, got {quantity}")
    if not quantity_in_range(quantity):
        raise _DecodeError(f"line {lineno}: quantity out of range")
    return quantity


def _parse_float(raw: str, what: str) -> float:
    try:
        value = float(raw.strip())
    except ValueError:
        raise _DecodeError(f"malformed {what} {raw!r}") from None
    if not math.isfinite(value):
        raise _DecodeError(f"non-finite {what} {raw!r}")
    return value


# ------------------------------------------------------------------
# File I/O
# ------------------------------------------------------------------

def save_portfolio(
    path: str | Path,
    username: str,
    ledger: PortfolioLedger,
) -> bool:
    """Overwrite *path* with the encoded ledger. Returns ``False`` on I/O error."""
    path = Path(path)
    try:
        path.write_text(encode(username, ledger), encoding="utf-8")
    except OSError as exc:
        logger.error("Error saving portfolio to %s: %s", path, exc)
        return False
    logger.info("Saved portfolio for '%s' to %s", username, path)
    return True


def load_portfolio(path: str | Path, expected_username: str) -> PortfolioLedger | None:
    """Load the ledger saved at *path* for *expected_username*.

    Returns ``None`` if the file is missing, unreadable, or does not decode.
    """
    path = Path(path)
    if not path.exists():
        logger.info("No save file at %s", path)
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Error reading portfolio from %s: %s", path, exc)
        return None

    ledger = decode(text, expected_username)
    if ledger is not None:
        logger.info(
            "Loaded portfolio for '%s' from %s (%d transaction(s)).",
            expected_username,
            path,
            len(ledger.transaction_log()),
        )
    return ledger
