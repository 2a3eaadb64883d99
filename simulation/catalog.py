"""Instrument catalog: the fixed universe of tradable stocks.

The catalog is an ordinary object passed explicitly to whatever needs price
data (ledger valuation, the price generator, the session). There is no
module-level market state.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from models.instrument import Instrument

# (symbol, display name, seed price) in display order.
DEFAULT_INSTRUMENTS: tuple[tuple[str, str, float], ...] = (
    ("AAPL", "Apple Inc.", 175.50),
    ("GOOGL", "Alphabet Inc.", 140.25),
    ("MSFT", "Microsoft Corp.", 380.75),
    ("AMZN", "Amazon.com Inc.", 155.30),
    ("TSLA", "Tesla Inc.", 245.60),
)


def normalize_symbol(symbol: str) -> str:
    """Canonical form of a ticker symbol: stripped and uppercased."""
    return symbol.strip().upper()


class InstrumentCatalog:
    """Registry of instruments keyed by symbol, in insertion order."""

    def __init__(self, instruments: Iterable[Instrument]) -> None:
        self._instruments: dict[str, Instrument] = {}
        for instrument in instruments:
            symbol = normalize_symbol(instrument.symbol)
            if symbol in self._instruments:
                raise ValueError(f"Duplicate instrument symbol '{symbol}'.")
            if symbol != instrument.symbol:
                instrument = instrument.model_copy(update={"symbol": symbol})
            self._instruments[symbol] = instrument

    @classmethod
    def default(cls) -> InstrumentCatalog:
        """Build a fresh catalog of the five built-in stocks at seed prices."""
        return cls(
            Instrument(symbol=symbol, name=name, current_price=price)
            for symbol, name, price in DEFAULT_INSTRUMENTS
        )

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def lookup(self, symbol: str) -> Instrument | None:
        """Return the instrument for *symbol* (case-insensitive), or ``None``."""
        return self._instruments.get(normalize_symbol(symbol))

    def all(self) -> list[Instrument]:
        """Return every instrument in catalog order."""
        return list(self._instruments.values())

    def symbols(self) -> list[str]:
        return list(self._instruments)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and normalize_symbol(symbol) in self._instruments

    def __iter__(self) -> Iterator[Instrument]:
        return iter(self._instruments.values())

    def __len__(self) -> int:
        return len(self._instruments)
