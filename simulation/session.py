"""Interactive trading session: the terminal menu around the core.

Lifecycle:
    1. Log in: ask for a username, optionally restore the saved portfolio,
       otherwise open a new account with some initial cash.
    2. Loop on the main menu until the user exits (or input ends):
        - view market / portfolio / transaction history
        - buy or sell at the catalog's current price
        - move market prices
        - save the portfolio
    3. On exit, offer to save.

Console output goes to ``out`` and input comes from ``input_fn`` so the
session can be driven by a script in tests.
"""

from __future__ import annotations

import logging
import math
import sys
from typing import Callable, TextIO

from models.config import PlatformConfig
from models.trade import TradeError, TradeResult
from simulation.catalog import InstrumentCatalog, normalize_symbol
from simulation.codec import load_portfolio, save_portfolio
from simulation.ledger import PortfolioLedger, quantity_in_range
from simulation.price_generator import PriceGenerator

logger = logging.getLogger(__name__)

MENU = """
=== MAIN MENU ===
1. View Market Data
2. Buy Stock
3. Sell Stock
4. View Portfolio
5. View Transaction History
6. Update Market Prices
7. Save Portfolio
8. Exit"""


class TradingSession:
    """Drives one user's interaction with the market and their ledger."""

    def __init__(
        self,
        config: PlatformConfig,
        catalog: InstrumentCatalog | None = None,
        price_generator: PriceGenerator | None = None,
        input_fn: Callable[[str], str] = input,
        out: TextIO | None = None,
    ) -> None:
        self._config = config
        self._catalog = catalog if catalog is not None else InstrumentCatalog.default()
        self._price_generator = (
            price_generator
            if price_generator is not None
            else PriceGenerator.from_config(config.market)
        )
        self._input = input_fn
        self._out = out if out is not None else sys.stdout
        self._data_file = config.persistence.data_file
        self.username: str | None = None
        self.ledger: PortfolioLedger | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Log in and serve the main menu until the user exits."""
        self._print("=================================")
        self._print("  STOCK TRADING PLATFORM")
        self._print("=================================")
        try:
            self.login()
            self._main_menu()
        except EOFError:
            self._print("\nInput closed; exiting without saving.")
            logger.info("Session ended by end of input.")

    def login(self) -> None:
        """Ask for a username and restore or create that user's ledger."""
        self.username = self._input("\nEnter username: ").strip()
        choice = self._input("Load existing portfolio? (y/n): ").strip()

        ledger = None
        if choice.lower() == "y":
            ledger = load_portfolio(self._data_file, self.username)
            if ledger is None:
                self._print("No saved portfolio found. Creating new account.")
            else:
                self._print("✓ Portfolio loaded successfully!")
        if ledger is None:
            ledger = PortfolioLedger(self._initial_cash())
        self.ledger = ledger
        self._print(f"\n✓ Welcome, {self.username}!")

    def _main_menu(self) -> None:
        actions: dict[int, Callable[[], None]] = {
            1: self.show_market,
            2: self.buy,
            3: self.sell,
            4: self.show_portfolio,
            5: self.show_transactions,
            6: self.update_prices,
            7: self.save,
        }
        while True:
            self._print(MENU)
            choice = self._read_int("Choose option: ")
            if choice == 8:
                self._exit()
                return
            action = actions.get(choice)
            if action is None:
                self._print("✗ Invalid option! Please choose 1-8.")
                continue
            action()

    def _exit(self) -> None:
        if self._input("\nSave before exit? (y/n): ").strip().lower() == "y":
            self.save()
        self._print("\nThank you for using Stock Trading Platform!")
        self._print(f"Goodbye, {self.username}!")

    # ------------------------------------------------------------------
    # Menu actions
    # ------------------------------------------------------------------

    def show_market(self) -> None:
        self._print("\n=== MARKET DATA ===")
        for instrument in self._catalog.all():
            self._print(str(instrument))

    def buy(self) -> None:
        """Buy shares at the current market price after confirmation."""
        self.show_market()
        symbol = normalize_symbol(self._input("\nEnter stock symbol to buy: "))
        instrument = self._catalog.lookup(symbol)
        if instrument is None:
            self._report_unknown_symbol(symbol)
            return

        self._print(f"Current price of {symbol}: ${instrument.current_price:.2f}")
        quantity = self._read_quantity("Enter quantity to buy: ")
        if quantity is None:
            return

        price = instrument.current_price
        self._print(f"\nTotal cost: ${quantity * price:.2f}")
        if not self._confirm("Confirm purchase? (y/n): "):
            self._print("Purchase cancelled.")
            return
        self._report(self.ledger.buy(symbol, quantity, price))

    def sell(self) -> None:
        """Sell held shares at the current market price after confirmation."""
        holdings = self.ledger.holdings
        if not holdings:
            self._print("✗ You don't own any stocks to sell!")
            return

        self._print("\n=== YOUR HOLDINGS ===")
        for held_symbol, held_quantity in holdings.items():
            held = self._catalog.lookup(held_symbol)
            if held is not None:
                self._print(
                    f"{held_symbol}: {held_quantity} shares @ ${held.current_price:.2f}"
                )

        symbol = normalize_symbol(self._input("\nEnter stock symbol to sell: "))
        instrument = self._catalog.lookup(symbol)
        if instrument is None:
            self._report_unknown_symbol(symbol)
            return
        if symbol not in holdings:
            self._print(f"✗ You don't own any shares of {symbol}!")
            return

        self._print(f"You own {holdings[symbol]} shares of {symbol}")
        self._print(f"Current price: ${instrument.current_price:.2f}")
        quantity = self._read_quantity("Enter quantity to sell: ")
        if quantity is None:
            return

        price = instrument.current_price
        self._print(f"\nTotal value: ${quantity * price:.2f}")
        if not self._confirm("Confirm sale? (y/n): "):
            self._print("Sale cancelled.")
            return
        self._report(self.ledger.sell(symbol, quantity, price))

    def show_portfolio(self) -> None:
        self._print("\n=== PORTFOLIO ===")
        self._print(f"Cash Balance: ${self.ledger.cash:.2f}")
        self._print("\nHoldings:")
        holdings = self.ledger.holdings
        if not holdings:
            self._print("No stocks owned")
        else:
            values = self.ledger.position_values(self._catalog)
            for symbol, value in values.items():
                price = self._catalog.lookup(symbol).current_price
                self._print(f"{symbol}: {holdings[symbol]} shares @ ${price:.2f} = ${value:.2f}")
        self._print(f"\nTotal Portfolio Value: ${self.ledger.total_value(self._catalog):.2f}")

    def show_transactions(self) -> None:
        self._print("\n=== TRANSACTION HISTORY ===")
        transactions = self.ledger.transaction_log()
        if not transactions:
            self._print("No transactions yet")
            return
        for idx, record in enumerate(transactions, start=1):
            self._print(f"{idx}. {record}")

    def update_prices(self) -> None:
        self._print("\n=== UPDATING MARKET PRICES ===")
        for change in self._price_generator.tick(self._catalog):
            self._print(str(change))
        self._print("Market prices updated!")

    def save(self) -> None:
        if save_portfolio(self._data_file, self.username, self.ledger):
            self._print(f"\n✓ Portfolio saved successfully to {self._data_file}")
        else:
            self._print(f"✗ Error saving portfolio to {self._data_file}")

    # ------------------------------------------------------------------
    # Input / output helpers
    # ------------------------------------------------------------------

    def _print(self, text: str = "") -> None:
        print(text, file=self._out)

    def _report(self, result: TradeResult) -> None:
        prefix = "✓" if result.accepted else "✗"
        self._print(f"{prefix} {result.message}")

    def _report_unknown_symbol(self, symbol: str) -> None:
        logger.info("Unknown symbol requested: %r", symbol)
        available = ", ".join(self._catalog.symbols())
        self._report(
            TradeResult.rejected(
                TradeError.SYMBOL_NOT_FOUND,
                f"Stock not found! Available symbols: {available}",
            )
        )

    def _confirm(self, prompt: str) -> bool:
        return self._input(prompt).strip().lower() == "y"

    def _read_quantity(self, prompt: str) -> int | None:
        """Read a share count; non-positive values are refused here."""
        quantity = self._read_int(prompt)
        if quantity <= 0:
            self._print("✗ Quantity must be positive!")
            return None
        if not quantity_in_range(quantity):
            self._print("✗ Quantity is too large!")
            return None
        return quantity

    def _initial_cash(self) -> float:
        if self._config.initial_cash is not None:
            return self._config.initial_cash
        prompt = "Enter initial cash amount: $"
        while True:
            cash = self._read_float(prompt)
            if cash >= 0:
                return cash
            prompt = "Initial cash cannot be negative. Enter initial cash amount: $"

    def _read_int(self, prompt: str) -> int:
        while True:
            raw = self._input(prompt).strip()
            try:
                return int(raw)
            except ValueError:
                prompt = "Invalid input! Please enter a valid number: "

    def _read_float(self, prompt: str) -> float:
        while True:
            raw = self._input(prompt).strip()
            try:
                value = float(raw)
            except ValueError:
                value = math.nan
            if math.isfinite(value):
                return value
            prompt = "Invalid input! Please enter a valid number: "
