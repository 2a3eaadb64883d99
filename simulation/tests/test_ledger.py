"""Tests for the portfolio ledger's buy/sell invariants and valuation."""

import logging

import pytest

from models.instrument import Instrument
from models.trade import TradeError
from models.transaction import TransactionKind, TransactionRecord
from simulation.catalog import InstrumentCatalog
from simulation.ledger import PortfolioLedger


@pytest.fixture
def ledger() -> PortfolioLedger:
    return PortfolioLedger(1000.00)


def _state(ledger: PortfolioLedger):
    return ledger.cash, ledger.holdings, ledger.transaction_log()


# =============================================================================
# 1. CONSTRUCTION
# =============================================================================


class TestConstruction:
    def test_new_ledger_is_empty(self, ledger: PortfolioLedger):
        assert ledger.cash == 1000.00
        assert ledger.holdings == {}
        assert ledger.transaction_log() == []

    @pytest.mark.parametrize("cash", [-0.01, float("nan"), float("inf")])
    def test_invalid_initial_cash(self, cash):
        with pytest.raises(ValueError):
            PortfolioLedger(cash)

    def test_zero_initial_cash_allowed(self):
        assert PortfolioLedger(0).cash == 0.0

    def test_restore_drops_zero_holdings(self):
        record = TransactionRecord(kind="BUY", symbol="AAPL", quantity=1, price=2.0)
        restored = PortfolioLedger.restore(10.0, {"AAPL": 3, "msft": 0}, [record])
        assert restored.holdings == {"AAPL": 3}
        assert restored.transaction_log() == [record]


# =============================================================================
# 2. BUY
# =============================================================================


class TestBuy:
    def test_scenario_buy_then_sell_all(self, ledger: PortfolioLedger):
        result = ledger.buy("AAPL", 5, 175.50)
        assert result.accepted
        assert ledger.cash == pytest.approx(122.50)
        assert ledger.holdings == {"AAPL": 5}

        result = ledger.sell("AAPL", 5, 180.00)
        assert result.accepted
        assert ledger.cash == pytest.approx(1022.50)
        assert ledger.holdings == {}
        kinds = [t.kind for t in ledger.transaction_log()]
        assert kinds == [TransactionKind.BUY, TransactionKind.SELL]

    def test_buy_accumulates(self, ledger: PortfolioLedger):
        ledger.buy("TSLA", 1, 100.0)
        ledger.buy("TSLA", 2, 100.0)
        assert ledger.holdings == {"TSLA": 3}
        assert ledger.cash == pytest.approx(700.0)
        assert len(ledger.transaction_log()) == 2

    def test_buy_records_transaction(self, ledger: PortfolioLedger):
        result = ledger.buy("googl", 2, 140.25)
        assert result.transaction is not None
        assert result.transaction.symbol == "GOOGL"
        assert result.transaction.kind is TransactionKind.BUY
        assert result.transaction.quantity == 2
        assert result.transaction.price == 140.25
        assert ledger.transaction_log() == [result.transaction]
        assert "Successfully bought 2 shares of GOOGL" in result.message

    def test_buy_exact_cash_allowed(self, ledger: PortfolioLedger):
        assert ledger.buy("AAPL", 4, 250.0).accepted
        assert ledger.cash == 0.0

    def test_insufficient_funds_leaves_state(self):
        ledger = PortfolioLedger(100.00)
        before = _state(ledger)
        result = ledger.buy("MSFT", 1, 380.75)
        assert result.status == "rejected"
        assert result.error is TradeError.INSUFFICIENT_FUNDS
        assert "available $100.00" in result.message
        assert _state(ledger) == before
        assert ledger.cash == 100.00

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity(self, ledger: PortfolioLedger, quantity):
        result = ledger.buy("AAPL", quantity, 10.0)
        assert result.error is TradeError.INVALID_QUANTITY
        assert ledger.transaction_log() == []

    @pytest.mark.parametrize("price", [0.0, -5.0])
    def test_non_positive_price(self, ledger: PortfolioLedger, price):
        result = ledger.buy("AAPL", 1, price)
        assert result.error is TradeError.INVALID_PRICE
        assert ledger.cash == 1000.00


# =============================================================================
# 3. SELL
# =============================================================================


class TestSell:
    def test_sell_without_holding(self, ledger: PortfolioLedger):
        before = _state(ledger)
        result = ledger.sell("GOOGL", 1, 140.25)
        assert result.error is TradeError.INSUFFICIENT_SHARES
        assert _state(ledger) == before

    def test_sell_more_than_held(self, ledger: PortfolioLedger):
        ledger.buy("AMZN", 2, 155.30)
        before = _state(ledger)
        result = ledger.sell("AMZN", 3, 155.30)
        assert result.error is TradeError.INSUFFICIENT_SHARES
        assert "You own 2 shares of AMZN" in result.message
        assert _state(ledger) == before

    def test_partial_sell(self, ledger: PortfolioLedger):
        ledger.buy("AMZN", 4, 100.0)
        result = ledger.sell("amzn", 1, 110.0)
        assert result.accepted
        assert ledger.holdings == {"AMZN": 3}
        assert ledger.cash == pytest.approx(710.0)
        assert len(ledger.transaction_log()) == 2

    def test_holdings_never_store_zero(self, ledger: PortfolioLedger):
        ledger.buy("AAPL", 1, 1.0)
        ledger.sell("AAPL", 1, 1.0)
        assert "AAPL" not in ledger.holdings
        assert ledger.get_portfolio().holdings == {}


# =============================================================================
# 4. VIEWS AND VALUATION
# =============================================================================


class TestValuation:
    def test_total_value_uses_catalog_prices(self, ledger: PortfolioLedger):
        catalog = InstrumentCatalog.default()
        ledger.buy("AAPL", 2, 100.0)
        ledger.buy("TSLA", 1, 200.0)
        expected = 600.0 + 2 * 175.50 + 245.60
        assert ledger.total_value(catalog) == pytest.approx(expected)
        assert ledger.position_values(catalog) == pytest.approx(
            {"AAPL": 351.0, "TSLA": 245.60}
        )

    def test_symbols_missing_from_catalog_are_skipped(self, ledger: PortfolioLedger):
        ledger.buy("XYZ", 3, 10.0)
        catalog = InstrumentCatalog([Instrument(symbol="AAPL", name="Apple", current_price=5.0)])
        assert ledger.total_value(catalog) == pytest.approx(970.0)

    def test_views_are_copies(self, ledger: PortfolioLedger):
        ledger.buy("AAPL", 1, 1.0)
        ledger.holdings["AAPL"] = 99
        ledger.transaction_log().clear()
        assert ledger.holdings == {"AAPL": 1}
        assert len(ledger.transaction_log()) == 1

    def test_snapshot(self, ledger: PortfolioLedger):
        ledger.buy("MSFT", 1, 380.75)
        snapshot = ledger.get_portfolio()
        ledger.sell("MSFT", 1, 380.75)
        assert snapshot.holdings == {"MSFT": 1}
        assert snapshot.cash == pytest.approx(619.25)


# =============================================================================
# 5. EDGE AMOUNTS AND LOGGING
# =============================================================================


class TestEdgeAmounts:
    def test_quantity_too_large_for_float(self, ledger: PortfolioLedger):
        before = _state(ledger)
        result = ledger.buy("AAPL", 10**400, 175.5)
        assert result.error is TradeError.INVALID_QUANTITY
        assert "too large" in result.message
        assert _state(ledger) == before

    def test_sell_quantity_too_large_for_float(self, ledger: PortfolioLedger):
        result = ledger.sell("AAPL", 10**400, 175.5)
        assert result.error is TradeError.INVALID_QUANTITY

    def test_huge_but_finite_quantity_is_unaffordable(self, ledger: PortfolioLedger):
        result = ledger.buy("AAPL", 10**307, 175.5)
        assert result.error is TradeError.INSUFFICIENT_FUNDS
        assert ledger.cash == 1000.00

    def test_exactly_affordable_despite_rounding(self):
        ledger = PortfolioLedger(0.30)
        result = ledger.buy("AAPL", 3, 0.1)
        assert result.accepted
        assert ledger.cash == pytest.approx(0.0)
        assert ledger.cash >= 0
        assert ledger.holdings == {"AAPL": 3}

    def test_rejections_do_not_log_warnings(self, ledger: PortfolioLedger, caplog):
        with caplog.at_level(logging.INFO, logger="simulation.ledger"):
            ledger.buy("MSFT", 10, 380.75)
            ledger.sell("GOOGL", 1, 140.25)
        assert [r.levelno for r in caplog.records] == [logging.INFO, logging.INFO]
