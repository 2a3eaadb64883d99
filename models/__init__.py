"""Data models for the stock trading simulation.

The catalog, ledger, codec and session all import from models.
"""

from models.config import MarketConfig, PersistenceConfig, PlatformConfig
from models.instrument import Instrument, PriceChange
from models.portfolio import PortfolioSnapshot
from models.trade import TradeError, TradeResult
from models.transaction import TransactionKind, TransactionRecord

__all__ = [
    # config
    "MarketConfig",
    "PersistenceConfig",
    "PlatformConfig",
    # instrument
    "Instrument",
    "PriceChange",
    # portfolio
    "PortfolioSnapshot",
    # trade
    "TradeError",
    "TradeResult",
    # transaction
    "TransactionKind",
    "TransactionRecord",
]
