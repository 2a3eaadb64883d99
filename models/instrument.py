"""Instrument and price movement models."""

from pydantic import BaseModel, Field


class Instrument(BaseModel):
    """A tradable stock in the simulated market.

    ``current_price`` is the only mutable field; the price generator
    overwrites it in place on every tick.
    """

    symbol: str
    name: str
    current_price: float = Field(gt=0)

    def __str__(self) -> str:
        return f"{self.name} ({self.symbol}): ${self.current_price:.2f}"


class PriceChange(BaseModel):
    """Old and new price of one instrument after a market tick."""

    symbol: str
    old_price: float
    new_price: float

    @property
    def change(self) -> float:
        return self.new_price - self.old_price

    @property
    def change_pct(self) -> float:
        """Percentage move relative to the old price."""
        return self.change / self.old_price * 100

    @property
    def direction(self) -> str:
        return "↑" if self.new_price > self.old_price else "↓"

    def __str__(self) -> str:
        return (
            f"{self.symbol}: ${self.old_price:.2f} → ${self.new_price:.2f} "
            f"{self.direction} ({self.change_pct:.2f}%)"
        )
