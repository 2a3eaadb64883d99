"""Random-walk price generator for the simulated market."""

from __future__ import annotations

import logging
import random

from models.config import MarketConfig
from models.instrument import PriceChange
from simulation.catalog import InstrumentCatalog

logger = logging.getLogger(__name__)


class PriceGenerator:
    """Applies an independent bounded random move to every instrument.

    Each tick draws ``delta`` uniformly from ``[-max_change, +max_change)``
    and sets ``new = max(floor, old * (1 + delta))``. Given the same random
    source the sequence of prices is fully reproducible.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        max_change: float = 0.05,
        floor: float = 1.0,
    ) -> None:
        if not 0 < max_change < 1:
            raise ValueError(f"max_change must be in (0, 1), got {max_change}.")
        if floor <= 0:
            raise ValueError(f"floor must be positive, got {floor}.")
        self._rng = rng if rng is not None else random.Random()
        self._max_change = max_change
        self._floor = floor

    @classmethod
    def from_config(cls, config: MarketConfig) -> PriceGenerator:
        return cls(
            rng=random.Random(config.seed),
            max_change=config.max_price_change,
            floor=config.price_floor,
        )

    def tick(self, catalog: InstrumentCatalog) -> list[PriceChange]:
        """Move every price in *catalog* in place and report each change."""
        changes: list[PriceChange] = []
        for instrument in catalog.all():
            old_price = instrument.current_price
            # random() is in [0, 1), so delta is in [-max_change, +max_change).
            delta = (self._rng.random() * 2 - 1) * self._max_change
            new_price = max(self._floor, old_price * (1 + delta))
            instrument.current_price = new_price
            logger.debug(
                "%s: %.4f -> %.4f (delta %+.4f)",
                instrument.symbol,
                old_price,
                new_price,
                delta,
            )
            changes.append(
                PriceChange(
                    symbol=instrument.symbol,
                    old_price=old_price,
                    new_price=new_price,
                )
            )
        return changes
