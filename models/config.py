"""Platform configuration models, loaded from YAML.

These live in ``models/`` because they are shared data contracts used by the
entrypoint, the session driver, and the market simulation.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field


class MarketConfig(BaseModel):
    """Configuration for the simulated market's price movement."""

    max_price_change: float = Field(
        default=0.05,
        gt=0.0,
        lt=1.0,
        description="Largest fractional price move per tick, e.g. 0.05 for +/-5%.",
    )
    price_floor: float = Field(
        default=1.0,
        gt=0.0,
        description="Prices never fall below this value.",
    )
    seed: int | None = Field(
        default=None,
        description="Optional random seed for reproducible price paths.",
    )


class PersistenceConfig(BaseModel):
    """Configuration for the portfolio save file."""

    data_file: str = Field(
        default="portfolio_data.txt",
        description="Path of the text file holding the saved portfolio.",
    )


class PlatformConfig(BaseModel):
    """Top-level configuration for a trading session.

    Every field has a default, so running without a config file is valid.
    """

    market: MarketConfig = Field(
        default_factory=MarketConfig,
        description="Price generator configuration.",
    )
    persistence: PersistenceConfig = Field(
        default_factory=PersistenceConfig,
        description="Save file configuration.",
    )
    initial_cash: float | None = Field(
        default=None,
        ge=0,
        description="Starting cash for new accounts. If unset, the session prompts for it.",
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> PlatformConfig:
        """Load and validate a ``PlatformConfig`` from a YAML file.

        Raises ``FileNotFoundError`` if the file does not exist and
        ``ValueError`` if the content is not a valid YAML mapping. An empty
        file yields the defaults.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with path.open(encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)

        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ValueError(
                f"Expected a YAML mapping in {path}, got {type(raw).__name__}."
            )

        return cls(**raw)
