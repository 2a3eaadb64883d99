"""Portfolio state models."""

from pydantic import BaseModel, ConfigDict


class PortfolioSnapshot(BaseModel):
    """Cash and holdings (symbol -> shares) at a point in time.

    Handed out by the ledger as a read-only copy; mutating the ledger later
    does not change a snapshot that was already taken.
    """

    model_config = ConfigDict(frozen=True)

    cash: float
    holdings: dict[str, int]
