"""Portfolio state models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from models.trade import TradeRecord


class Position(BaseModel):
    """Open holding in one symbol. Only exists while quantity > 0.

    The ledger replaces positions with updated copies instead of mutating
    them, so a ``Position`` handed to a caller never changes underneath it.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    quantity: int = Field(gt=0)
    average_cost: float = Field(gt=0, allow_inf_nan=False)
    last_price: float = Field(gt=0, allow_inf_nan=False)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def unrealized_pnl(self) -> float:
        return (self.last_price - self.average_cost) * self.quantity

    @computed_field  # type: ignore[prop-decorator]
    @property
    def market_value(self) -> float:
        return self.last_price * self.quantity

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cost_basis(self) -> float:
        return self.average_cost * self.quantity


class PricePoint(BaseModel):
    """One observed quote for the price history chart."""

    timestamp: datetime
    price: float


class PortfolioSnapshot(BaseModel):
    """Read-only view of the session at one point in time."""

    status: str
    initial_capital: float
    cash: float
    positions: list[Position]
    quotes: dict[str, float]
    realized_pnl: float
    unrealized_pnl: float
    equity: float
    return_pct: float
    total_trades: int
    recent_trades: list[TradeRecord] = []  # Newest first
