"""Order and execution models: Side, TradeRecord, OrderResult."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict


class Side(str, Enum):
    """Direction of a trade. Short selling is not modeled."""

    BUY = "BUY"
    SELL = "SELL"


class RejectionReason(str, Enum):
    """Why the execution gate refused an order."""

    INVALID_ORDER = "InvalidOrder"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    INSUFFICIENT_POSITION = "InsufficientPosition"
    SESSION_NOT_ACTIVE = "SessionNotActive"


class TradeRecord(BaseModel):
    """Single executed fill. Created once per accepted order, never mutated."""

    model_config = ConfigDict(frozen=True)

    trade_id: str
    side: Side
    symbol: str
    quantity: int
    price: float  # Quote snapshot at acceptance time
    timestamp: datetime
    realized_pnl: float | None = None  # Only set on SELL records

    @property
    def notional(self) -> float:
        return self.quantity * self.price


class OrderResult(BaseModel):
    """Outcome of ``submit_order``.

    When accepted, ``trade`` holds the recorded fill. When rejected, ``reason``
    names the rejection class and ``message`` explains it; the ledger was not
    touched.
    """

    status: Literal["accepted", "rejected"]
    trade: TradeRecord | None = None
    reason: RejectionReason | None = None
    message: str = ""

    @property
    def accepted(self) -> bool:
        return self.status == "accepted"
