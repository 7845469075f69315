"""Logging and run storage models.

- ``RejectedOrderLog`` — one order the gate refused, with the tick it was sent on.
- ``SessionLog`` — run-level log with embedded config for reproducibility.
"""

from __future__ import annotations

from pydantic import BaseModel

from models.config import SimulationConfig
from models.portfolio import PortfolioSnapshot
from models.trade import OrderResult, TradeRecord


class RejectedOrderLog(BaseModel):
    """An order that was submitted but refused by the execution gate."""

    tick: int
    side: str
    symbol: str
    quantity: int
    result: OrderResult


class SessionLog(BaseModel):
    """Run-level log with embedded configuration for reproducibility.

    ``run_name`` is derived from the configuration file path by the runner.
    ``trades`` is kept in execution order (oldest first).
    """

    run_name: str
    config: SimulationConfig
    ticks_applied: int = 0
    trades: list[TradeRecord] = []
    rejected_orders: list[RejectedOrderLog] = []
    final_snapshot: PortfolioSnapshot | None = None
    errors: list[str] = []
