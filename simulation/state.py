"""Mutable session state shared by the ledger, gate, and controller.

The controller owns exactly one ``SessionState`` at a time and replaces it
with a fresh instance on reset; the ledger and gate operate on the instance
they were constructed with.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from models.portfolio import Position, PricePoint
from models.trade import TradeRecord


class SessionStatus(str, Enum):
    """Lifecycle states of a simulation session."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass
class SessionState:
    """Cash, positions, trade log, and quotes of the single active session."""

    initial_capital: float
    cash: float
    quotes: dict[str, float]
    history_length: int = 50
    status: SessionStatus = SessionStatus.IDLE
    positions: dict[str, Position] = field(default_factory=dict)
    trades: list[TradeRecord] = field(default_factory=list)  # Oldest first, append-only
    realized_pnl: float = 0.0
    price_history: dict[str, deque[PricePoint]] = field(default_factory=dict)

    @classmethod
    def fresh(
        cls,
        initial_capital: float,
        quotes: dict[str, float],
        history_length: int = 50,
    ) -> SessionState:
        """Build the Idle state: full cash, no positions, trades, or history."""
        return cls(
            initial_capital=initial_capital,
            cash=initial_capital,
            quotes=dict(quotes),
            history_length=history_length,
        )

    def record_quote(self, symbol: str, point: PricePoint) -> None:
        """Store the latest quote and append it to the bounded price history."""
        self.quotes[symbol] = point.price
        history = self.price_history.get(symbol)
        if history is None:
            history = deque(maxlen=self.history_length)
            self.price_history[symbol] = history
        history.append(point)
