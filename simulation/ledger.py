"""Portfolio ledger: the single source of truth for cash, positions, and P&L.

The ledger applies price ticks and already-validated trades to a
``SessionState``. It performs no I/O and no admission control; the execution
gate guarantees that every trade reaching ``apply_trade`` is affordable and
never oversells.
"""

from __future__ import annotations

import logging
import math
import uuid
from datetime import datetime, timezone
from typing import Callable

from models.portfolio import Position
from models.trade import Side, TradeRecord
from simulation.state import SessionState

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_price(price: float) -> bool:
    """True for a finite price strictly above zero."""
    return price > 0 and math.isfinite(price)


class PortfolioLedger:
    """Applies ticks and trades to one session's cash and position set.

    Invariant: ``cash + sum(quantity * average_cost)`` equals
    ``initial_capital + realized_pnl`` after every completed call.
    """

    def __init__(
        self,
        state: SessionState,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._state = state
        self._clock = clock

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def apply_price_tick(self, symbol: str, new_price: float) -> Position | None:
        """Mark the open position in *symbol* to *new_price*.

        Returns the re-marked position, or ``None`` when *symbol* is not held.
        """
        if not is_valid_price(new_price):
            raise ValueError(f"Tick price must be positive and finite, got {new_price} for {symbol}.")

        position = self._state.positions.get(symbol)
        if position is None:
            return None

        updated = position.model_copy(update={"last_price": new_price})
        self._state.positions[symbol] = updated
        return updated

    def apply_trade(
        self,
        side: Side,
        symbol: str,
        quantity: int,
        price: float,
    ) -> TradeRecord:
        """Apply one fill and append its record to the trade log.

        BUY blends the average cost by volume; SELL closes units at the
        existing average cost, leaving the cost basis of the remainder
        unchanged, and removes the position once it reaches zero.
        """
        if quantity <= 0:
            raise ValueError(f"Trade quantity must be positive, got {quantity}.")
        if not is_valid_price(price):
            raise ValueError(f"Trade price must be positive and finite, got {price}.")

        side = Side(side)
        realized: float | None = None

        if side is Side.BUY:
            self._buy(symbol, quantity, price)
        else:
            realized = self._sell(symbol, quantity, price)

        trade = TradeRecord(
            trade_id=uuid.uuid4().hex[:12],
            side=side,
            symbol=symbol,
            quantity=quantity,
            price=price,
            timestamp=self._clock(),
            realized_pnl=realized,
        )
        self._state.trades.append(trade)
        logger.info(
            "%s %d %s @ %.2f (cash $%.2f)",
            side.value,
            quantity,
            symbol,
            price,
            self._state.cash,
        )
        return trade

    # ------------------------------------------------------------------
    # Derived figures
    # ------------------------------------------------------------------

    def total_unrealized_pnl(self) -> float:
        return sum(p.unrealized_pnl for p in self._state.positions.values())

    def market_value(self) -> float:
        """Sum of open positions valued at their last observed price."""
        return sum(p.market_value for p in self._state.positions.values())

    def cost_basis_total(self) -> float:
        return sum(p.cost_basis for p in self._state.positions.values())

    def equity(self) -> float:
        return self._state.cash + self.market_value()

    def total_return(self) -> float:
        """Fractional return on initial capital, e.g. ``0.01`` for 1%."""
        initial = self._state.initial_capital
        return (self.equity() - initial) / initial

    def return_pct(self) -> float:
        return self.total_return() * 100

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _buy(self, symbol: str, quantity: int, price: float) -> None:
        state = self._state
        state.cash -= quantity * price

        existing = state.positions.get(symbol)
        if existing is None:
            state.positions[symbol] = Position(
                symbol=symbol,
                quantity=quantity,
                average_cost=price,
                last_price=price,
            )
            return

        new_qty = existing.quantity + quantity
        new_avg = (existing.average_cost * existing.quantity + price * quantity) / new_qty
        state.positions[symbol] = existing.model_copy(
            update={"quantity": new_qty, "average_cost": new_avg, "last_price": price}
        )

    def _sell(self, symbol: str, quantity: int, price: float) -> float:
        state = self._state
        existing = state.positions.get(symbol)
        held = existing.quantity if existing is not None else 0
        if existing is None or quantity > held:
            raise ValueError(
                f"Cannot sell {quantity} shares of {symbol} — only {held} held."
            )

        realized = (price - existing.average_cost) * quantity
        state.cash += quantity * price
        state.realized_pnl += realized

        remaining = existing.quantity - quantity
        if remaining == 0:
            del state.positions[symbol]
        else:
            state.positions[symbol] = existing.model_copy(
                update={"quantity": remaining, "last_price": price}
            )
        return realized
