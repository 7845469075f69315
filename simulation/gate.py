"""Trade execution gate: admission control in front of the portfolio ledger.

Every order is validated against the current session state before the ledger
sees it. Execution is **all-or-nothing**: an order is either filled in full at
the live quote or rejected with no side effects. Partial fills, short sales,
and limit/stop orders are not modeled.
"""

from __future__ import annotations

import logging

from models.trade import OrderResult, Side
from simulation.errors import (
    InsufficientFunds,
    InsufficientPosition,
    InvalidOrder,
    OrderRejected,
    SessionNotActive,
)
from simulation.ledger import PortfolioLedger, is_valid_price
from simulation.state import SessionState, SessionStatus

logger = logging.getLogger(__name__)


class TradeExecutionGate:
    """Validates order intents and forwards accepted ones to the ledger.

    The gate takes a single quote snapshot per order and uses it both for
    validation and as the recorded execution price. Callers are expected to
    hold the session's step lock around ``submit`` so no tick can land
    between the two.
    """

    def __init__(self, state: SessionState, ledger: PortfolioLedger) -> None:
        self._state = state
        self._ledger = ledger

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def submit(self, side: Side | str, symbol: str, quantity: int) -> OrderResult:
        """Validate and execute one order, returning an ``OrderResult``."""
        try:
            side, price = self._validate(side, symbol, quantity)
        except OrderRejected as exc:
            logger.info("Order rejected (%s): %s", exc.reason.value, exc.message)
            return OrderResult(
                status="rejected",
                reason=exc.reason,
                message=exc.message,
            )

        trade = self._ledger.apply_trade(side, symbol, quantity, price)
        return OrderResult(
            status="accepted",
            trade=trade,
            message=f"{side.value} {quantity} {symbol} @ ${price:.2f}.",
        )

    def estimate_cost(self, symbol: str, quantity: int) -> float:
        """Notional of *quantity* units at the current quote."""
        price = self._state.quotes.get(symbol)
        if price is None:
            raise KeyError(f"No quote for {symbol}.")
        return price * quantity

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _validate(self, side: Side | str, symbol: str, quantity: int) -> tuple[Side, float]:
        """Return the parsed side and the quote snapshot, or raise ``OrderRejected``."""
        state = self._state
        if state.status is not SessionStatus.RUNNING:
            raise SessionNotActive(
                f"Session is {state.status.value}; start it before trading."
            )

        try:
            parsed_side = Side(side.upper() if isinstance(side, str) else side)
        except ValueError:
            raise InvalidOrder(f"Unknown order side {side!r}; expected BUY or SELL.") from None

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidOrder(
                f"Order quantity must be a positive integer, got {quantity!r} for {symbol}."
            )

        price = state.quotes.get(symbol)
        if price is None:
            raise InvalidOrder(f"No quote for {symbol}; it is not a tracked instrument.")
        if not is_valid_price(price):
            raise InvalidOrder(f"Quote for {symbol} is not a positive finite price ({price}).")

        if parsed_side is Side.BUY:
            cost = quantity * price
            if state.cash < cost:
                raise InsufficientFunds(
                    f"Insufficient cash to buy {quantity} shares of {symbol} at "
                    f"${price:.2f} (cost ${cost:.2f}, available ${state.cash:.2f})."
                )
        else:
            position = state.positions.get(symbol)
            held = position.quantity if position is not None else 0
            if quantity > held:
                raise InsufficientPosition(
                    f"Cannot sell {quantity} shares of {symbol} — only {held} held."
                )

        return parsed_side, price
