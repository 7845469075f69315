"""Order rejection taxonomy raised by the execution gate.

All rejections are local and recoverable: the gate converts them into an
``OrderResult`` and the ledger is never reached.
"""

from __future__ import annotations

from models.trade import RejectionReason


class OrderRejected(Exception):
    """Base class for an order the gate refused to forward to the ledger."""

    reason: RejectionReason

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidOrder(OrderRejected):
    """Non-positive or non-integer quantity, unknown side, or no usable quote."""

    reason = RejectionReason.INVALID_ORDER


class InsufficientFunds(OrderRejected):
    """BUY notional exceeds available cash."""

    reason = RejectionReason.INSUFFICIENT_FUNDS


class InsufficientPosition(OrderRejected):
    """SELL of a symbol not held, or of more units than held."""

    reason = RejectionReason.INSUFFICIENT_POSITION


class SessionNotActive(OrderRejected):
    """Order submitted while the session is idle or paused."""

    reason = RejectionReason.SESSION_NOT_ACTIVE
