"""Session controller: lifecycle, step lock, and the in-process interface.

Lifecycle::

    IDLE --start--> RUNNING --pause--> PAUSED --start--> RUNNING
      ^                                                     |
      +-------------------- reset (from any state) ---------+

The controller exclusively owns the ``SessionState``. Ticks, orders, and
resets all run under one re-entrant step lock, so each is a complete state
transition before the next is admitted.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable

from models.config import SimulationConfig
from models.portfolio import PortfolioSnapshot, Position, PricePoint
from models.trade import OrderResult, Side, TradeRecord
from simulation.gate import TradeExecutionGate
from simulation.ledger import PortfolioLedger, is_valid_price, utc_now
from simulation.price_feed import PriceFeed
from simulation.state import SessionState, SessionStatus

logger = logging.getLogger(__name__)


class SessionController:
    """Owns one paper-trading session and exposes its commands and views.

    Instantiate one ``SessionController`` per simulator. ``reset`` rebuilds
    the session state, ledger, and gate from scratch rather than clearing
    fields in place.
    """

    def __init__(
        self,
        initial_capital: float,
        start_prices: dict[str, float],
        history_length: int = 50,
        feed: PriceFeed | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if initial_capital <= 0:
            raise ValueError(f"initial_capital must be positive, got {initial_capital}.")
        self._initial_capital = initial_capital
        self._start_prices = dict(start_prices)
        self._history_length = history_length
        self._feed = feed
        self._clock = clock
        self._lock = threading.RLock()
        self._build_session()

    @classmethod
    def from_config(
        cls,
        config: SimulationConfig,
        feed: PriceFeed | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> SessionController:
        return cls(
            initial_capital=config.account.initial_capital,
            start_prices=config.feed.symbols,
            history_length=config.history_length,
            feed=feed,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin (or resume) tick processing and order acceptance."""
        with self._lock:
            if self._state.status is SessionStatus.RUNNING:
                return
            previous = self._state.status
            self._state.status = SessionStatus.RUNNING
            logger.info("Session %s -> running.", previous.value)

    def pause(self) -> None:
        """Freeze the session: ticks are ignored and orders are rejected."""
        with self._lock:
            if self._state.status is not SessionStatus.RUNNING:
                return
            self._state.status = SessionStatus.PAUSED
            logger.info("Session running -> paused.")

    def reset(self) -> None:
        """Discard all session state and return to Idle with full cash."""
        with self._lock:
            self._build_session()
            if self._feed is not None:
                self._feed.reset()
            logger.info(
                "Session reset: cash restored to $%.2f.", self._initial_capital
            )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def tick(self, symbol: str, price: float) -> Position | None:
        """Apply one feed tick. Ignored unless the session is running.

        Returns the re-marked position when *symbol* is held.
        """
        with self._lock:
            if self._state.status is not SessionStatus.RUNNING:
                logger.debug("Ignoring tick %s=%.4f while %s.", symbol, price, self._state.status.value)
                return None
            position = self._ledger.apply_price_tick(symbol, price)
            self._state.record_quote(symbol, PricePoint(timestamp=self._clock(), price=price))
            logger.debug("Tick %s=%.4f", symbol, price)
            return position

    def apply_prices(self, prices: dict[str, float]) -> None:
        """Apply one tick for every symbol in *prices* as a single step.

        Every price is checked before any is applied, so a bad price leaves
        all quotes and positions untouched.
        """
        bad = sorted(sym for sym, price in prices.items() if not is_valid_price(price))
        if bad:
            raise ValueError(f"Tick prices must be positive and finite: {', '.join(bad)}.")
        with self._lock:
            for symbol, price in prices.items():
                self.tick(symbol, price)

    def submit_order(self, side: Side | str, symbol: str, quantity: int) -> OrderResult:
        """Route an order intent through the execution gate."""
        with self._lock:
            return self._gate.submit(side, symbol, quantity)

    def estimate_cost(self, symbol: str, quantity: int) -> float:
        with self._lock:
            return self._gate.estimate_cost(symbol, quantity)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._state.status

    @property
    def is_running(self) -> bool:
        return self._state.status is SessionStatus.RUNNING

    @property
    def initial_capital(self) -> float:
        return self._initial_capital

    @property
    def cash(self) -> float:
        return self._state.cash

    @property
    def realized_pnl(self) -> float:
        return self._state.realized_pnl

    def positions(self) -> list[Position]:
        with self._lock:
            return list(self._state.positions.values())

    def position(self, symbol: str) -> Position | None:
        return self._state.positions.get(symbol)

    def trade_log(self, newest_first: bool = True) -> list[TradeRecord]:
        with self._lock:
            trades = list(self._state.trades)
        if newest_first:
            trades.reverse()
        return trades

    def quotes(self) -> dict[str, float]:
        with self._lock:
            return dict(self._state.quotes)

    def price_history(self, symbol: str) -> list[PricePoint]:
        with self._lock:
            return list(self._state.price_history.get(symbol, ()))

    def total_unrealized_pnl(self) -> float:
        with self._lock:
            return self._ledger.total_unrealized_pnl()

    def total_return(self) -> float:
        with self._lock:
            return self._ledger.total_return()

    def return_pct(self) -> float:
        with self._lock:
            return self._ledger.return_pct()

    def cost_basis_total(self) -> float:
        with self._lock:
            return self._ledger.cost_basis_total()

    def snapshot(self, recent_trades: int = 10) -> PortfolioSnapshot:
        """Return a consistent read-only view of the whole session."""
        with self._lock:
            state = self._state
            return PortfolioSnapshot(
                status=state.status.value,
                initial_capital=state.initial_capital,
                cash=state.cash,
                positions=list(state.positions.values()),
                quotes=dict(state.quotes),
                realized_pnl=state.realized_pnl,
                unrealized_pnl=self._ledger.total_unrealized_pnl(),
                equity=self._ledger.equity(),
                return_pct=self._ledger.return_pct(),
                total_trades=len(state.trades),
                recent_trades=self.trade_log()[:recent_trades],
            )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_session(self) -> None:
        self._state = SessionState.fresh(
            initial_capital=self._initial_capital,
            quotes=self._start_prices,
            history_length=self._history_length,
        )
        self._ledger = PortfolioLedger(self._state, clock=self._clock)
        self._gate = TradeExecutionGate(self._state, self._ledger)
