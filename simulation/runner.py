"""Async simulation runner: the fixed-interval tick loop.

Lifecycle:
    1. Build the session controller and price feed from config.
    2. Start the session.
    3. For each tick:
        a. Pull the next prices from the feed and apply them as one step.
        b. Submit any orders scheduled for this tick.
        c. Sleep for the tick interval.
       While the session is paused no ticks are pulled or applied.
    4. Finalise and write the session log and summary.

Ticks are emitted from a single coroutine, so a tick is always fully applied
before the next one is pulled from the feed.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any

from models.config import ScheduledOrder, SimulationConfig
from models.log import RejectedOrderLog
from simulation.price_feed import PriceFeed, RandomWalkFeed
from simulation.session import SessionController
from simulation.sim_logging import SimulationLogger, run_name_from_config_path

logger = logging.getLogger(__name__)


class AsyncSimulationRunner:
    """Drives one session through ``num_ticks`` feed ticks and scheduled orders."""

    def __init__(
        self,
        config: SimulationConfig,
        config_yaml_path: str | None = None,
        output_dir: str = "results",
        feed: PriceFeed | None = None,
        controller: SessionController | None = None,
        run_name: str | None = None,
    ) -> None:
        self._config = config
        self._config_yaml_path = config_yaml_path
        if run_name is None:
            run_name = (
                run_name_from_config_path(config_yaml_path)
                if config_yaml_path is not None
                else "session"
            )
        self._run_name = run_name
        self._feed = feed if feed is not None else RandomWalkFeed.from_config(config.feed)
        self._controller = (
            controller
            if controller is not None
            else SessionController.from_config(config, feed=self._feed)
        )
        self._sim_logger = SimulationLogger(output_dir, config, run_name)
        self._orders_by_tick: dict[int, list[ScheduledOrder]] = defaultdict(list)
        for order in config.orders:
            self._orders_by_tick[order.at_tick].append(order)
        self._stop = asyncio.Event()
        self._ticks_applied = 0

    @property
    def controller(self) -> SessionController:
        return self._controller

    @property
    def ticks_applied(self) -> int:
        return self._ticks_applied

    def stop(self) -> None:
        """Ask the tick loop to finish after the current step."""
        self._stop.set()

    async def run(self) -> dict[str, Any]:
        """Execute the full simulation and return the run summary."""
        self._sim_logger.init_run(self._config_yaml_path)
        interval = self._config.feed.tick_interval_seconds
        logger.info(
            "Starting session '%s': %d tick(s) every %.2fs over %s.",
            self._run_name,
            self._config.num_ticks,
            interval,
            ", ".join(self._controller.quotes()),
        )

        self._controller.start()
        while self._ticks_applied < self._config.num_ticks and not self._stop.is_set():
            if not self._controller.is_running:
                await asyncio.sleep(interval)
                continue

            self._controller.apply_prices(self._feed.next_prices())
            self._submit_scheduled(self._ticks_applied)
            self._ticks_applied += 1
            await asyncio.sleep(interval)

        self._controller.pause()

        summary = self._build_summary()
        self._sim_logger.finalize(
            self._controller.snapshot(),
            ticks_applied=self._ticks_applied,
            summary=summary,
        )
        logger.info(
            "Session '%s' complete. Cash: $%.2f, return: %.2f%%, trades: %d. Output: %s",
            self._run_name,
            self._controller.cash,
            self._controller.return_pct(),
            summary["total_trades"],
            self._sim_logger.run_dir,
        )
        return summary

    # ------------------------------------------------------------------
    # Scheduled orders
    # ------------------------------------------------------------------

    def _submit_scheduled(self, tick: int) -> None:
        for order in self._orders_by_tick.get(tick, []):
            try:
                result = self._controller.submit_order(order.side, order.symbol, order.quantity)
            except Exception as exc:
                msg = f"Order at tick {tick} ({order.side.value} {order.quantity} {order.symbol}) failed: {exc}"
                logger.exception(msg)
                self._sim_logger.record_error(msg)
                continue

            if result.accepted and result.trade is not None:
                self._sim_logger.record_trade(result.trade)
            else:
                self._sim_logger.record_rejection(
                    RejectedOrderLog(
                        tick=tick,
                        side=order.side.value,
                        symbol=order.symbol,
                        quantity=order.quantity,
                        result=result,
                    )
                )

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def _build_summary(self) -> dict[str, Any]:
        """Build a lightweight summary dict for the run."""
        snapshot = self._controller.snapshot()
        session_log = self._sim_logger.session_log
        return {
            "run_name": self._run_name,
            "ticks_applied": self._ticks_applied,
            "initial_capital": snapshot.initial_capital,
            "final_cash": snapshot.cash,
            "final_positions": {p.symbol: p.quantity for p in snapshot.positions},
            "final_quotes": snapshot.quotes,
            "equity": snapshot.equity,
            "realized_pnl": snapshot.realized_pnl,
            "unrealized_pnl": snapshot.unrealized_pnl,
            "return_pct": snapshot.return_pct,
            "total_trades": snapshot.total_trades,
            "rejected_orders": len(session_log.rejected_orders),
        }
