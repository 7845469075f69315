"""Price feeds that supply the session with ``{symbol: price}`` ticks.

The session never generates prices itself; it consumes whatever feed it is
given. ``RandomWalkFeed`` reproduces the simulator's synthetic live prices,
and ``ScriptedPriceFeed`` replays a fixed sequence so ledger behaviour can be
exercised deterministically.
"""

from __future__ import annotations

import random
from typing import Iterable, Protocol

from models.config import FeedConfig


class PriceFeed(Protocol):
    """Source of price ticks for the tracked instruments."""

    def next_prices(self) -> dict[str, float]:
        """Return the next price for every instrument that ticks this step."""
        ...

    def reset(self) -> None:
        """Rewind the feed to its starting prices."""
        ...


class RandomWalkFeed:
    """Multiplicative random walk clamped to a positive floor.

    Each step moves every symbol by a relative change drawn uniformly from
    ``[-max_change, +max_change]``.
    """

    def __init__(
        self,
        start_prices: dict[str, float],
        max_change: float = 0.02,
        price_floor: float = 0.01,
        seed: int | None = None,
    ) -> None:
        if price_floor <= 0:
            raise ValueError(f"price_floor must be positive, got {price_floor}.")
        self._start_prices = dict(start_prices)
        self._max_change = max_change
        self._price_floor = price_floor
        self._seed = seed
        self._rng = random.Random(seed)
        self._prices = dict(start_prices)

    @classmethod
    def from_config(cls, config: FeedConfig) -> RandomWalkFeed:
        return cls(
            start_prices=config.symbols,
            max_change=config.max_change,
            price_floor=config.price_floor,
            seed=config.seed,
        )

    @property
    def prices(self) -> dict[str, float]:
        return dict(self._prices)

    def next_prices(self) -> dict[str, float]:
        for symbol, price in self._prices.items():
            change = self._rng.uniform(-self._max_change, self._max_change)
            self._prices[symbol] = max(self._price_floor, price * (1 + change))
        return dict(self._prices)

    def reset(self) -> None:
        self._prices = dict(self._start_prices)
        self._rng = random.Random(self._seed)


class ScriptedPriceFeed:
    """Replays a fixed list of price maps, then keeps repeating the last one."""

    def __init__(self, steps: Iterable[dict[str, float]]) -> None:
        self._steps = [dict(step) for step in steps]
        if not self._steps:
            raise ValueError("ScriptedPriceFeed needs at least one step.")
        self._index = 0

    def next_prices(self) -> dict[str, float]:
        step = self._steps[min(self._index, len(self._steps) - 1)]
        self._index += 1
        return dict(step)

    def reset(self) -> None:
        self._index = 0
