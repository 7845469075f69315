"""Simulation configuration models, loaded from YAML.

These live in ``models/`` because they are shared data contracts used by the
session controller, the async runner, and the CLI entrypoint.
"""

from __future__ import annotations

import math
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from models.trade import Side

# Default tracked instruments and their starting quotes.
DEFAULT_SYMBOLS: dict[str, float] = {
    "AAPL": 150.25,
    "MSFT": 305.80,
    "GOOGL": 2450.50,
    "TSLA": 185.30,
    "SPY": 425.75,
}


class AccountConfig(BaseModel):
    """Configuration for the paper-trading account."""

    initial_capital: float = Field(
        default=10_000.0,
        gt=0,
        description="Starting cash balance; restored on every reset.",
    )


class FeedConfig(BaseModel):
    """Configuration for the synthetic random-walk price feed."""

    symbols: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_SYMBOLS),
        description="Tracked instruments and their starting prices.",
    )
    tick_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Seconds between two consecutive price ticks.",
    )
    max_change: float = Field(
        default=0.02,
        ge=0.0,
        lt=1.0,
        description="Maximum relative move per tick, drawn uniformly from [-max_change, +max_change].",
    )
    price_floor: float = Field(
        default=0.01,
        gt=0,
        description="Generated prices are clamped to at least this value.",
    )
    seed: int | None = Field(
        default=None,
        description="Optional RNG seed for a reproducible price path.",
    )

    @field_validator("symbols")
    @classmethod
    def _positive_prices(cls, value: dict[str, float]) -> dict[str, float]:
        if not value:
            raise ValueError("At least one symbol must be configured.")
        bad = sorted(
            sym for sym, price in value.items() if not (price > 0 and math.isfinite(price))
        )
        if bad:
            raise ValueError(f"Starting prices must be positive and finite: {', '.join(bad)}.")
        return value


class ScheduledOrder(BaseModel):
    """An order the runner submits once the given tick has been applied."""

    at_tick: int = Field(ge=0, description="Tick index (0-based) after which to submit.")
    side: Side
    symbol: str
    quantity: int

    @field_validator("side", mode="before")
    @classmethod
    def _upper_side(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class SimulationConfig(BaseModel):
    """Top-level configuration for a simulation run, loaded from YAML.

    The run name is derived from the config file path at load time rather
    than being specified inside the YAML itself.
    """

    account: AccountConfig = Field(
        default_factory=AccountConfig,
        description="Account configuration.",
    )
    feed: FeedConfig = Field(
        default_factory=FeedConfig,
        description="Price feed configuration.",
    )
    history_length: int = Field(
        default=50,
        ge=1,
        description="Number of price points kept per symbol.",
    )
    num_ticks: int = Field(
        default=60,
        ge=1,
        description="Number of ticks the runner emits before stopping.",
    )
    orders: list[ScheduledOrder] = Field(
        default_factory=list,
        description="Orders submitted by the runner at fixed ticks.",
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load and validate a ``SimulationConfig`` from a YAML file.

        Raises ``FileNotFoundError`` if the file does not exist and
        ``ValueError`` if the content is not a valid YAML mapping.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with path.open(encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)

        if not isinstance(raw, dict):
            raise ValueError(
                f"Expected a YAML mapping in {path}, got {type(raw).__name__}."
            )

        return cls(**raw)
