"""Tests for configuration loading and the trade/portfolio data contracts."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from models.config import DEFAULT_SYMBOLS, FeedConfig, ScheduledOrder, SimulationConfig
from models.portfolio import Position
from models.trade import Side, TradeRecord


class TestConfig:
    def test_defaults(self):
        config = SimulationConfig()
        assert config.account.initial_capital == 10_000.0
        assert config.feed.symbols == DEFAULT_SYMBOLS
        assert config.feed.tick_interval_seconds == 1.0
        assert config.history_length == 50
        assert config.orders == []

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "demo.yaml"
        path.write_text(
            "account:\n"
            "  initial_capital: 5000\n"
            "feed:\n"
            "  symbols: {AAPL: 150.0}\n"
            "  seed: 1\n"
            "num_ticks: 5\n"
            "orders:\n"
            "  - {at_tick: 2, side: sell, symbol: AAPL, quantity: 3}\n",
            encoding="utf-8",
        )
        config = SimulationConfig.from_yaml(path)
        assert config.account.initial_capital == 5_000.0
        assert config.feed.symbols == {"AAPL": 150.0}
        assert config.num_ticks == 5
        assert config.orders[0].side is Side.SELL

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SimulationConfig.from_yaml(tmp_path / "missing.yaml")

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ValueError):
            SimulationConfig.from_yaml(path)

    def test_rejects_non_positive_prices(self):
        with pytest.raises(ValidationError):
            FeedConfig(symbols={"AAPL": 0.0})
        with pytest.raises(ValidationError):
            FeedConfig(symbols={})
        with pytest.raises(ValidationError):
            FeedConfig(symbols={"AAPL": float("nan")})

    def test_rejects_non_positive_capital(self):
        with pytest.raises(ValidationError):
            SimulationConfig(account={"initial_capital": 0})

    def test_scheduled_order_side(self):
        assert ScheduledOrder(at_tick=0, side="buy", symbol="AAPL", quantity=1).side is Side.BUY
        with pytest.raises(ValidationError):
            ScheduledOrder(at_tick=0, side="hold", symbol="AAPL", quantity=1)


class TestContracts:
    def test_trade_record_is_immutable(self):
        trade = TradeRecord(
            trade_id="abc123",
            side=Side.BUY,
            symbol="AAPL",
            quantity=10,
            price=150.0,
            timestamp=datetime(2025, 3, 15, tzinfo=timezone.utc),
        )
        assert trade.notional == pytest.approx(1_500.0)
        with pytest.raises(ValidationError):
            trade.quantity = 20

    def test_position_derived_fields(self):
        position = Position(symbol="AAPL", quantity=20, average_cost=110.0, last_price=150.0)
        assert position.unrealized_pnl == pytest.approx(800.0)
        assert position.market_value == pytest.approx(3_000.0)
        assert position.cost_basis == pytest.approx(2_200.0)
        assert position.model_dump()["unrealized_pnl"] == pytest.approx(800.0)

    @pytest.mark.parametrize(
        "fields",
        [
            {"quantity": 0},
            {"quantity": -3},
            {"average_cost": 0.0},
            {"last_price": -1.0},
            {"last_price": float("nan")},
            {"average_cost": float("inf")},
        ],
    )
    def test_position_bounds(self, fields):
        values = {"symbol": "AAPL", "quantity": 10, "average_cost": 100.0, "last_price": 100.0}
        values.update(fields)
        with pytest.raises(ValidationError):
            Position(**values)
