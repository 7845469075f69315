"""Tests for the random-walk and scripted price feeds."""

import pytest

from models.config import FeedConfig
from simulation.price_feed import RandomWalkFeed, ScriptedPriceFeed


class TestRandomWalkFeed:
    def test_moves_stay_within_bounds(self):
        feed = RandomWalkFeed({"AAPL": 100.0, "SPY": 400.0}, max_change=0.02, seed=7)
        previous = feed.prices
        for _ in range(100):
            current = feed.next_prices()
            for symbol, price in current.items():
                assert price > 0
                assert abs(price / previous[symbol] - 1) <= 0.02 + 1e-12
            previous = current

    def test_clamps_to_floor(self):
        feed = RandomWalkFeed({"PENNY": 0.01}, max_change=0.5, price_floor=0.01, seed=1)
        for _ in range(200):
            assert feed.next_prices()["PENNY"] >= 0.01

    def test_seed_is_reproducible(self):
        a = RandomWalkFeed({"AAPL": 150.0}, seed=42)
        b = RandomWalkFeed({"AAPL": 150.0}, seed=42)
        assert [a.next_prices() for _ in range(5)] == [b.next_prices() for _ in range(5)]

    def test_reset_replays_path(self):
        feed = RandomWalkFeed({"AAPL": 150.0}, seed=3)
        first = [feed.next_prices() for _ in range(3)]
        feed.reset()
        assert feed.prices == {"AAPL": 150.0}
        assert [feed.next_prices() for _ in range(3)] == first

    def test_from_config(self):
        feed = RandomWalkFeed.from_config(FeedConfig(symbols={"TSLA": 185.3}, seed=0))
        assert set(feed.next_prices()) == {"TSLA"}

    def test_rejects_non_positive_floor(self):
        with pytest.raises(ValueError):
            RandomWalkFeed({"AAPL": 1.0}, price_floor=0.0)


class TestScriptedPriceFeed:
    def test_replays_then_holds_last(self):
        feed = ScriptedPriceFeed([{"AAPL": 150.0}, {"AAPL": 160.0}])
        assert feed.next_prices() == {"AAPL": 150.0}
        assert feed.next_prices() == {"AAPL": 160.0}
        assert feed.next_prices() == {"AAPL": 160.0}

    def test_requires_steps(self):
        with pytest.raises(ValueError):
            ScriptedPriceFeed([])
