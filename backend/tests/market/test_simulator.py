"""Tests for RandomWalkSimulator."""

from decimal import Decimal

import numpy as np

from stockwatch.market.seed_prices import PRICE_FLOOR, SEED_PRICES, SUPPORTED_TICKERS
from stockwatch.market.simulator import RandomWalkSimulator


class TestRandomWalkSimulator:
    """Unit tests for the random-walk price simulator."""

    def test_step_returns_all_tickers(self):
        """Test that step() returns prices for all tickers."""
        sim = RandomWalkSimulator(SUPPORTED_TICKERS)
        result = sim.step()
        assert set(result) == set(SUPPORTED_TICKERS)

    def test_initial_prices_match_seeds(self):
        """Before any step, each ticker sits flat at its seed price."""
        sim = RandomWalkSimulator(["GOOG", "TSLA"])
        states = sim.states()
        assert states["GOOG"].price == SEED_PRICES["GOOG"]
        assert states["GOOG"].change == 0

    def test_unknown_ticker_gets_default_seed(self):
        sim = RandomWalkSimulator(["ZZZZ"])
        assert sim.get_price("ZZZZ") == Decimal("100.00")

    def test_scripted_drop(self, scripted_rng):
        """Previous 100.00 with delta -6.00 gives 94.00, change -6.00, -6%."""
        sim = RandomWalkSimulator(
            ["GOOG"], rng=scripted_rng([-6.0]), seed_prices={"GOOG": Decimal("100.00")}
        )
        state = sim.step()["GOOG"]
        assert state.price == Decimal("94.00")
        assert state.change == Decimal("-6.00")
        assert state.change_percent == Decimal(-6)

    def test_change_is_against_previous_tick(self, scripted_rng):
        """Each tick's change is computed from the prior tick, not the seed."""
        sim = RandomWalkSimulator(["GOOG"], rng=scripted_rng([5.0], [-2.5]))
        first = sim.step()["GOOG"]
        second = sim.step()["GOOG"]
        assert first.price == Decimal("180.00")
        assert second.previous_price == first.price
        assert second.price == Decimal("177.50")
        assert second.change_percent == second.change * 100 / first.price

    def test_deltas_are_per_ticker(self, scripted_rng):
        """Each ticker gets its own draw."""
        sim = RandomWalkSimulator(["GOOG", "TSLA"], rng=scripted_rng([1.0, -1.0]))
        result = sim.step()
        assert result["GOOG"].change == Decimal("1.00")
        assert result["TSLA"].change == Decimal("-1.00")

    def test_prices_rounded_to_cents(self, scripted_rng):
        """Prices carry at most two decimal places."""
        sim = RandomWalkSimulator(["GOOG"], rng=scripted_rng([1.23456]))
        state = sim.step()["GOOG"]
        assert state.price == Decimal("176.23")
        assert state.price.as_tuple().exponent == -2

    def test_floor(self, scripted_rng):
        """A large drop stops at the floor; change reflects the floored price."""
        sim = RandomWalkSimulator(["GOOG"], rng=scripted_rng([-1000.0], [-3.0]))
        state = sim.step()["GOOG"]
        assert state.price == PRICE_FLOOR
        assert state.change == PRICE_FLOOR - SEED_PRICES["GOOG"]
        again = sim.step()["GOOG"]
        assert again.price == PRICE_FLOOR
        assert again.change == 0

    def test_prices_never_below_floor(self):
        """Random walk never drops below the floor."""
        sim = RandomWalkSimulator(SUPPORTED_TICKERS, rng=np.random.default_rng(7), max_delta=50.0)
        for _ in range(2_000):
            for state in sim.step().values():
                assert state.price >= PRICE_FLOOR

    def test_moves_stay_within_max_delta(self):
        """Off the floor, a tick never moves a price by more than max_delta (plus rounding)."""
        sim = RandomWalkSimulator(SUPPORTED_TICKERS, rng=np.random.default_rng(11))
        for _ in range(500):
            for state in sim.step().values():
                if state.price > PRICE_FLOOR:
                    assert abs(state.change) <= Decimal("5.01")

    def test_step_replaces_batch(self):
        """A batch returned by step() is not mutated by later steps."""
        sim = RandomWalkSimulator(["GOOG"], rng=np.random.default_rng(3))
        first = sim.step()
        snapshot = dict(first)
        sim.step()
        assert first == snapshot

    def test_empty_step(self):
        """Test stepping with no tickers."""
        sim = RandomWalkSimulator([])
        assert sim.step() == {}

    def test_get_price_returns_none_for_unknown(self):
        """Test that get_price returns None for unknown ticker."""
        sim = RandomWalkSimulator(["GOOG"])
        assert sim.get_price("UNKNOWN") is None
