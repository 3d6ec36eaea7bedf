"""Integration tests for MarketTicker."""

import asyncio

import pytest

from stockwatch.market.cache import PriceCache
from stockwatch.market.simulator import MarketTicker, RandomWalkSimulator


@pytest.mark.asyncio
class TestMarketTicker:
    """Integration tests for the tick loop."""

    async def test_start_populates_cache(self):
        """Test that start() immediately populates the cache."""
        cache = PriceCache()
        ticker = MarketTicker(RandomWalkSimulator(["GOOG", "TSLA"]), cache, interval=10)
        await ticker.start()

        assert cache.get("GOOG") is not None
        assert cache.get("TSLA") is not None

        await ticker.stop()

    async def test_prices_update_over_time(self):
        """Test that batches are published periodically."""
        cache = PriceCache()
        ticker = MarketTicker(RandomWalkSimulator(["GOOG"]), cache, interval=0.02)
        await ticker.start()

        initial_version = cache.version
        await asyncio.sleep(0.15)
        assert cache.version > initial_version + 2

        await ticker.stop()

    async def test_stop_is_clean(self):
        """Test that stop() is clean and idempotent."""
        ticker = MarketTicker(RandomWalkSimulator(["GOOG"]), PriceCache(), interval=0.05)
        await ticker.start()
        assert ticker.running
        await ticker.stop()
        assert not ticker.running
        await ticker.stop()

    async def test_start_twice_keeps_one_loop(self):
        """A second start() is a no-op while the loop is running."""
        ticker = MarketTicker(RandomWalkSimulator(["GOOG"]), PriceCache(), interval=10)
        await ticker.start()
        task = ticker._task

        await ticker.start()
        assert ticker._task is task
        assert ticker.running

        await ticker.stop()
        assert task.done()

    async def test_tick_publishes_then_notifies(self, scripted_rng):
        """Listeners see the batch that is already in the cache."""
        cache = PriceCache()
        sim = RandomWalkSimulator(["GOOG"], rng=scripted_rng([3.0]))
        ticker = MarketTicker(sim, cache, interval=10)
        seen = []

        async def listener(batch):
            seen.append((batch, cache.get_all()))

        ticker.add_listener(listener)
        batch = await ticker.tick()

        assert len(seen) == 1
        assert seen[0][0] == batch
        assert seen[0][1] == batch

    async def test_listener_failure_does_not_stop_others(self):
        """A raising listener is logged; later listeners still run."""
        ticker = MarketTicker(RandomWalkSimulator(["GOOG"]), PriceCache(), interval=10)
        calls = []

        async def broken(batch):
            raise RuntimeError("boom")

        async def healthy(batch):
            calls.append(batch)

        ticker.add_listener(broken)
        ticker.add_listener(healthy)
        await ticker.tick()
        assert len(calls) == 1

    async def test_loop_survives_failing_listener(self):
        """The loop keeps ticking across listener failures."""
        cache = PriceCache()
        ticker = MarketTicker(RandomWalkSimulator(["GOOG"]), cache, interval=0.02)

        async def broken(batch):
            raise RuntimeError("boom")

        ticker.add_listener(broken)
        await ticker.start()
        start_version = cache.version
        await asyncio.sleep(0.12)

        assert ticker.running
        assert cache.version > start_version + 1

        await ticker.stop()

    async def test_ticks_do_not_overlap(self):
        """A slow listener delays the next tick instead of overlapping it."""
        ticker = MarketTicker(RandomWalkSimulator(["GOOG"]), PriceCache(), interval=0.01)
        active = 0
        max_active = 0

        async def slow(batch):
            nonlocal active, max_active
            active += 1
            max_active = max(max_active, active)
            await asyncio.sleep(0.03)
            active -= 1

        ticker.add_listener(slow)
        await ticker.start()
        await asyncio.sleep(0.15)
        await ticker.stop()

        assert max_active == 1
