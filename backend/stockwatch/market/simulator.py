"""Random-walk price simulator and the timer that drives it."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from decimal import Decimal

import numpy as np

from .cache import PriceCache
from .models import PriceState, to_cents
from .seed_prices import DEFAULT_SEED_PRICE, MAX_DELTA, PRICE_FLOOR, SEED_PRICES

logger = logging.getLogger(__name__)

TickListener = Callable[[dict[str, PriceState]], Awaitable[None]]


class RandomWalkSimulator:
    """Additive random walk over a fixed set of tickers.

    Math:
        P(t+1) = max(floor, round_cents(P(t) + U(-max_delta, max_delta)))

    Each ticker draws its own delta, and change / percent change are computed
    against that ticker's own previous price, so volatility is independent
    per ticker. The floor keeps percent changes meaningful (no zero or
    negative denominators).
    """

    def __init__(
        self,
        tickers: Iterable[str],
        rng: np.random.Generator | None = None,
        max_delta: float = MAX_DELTA,
        floor: Decimal = PRICE_FLOOR,
        seed_prices: Mapping[str, Decimal] | None = None,
    ) -> None:
        self._tickers: tuple[str, ...] = tuple(tickers)
        self._rng = rng if rng is not None else np.random.default_rng()
        self._max_delta = max_delta
        self._floor = floor
        seeds = SEED_PRICES if seed_prices is None else seed_prices
        self._states: dict[str, PriceState] = {
            ticker: PriceState.flat(ticker, seeds.get(ticker, DEFAULT_SEED_PRICE))
            for ticker in self._tickers
        }

    # --- Public API ---

    def step(self) -> dict[str, PriceState]:
        """Advance every ticker by one tick and return the new batch.

        The next batch is built completely before it replaces the current one.
        """
        if not self._tickers:
            return {}

        deltas = self._rng.uniform(-self._max_delta, self._max_delta, len(self._tickers))

        batch: dict[str, PriceState] = {}
        for ticker, delta in zip(self._tickers, deltas):
            previous = self._states[ticker].price
            price = max(self._floor, to_cents(previous + Decimal(str(float(delta)))))
            batch[ticker] = PriceState(ticker=ticker, price=price, previous_price=previous)

        self._states = batch
        return dict(batch)

    def states(self) -> dict[str, PriceState]:
        """The current batch of quotes."""
        return dict(self._states)

    def get_price(self, ticker: str) -> Decimal | None:
        """Current price for a ticker, or None if not simulated."""
        state = self._states.get(ticker)
        return state.price if state else None

    @property
    def tickers(self) -> tuple[str, ...]:
        return self._tickers


class MarketTicker:
    """Drives the simulator on a fixed period and notifies tick listeners.

    Runs a background asyncio task that, once per `interval` seconds, steps
    the simulator, publishes the batch to the PriceCache, then awaits every
    listener with that batch. A tick always finishes before the next begins;
    if a tick overruns the interval, the next one starts right after it.
    """

    def __init__(
        self,
        simulator: RandomWalkSimulator,
        price_cache: PriceCache,
        interval: float = 1.0,
    ) -> None:
        self._sim = simulator
        self._cache = price_cache
        self._interval = interval
        self._listeners: list[TickListener] = []
        self._task: asyncio.Task | None = None

    def add_listener(self, listener: TickListener) -> None:
        """Call ``listener(batch)`` after every published tick."""
        self._listeners.append(listener)

    def seed(self) -> None:
        """Publish the simulator's current quotes without advancing them."""
        self._cache.publish(self._sim.states())

    async def start(self) -> None:
        if self.running:
            return
        # Seed the cache so readers have prices before the first tick
        self.seed()
        self._task = asyncio.create_task(self._run_loop(), name="market-ticker")
        logger.info(
            "Market ticker started: %d tickers, %.3fs interval",
            len(self._sim.tickers),
            self._interval,
        )

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("Market ticker stopped")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> dict[str, PriceState]:
        """Run one tick: step, publish, notify. Returns the published batch."""
        batch = self._sim.step()
        self._cache.publish(batch)
        for listener in self._listeners:
            try:
                await listener(batch)
            except Exception:
                logger.exception("Tick listener %r failed", listener)
        return batch

    async def _run_loop(self) -> None:
        """Core loop: tick, then sleep for whatever is left of the interval."""
        loop = asyncio.get_running_loop()
        while True:
            started = loop.time()
            try:
                await self.tick()
            except Exception:
                logger.exception("Market tick failed")
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self._interval - elapsed))
