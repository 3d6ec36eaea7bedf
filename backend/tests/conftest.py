"""Pytest configuration and shared fixtures."""

from decimal import Decimal

import numpy as np
import pytest

from stockwatch.config import Settings
from stockwatch.market.models import PriceState
from stockwatch.realtime.registry import ConnectionRegistry
from stockwatch.store.memory import InMemoryIdentityStore


class ScriptedRng:
    """Stands in for ``numpy.random.Generator``.

    Each ``uniform`` call returns the next scripted round of deltas. Once the
    script runs out, every call returns ``fallback`` for each ticker.
    """

    def __init__(self, *rounds, fallback: float = 0.0):
        self._rounds = [list(r) for r in rounds]
        self._fallback = fallback
        self.calls = 0

    def uniform(self, low, high, size):
        self.calls += 1
        if self._rounds:
            deltas = self._rounds.pop(0)
            assert len(deltas) == size
            return np.array(deltas, dtype=float)
        return np.full(size, self._fallback, dtype=float)


class RecordingChannel:
    """PushChannel fake that records every send."""

    def __init__(self, dead: set[str] | None = None, raising: set[str] | None = None):
        self.sent: list[tuple[str, str, dict]] = []
        self.dead = dead or set()
        self.raising = raising or set()

    async def send(self, channel_id: str, event: str, payload: dict) -> bool:
        if channel_id in self.raising:
            raise ConnectionResetError("socket went away")
        if channel_id in self.dead:
            return False
        self.sent.append((channel_id, event, payload))
        return True

    def for_channel(self, channel_id: str) -> list[tuple[str, dict]]:
        return [(event, payload) for cid, event, payload in self.sent if cid == channel_id]


def make_state(ticker: str, price: str, previous: str) -> PriceState:
    return PriceState(ticker=ticker, price=Decimal(price), previous_price=Decimal(previous))


@pytest.fixture
def scripted_rng():
    """Factory for ScriptedRng instances."""
    return ScriptedRng


@pytest.fixture
def state():
    """Factory: state("GOOG", "94.00", "100.00") -> PriceState."""
    return make_state


@pytest.fixture
def store():
    return InMemoryIdentityStore()


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def recording_channel():
    """Factory for RecordingChannel with dead / raising channel ids."""
    return RecordingChannel


@pytest.fixture
def settings():
    """Settings for tests: no login delay, no background ticks during a test."""
    return Settings(login_delay=0.0, tick_interval_ms=3_600_000, log_level="WARNING")
