"""Thread-safe in-memory price table."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from threading import Lock

from .models import PriceState


class PriceCache:
    """Holds the latest published batch of quotes, one per supported ticker.

    Writer: MarketTicker, once per tick, always with a complete batch.
    Readers: fan-out engine, WebSocket register handler, trade execution.

    A batch is swapped in as a single replacement, so a reader sees either the
    previous tick's quotes or the new tick's quotes, never a mix of both.
    """

    def __init__(self) -> None:
        self._prices: dict[str, PriceState] = {}
        self._lock = Lock()
        self._version: int = 0  # Bumped once per published batch

    def publish(self, batch: Mapping[str, PriceState]) -> None:
        """Replace the whole price table with ``batch``."""
        snapshot = dict(batch)
        with self._lock:
            self._prices = snapshot
            self._version += 1

    def get(self, ticker: str) -> PriceState | None:
        """Latest quote for a single ticker, or None if unknown."""
        with self._lock:
            return self._prices.get(ticker)

    def get_all(self) -> dict[str, PriceState]:
        """Point-in-time copy of the current batch."""
        with self._lock:
            return dict(self._prices)

    def get_price(self, ticker: str) -> Decimal | None:
        """Convenience: get just the price, or None."""
        state = self.get(ticker)
        return state.price if state else None

    @property
    def version(self) -> int:
        """Number of batches published so far."""
        return self._version

    def __len__(self) -> int:
        with self._lock:
            return len(self._prices)

    def __contains__(self, ticker: str) -> bool:
        with self._lock:
            return ticker in self._prices
