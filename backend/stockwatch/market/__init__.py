"""Simulated market data for Stockwatch.

Public API:
    PriceState          - Immutable per-ticker quote dataclass
    PriceCache          - Thread-safe table of the latest published batch
    RandomWalkSimulator - Advances the fixed ticker set one tick at a time
    MarketTicker        - Timer that steps the simulator and notifies listeners
    SUPPORTED_TICKERS   - The fixed ticker set
"""

from .cache import PriceCache
from .models import PriceState
from .seed_prices import SUPPORTED_TICKERS
from .simulator import MarketTicker, RandomWalkSimulator

__all__ = [
    "PriceState",
    "PriceCache",
    "RandomWalkSimulator",
    "MarketTicker",
    "SUPPORTED_TICKERS",
]
