"""Supported tickers and random-walk parameters for the price simulator."""

from decimal import Decimal

# The fixed set of tickers users can subscribe to, alert on, and trade
SUPPORTED_TICKERS: tuple[str, ...] = ("GOOG", "TSLA", "AMZN", "META", "NVDA")

# Starting prices for each supported ticker
SEED_PRICES: dict[str, Decimal] = {
    "GOOG": Decimal("175.00"),
    "TSLA": Decimal("250.00"),
    "AMZN": Decimal("185.00"),
    "META": Decimal("500.00"),
    "NVDA": Decimal("800.00"),
}

# Fallback for a ticker without a seed price
DEFAULT_SEED_PRICE = Decimal("100.00")

# Each tick moves a price by a uniform draw in [-MAX_DELTA, MAX_DELTA)
MAX_DELTA = 5.0

# Simulated prices never drop below this
PRICE_FLOOR = Decimal("10.00")
