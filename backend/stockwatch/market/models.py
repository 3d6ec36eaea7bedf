"""Data models for simulated prices."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_cents(value: Decimal) -> Decimal:
    """Round a Decimal to two places, half-up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_cents(value: Decimal) -> str:
    """Fixed two-decimal string, e.g. ``Decimal("-6") -> "-6.00"``."""
    return f"{to_cents(value):.2f}"


@dataclass(frozen=True, slots=True)
class PriceState:
    """Immutable quote for a single ticker as of the latest tick."""

    ticker: str
    price: Decimal
    previous_price: Decimal

    @property
    def change(self) -> Decimal:
        """Absolute change from the previous tick's price."""
        return self.price - self.previous_price

    @property
    def change_percent(self) -> Decimal:
        """Percentage change from the previous tick's price (full precision)."""
        if self.previous_price == 0:
            return Decimal(0)
        return self.change * 100 / self.previous_price

    @property
    def direction(self) -> str:
        """'up', 'down', or 'flat'."""
        if self.price > self.previous_price:
            return "up"
        elif self.price < self.previous_price:
            return "down"
        return "flat"

    def to_wire(self) -> dict[str, str]:
        """Serialize for the ``stockUpdate`` push event."""
        return {
            "price": format_cents(self.price),
            "change": format_cents(self.change),
            "changePercent": format_cents(self.change_percent),
        }

    @classmethod
    def flat(cls, ticker: str, price: Decimal) -> PriceState:
        """A quote with no movement, used for seeding."""
        return cls(ticker=ticker, price=price, previous_price=price)
