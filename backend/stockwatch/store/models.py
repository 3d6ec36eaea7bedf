"""Per-user records kept by the identity store."""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

DEFAULT_STARTING_CASH = Decimal("100000")
MAX_EMAIL_LENGTH = 100


def normalize_email(email: str | None) -> str:
    """Canonical store key for an email address: trimmed, lowercased, length-capped."""
    if not email:
        return ""
    return email.strip().lower()[:MAX_EMAIL_LENGTH]


@dataclass(slots=True)
class AlertThreshold:
    """Price levels that raise an alert for one ticker. Either side may be unset."""

    ticker: str
    above: Decimal | None = None
    below: Decimal | None = None

    def to_dict(self) -> dict:
        result: dict = {"ticker": self.ticker}
        if self.above is not None:
            result["above"] = float(self.above)
        if self.below is not None:
            result["below"] = float(self.below)
        return result


@dataclass(slots=True)
class Holding:
    ticker: str
    quantity: int
    avg_price: Decimal

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "quantity": self.quantity,
            "avgPrice": float(self.avg_price),
        }


@dataclass(slots=True)
class Portfolio:
    """Virtual cash balance plus share holdings."""

    cash_balance: Decimal = DEFAULT_STARTING_CASH
    holdings: list[Holding] = field(default_factory=list)

    def holding(self, ticker: str) -> Holding | None:
        for holding in self.holdings:
            if holding.ticker == ticker:
                return holding
        return None

    def to_dict(self) -> dict:
        return {
            "cashBalance": float(self.cash_balance),
            "holdings": [h.to_dict() for h in self.holdings],
        }


@dataclass(frozen=True, slots=True)
class WatchProfile:
    """What the fan-out engine needs to know about one user on each tick."""

    subscriptions: tuple[str, ...] = ()
    thresholds: dict[str, AlertThreshold] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        subscriptions: Iterable[str] | None,
        thresholds: Iterable[AlertThreshold | None] | None,
    ) -> WatchProfile:
        """Normalize possibly-missing user state. ``None`` means empty."""
        by_ticker: dict[str, AlertThreshold] = {}
        for threshold in thresholds or ():
            if threshold is not None:
                by_ticker[threshold.ticker] = threshold
        return cls(subscriptions=tuple(subscriptions or ()), thresholds=by_ticker)


@dataclass(slots=True)
class UserRecord:
    email: str
    subscriptions: list[str] = field(default_factory=list)
    portfolio: Portfolio = field(default_factory=Portfolio)
    thresholds: list[AlertThreshold] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)  # Unix seconds

    def watch_profile(self) -> WatchProfile:
        return WatchProfile.build(self.subscriptions, self.thresholds)

    def alerts_dict(self) -> dict:
        return {"thresholds": [t.to_dict() for t in self.thresholds]}
