"""Per-user message building: the ``stockUpdate`` view and price alerts."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from ..market.models import PriceState, to_cents
from ..store.models import AlertThreshold, WatchProfile

STOCK_UPDATE = "stockUpdate"
PRICE_ALERT = "priceAlert"

SUDDEN_CHANGE = "sudden-change"
THRESHOLD_ABOVE = "threshold-above"
THRESHOLD_BELOW = "threshold-below"

# abs(percent change) strictly above this raises a sudden-change alert
SUDDEN_CHANGE_PERCENT = Decimal(5)

Message = tuple[str, dict]


def _number(value: Decimal) -> float:
    return float(to_cents(value))


def evaluate_alerts(state: PriceState, threshold: AlertThreshold | None = None) -> list[dict]:
    """Alerts that fire for ``state`` on this tick.

    Checked in order: sudden change, threshold above, threshold below. Several
    may fire at once. Conditions are level-triggered: an alert repeats on
    every tick for as long as its condition holds.

    The sudden-change test uses the full-precision percent, while the payload
    reports it rounded to cents. A 5.004% move therefore fires with a
    ``changePercent`` of 5.0.
    """
    alerts: list[dict] = []

    change_percent = state.change_percent
    if abs(change_percent) > SUDDEN_CHANGE_PERCENT:
        alerts.append(
            {
                "ticker": state.ticker,
                "type": SUDDEN_CHANGE,
                "changePercent": _number(change_percent),
                "price": _number(state.price),
            }
        )

    if threshold is not None:
        if threshold.above is not None and state.price >= threshold.above:
            alerts.append(
                {
                    "ticker": state.ticker,
                    "type": THRESHOLD_ABOVE,
                    "threshold": float(threshold.above),
                    "price": _number(state.price),
                }
            )
        if threshold.below is not None and state.price <= threshold.below:
            alerts.append(
                {
                    "ticker": state.ticker,
                    "type": THRESHOLD_BELOW,
                    "threshold": float(threshold.below),
                    "price": _number(state.price),
                }
            )

    return alerts


def build_stock_update(
    subscriptions: tuple[str, ...],
    prices: Mapping[str, PriceState],
) -> dict[str, dict[str, str]]:
    """Wire view of ``prices`` restricted to ``subscriptions``. Unknown tickers are skipped."""
    return {ticker: prices[ticker].to_wire() for ticker in subscriptions if ticker in prices}


def build_messages(profile: WatchProfile, prices: Mapping[str, PriceState]) -> list[Message]:
    """Everything one user should receive for this tick, in send order.

    Empty when the user has no subscriptions. Otherwise one ``stockUpdate``
    followed by zero or more ``priceAlert`` messages.
    """
    if not profile.subscriptions:
        return []

    alerts: list[dict] = []
    for ticker in profile.subscriptions:
        state = prices.get(ticker)
        if state is None:
            continue
        alerts.extend(evaluate_alerts(state, profile.thresholds.get(ticker)))

    messages: list[Message] = [(STOCK_UPDATE, build_stock_update(profile.subscriptions, prices))]
    messages.extend((PRICE_ALERT, alert) for alert in alerts)
    return messages
