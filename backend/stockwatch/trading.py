"""Virtual buy/sell execution against a user's portfolio."""

from __future__ import annotations

import copy
from decimal import Decimal

from .store.models import Holding, Portfolio

BUY = "buy"
SELL = "sell"


class TradeError(ValueError):
    """The trade was rejected. The message is safe to show to the user."""


class InsufficientFundsError(TradeError):
    def __init__(self) -> None:
        super().__init__("Insufficient virtual balance")


class InsufficientSharesError(TradeError):
    def __init__(self) -> None:
        super().__init__("Not enough shares to sell")


def execute_trade(
    portfolio: Portfolio,
    ticker: str,
    side: str,
    quantity: int,
    price: Decimal,
) -> Portfolio:
    """Fill ``quantity`` shares of ``ticker`` at ``price``. Returns a new portfolio.

    Buys debit cash and merge into any existing holding at a weighted average
    price. Sells credit cash and drop the holding once it reaches zero.
    """
    if side not in (BUY, SELL):
        raise TradeError("Invalid trade side")
    if quantity <= 0:
        raise TradeError("Quantity must be a positive integer")

    result = copy.deepcopy(portfolio)
    trade_value = price * quantity
    holding = result.holding(ticker)

    if side == BUY:
        if result.cash_balance < trade_value:
            raise InsufficientFundsError()
        result.cash_balance -= trade_value
        if holding is None:
            result.holdings.append(Holding(ticker=ticker, quantity=quantity, avg_price=price))
        else:
            total_cost = holding.avg_price * holding.quantity + trade_value
            holding.quantity += quantity
            holding.avg_price = total_cost / holding.quantity
    else:
        if holding is None or holding.quantity < quantity:
            raise InsufficientSharesError()
        holding.quantity -= quantity
        result.cash_balance += trade_value
        if holding.quantity == 0:
            result.holdings = [h for h in result.holdings if h.ticker != ticker]

    return result
