"""Supported tickers, subscriptions and alert threshold routes."""
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator

from ..config import Settings
from ..market.seed_prices import SUPPORTED_TICKERS
from ..store.interface import IdentityStore
from .session import session_dependency


class TickerRequest(BaseModel):
    ticker: str


class AlertRequest(BaseModel):
    """Threshold config for one ticker. Omit both levels to clear it."""

    ticker: str
    above: Optional[Decimal] = None
    below: Optional[Decimal] = None

    @field_validator("above", "below", mode="before")
    @classmethod
    def blank_is_unset(cls, v):
        # Browser forms submit empty inputs as ""
        if isinstance(v, str) and not v.strip():
            return None
        return v


def require_supported(ticker: str) -> str:
    if ticker not in SUPPORTED_TICKERS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unsupported stock ticker")
    return ticker


def create_watchlist_router(store: IdentityStore, settings: Settings) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["watchlist"])
    current_email = session_dependency(settings)

    @router.get("/stocks")
    async def list_stocks():
        return {"stocks": list(SUPPORTED_TICKERS)}

    @router.post("/subscribe")
    async def subscribe(body: TickerRequest, email: str = Depends(current_email)):
        ticker = require_supported(body.ticker)
        subscriptions = await store.subscribe(email, ticker)
        return {"success": True, "subscriptions": subscriptions}

    @router.post("/unsubscribe")
    async def unsubscribe(body: TickerRequest, email: str = Depends(current_email)):
        subscriptions = await store.unsubscribe(email, body.ticker)
        return {"success": True, "subscriptions": subscriptions}

    @router.get("/alerts")
    async def get_alerts(email: str = Depends(current_email)):
        user = await store.get(email)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user.alerts_dict()

    @router.post("/alerts")
    async def set_alert(body: AlertRequest, email: str = Depends(current_email)):
        ticker = require_supported(body.ticker)
        thresholds = await store.set_alert_threshold(email, ticker, body.above, body.below)
        return {"thresholds": [t.to_dict() for t in thresholds]}

    return router
