"""Virtual portfolio and trade routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from ..config import Settings
from ..market.cache import PriceCache
from ..store.interface import IdentityStore
from ..trading import TradeError, execute_trade
from .session import session_dependency
from .watchlist import require_supported

logger = logging.getLogger(__name__)


class TradeRequest(BaseModel):
    ticker: str
    side: str
    quantity: int


def create_portfolio_router(store: IdentityStore, price_cache: PriceCache, settings: Settings) -> APIRouter:
    """Create the portfolio router.

    Trades fill immediately at the latest simulated price. Read, fill and
    save are separate steps with no locking across them.
    """
    router = APIRouter(prefix="/api", tags=["portfolio"])
    current_email = session_dependency(settings)

    @router.get("/portfolio")
    async def get_portfolio(email: str = Depends(current_email)):
        user = await store.get(email)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user.portfolio.to_dict()

    @router.post("/trade")
    async def trade(body: TradeRequest, email: str = Depends(current_email)):
        ticker = require_supported(body.ticker)
        price = price_cache.get_price(ticker)
        if price is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No price available for this ticker")

        user = await store.get(email)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        try:
            portfolio = execute_trade(user.portfolio, ticker, body.side, body.quantity, price)
        except TradeError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

        saved = await store.save_portfolio(email, portfolio)
        logger.info("Trade filled for %s: %s %d %s @ %s", email, body.side, body.quantity, ticker, price)
        return saved.to_dict()

    return router
