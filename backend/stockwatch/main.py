"""FastAPI application assembly."""

from __future__ import annotations

import logging
import os
import sys
from contextlib import asynccontextmanager

import numpy as np
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .api import create_auth_router, create_portfolio_router, create_watchlist_router
from .config import Settings
from .market import SUPPORTED_TICKERS, MarketTicker, PriceCache, RandomWalkSimulator
from .realtime import ConnectionRegistry, FanoutEngine, WebSocketHub, create_stream_router
from .store import IdentityStore, InMemoryIdentityStore, StoreUnavailableError, UserNotFoundError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


async def _store_unavailable(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.warning("Store unavailable during %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage is temporarily unavailable. Please try again."},
    )


async def _user_not_found(request: Request, exc: UserNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "User not found"})


def create_app(
    settings: Settings | None = None,
    store: IdentityStore | None = None,
    rng: np.random.Generator | None = None,
) -> FastAPI:
    """Wire the simulator, fan-out engine, push channel and HTTP routes together.

    The price cache is seeded immediately; the tick loop runs only while the
    app's lifespan is active.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)
    if store is None:
        store = InMemoryIdentityStore(starting_cash=settings.starting_cash)

    price_cache = PriceCache()
    simulator = RandomWalkSimulator(SUPPORTED_TICKERS, rng=rng)
    ticker = MarketTicker(simulator, price_cache, interval=settings.tick_interval)
    ticker.seed()

    registry = ConnectionRegistry()
    hub = WebSocketHub()
    engine = FanoutEngine(
        registry, store, hub, fetch_timeout=settings.fetch_timeout, send_timeout=settings.send_timeout
    )
    ticker.add_listener(engine.broadcast)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await ticker.start()
        yield
        await ticker.stop()

    app = FastAPI(title="Stockwatch", lifespan=lifespan)

    limiter = Limiter(key_func=get_remote_address)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(StoreUnavailableError, _store_unavailable)
    app.add_exception_handler(UserNotFoundError, _user_not_found)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(create_auth_router(store, settings, limiter))
    app.include_router(create_watchlist_router(store, settings))
    app.include_router(create_portfolio_router(store, price_cache, settings))
    app.include_router(create_stream_router(hub, registry, engine, price_cache))

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "ticker_running": ticker.running,
            "connections": len(registry),
            "prices_version": price_cache.version,
        }

    # Handy for tests and debugging
    app.state.settings = settings
    app.state.store = store
    app.state.price_cache = price_cache
    app.state.market_ticker = ticker
    app.state.registry = registry
    app.state.hub = hub
    app.state.fanout = engine

    logger.info("Stockwatch app created: %d tickers", len(SUPPORTED_TICKERS))
    return app


def run() -> None:
    """Console entry point: serve with uvicorn."""
    import uvicorn

    uvicorn.run(
        create_app(),
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
    )
