"""HTTP routes. Each module exposes a router factory taking its collaborators."""

from .auth import create_auth_router
from .portfolio import create_portfolio_router
from .watchlist import create_watchlist_router

__all__ = [
    "create_auth_router",
    "create_portfolio_router",
    "create_watchlist_router",
]
