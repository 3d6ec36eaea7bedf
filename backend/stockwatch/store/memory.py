"""Process-local identity store. State resets on restart."""

from __future__ import annotations

import copy
import logging
from decimal import Decimal
from threading import Lock

from .interface import IdentityStore, StoreUnavailableError, UserNotFoundError
from .models import DEFAULT_STARTING_CASH, AlertThreshold, Portfolio, UserRecord, WatchProfile

logger = logging.getLogger(__name__)


class InMemoryIdentityStore(IdentityStore):
    """IdentityStore backed by a dict.

    Setting ``available = False`` makes every call raise
    StoreUnavailableError, which is how outages are exercised.
    """

    def __init__(self, starting_cash: Decimal = DEFAULT_STARTING_CASH) -> None:
        self._users: dict[str, UserRecord] = {}
        self._lock = Lock()
        self._starting_cash = starting_cash
        self.available = True

    async def find_or_create(self, email: str) -> UserRecord:
        self._check_available()
        with self._lock:
            user = self._users.get(email)
            if user is None:
                user = UserRecord(email=email, portfolio=Portfolio(cash_balance=self._starting_cash))
                self._users[email] = user
                logger.info("Created user %s", email)
            return copy.deepcopy(user)

    async def get(self, email: str) -> UserRecord | None:
        self._check_available()
        with self._lock:
            user = self._users.get(email)
            return copy.deepcopy(user) if user else None

    async def get_watch_profile(self, email: str) -> WatchProfile | None:
        self._check_available()
        with self._lock:
            user = self._users.get(email)
            if user is None:
                return None
            return copy.deepcopy(user.watch_profile())

    async def subscribe(self, email: str, ticker: str) -> list[str]:
        self._check_available()
        with self._lock:
            user = self._require(email)
            if ticker not in user.subscriptions:
                user.subscriptions.append(ticker)
            return list(user.subscriptions)

    async def unsubscribe(self, email: str, ticker: str) -> list[str]:
        self._check_available()
        with self._lock:
            user = self._require(email)
            user.subscriptions = [t for t in user.subscriptions if t != ticker]
            return list(user.subscriptions)

    async def set_alert_threshold(
        self,
        email: str,
        ticker: str,
        above: Decimal | None,
        below: Decimal | None,
    ) -> list[AlertThreshold]:
        self._check_available()
        with self._lock:
            user = self._require(email)
            thresholds = [t for t in user.thresholds if t.ticker != ticker]
            if above is not None or below is not None:
                thresholds.append(AlertThreshold(ticker=ticker, above=above, below=below))
            user.thresholds = thresholds
            return copy.deepcopy(thresholds)

    async def save_portfolio(self, email: str, portfolio: Portfolio) -> Portfolio:
        self._check_available()
        with self._lock:
            user = self._require(email)
            user.portfolio = copy.deepcopy(portfolio)
            return copy.deepcopy(user.portfolio)

    # --- Internals ---

    def _check_available(self) -> None:
        if not self.available:
            raise StoreUnavailableError("in-memory store is marked unavailable")

    def _require(self, email: str) -> UserRecord:
        """Caller must hold the lock."""
        user = self._users.get(email)
        if user is None:
            raise UserNotFoundError(email)
        return user

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
