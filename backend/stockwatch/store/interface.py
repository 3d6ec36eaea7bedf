"""Abstract interface for the identity store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from .models import AlertThreshold, Portfolio, UserRecord, WatchProfile


class StoreError(Exception):
    """Base class for identity store failures."""


class StoreUnavailableError(StoreError):
    """The backing store cannot be reached right now. Retrying later may work."""


class UserNotFoundError(StoreError):
    """No user exists for the given email."""

    def __init__(self, email: str) -> None:
        super().__init__(f"User not found: {email}")
        self.email = email


class IdentityStore(ABC):
    """Contract for per-user state, keyed by normalized email.

    The fan-out engine only ever calls ``get_watch_profile``. The HTTP
    endpoints use the rest. Implementations return copies: mutating a
    returned record has no effect on the store.

    Any method may raise StoreUnavailableError.
    """

    @abstractmethod
    async def find_or_create(self, email: str) -> UserRecord:
        """Return the user for ``email``, creating an empty one if needed."""

    @abstractmethod
    async def get(self, email: str) -> UserRecord | None:
        """Return the user for ``email``, or None."""

    @abstractmethod
    async def get_watch_profile(self, email: str) -> WatchProfile | None:
        """Subscriptions and alert thresholds for ``email``, or None if unknown."""

    @abstractmethod
    async def subscribe(self, email: str, ticker: str) -> list[str]:
        """Add ``ticker`` to the user's subscriptions. No-op if already present."""

    @abstractmethod
    async def unsubscribe(self, email: str, ticker: str) -> list[str]:
        """Remove ``ticker`` from the user's subscriptions. No-op if absent."""

    @abstractmethod
    async def set_alert_threshold(
        self,
        email: str,
        ticker: str,
        above: Decimal | None,
        below: Decimal | None,
    ) -> list[AlertThreshold]:
        """Replace the threshold entry for ``ticker``.

        Passing neither side clears the entry.
        """

    @abstractmethod
    async def save_portfolio(self, email: str, portfolio: Portfolio) -> Portfolio:
        """Persist ``portfolio`` as the user's current portfolio."""
