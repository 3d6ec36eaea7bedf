"""Per-user state: subscriptions, alert thresholds, virtual portfolio."""

from .interface import IdentityStore, StoreError, StoreUnavailableError, UserNotFoundError
from .memory import InMemoryIdentityStore
from .models import AlertThreshold, Holding, Portfolio, UserRecord, WatchProfile

__all__ = [
    "IdentityStore",
    "InMemoryIdentityStore",
    "StoreError",
    "StoreUnavailableError",
    "UserNotFoundError",
    "AlertThreshold",
    "Holding",
    "Portfolio",
    "UserRecord",
    "WatchProfile",
]
