"""Per-tick fan-out of price updates and alerts to connected users."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Protocol

from ..market.models import PriceState
from ..store.interface import IdentityStore, StoreUnavailableError
from ..store.models import WatchProfile
from .alerts import STOCK_UPDATE, build_messages, build_stock_update
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class PushChannel(Protocol):
    """One-way, best-effort delivery to a live client channel."""

    async def send(self, channel_id: str, event: str, payload: dict) -> bool:
        """Deliver ``payload`` as ``event``. Returns False if delivery failed."""
        ...


class FanoutEngine:
    """Pushes each connected user their personalized view of a tick.

    For every (identity, channel) in a registry snapshot, the identity's
    subscriptions and thresholds are fetched from the store (all fetches run
    concurrently), then one ``stockUpdate`` and any ``priceAlert`` messages are
    sent. Identities are served concurrently; each identity's messages go out
    in order, and every send is bounded by ``send_timeout``. A store failure
    skips that identity for this tick only; a failed or slow send drops the rest
    of that identity's messages for this tick.
    Nothing raised for one identity affects the others.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        store: IdentityStore,
        channel: PushChannel,
        fetch_timeout: float = 0.5,
        send_timeout: float = 1.0,
    ) -> None:
        self._registry = registry
        self._store = store
        self._channel = channel
        self._fetch_timeout = fetch_timeout
        self._send_timeout = send_timeout

    async def broadcast(self, prices: Mapping[str, PriceState]) -> int:
        """Fan ``prices`` out to every registered identity.

        Returns the number of identities a delivery was attempted for.
        """
        targets = self._registry.snapshot()
        if not targets:
            return 0

        profiles = await asyncio.gather(*(self._fetch(identity) for identity, _ in targets))

        deliveries = []
        for (identity, channel_id), profile in zip(targets, profiles):
            if profile is None:
                continue
            messages = build_messages(profile, prices)
            if messages:
                deliveries.append(self._deliver(channel_id, messages))

        await asyncio.gather(*deliveries)
        return len(deliveries)

    async def send_initial(
        self,
        identity: str,
        channel_id: str,
        prices: Mapping[str, PriceState],
    ) -> bool:
        """Send a freshly registered channel the current prices, without alerts."""
        profile = await self._fetch(identity)
        if profile is None or not profile.subscriptions:
            return False
        return await self._send(channel_id, STOCK_UPDATE, build_stock_update(profile.subscriptions, prices))

    # --- Internals ---

    async def _fetch(self, identity: str) -> WatchProfile | None:
        try:
            return await asyncio.wait_for(
                self._store.get_watch_profile(identity), timeout=self._fetch_timeout
            )
        except StoreUnavailableError as exc:
            logger.warning("Skipping %s this tick, store unavailable: %s", identity, exc)
        except asyncio.TimeoutError:
            logger.warning("Skipping %s this tick, store fetch timed out", identity)
        except Exception:
            logger.exception("Skipping %s this tick, store fetch failed", identity)
        return None

    async def _deliver(self, channel_id: str, messages: list[tuple[str, dict]]) -> None:
        for event, payload in messages:
            if not await self._send(channel_id, event, payload):
                return

    async def _send(self, channel_id: str, event: str, payload: dict) -> bool:
        try:
            return await asyncio.wait_for(
                self._channel.send(channel_id, event, payload), timeout=self._send_timeout
            )
        except asyncio.TimeoutError:
            logger.debug("Send of %s to channel %s timed out", event, channel_id)
            return False
        except Exception:
            logger.debug("Send of %s to channel %s raised", event, channel_id, exc_info=True)
            return False
