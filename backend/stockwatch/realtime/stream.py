"""WebSocket endpoint for live price updates and alerts."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..market.cache import PriceCache
from ..store.models import normalize_email
from .fanout import FanoutEngine
from .hub import WebSocketHub
from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)

REGISTER = "register"


def create_stream_router(
    hub: WebSocketHub,
    registry: ConnectionRegistry,
    engine: FanoutEngine,
    price_cache: PriceCache,
) -> APIRouter:
    """Create the push-channel router with its collaborators injected."""
    router = APIRouter(tags=["streaming"])

    @router.websocket("/ws")
    async def price_socket(websocket: WebSocket) -> None:
        """Live channel for one browser tab.

        The client announces who it is with:

            {"event": "register", "data": "user@example.com"}

        and from then on receives ``stockUpdate`` and ``priceAlert`` frames
        once per tick. Registering again (same or different email) rebinds
        the channel.
        """
        await websocket.accept()
        channel_id = hub.add(websocket)
        client = websocket.client.host if websocket.client else "unknown"
        logger.info("Client connected: %s (channel %s)", client, channel_id)

        try:
            while True:
                raw = await websocket.receive_text()
                email = _parse_register(raw)
                if email is None:
                    logger.debug("Ignoring message on channel %s: %.80s", channel_id, raw)
                    continue
                registry.register(email, channel_id)
                logger.info("User %s registered with channel %s", email, channel_id)
                await engine.send_initial(email, channel_id, price_cache.get_all())
        except WebSocketDisconnect:
            pass
        finally:
            identity = registry.unregister(channel_id)
            hub.remove(channel_id)
            logger.info("Client disconnected: %s (channel %s, user %s)", client, channel_id, identity)

    return router


def _parse_register(raw: str) -> str | None:
    """Email from a register frame, or None for anything else."""
    try:
        message = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(message, dict) or message.get("event") != REGISTER:
        return None
    data = message.get("data")
    if not isinstance(data, str):
        return None
    return normalize_email(data) or None
