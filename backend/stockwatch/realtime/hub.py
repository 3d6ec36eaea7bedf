"""WebSocket-backed push channel."""

from __future__ import annotations

import logging
import uuid
from threading import Lock

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class WebSocketHub:
    """Owns the open WebSockets, keyed by a generated channel id.

    Frames are JSON objects shaped ``{"event": <name>, "data": <payload>}``.
    """

    def __init__(self) -> None:
        self._sockets: dict[str, WebSocket] = {}
        self._lock = Lock()

    def add(self, websocket: WebSocket) -> str:
        """Track an accepted socket and return its new channel id."""
        channel_id = uuid.uuid4().hex
        with self._lock:
            self._sockets[channel_id] = websocket
        return channel_id

    def remove(self, channel_id: str) -> None:
        with self._lock:
            self._sockets.pop(channel_id, None)

    async def send(self, channel_id: str, event: str, payload: dict) -> bool:
        with self._lock:
            websocket = self._sockets.get(channel_id)
        if websocket is None:
            logger.debug("Dropping %s for unknown channel %s", event, channel_id)
            return False
        try:
            await websocket.send_json({"event": event, "data": payload})
        except Exception as exc:
            # Closed or half-closed socket; its disconnect handler cleans up
            logger.debug("Dropping %s for channel %s: %s", event, channel_id, exc)
            return False
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._sockets)

    def __contains__(self, channel_id: str) -> bool:
        with self._lock:
            return channel_id in self._sockets
