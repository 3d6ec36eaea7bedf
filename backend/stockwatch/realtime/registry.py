"""Maps each identity to its live push channel."""

from __future__ import annotations

import logging
from threading import Lock

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """At most one channel per identity.

    ``register`` silently replaces an identity's previous channel. An entry
    is only removed by ``unregister`` with that entry's own channel id. A
    channel that dies without a disconnect event keeps its entry, and keeps
    failing sends, until the transport notices.
    """

    def __init__(self) -> None:
        self._channels: dict[str, str] = {}  # identity -> channel id
        self._lock = Lock()

    def register(self, identity: str, channel_id: str) -> None:
        """Bind ``identity`` to ``channel_id``.

        A channel carries one identity: any other identity already bound to
        ``channel_id`` is dropped, so registering a second email on the same
        socket rebinds it rather than adding a second entry.
        """
        with self._lock:
            stale = [other for other, bound in self._channels.items() if bound == channel_id and other != identity]
            for other in stale:
                del self._channels[other]
            previous = self._channels.get(identity)
            self._channels[identity] = channel_id
        for other in stale:
            logger.info("Channel %s rebound from %s to %s", channel_id, other, identity)
        if previous and previous != channel_id:
            logger.info("Identity %s moved from channel %s to %s", identity, previous, channel_id)

    def unregister(self, channel_id: str) -> str | None:
        """Drop the entry bound to ``channel_id``. Returns its identity, if any."""
        with self._lock:
            for identity, bound in self._channels.items():
                if bound == channel_id:
                    del self._channels[identity]
                    return identity
        return None

    def snapshot(self) -> tuple[tuple[str, str], ...]:
        """Point-in-time ``(identity, channel_id)`` pairs, safe to iterate repeatedly."""
        with self._lock:
            return tuple(self._channels.items())

    def channel_for(self, identity: str) -> str | None:
        with self._lock:
            return self._channels.get(identity)

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)

    def __contains__(self, identity: str) -> bool:
        with self._lock:
            return identity in self._channels
