"""Live push channel: connection registry, per-tick fan-out, alerts.

Public API:
    ConnectionRegistry   - identity -> live channel id, one channel each
    FanoutEngine         - sends each user their stockUpdate and priceAlerts
    PushChannel          - Protocol for one-way best-effort delivery
    WebSocketHub         - PushChannel over FastAPI WebSockets
    create_stream_router - FastAPI router factory for the /ws endpoint
"""

from .alerts import build_messages, evaluate_alerts
from .fanout import FanoutEngine, PushChannel
from .hub import WebSocketHub
from .registry import ConnectionRegistry
from .stream import create_stream_router

__all__ = [
    "ConnectionRegistry",
    "FanoutEngine",
    "PushChannel",
    "WebSocketHub",
    "build_messages",
    "create_stream_router",
    "evaluate_alerts",
]
