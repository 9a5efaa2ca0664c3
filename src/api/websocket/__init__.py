"""WebSocket API package."""

from src.api.websocket.protocol import encode_outcome, parse_event
from src.api.websocket.relay import RelayConnection, router

__all__ = [
    "RelayConnection",
    "encode_outcome",
    "parse_event",
    "router",
]
