"""WebSocket Relay - Transport gateway for conversation events.

One handler per connection. Frames on a connection are processed one at a
time in arrival order; separate connections run concurrently. No failure
closes the connection, every path goes back to waiting for the next frame.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from src.api.dependencies import get_orchestrator, get_relay_settings
from src.api.websocket.protocol import encode_failure, encode_outcome, parse_event
from src.config.settings import Settings
from src.exceptions import MalformedEventError
from src.observability.logging import get_logger
from src.observability.metrics import (
    record_connection_close,
    record_connection_open,
    record_malformed_frame,
    record_outcome,
)
from src.orchestrator.events import FailureReason
from src.orchestrator.session import SessionOrchestrator

logger = get_logger(__name__)

router = APIRouter(tags=["relay"])


class RelayConnection:
    """Serves a single WebSocket connection.

    Usage:
        connection = RelayConnection(websocket, orchestrator)
        await connection.run()
    """

    def __init__(
        self,
        websocket: WebSocket,
        orchestrator: SessionOrchestrator,
        default_room: str,
    ) -> None:
        self._websocket = websocket
        self._orchestrator = orchestrator
        self._default_room = default_room
        self._frames_handled = 0

    @property
    def frames_handled(self) -> int:
        """Number of frames answered on this connection."""
        return self._frames_handled

    async def run(self) -> None:
        """Accept the connection and serve frames until the client leaves."""
        await self._websocket.accept()
        record_connection_open()
        logger.info("relay_connection_opened", client=self._client_label())

        try:
            while True:
                message = await self._websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break

                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes") or b""

                await self._websocket.send_json(await self.handle_frame(raw))
                self._frames_handled += 1

        except WebSocketDisconnect:
            pass
        finally:
            record_connection_close()
            logger.info(
                "relay_connection_closed",
                client=self._client_label(),
                frames=self._frames_handled,
            )

    async def handle_frame(self, raw: str | bytes) -> dict:
        """Turn one inbound frame into one outbound frame."""
        try:
            event = parse_event(raw, default_room=self._default_room)
        except MalformedEventError as e:
            logger.warning("relay_frame_rejected", error=str(e))
            record_malformed_frame()
            record_outcome("unknown", FailureReason.MALFORMED_EVENT.name.lower())
            return encode_failure(FailureReason.MALFORMED_EVENT)

        logger.info("relay_event_received", event_kind=event.kind, room_id=event.room_id)
        outcome = await self._orchestrator.handle(event)
        return encode_outcome(outcome)

    def _client_label(self) -> str:
        client = self._websocket.client
        return f"{client.host}:{client.port}" if client else "unknown"


@router.websocket("/")
@router.websocket("/ws")
async def relay_websocket(
    websocket: WebSocket,
    orchestrator: SessionOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_relay_settings),
) -> None:
    """Conversation relay endpoint.

    Accepts speech and text_message frames, answers each with an
    ai_response or error frame.
    """
    connection = RelayConnection(websocket, orchestrator, settings.default_room)
    await connection.run()
