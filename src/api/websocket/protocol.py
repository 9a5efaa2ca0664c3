"""Relay Wire Protocol - JSON frame codec.

Inbound frames:
    {"type": "speech", "roomName": str, "audio": base64 str}
    {"type": "text_message", "roomName"?: str, "message": str}

Outbound frames:
    {"type": "ai_response", "userText": str, "aiText": str}
    {"type": "error", "message": str}

Frames that fail validation raise MalformedEventError and never reach the
orchestrator.
"""

from __future__ import annotations

import base64
import binascii
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from src.config.constants import RELAY
from src.exceptions import MalformedEventError
from src.orchestrator.events import (
    Failure,
    FailureReason,
    InboundEvent,
    Outcome,
    Reply,
    SpeechEvent,
    TextEvent,
)


class SpeechFrame(BaseModel):
    """Recorded speech frame."""

    type: Literal["speech"]
    roomName: str = Field(..., min_length=1)
    audio: str


class TextMessageFrame(BaseModel):
    """Typed text frame. Missing or empty roomName means the default room."""

    type: Literal["text_message"]
    roomName: str | None = None
    message: str


InboundFrame = Annotated[
    Union[SpeechFrame, TextMessageFrame],
    Field(discriminator="type"),
]

_frame_adapter: TypeAdapter[SpeechFrame | TextMessageFrame] = TypeAdapter(InboundFrame)


def _decode_audio(audio: str) -> bytes:
    try:
        decoded = base64.b64decode(audio, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedEventError(f"audio is not valid base64: {e}", RELAY.FRAME_SPEECH) from e
    if not decoded:
        raise MalformedEventError("audio is empty", RELAY.FRAME_SPEECH)
    return decoded


def parse_event(
    raw: str | bytes,
    default_room: str = RELAY.DEFAULT_ROOM,
) -> InboundEvent:
    """Decode one inbound frame into an event.

    Args:
        raw: Frame payload as received from the WebSocket
        default_room: Room for text messages without a roomName

    Returns:
        SpeechEvent or TextEvent

    Raises:
        MalformedEventError: Invalid JSON, unknown type, or bad fields
    """
    try:
        frame = _frame_adapter.validate_json(raw)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        reason = errors[0]["msg"] if errors else "invalid frame"
        raise MalformedEventError(reason) from e

    if isinstance(frame, SpeechFrame):
        return SpeechEvent(room_id=frame.roomName, audio=_decode_audio(frame.audio))

    return TextEvent(room_id=frame.roomName or default_room, text=frame.message)


def encode_outcome(outcome: Outcome) -> dict[str, Any]:
    """Serialize an outcome into an outbound frame."""
    if isinstance(outcome, Reply):
        return {
            "type": RELAY.FRAME_AI_RESPONSE,
            "userText": outcome.user_text,
            "aiText": outcome.assistant_text,
        }
    return encode_failure(outcome.reason)


def encode_failure(reason: FailureReason) -> dict[str, str]:
    """Build an error frame for a failure reason."""
    return {"type": RELAY.FRAME_ERROR, "message": Failure(reason).message}
