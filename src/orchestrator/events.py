"""Conversation Events - Inbound events and outcomes.

Inbound events are produced by the transport gateway after a frame has been
validated. Outcomes are what the orchestrator hands back for serialization.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from src.config.constants import RELAY


class Role(Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    """One message within a room's history."""

    role: Role
    content: str

    def to_message(self) -> dict[str, str]:
        """Chat-completions style message dict."""
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class SpeechEvent:
    """Recorded speech for a room."""

    room_id: str
    audio: bytes

    @property
    def kind(self) -> str:
        return RELAY.FRAME_SPEECH


@dataclass(frozen=True)
class TextEvent:
    """Typed text for a room. Empty text is allowed."""

    room_id: str
    text: str

    @property
    def kind(self) -> str:
        return RELAY.FRAME_TEXT_MESSAGE


InboundEvent = Union[SpeechEvent, TextEvent]


class FailureReason(Enum):
    """Failure categories reported to the client.

    Values are the exact messages carried by outbound error frames.
    """

    AUDIO_UNINTELLIGIBLE = RELAY.MSG_AUDIO_UNINTELLIGIBLE
    SPEECH_BACKEND_ERROR = RELAY.MSG_SPEECH_ERROR
    MESSAGE_ERROR = RELAY.MSG_MESSAGE_ERROR
    MALFORMED_EVENT = RELAY.MSG_MALFORMED


@dataclass(frozen=True)
class Reply:
    """Successful outcome: recognized user text and generated reply."""

    user_text: str
    assistant_text: str


@dataclass(frozen=True)
class Failure:
    """Failed outcome."""

    reason: FailureReason

    @property
    def message(self) -> str:
        return self.reason.value


Outcome = Union[Reply, Failure]
