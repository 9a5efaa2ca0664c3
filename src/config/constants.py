"""Relay protocol constants.

Wire strings and defaults shared by the gateway, orchestrator and HTTP routes.
Clients match on these exact strings, so they must not change.
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class RelayConstants:
    """Immutable relay protocol values."""

    # Inbound frame types
    FRAME_SPEECH: Final[str] = "speech"
    FRAME_TEXT_MESSAGE: Final[str] = "text_message"

    # Outbound frame types
    FRAME_AI_RESPONSE: Final[str] = "ai_response"
    FRAME_ERROR: Final[str] = "error"

    # Outbound error messages
    MSG_AUDIO_UNINTELLIGIBLE: Final[str] = "Could not understand audio"
    MSG_SPEECH_ERROR: Final[str] = "Error processing speech"
    MSG_MESSAGE_ERROR: Final[str] = "Error processing message"
    MSG_MALFORMED: Final[str] = "Failed to process message"

    # Rooms
    DEFAULT_ROOM: Final[str] = "default-room"
    ROOM_PREFIX: Final[str] = "ai-room"
    TOKEN_IDENTITY: Final[str] = "user"

    # Generation
    FALLBACK_REPLY: Final[str] = "I'm sorry, I couldn't process that request."
    GENERATION_MAX_TOKENS: Final[int] = 1024

    # Timeouts (seconds)
    ASR_TIMEOUT_S: Final[float] = 60.0
    ASR_POLL_INTERVAL_S: Final[float] = 1.0
    LLM_TIMEOUT_S: Final[float] = 30.0


# Singleton instance for import
RELAY = RelayConstants()
