"""Orchestrator module - Conversation state and event handling.

Provides:
- SessionOrchestrator: Per-event transcription/generation pipeline
- ConversationStore: Room to history mapping
- Events and outcomes exchanged with the transport gateway
"""

from src.orchestrator.events import (
    Failure,
    FailureReason,
    InboundEvent,
    Outcome,
    Reply,
    Role,
    SpeechEvent,
    TextEvent,
    Turn,
)
from src.orchestrator.session import SessionOrchestrator
from src.orchestrator.store import ConversationHistory, ConversationStore

__all__ = [
    # Orchestration
    "SessionOrchestrator",
    # Store
    "ConversationStore",
    "ConversationHistory",
    # Events
    "InboundEvent",
    "SpeechEvent",
    "TextEvent",
    "Role",
    "Turn",
    # Outcomes
    "Outcome",
    "Reply",
    "Failure",
    "FailureReason",
]
