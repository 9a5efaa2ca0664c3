"""Conversation Store - Per-room turn history.

Process-wide mapping from room identifier to an append-only history.
Histories are created lazily and live until the process exits; there is
no eviction and no size cap.

Appends for one room are serialized by that room's lock so a user/assistant
pair is never interleaved with another pair. The lock is only taken around
the append itself, never across backend calls.
"""

from __future__ import annotations

import asyncio
from typing import Iterator

from src.observability.logging import get_logger
from src.observability.metrics import record_room_created
from src.orchestrator.events import Role, Turn

logger = get_logger(__name__)


class ConversationHistory:
    """Ordered turn history for a single room.

    Usage:
        history = store.get_or_create("room-1")
        await history.append_exchange("hello", "hi there")
        history.snapshot()  # (Turn(USER, "hello"), Turn(ASSISTANT, "hi there"))
    """

    def __init__(self, room_id: str) -> None:
        self._room_id = room_id
        self._turns: list[Turn] = []
        self._lock = asyncio.Lock()

    @property
    def room_id(self) -> str:
        """Room identifier."""
        return self._room_id

    def append(self, turn: Turn) -> None:
        """Add one turn to the end of the history."""
        self._turns.append(turn)

    async def append_exchange(self, user_text: str, assistant_text: str) -> int:
        """Append a user turn followed by an assistant turn.

        Args:
            user_text: Recognized or typed user message
            assistant_text: Generated (or fallback) reply

        Returns:
            History length after the append
        """
        async with self._lock:
            self.append(Turn(Role.USER, user_text))
            self.append(Turn(Role.ASSISTANT, assistant_text))
            return len(self._turns)

    def snapshot(self) -> tuple[Turn, ...]:
        """Immutable view of the current turns."""
        return tuple(self._turns)

    def as_messages(self) -> list[dict[str, str]]:
        """Turns as chat-completions message dicts."""
        return [turn.to_message() for turn in self._turns]

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"ConversationHistory(room_id={self._room_id!r}, turns={len(self._turns)})"


class ConversationStore:
    """Maps room identifiers to conversation histories.

    Created once at application startup and injected wherever histories are
    needed. A history, once installed, is never replaced.

    Usage:
        store = ConversationStore()
        history = store.get_or_create("room-1")
        assert store.get_or_create("room-1") is history
    """

    def __init__(self) -> None:
        self._histories: dict[str, ConversationHistory] = {}

    def get_or_create(self, room_id: str) -> ConversationHistory:
        """Return the room's history, installing an empty one if absent.

        Runs without awaiting, so two callers on the event loop can never
        install different histories for the same room.
        """
        history = self._histories.get(room_id)
        if history is None:
            history = ConversationHistory(room_id)
            self._histories[room_id] = history
            record_room_created()
            logger.debug("room_created", room_id=room_id)
        return history

    def register(self, room_id: str) -> ConversationHistory:
        """Pre-register a room at token issuance.

        Equivalent to get_or_create: an existing history is kept as is.
        """
        return self.get_or_create(room_id)

    def append(self, history: ConversationHistory, turn: Turn) -> None:
        """Add one turn to a history handle."""
        history.append(turn)

    def get(self, room_id: str) -> ConversationHistory | None:
        """Get history by room ID without creating it."""
        return self._histories.get(room_id)

    def room_ids(self) -> list[str]:
        """Identifiers of all known rooms."""
        return list(self._histories.keys())

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._histories

    def __len__(self) -> int:
        return len(self._histories)
