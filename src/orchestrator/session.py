"""Session Orchestrator - Drives one inbound event through the pipeline.

For each event:
1. Resolve the room's history (created on first use)
2. Speech only: transcribe, rejecting blank transcripts
3. Generate a reply; a failed generation becomes the fallback reply
4. Append the user/assistant pair under the room lock
5. Return Reply, or Failure for the speech-stage errors

Speech failures leave the history untouched. Generation failures never
reach the client; the exchange is recorded with the fallback reply.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from src.config.constants import RELAY
from src.exceptions import AudioUnintelligibleError, SpeechBackendError
from src.observability.logging import RoomLogger, bind_room, get_logger, unbind_room
from src.observability.metrics import (
    record_asr_latency,
    record_error,
    record_generation_fallback,
    record_llm_latency,
    record_outcome,
)
from src.orchestrator.events import (
    Failure,
    FailureReason,
    InboundEvent,
    Outcome,
    Reply,
    SpeechEvent,
    TextEvent,
)
from src.orchestrator.store import ConversationHistory, ConversationStore

if TYPE_CHECKING:
    from src.audio.asr.base import Transcriber
    from src.llm.base import Responder

logger = get_logger(__name__)


class SessionOrchestrator:
    """Conversation orchestrator shared by all connections.

    Holds no per-connection state; the only shared mutable state is the
    injected ConversationStore.

    Usage:
        orchestrator = SessionOrchestrator(store, transcriber, responder)
        outcome = await orchestrator.handle(TextEvent("room-1", "hello"))
    """

    def __init__(
        self,
        store: ConversationStore,
        transcriber: Transcriber,
        responder: Responder,
        fallback_reply: str = RELAY.FALLBACK_REPLY,
    ) -> None:
        self._store = store
        self._transcriber = transcriber
        self._responder = responder
        self._fallback_reply = fallback_reply

    @property
    def store(self) -> ConversationStore:
        """Conversation store backing this orchestrator."""
        return self._store

    @property
    def fallback_reply(self) -> str:
        """Assistant text recorded when generation fails."""
        return self._fallback_reply

    async def handle(self, event: InboundEvent) -> Outcome:
        """Process one inbound event.

        Args:
            event: Validated speech or text event

        Returns:
            Reply on success, Failure for speech-stage errors
        """
        bind_room(event.room_id)
        try:
            outcome = await self._handle(event)
        except Exception as e:
            # Append is the last step, so history is untouched here
            logger.error(
                "event_processing_failed",
                event_kind=event.kind,
                error=str(e),
                exc_info=e,
            )
            record_error("orchestrator", type(e).__name__)
            outcome = Failure(self._processing_failure(event))
        finally:
            unbind_room()

        record_outcome(
            event.kind,
            "reply" if isinstance(outcome, Reply) else outcome.reason.name.lower(),
        )
        return outcome

    async def _handle(self, event: InboundEvent) -> Outcome:
        room_log = RoomLogger(event.room_id)
        history = self._store.get_or_create(event.room_id)

        if isinstance(event, SpeechEvent):
            try:
                user_text = await self._transcribe(event, room_log)
            except AudioUnintelligibleError:
                room_log.speech_unintelligible()
                return Failure(FailureReason.AUDIO_UNINTELLIGIBLE)
            except SpeechBackendError as e:
                room_log.speech_failed(str(e))
                record_error("asr", type(e).__name__)
                return Failure(FailureReason.SPEECH_BACKEND_ERROR)
        elif isinstance(event, TextEvent):
            user_text = event.text
        else:
            raise TypeError(f"Unsupported event: {type(event).__name__}")

        assistant_text = await self._generate(user_text, history, room_log)
        return await self._record(history, user_text, assistant_text, room_log)

    async def _transcribe(self, event: SpeechEvent, room_log: RoomLogger) -> str:
        start = time.perf_counter()
        text = await self._transcriber.transcribe(event.audio)
        record_asr_latency((time.perf_counter() - start) * 1000)

        if not text.strip():
            raise AudioUnintelligibleError(event.room_id)

        room_log.speech_recognized(text)
        return text

    async def _generate(
        self,
        user_text: str,
        history: ConversationHistory,
        room_log: RoomLogger,
    ) -> str:
        start = time.perf_counter()
        try:
            return await self._responder.generate(user_text, history.snapshot())
        except Exception as e:
            # Responders outside BaseResponder may raise anything
            room_log.generation_fallback(str(e))
            record_generation_fallback()
            record_error("llm", type(e).__name__)
            return self._fallback_reply
        finally:
            record_llm_latency((time.perf_counter() - start) * 1000)

    async def _record(
        self,
        history: ConversationHistory,
        user_text: str,
        assistant_text: str,
        room_log: RoomLogger,
    ) -> Reply:
        start = time.perf_counter()
        turns = await history.append_exchange(user_text, assistant_text)
        room_log.exchange_recorded(turns, (time.perf_counter() - start) * 1000)
        return Reply(user_text=user_text, assistant_text=assistant_text)

    @staticmethod
    def _processing_failure(event: InboundEvent) -> FailureReason:
        if isinstance(event, SpeechEvent):
            return FailureReason.SPEECH_BACKEND_ERROR
        return FailureReason.MESSAGE_ERROR
