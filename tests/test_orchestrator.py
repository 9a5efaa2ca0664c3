"""Tests for SessionOrchestrator.

Tests cover:
- Text and speech success paths
- Blank transcript and speech backend failure (history untouched)
- Generation failure absorbed by the fallback reply
- Turn count and role alternation over many events
- Concurrent events for the same room
- Unexpected adapter errors
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.audio.asr.base import MockTranscriber
from src.config.constants import RELAY
from src.exceptions import SpeechBackendError
from src.llm.mock_client import MockLLMClient, MockLLMConfig
from src.orchestrator.events import (
    Failure,
    FailureReason,
    Reply,
    Role,
    SpeechEvent,
    TextEvent,
    Turn,
)
from src.orchestrator.session import SessionOrchestrator
from src.orchestrator.store import ConversationStore


AUDIO = b"\x00\x01fake-wav-bytes"


class TestTextEvents:
    """Tests for typed text events."""

    @pytest.mark.asyncio
    async def test_text_reply(self, orchestrator: SessionOrchestrator, store: ConversationStore):
        """Text message yields a reply and records the pair."""
        outcome = await orchestrator.handle(TextEvent("r1", "hello"))

        assert outcome == Reply(user_text="hello", assistant_text="hi there")
        assert store.get("r1").snapshot() == (
            Turn(Role.USER, "hello"),
            Turn(Role.ASSISTANT, "hi there"),
        )

    @pytest.mark.asyncio
    async def test_empty_text_is_forwarded(self, orchestrator, responder, store):
        """Empty text still goes to generation and is recorded."""
        outcome = await orchestrator.handle(TextEvent("r1", ""))

        assert isinstance(outcome, Reply)
        assert outcome.user_text == ""
        assert responder.calls[0][0] == ""
        assert len(store.get("r1")) == 2

    @pytest.mark.asyncio
    async def test_text_skips_transcription(self, orchestrator, transcriber):
        """Text events never call the transcriber."""
        await orchestrator.handle(TextEvent("r1", "hello"))
        assert transcriber.calls == []

    @pytest.mark.asyncio
    async def test_generation_failure_uses_fallback(self, store, transcriber):
        """Failed generation is recorded with the fallback reply."""
        failing = MockLLMClient(MockLLMConfig(fail=True))
        orchestrator = SessionOrchestrator(store, transcriber, failing)

        outcome = await orchestrator.handle(TextEvent("r1", "hello"))

        assert outcome == Reply(user_text="hello", assistant_text=RELAY.FALLBACK_REPLY)
        assert store.get("r1").snapshot() == (
            Turn(Role.USER, "hello"),
            Turn(Role.ASSISTANT, RELAY.FALLBACK_REPLY),
        )

    @pytest.mark.asyncio
    async def test_custom_fallback_reply(self, store, transcriber):
        """Configured fallback text is used."""
        failing = MockLLMClient(MockLLMConfig(fail=True))
        orchestrator = SessionOrchestrator(store, transcriber, failing, fallback_reply="oops")

        outcome = await orchestrator.handle(TextEvent("r1", "hello"))

        assert outcome.assistant_text == "oops"

    @pytest.mark.asyncio
    async def test_generation_timeout_uses_fallback(self, store, transcriber):
        """A generation that exceeds its timeout falls back."""
        slow = MockLLMClient(MockLLMConfig(delay_ms=500, reply="late", timeout_s=0.01))
        orchestrator = SessionOrchestrator(store, transcriber, slow)

        outcome = await orchestrator.handle(TextEvent("r1", "hello"))

        assert outcome.assistant_text == RELAY.FALLBACK_REPLY
        assert len(store.get("r1")) == 2

    @pytest.mark.asyncio
    async def test_unexpected_responder_error_uses_fallback(self, store, transcriber):
        """A responder raising an arbitrary exception still falls back."""
        responder = AsyncMock()
        responder.generate.side_effect = RuntimeError("boom")
        orchestrator = SessionOrchestrator(store, transcriber, responder)

        outcome = await orchestrator.handle(TextEvent("r1", "hello"))

        assert outcome == Reply(user_text="hello", assistant_text=RELAY.FALLBACK_REPLY)

    @pytest.mark.asyncio
    async def test_history_passed_to_responder(self, orchestrator, responder):
        """Responder receives the room's prior turns."""
        await orchestrator.handle(TextEvent("r1", "first"))
        await orchestrator.handle(TextEvent("r1", "second"))

        prompt, history = responder.calls[1]
        assert prompt == "second"
        assert history == (
            Turn(Role.USER, "first"),
            Turn(Role.ASSISTANT, "hi there"),
        )


class TestSpeechEvents:
    """Tests for recorded speech events."""

    @pytest.mark.asyncio
    async def test_speech_reply(self, orchestrator, transcriber, store):
        """Recognized speech becomes the user turn."""
        outcome = await orchestrator.handle(SpeechEvent("r2", AUDIO))

        assert outcome == Reply(user_text="what is the weather", assistant_text="hi there")
        assert transcriber.calls == [AUDIO]
        assert len(store.get("r2")) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("transcript", ["", "   ", "\n\t"])
    async def test_blank_transcript(self, store, responder, transcript):
        """Blank transcripts fail without touching history or generation."""
        orchestrator = SessionOrchestrator(store, MockTranscriber(transcript=transcript), responder)

        outcome = await orchestrator.handle(SpeechEvent("r2", AUDIO))

        assert outcome == Failure(FailureReason.AUDIO_UNINTELLIGIBLE)
        assert outcome.message == "Could not understand audio"
        assert store.get("r2").snapshot() == ()
        assert responder.calls == []

    @pytest.mark.asyncio
    async def test_speech_backend_failure(self, store, responder):
        """Transcriber failure is reported and history is untouched."""
        transcriber = MockTranscriber(error=SpeechBackendError("mock", "network down"))
        orchestrator = SessionOrchestrator(store, transcriber, responder)

        outcome = await orchestrator.handle(SpeechEvent("r2", AUDIO))

        assert outcome == Failure(FailureReason.SPEECH_BACKEND_ERROR)
        assert outcome.message == "Error processing speech"
        assert store.get("r2").snapshot() == ()
        assert responder.calls == []

    @pytest.mark.asyncio
    async def test_transcriber_raw_exception_is_wrapped(self, store, responder):
        """Arbitrary transcriber errors surface as speech failures."""
        transcriber = MockTranscriber(error=ConnectionError("refused"))
        orchestrator = SessionOrchestrator(store, transcriber, responder)

        outcome = await orchestrator.handle(SpeechEvent("r2", AUDIO))

        assert outcome == Failure(FailureReason.SPEECH_BACKEND_ERROR)

    @pytest.mark.asyncio
    async def test_speech_generation_failure_records_pair(self, store, transcriber):
        """Generation failure after good speech still records both turns."""
        orchestrator = SessionOrchestrator(
            store, transcriber, MockLLMClient(MockLLMConfig(fail=True))
        )

        outcome = await orchestrator.handle(SpeechEvent("r2", AUDIO))

        assert outcome == Reply("what is the weather", RELAY.FALLBACK_REPLY)
        assert len(store.get("r2")) == 2

    @pytest.mark.asyncio
    async def test_failure_then_success(self, store, responder):
        """Session stays usable after a speech failure."""
        orchestrator = SessionOrchestrator(store, MockTranscriber(transcript=""), responder)
        await orchestrator.handle(SpeechEvent("r2", AUDIO))

        outcome = await orchestrator.handle(TextEvent("r2", "typed instead"))

        assert isinstance(outcome, Reply)
        assert len(store.get("r2")) == 2


class TestHistoryProperties:
    """Tests for history invariants across many events."""

    @pytest.mark.asyncio
    async def test_two_turns_per_event_alternating_roles(self, orchestrator, store):
        """N successful events leave 2N turns alternating user/assistant."""
        for i in range(7):
            await orchestrator.handle(TextEvent("r1", f"message {i}"))

        turns = store.get("r1").snapshot()
        assert len(turns) == 14
        assert [t.role for t in turns] == [Role.USER, Role.ASSISTANT] * 7

    @pytest.mark.asyncio
    async def test_preregistered_room(self, orchestrator, store):
        """A room registered at token issuance is used as is."""
        registered = store.register("ai-room-1")

        await orchestrator.handle(TextEvent("ai-room-1", "hello"))

        assert store.get("ai-room-1") is registered
        assert len(registered) == 2

    @pytest.mark.asyncio
    async def test_rooms_do_not_share_history(self, orchestrator, store):
        """Events for one room never land in another."""
        await orchestrator.handle(TextEvent("a", "to a"))
        await orchestrator.handle(TextEvent("b", "to b"))

        assert [t.content for t in store.get("a")] == ["to a", "hi there"]
        assert [t.content for t in store.get("b")] == ["to b", "hi there"]


class TestConcurrency:
    """Tests for concurrent events."""

    @pytest.mark.asyncio
    async def test_concurrent_events_same_room(self, store, transcriber):
        """Two concurrent events produce two complete, non-interleaved pairs."""
        responder = MockLLMClient(MockLLMConfig(delay_ms=20, reply="ok"))
        orchestrator = SessionOrchestrator(store, transcriber, responder)

        outcomes = await asyncio.gather(
            orchestrator.handle(TextEvent("r1", "A")),
            orchestrator.handle(TextEvent("r1", "B")),
        )

        assert all(isinstance(o, Reply) for o in outcomes)
        turns = store.get("r1").snapshot()
        assert len(turns) == 4
        pairs = [(turns[0].content, turns[1].content), (turns[2].content, turns[3].content)]
        assert pairs in ([("A", "ok"), ("B", "ok")], [("B", "ok"), ("A", "ok")])

    @pytest.mark.asyncio
    async def test_history_order_follows_completion(self, store, transcriber):
        """The event that finishes generating first is recorded first."""

        class SlowFirst:
            name = "slow-first"

            async def generate(self, prompt, history):
                await asyncio.sleep(0.05 if prompt == "slow" else 0)
                return f"re:{prompt}"

            async def close(self):
                return None

        orchestrator = SessionOrchestrator(store, transcriber, SlowFirst())

        await asyncio.gather(
            orchestrator.handle(TextEvent("r1", "slow")),
            orchestrator.handle(TextEvent("r1", "fast")),
        )

        assert [t.content for t in store.get("r1")] == ["fast", "re:fast", "slow", "re:slow"]

    @pytest.mark.asyncio
    async def test_adapter_calls_do_not_block_other_rooms(self, store, transcriber):
        """A slow room does not serialize a different room."""
        gate = asyncio.Event()

        class Gated:
            name = "gated"

            async def generate(self, prompt, history):
                if prompt == "wait":
                    await gate.wait()
                return "done"

            async def close(self):
                return None

        orchestrator = SessionOrchestrator(store, transcriber, Gated())

        waiting = asyncio.create_task(orchestrator.handle(TextEvent("slow-room", "wait")))
        outcome = await orchestrator.handle(TextEvent("fast-room", "go"))

        assert isinstance(outcome, Reply)
        assert not waiting.done()

        gate.set()
        await waiting
        assert len(store.get("slow-room")) == 2
