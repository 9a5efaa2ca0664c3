"""Tests for structured logging and metrics helpers."""

import pytest
import structlog
from prometheus_client import REGISTRY

from src.observability.logging import RoomLogger, bind_room, unbind_room
from src.observability.metrics import (
    record_connection_close,
    record_connection_open,
    record_generation_fallback,
    record_outcome,
    render_latest,
)
from src.orchestrator.events import TextEvent


def _sample(name: str, labels: dict | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestRoomLogging:
    """Room correlation in logs."""

    def test_room_logger_binds_room(self):
        """Room events carry room_id and event_type."""
        with structlog.testing.capture_logs() as logs:
            RoomLogger("room-7").exchange_recorded(turns=4, elapsed_ms=0.1)

        assert logs[0]["event"] == "exchange_recorded"
        assert logs[0]["room_id"] == "room-7"
        assert logs[0]["turns"] == 4

    def test_bind_room_context(self):
        """bind_room puts room_id in the context until unbound."""
        bind_room("room-8")
        try:
            assert structlog.contextvars.get_contextvars()["room_id"] == "room-8"
        finally:
            unbind_room()

        assert "room_id" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_generation_fallback_logged(self, store, transcriber):
        """A generation failure is logged as a warning for its room."""
        from src.llm.mock_client import MockLLMClient, MockLLMConfig
        from src.orchestrator.session import SessionOrchestrator

        orchestrator = SessionOrchestrator(
            store, transcriber, MockLLMClient(MockLLMConfig(fail=True))
        )

        with structlog.testing.capture_logs() as logs:
            await orchestrator.handle(TextEvent("room-9", "hello"))

        fallback = [entry for entry in logs if entry["event"] == "generation_fallback"]
        assert len(fallback) == 1
        assert fallback[0]["log_level"] == "warning"
        assert fallback[0]["room_id"] == "room-9"


class TestMetrics:
    """Prometheus metric helpers."""

    def test_outcome_counter(self):
        labels = {"event": "text_message", "outcome": "reply"}
        before = _sample("voicerelay_outcomes_total", labels)

        record_outcome("text_message", "reply")

        assert _sample("voicerelay_outcomes_total", labels) == before + 1

    def test_fallback_counter(self):
        before = _sample("voicerelay_generation_fallbacks_total")

        record_generation_fallback()

        assert _sample("voicerelay_generation_fallbacks_total") == before + 1

    def test_connection_gauge(self):
        before = _sample("voicerelay_active_connections")

        record_connection_open()
        assert _sample("voicerelay_active_connections") == before + 1
        record_connection_close()

        assert _sample("voicerelay_active_connections") == before

    def test_render_latest(self):
        payload, content_type = render_latest()

        assert b"voicerelay_outcomes_total" in payload
        assert content_type.startswith("text/plain")
