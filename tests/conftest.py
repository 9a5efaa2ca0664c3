"""Pytest configuration and shared fixtures."""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing settings
os.environ.update({
    "ENVIRONMENT": "development",
    "ASR_ENGINE": "mock",  # No AssemblyAI calls in tests
    "LLM_ENGINE": "mock",  # No generation backend calls in tests
    "LIVEKIT_API_KEY": "test-key",
    "LIVEKIT_API_SECRET": "test-secret-with-enough-length-for-hs256",
    "STATIC_DIR": "/nonexistent/static",
})


@pytest.fixture
def test_settings():
    """Provide test settings instance."""
    from src.config.settings import Settings
    return Settings(_env_file=None)


@pytest.fixture
def store():
    """Fresh conversation store per test."""
    from src.orchestrator.store import ConversationStore
    return ConversationStore()


@pytest.fixture
def transcriber():
    """Mock transcriber returning a fixed transcript."""
    from src.audio.asr.base import MockTranscriber
    return MockTranscriber(transcript="what is the weather")


@pytest.fixture
def responder():
    """Mock responder returning a fixed reply."""
    from src.llm.mock_client import MockLLMClient, MockLLMConfig
    return MockLLMClient(MockLLMConfig(reply="hi there"))


@pytest.fixture
def orchestrator(store, transcriber, responder):
    """Orchestrator wired to the mock adapters."""
    from src.orchestrator.session import SessionOrchestrator
    return SessionOrchestrator(store, transcriber, responder)


@pytest.fixture
def make_client(test_settings, store):
    """Build a test client around specific adapters."""
    from src.main import create_app

    clients: list[TestClient] = []

    def _make(transcriber=None, responder=None) -> TestClient:
        app = create_app(
            settings=test_settings,
            store=store,
            transcriber=transcriber,
            responder=responder,
        )
        c = TestClient(app)
        c.__enter__()
        clients.append(c)
        return c

    yield _make

    for c in clients:
        c.__exit__(None, None, None)


@pytest.fixture
def client(make_client, transcriber, responder) -> Generator[TestClient, None, None]:
    """Provide FastAPI test client with mock adapters."""
    yield make_client(transcriber=transcriber, responder=responder)
