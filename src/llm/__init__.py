"""LLM module - Response generation backends.

Supports multiple backends:
- blackbox: Blackbox chat endpoint (single message, no history)
- openai: OpenAI-compatible chat completions (history-aware)
- mock: Testing backend with canned responses
"""

from __future__ import annotations

from src.llm.base import BaseResponder, Responder
from src.llm.blackbox_client import BlackboxClient, BlackboxConfig
from src.llm.mock_client import MockLLMClient, MockLLMConfig


def create_responder(engine: str | None = None) -> Responder:
    """Factory function to create a responder based on configuration.

    Args:
        engine: Override engine selection ("mock", "blackbox", or "openai").
                If None, uses LLM_ENGINE from settings.

    Returns:
        Responder instance

    Raises:
        ValueError: If engine is unknown
    """
    if engine is None:
        from src.config.settings import get_settings
        settings = get_settings()
        engine = settings.llm_engine

    if engine == "mock":
        return MockLLMClient()
    elif engine == "blackbox":
        return BlackboxClient()
    elif engine == "openai":
        from src.llm.openai_client import OpenAIChatClient
        return OpenAIChatClient()
    else:
        raise ValueError(
            f"Unknown LLM engine: {engine}. "
            f"Available: mock, blackbox, openai"
        )


__all__ = [
    # Interface
    "Responder",
    "BaseResponder",
    # Clients
    "BlackboxClient",
    "MockLLMClient",
    # OpenAIChatClient - lazy import via create_responder("openai")
    # Configuration
    "BlackboxConfig",
    "MockLLMConfig",
    # Factories
    "create_responder",
]
