"""Mock LLM Client - For testing without an external generation service.

Provides canned responses for running the full relay without network
access.

Usage:
    Set LLM_ENGINE=mock in .env to use this client.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Sequence

from src.config.constants import RELAY
from src.exceptions import GenerationBackendError
from src.llm.base import BaseResponder
from src.orchestrator.events import Turn


# Canned responses for different types of queries
CANNED_RESPONSES = [
    "I understand. Let me help you with that.",
    "That's a great question! Here's what I think...",
    "Thanks for sharing. I'd be happy to assist.",
    "Interesting point! Let me elaborate on that.",
    "I see what you mean. Here's my perspective.",
]

# More detailed responses for specific patterns
PATTERN_RESPONSES = {
    "hello": "Hello! How can I help you today?",
    "help": "I'm here to help! Ask me a question or just chat.",
    "how are you": "I'm doing great, thanks for asking!",
    "bye": "Goodbye! It was nice chatting with you.",
    "thank": "You're welcome! Anything else I can help with?",
}


@dataclass
class MockLLMConfig:
    """Configuration for mock LLM client."""

    delay_ms: int = 0  # Simulated backend latency
    reply: str | None = None  # Fixed reply; overrides pattern matching
    fail: bool = False  # Raise GenerationBackendError on every call
    timeout_s: float = RELAY.LLM_TIMEOUT_S


class MockLLMClient(BaseResponder):
    """Mock responder for testing.

    Features:
    - Fixed reply or pattern-matched canned replies
    - Configurable latency
    - Forced failure for fallback testing

    Every call is recorded in `calls` as (prompt, history) pairs.
    """

    def __init__(self, config: MockLLMConfig | None = None) -> None:
        self._config = config or MockLLMConfig()
        super().__init__(timeout_s=self._config.timeout_s)
        self.calls: list[tuple[str, tuple[Turn, ...]]] = []

    @property
    def name(self) -> str:
        return "mock"

    def _get_response(self, prompt: str) -> str:
        """Get appropriate response based on input.

        Checks for pattern matches first, then falls back to random canned response.
        """
        if self._config.reply is not None:
            return self._config.reply

        lowered = prompt.lower()
        for pattern, response in PATTERN_RESPONSES.items():
            if pattern in lowered:
                return response

        return random.choice(CANNED_RESPONSES)

    async def _generate(self, prompt: str, history: Sequence[Turn]) -> str:
        self.calls.append((prompt, tuple(history)))

        if self._config.delay_ms:
            await asyncio.sleep(self._config.delay_ms / 1000)

        if self._config.fail:
            raise GenerationBackendError(self.name, "simulated failure")

        return self._get_response(prompt)
