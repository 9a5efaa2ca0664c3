"""OpenAI-compatible Client - History-aware chat generation.

Works against any OpenAI-compatible chat completions API (OpenAI, vLLM,
Ollama and similar). Unlike the Blackbox responder, this backend forwards
the room's prior turns so replies can depend on the conversation so far.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from openai import AsyncOpenAI

from src.config.constants import RELAY
from src.config.settings import get_settings
from src.exceptions import GenerationBackendError
from src.llm.base import BaseResponder
from src.orchestrator.events import Turn


@dataclass
class OpenAIConfig:
    """Configuration for the OpenAI-compatible client."""

    base_url: str = "https://api.openai.com/v1"
    api_key: str = "EMPTY"  # Self-hosted servers accept any key
    model: str = "gpt-4o-mini"
    system_prompt: str | None = None
    max_tokens: int = RELAY.GENERATION_MAX_TOKENS
    temperature: float = 0.7
    timeout_s: float = RELAY.LLM_TIMEOUT_S


def build_messages(
    system_prompt: str | None,
    conversation: Sequence[Turn],
    user_input: str,
) -> list[dict[str, str]]:
    """Build message list for the chat API.

    Args:
        system_prompt: System prompt with persona/rules (omitted if empty)
        conversation: Previous conversation turns
        user_input: Current user input

    Returns:
        List of message dicts for the chat API
    """
    messages: list[dict[str, str]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.extend(turn.to_message() for turn in conversation)
    messages.append({"role": "user", "content": user_input})
    return messages


class OpenAIChatClient(BaseResponder):
    """OpenAI-compatible chat responder.

    Usage:
        client = OpenAIChatClient(OpenAIConfig(api_key="..."))
        text = await client.generate("hello", history)
        await client.close()
    """

    def __init__(
        self,
        config: OpenAIConfig | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        if config is None:
            settings = get_settings()
            config = OpenAIConfig(
                base_url=settings.llm_base_url,
                api_key=settings.llm_api_key or "EMPTY",
                model=settings.llm_model,
                system_prompt=settings.system_prompt,
                max_tokens=settings.llm_max_tokens,
                timeout_s=settings.llm_timeout_s,
            )

        super().__init__(timeout_s=config.timeout_s)
        self._config = config
        self._client = client

    @property
    def name(self) -> str:
        return "openai"

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                base_url=self._config.base_url,
                api_key=self._config.api_key,
                timeout=self._config.timeout_s,
            )
        return self._client

    async def _generate(self, prompt: str, history: Sequence[Turn]) -> str:
        completion = await self._get_client().chat.completions.create(
            model=self._config.model,
            messages=build_messages(self._config.system_prompt, history, prompt),
            max_tokens=self._config.max_tokens,
            temperature=self._config.temperature,
        )

        if not completion.choices or completion.choices[0].message.content is None:
            raise GenerationBackendError(self.name, "response carried no message content")

        return completion.choices[0].message.content

    async def close(self) -> None:
        """Close the API client."""
        if self._client is not None:
            await self._client.close()
            self._client = None
