"""Blackbox Client - Single-message chat generation over HTTP.

Posts the user's current message to the Blackbox chat endpoint and returns
the plain-text response body. Prior turns are not forwarded; the endpoint
is used as a stateless single-shot responder.
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from typing import Any, Sequence

import httpx

from src.config.constants import RELAY
from src.config.settings import get_settings
from src.exceptions import GenerationBackendError
from src.llm.base import BaseResponder
from src.observability.logging import get_logger
from src.orchestrator.events import Turn

logger = get_logger(__name__)

_MESSAGE_ID_ALPHABET = string.ascii_letters + string.digits


@dataclass
class BlackboxConfig:
    """Configuration for the Blackbox chat client."""

    url: str = "https://www.blackbox.ai/api/chat"
    api_key: str | None = None
    max_tokens: int = RELAY.GENERATION_MAX_TOKENS
    timeout_s: float = RELAY.LLM_TIMEOUT_S


def _message_id() -> str:
    return "".join(secrets.choice(_MESSAGE_ID_ALPHABET) for _ in range(7))


def build_payload(prompt: str, config: BlackboxConfig) -> dict[str, Any]:
    """Build the chat request body.

    Args:
        prompt: Current user message
        config: Client configuration

    Returns:
        JSON-serializable request payload
    """
    return {
        "messages": [
            {
                "role": "user",
                "content": prompt,
                "id": _message_id(),
            }
        ],
        "agentMode": {},
        "previewToken": None,
        "userId": None,
        "codeModelMode": True,
        "trendingAgentMode": {},
        "isMicMode": False,
        "userSystemPrompt": None,
        "maxTokens": config.max_tokens,
        "validated": config.api_key,
    }


class BlackboxClient(BaseResponder):
    """Blackbox chat responder.

    Usage:
        client = BlackboxClient(BlackboxConfig(api_key="..."))
        text = await client.generate("hello", history)
        await client.close()
    """

    def __init__(
        self,
        config: BlackboxConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if config is None:
            settings = get_settings()
            config = BlackboxConfig(
                url=settings.blackbox_url,
                api_key=settings.blackbox_api_key,
                max_tokens=settings.llm_max_tokens,
                timeout_s=settings.llm_timeout_s,
            )

        super().__init__(timeout_s=config.timeout_s)
        self._config = config
        self._client = client
        self._owns_client = client is None

    @property
    def name(self) -> str:
        return "blackbox"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={
                    "accept": "*/*",
                    "content-type": "application/json",
                },
                timeout=self._config.timeout_s,
            )
        return self._client

    async def _generate(self, prompt: str, history: Sequence[Turn]) -> str:
        response = await self._get_client().post(
            self._config.url,
            json=build_payload(prompt, self._config),
        )

        if not response.is_success:
            raise GenerationBackendError(
                self.name,
                "non-success response",
                status_code=response.status_code,
            )

        logger.debug(
            "blackbox_response",
            status_code=response.status_code,
            chars=len(response.text),
        )
        return response.text

    async def close(self) -> None:
        """Close the HTTP client if this responder created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
