"""AssemblyAI ASR - Cloud batch transcription.

Uses AssemblyAI's REST API:
1. POST /v2/upload with the raw audio bytes
2. POST /v2/transcript referencing the uploaded audio
3. GET /v2/transcript/{id} until status is completed or error

The whole sequence is bounded by timeout_s.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx

from src.audio.asr.base import BaseTranscriber
from src.config.constants import RELAY
from src.config.settings import get_settings
from src.exceptions import MissingConfigError, SpeechBackendError
from src.observability.logging import get_logger
from src.utils.async_timeout import with_timeout

logger = get_logger(__name__)


@dataclass
class AssemblyAIConfig:
    """Configuration for AssemblyAI transcription."""

    api_key: str
    base_url: str = "https://api.assemblyai.com"
    timeout_s: float = RELAY.ASR_TIMEOUT_S
    poll_interval_s: float = RELAY.ASR_POLL_INTERVAL_S
    request_timeout_s: float = 15.0


class AssemblyAITranscriber(BaseTranscriber):
    """AssemblyAI transcription engine.

    Usage:
        asr = AssemblyAITranscriber(AssemblyAIConfig(api_key="..."))
        text = await asr.transcribe(audio_bytes)
        await asr.close()
    """

    def __init__(
        self,
        config: AssemblyAIConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if config is None:
            settings = get_settings()
            if not settings.assemblyai_api_key:
                raise MissingConfigError(
                    "ASSEMBLYAI_API_KEY", "required when ASR_ENGINE=assemblyai"
                )
            config = AssemblyAIConfig(
                api_key=settings.assemblyai_api_key,
                base_url=settings.assemblyai_base_url,
                timeout_s=settings.asr_timeout_s,
                poll_interval_s=settings.asr_poll_interval_s,
            )

        self._config = config
        self._client = client
        self._owns_client = client is None

    @property
    def name(self) -> str:
        return "assemblyai"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                headers={"authorization": self._config.api_key},
                timeout=self._config.request_timeout_s,
            )
        return self._client

    async def _transcribe(self, audio: bytes) -> str | None:
        return await with_timeout(
            self._run(audio),
            timeout_s=self._config.timeout_s,
            operation="AssemblyAI transcription",
        )

    async def _run(self, audio: bytes) -> str | None:
        client = self._get_client()

        upload = await client.post("/v2/upload", content=audio)
        upload.raise_for_status()
        upload_url = upload.json()["upload_url"]

        created = await client.post("/v2/transcript", json={"audio_url": upload_url})
        created.raise_for_status()
        transcript = created.json()
        transcript_id = transcript["id"]

        logger.debug(
            "assemblyai_transcript_created",
            transcript_id=transcript_id,
            audio_bytes=len(audio),
        )

        while True:
            status = transcript.get("status")
            if status == "completed":
                return transcript.get("text")
            if status == "error":
                raise SpeechBackendError(
                    self.name, transcript.get("error") or "transcription failed"
                )

            await asyncio.sleep(self._config.poll_interval_s)
            polled = await client.get(f"/v2/transcript/{transcript_id}")
            polled.raise_for_status()
            transcript = polled.json()

    async def close(self) -> None:
        """Close the HTTP client if this engine created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
