"""ASR Base Interface - Pluggable speech transcription.

Defines the interface for transcription engines. An engine takes a complete
recorded utterance and returns its text.

Every backend failure surfaces as SpeechBackendError. A blank transcript is
a successful result; deciding that it is unintelligible is the caller's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol

from src.exceptions import SpeechBackendError
from src.observability.logging import get_logger

logger = get_logger(__name__)


class Transcriber(Protocol):
    """Protocol for pluggable transcription engines.

    Usage:
        asr = AssemblyAITranscriber(config)
        text = await asr.transcribe(audio_bytes)
        await asr.close()
    """

    @property
    def name(self) -> str:
        """Engine name for logs and errors."""
        ...

    async def transcribe(self, audio: bytes) -> str:
        """Transcribe a recorded utterance.

        Args:
            audio: Encoded audio bytes (e.g. WAV/WebM from the browser)

        Returns:
            Transcript text, possibly empty

        Raises:
            SpeechBackendError: On any backend failure
        """
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...


class BaseTranscriber(ABC):
    """Base class for transcription engines.

    Subclasses implement _transcribe. Anything it raises other than
    SpeechBackendError is wrapped so callers see one failure type.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine name."""
        ...

    @abstractmethod
    async def _transcribe(self, audio: bytes) -> str | None:
        """Backend-specific transcription."""
        ...

    async def transcribe(self, audio: bytes) -> str:
        """Transcribe audio, normalizing failures and missing text."""
        try:
            text = await self._transcribe(audio)
        except SpeechBackendError:
            raise
        except Exception as e:
            logger.warning("asr_backend_error", engine=self.name, error=str(e))
            raise SpeechBackendError(self.name, str(e)) from e

        return text or ""

    async def close(self) -> None:
        """Release backend resources."""
        return None


class MockTranscriber(BaseTranscriber):
    """Mock transcription engine for testing.

    Returns a fixed transcript, or raises a configured error.
    Every call's audio is recorded in `calls`.
    """

    def __init__(
        self,
        transcript: str = "",
        error: Exception | None = None,
    ) -> None:
        self._transcript = transcript
        self._error = error
        self.calls: list[bytes] = []

    @property
    def name(self) -> str:
        return "mock"

    async def _transcribe(self, audio: bytes) -> str | None:
        self.calls.append(audio)
        if self._error is not None:
            raise self._error
        return self._transcript
