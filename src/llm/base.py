"""Response Generation Interface - Pluggable reply backends.

A responder takes the user's current message plus the room history and
returns the assistant's reply text. Whether the history reaches the backend
is the responder's policy.

Every backend failure (network error, non-success status, unusable payload,
timeout) surfaces as GenerationBackendError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, Sequence

from src.exceptions import GenerationBackendError
from src.observability.logging import get_logger
from src.orchestrator.events import Turn
from src.utils.async_timeout import AsyncTimeoutError, with_timeout

logger = get_logger(__name__)


class Responder(Protocol):
    """Protocol for pluggable response generation backends."""

    @property
    def name(self) -> str:
        """Backend name for logs and errors."""
        ...

    async def generate(self, prompt: str, history: Sequence[Turn]) -> str:
        """Generate a reply.

        Args:
            prompt: Current user message
            history: Prior turns of the room (read-only)

        Returns:
            Reply text

        Raises:
            GenerationBackendError: On any backend failure
        """
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...


class BaseResponder(ABC):
    """Base class for response backends.

    Bounds each call with timeout_s and wraps anything _generate raises
    into GenerationBackendError.
    """

    def __init__(self, timeout_s: float) -> None:
        self._timeout_s = timeout_s

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name."""
        ...

    @abstractmethod
    async def _generate(self, prompt: str, history: Sequence[Turn]) -> str:
        """Backend-specific generation."""
        ...

    async def generate(self, prompt: str, history: Sequence[Turn]) -> str:
        """Generate a reply with timeout and error normalization."""
        try:
            return await with_timeout(
                self._generate(prompt, history),
                timeout_s=self._timeout_s,
                operation=f"{self.name} generation",
            )
        except GenerationBackendError:
            raise
        except AsyncTimeoutError as e:
            raise GenerationBackendError(self.name, e.message) from e
        except Exception as e:
            logger.warning("llm_backend_error", backend=self.name, error=str(e))
            raise GenerationBackendError(self.name, str(e)) from e

    async def close(self) -> None:
        """Release backend resources."""
        return None
