"""Voice Relay Exception Hierarchy.

Provides structured exception classes for the relay pipeline.

Hierarchy:
    RelayError (base)
    ├── EventError
    │   ├── MalformedEventError
    │   └── AudioUnintelligibleError
    ├── ConfigurationError
    │   └── MissingConfigError
    ├── ASRError
    │   └── SpeechBackendError
    └── LLMError
        └── GenerationBackendError
"""

from typing import Any


class RelayError(Exception):
    """Base exception for all relay errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# Event Errors
# =============================================================================


class EventError(RelayError):
    """Base exception for inbound event errors."""

    pass


class MalformedEventError(EventError):
    """Raised when an inbound frame cannot be turned into an event."""

    def __init__(self, reason: str, frame_type: str | None = None) -> None:
        details: dict[str, Any] = {"reason": reason}
        if frame_type is not None:
            details["frame_type"] = frame_type
        super().__init__(
            message=f"Malformed event: {reason}",
            details=details,
            recoverable=True,  # Connection stays open for the next frame
        )


class AudioUnintelligibleError(EventError):
    """Raised when a transcript comes back empty or whitespace-only."""

    def __init__(self, room_id: str | None = None) -> None:
        details = {"room_id": room_id} if room_id else {}
        super().__init__(
            message="Could not understand audio",
            details=details,
            recoverable=True,
        )


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(RelayError):
    """Base exception for configuration-related errors."""

    pass


class MissingConfigError(ConfigurationError):
    """Raised when a required configuration is missing."""

    def __init__(self, config_key: str, description: str | None = None) -> None:
        message = f"Missing required configuration: {config_key}"
        if description:
            message += f" - {description}"
        super().__init__(
            message=message,
            details={"config_key": config_key},
            recoverable=False,
        )


# =============================================================================
# ASR Errors
# =============================================================================


class ASRError(RelayError):
    """Base exception for ASR-related errors."""

    pass


class SpeechBackendError(ASRError):
    """Raised when the transcription backend fails for any reason."""

    def __init__(self, backend: str, reason: str) -> None:
        super().__init__(
            message=f"Speech backend {backend} failed: {reason}",
            details={"backend": backend, "reason": reason},
            recoverable=True,
        )
        self.backend = backend
        self.reason = reason


# =============================================================================
# LLM Errors
# =============================================================================


class LLMError(RelayError):
    """Base exception for LLM-related errors."""

    pass


class GenerationBackendError(LLMError):
    """Raised when the response generation backend fails."""

    def __init__(
        self,
        backend: str,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        details: dict[str, Any] = {"backend": backend, "reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            message=f"Generation backend {backend} failed: {reason}",
            details=details,
            recoverable=True,  # Replaced by the fallback reply
        )
        self.backend = backend
        self.reason = reason
        self.status_code = status_code
