"""Voice Relay - Room-scoped speech and text conversation relay."""

__version__ = "1.0.0"

# Export exception hierarchy for easy importing
from src.exceptions import (
    RelayError,
    EventError,
    MalformedEventError,
    AudioUnintelligibleError,
    ConfigurationError,
    MissingConfigError,
    ASRError,
    SpeechBackendError,
    LLMError,
    GenerationBackendError,
)

__all__ = [
    "__version__",
    # Base
    "RelayError",
    # Events
    "EventError",
    "MalformedEventError",
    "AudioUnintelligibleError",
    # Configuration
    "ConfigurationError",
    "MissingConfigError",
    # ASR
    "ASRError",
    "SpeechBackendError",
    # LLM
    "LLMError",
    "GenerationBackendError",
]
