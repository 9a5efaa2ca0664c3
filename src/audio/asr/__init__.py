"""Automatic Speech Recognition module.

Provides pluggable transcription engines.

Available engines:
- MockTranscriber: For testing (fixed transcript)
- AssemblyAITranscriber: Cloud batch transcription (production)

Usage:
    from src.audio.asr import create_transcriber

    asr = create_transcriber("assemblyai")
    text = await asr.transcribe(audio_bytes)
"""

from __future__ import annotations

from src.audio.asr.base import BaseTranscriber, MockTranscriber, Transcriber

__all__ = [
    # Protocol and base
    "Transcriber",
    "BaseTranscriber",
    # Implementations
    "MockTranscriber",
    "AssemblyAITranscriber",
    "AssemblyAIConfig",
    # Factory
    "create_transcriber",
]


# Lazy imports for optional engines
def __getattr__(name: str):
    """Lazy import for optional ASR engines."""
    if name in ("AssemblyAITranscriber", "AssemblyAIConfig"):
        from src.audio.asr.assemblyai import AssemblyAIConfig, AssemblyAITranscriber

        if name == "AssemblyAITranscriber":
            return AssemblyAITranscriber
        return AssemblyAIConfig

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def create_transcriber(
    engine: str | None = None,
    **kwargs,
) -> Transcriber:
    """Factory function to create transcription engines.

    Args:
        engine: Engine type ("mock", "assemblyai"). If None, uses ASR_ENGINE
            from settings.
        **kwargs: Engine-specific configuration

    Returns:
        Configured transcription engine

    Raises:
        ValueError: If engine type is unknown
        MissingConfigError: If the engine's API key is not configured
    """
    if engine is None:
        from src.config.settings import get_settings
        engine = get_settings().asr_engine

    if engine == "mock":
        return MockTranscriber(
            transcript=kwargs.get("transcript", ""),
            error=kwargs.get("error"),
        )

    elif engine == "assemblyai":
        from src.audio.asr.assemblyai import AssemblyAIConfig, AssemblyAITranscriber

        if "api_key" in kwargs:
            config = AssemblyAIConfig(**kwargs)
            return AssemblyAITranscriber(config)
        return AssemblyAITranscriber()

    else:
        raise ValueError(
            f"Unknown ASR engine: {engine}. "
            f"Available: mock, assemblyai"
        )
