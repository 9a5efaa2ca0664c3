"""Application Settings - Environment-based configuration.

Uses Pydantic Settings for validation and type coercion.

Required variables fail startup if missing.
Conditional variables are required only when their backend is selected.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.config.constants import RELAY


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API bind host")
    api_port: int = Field(
        default=4001,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("api_port", "port"),
        description="API port (API_PORT or PORT)",
    )
    log_level: Literal["DEBUG", "INFO", "WARN", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment name"
    )
    static_dir: str = Field(
        default="public", description="Directory served at /static when present"
    )

    # LiveKit (room admission tokens)
    livekit_host: str = Field(default="LIVEKIT_HOST", description="LiveKit server URL")
    livekit_api_key: str = Field(default="LIVEKIT_API_KEY", description="LiveKit API key")
    livekit_api_secret: str = Field(
        default="LIVEKIT_API_SECRET", description="LiveKit API secret"
    )
    room_prefix: str = Field(
        default=RELAY.ROOM_PREFIX, description="Prefix for server-minted room names"
    )
    default_room: str = Field(
        default=RELAY.DEFAULT_ROOM,
        description="Room used by text messages that carry no roomName",
    )

    # ASR Configuration
    asr_engine: Literal["mock", "assemblyai"] = Field(
        default="assemblyai", description="Transcription backend"
    )
    assemblyai_api_key: str | None = Field(
        default=None, description="AssemblyAI API key"
    )
    assemblyai_base_url: str = Field(
        default="https://api.assemblyai.com", description="AssemblyAI API base URL"
    )
    asr_timeout_s: float = Field(
        default=RELAY.ASR_TIMEOUT_S,
        gt=0,
        le=600,
        description="Upper bound on a single transcription",
    )
    asr_poll_interval_s: float = Field(
        default=RELAY.ASR_POLL_INTERVAL_S,
        gt=0,
        le=30,
        description="Transcript status polling interval",
    )

    # LLM Configuration
    llm_engine: Literal["mock", "blackbox", "openai"] = Field(
        default="blackbox", description="Response generation backend"
    )
    blackbox_api_key: str | None = Field(
        default=None, description="Blackbox validation key"
    )
    blackbox_url: str = Field(
        default="https://www.blackbox.ai/api/chat", description="Blackbox chat endpoint"
    )
    llm_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI-compatible API base URL (llm_engine=openai)",
    )
    llm_api_key: str | None = Field(
        default=None, description="API key for the OpenAI-compatible backend"
    )
    llm_model: str = Field(default="gpt-4o-mini", description="Chat model name")
    llm_max_tokens: int = Field(
        default=RELAY.GENERATION_MAX_TOKENS, ge=1, le=8192, description="Reply token cap"
    )
    llm_timeout_s: float = Field(
        default=RELAY.LLM_TIMEOUT_S,
        gt=0,
        le=300,
        description="Upper bound on a single generation",
    )
    system_prompt: str = Field(
        default=(
            "You are a helpful AI assistant speaking with a user through a voice "
            "interface. Keep your responses concise and conversational and short."
        ),
        description="System prompt for history-aware backends",
    )
    fallback_reply: str = Field(
        default=RELAY.FALLBACK_REPLY,
        description="Assistant text recorded when generation fails",
    )

    # Observability
    metrics_enabled: bool = Field(default=True, description="Expose Prometheus metrics")

    def model_post_init(self, __context) -> None:
        """Validate conditional requirements after model creation."""
        if self.environment == "production":
            if self.asr_engine == "assemblyai" and not self.assemblyai_api_key:
                raise ValueError(
                    "assemblyai_api_key is required when asr_engine=assemblyai "
                    "in production environment"
                )
            if self.llm_engine == "openai" and not self.llm_api_key:
                raise ValueError(
                    "llm_api_key is required when llm_engine=openai "
                    "in production environment"
                )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
