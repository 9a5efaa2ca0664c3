"""Prometheus Metrics - relay observability.

Exports:
- Outcome counts by type and failure reason
- Generation fallbacks
- Transcription and generation latencies
- Active WebSocket connections
- Rooms created
"""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, Info, generate_latest

# -----------------------------------------------------------------------------
# Latency Histograms
# -----------------------------------------------------------------------------

ASR_LATENCY = Histogram(
    "voicerelay_asr_latency_seconds",
    "Transcription backend latency",
    buckets=[0.25, 0.5, 1.0, 2.0, 3.0, 5.0, 10.0, 20.0, 30.0, 60.0],
)

LLM_LATENCY = Histogram(
    "voicerelay_llm_latency_seconds",
    "Response generation backend latency",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 3.0, 5.0, 10.0, 30.0],
)

# -----------------------------------------------------------------------------
# Counters
# -----------------------------------------------------------------------------

OUTCOMES = Counter(
    "voicerelay_outcomes_total",
    "Outcomes returned to clients",
    ["event", "outcome"],  # event: speech, text_message; outcome: reply or failure reason
)

GENERATION_FALLBACKS = Counter(
    "voicerelay_generation_fallbacks_total",
    "Generation failures replaced by the fallback reply",
)

MALFORMED_FRAMES = Counter(
    "voicerelay_malformed_frames_total",
    "Inbound frames rejected before reaching the orchestrator",
)

ROOMS_CREATED = Counter(
    "voicerelay_rooms_created_total",
    "Conversation histories created",
)

ERRORS = Counter(
    "voicerelay_errors_total",
    "Total errors by component",
    ["component", "type"],  # asr, llm, gateway
)

# -----------------------------------------------------------------------------
# Gauges
# -----------------------------------------------------------------------------

ACTIVE_CONNECTIONS = Gauge(
    "voicerelay_active_connections",
    "Currently open WebSocket connections",
)

# -----------------------------------------------------------------------------
# Info
# -----------------------------------------------------------------------------

BUILD_INFO = Info(
    "voicerelay_build",
    "Build information",
)


# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def record_asr_latency(latency_ms: float) -> None:
    """Record transcription latency in milliseconds."""
    ASR_LATENCY.observe(latency_ms / 1000.0)


def record_llm_latency(latency_ms: float) -> None:
    """Record generation latency in milliseconds."""
    LLM_LATENCY.observe(latency_ms / 1000.0)


def record_outcome(event: str, outcome: str) -> None:
    """Record an outcome sent back for an event."""
    OUTCOMES.labels(event=event, outcome=outcome).inc()


def record_generation_fallback() -> None:
    """Record a generation failure absorbed by the fallback reply."""
    GENERATION_FALLBACKS.inc()


def record_malformed_frame() -> None:
    """Record a rejected inbound frame."""
    MALFORMED_FRAMES.inc()


def record_room_created() -> None:
    """Record a new conversation history."""
    ROOMS_CREATED.inc()


def record_error(component: str, error_type: str) -> None:
    """Record error by component."""
    ERRORS.labels(component=component, type=error_type).inc()


def record_connection_open() -> None:
    """Record WebSocket connection accepted."""
    ACTIVE_CONNECTIONS.inc()


def record_connection_close() -> None:
    """Record WebSocket connection closed."""
    ACTIVE_CONNECTIONS.dec()


def set_build_info(version: str) -> None:
    """Set build information."""
    BUILD_INFO.info({"version": version})


def render_latest() -> tuple[bytes, str]:
    """Render the default registry in Prometheus text format.

    Returns:
        Tuple of (payload, content type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
