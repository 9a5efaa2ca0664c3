"""Structured Logging - JSON logs with room correlation.

Provides structured logging for:
- Connection events (open, close)
- Room events (created, exchange recorded)
- Pipeline stage failures (speech backend, generation fallback)
- Malformed frames

Logs emitted while handling an event carry room_id for correlation.
"""

import logging
import sys

import structlog


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, output JSON; else human-readable
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    # WARN is accepted by settings but logging only knows WARNING
    level_name = "WARNING" if level.upper() == "WARN" else level.upper()

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name),
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


def bind_room(room_id: str) -> None:
    """Bind room_id to all logs in current context.

    Args:
        room_id: Room identifier
    """
    structlog.contextvars.bind_contextvars(room_id=room_id)


def unbind_room() -> None:
    """Remove room_id from log context."""
    structlog.contextvars.unbind_contextvars("room_id")


class RoomLogger:
    """Logger for room conversation events."""

    def __init__(self, room_id: str) -> None:
        self._room_id = room_id
        self._log = get_logger("room").bind(room_id=room_id)

    def speech_recognized(self, text: str) -> None:
        """Log a transcript returned by the speech backend."""
        self._log.info(
            "speech_recognized",
            event_type="speech.recognized",
            chars=len(text),
        )

    def speech_unintelligible(self) -> None:
        """Log a blank transcript."""
        self._log.info(
            "speech_unintelligible",
            event_type="speech.unintelligible",
        )

    def speech_failed(self, error: str) -> None:
        """Log a speech backend failure."""
        self._log.error(
            "speech_failed",
            event_type="speech.failed",
            error=error,
        )

    def generation_fallback(self, error: str) -> None:
        """Log a generation failure replaced by the fallback reply."""
        self._log.warning(
            "generation_fallback",
            event_type="generation.fallback",
            error=error,
        )

    def exchange_recorded(self, turns: int, elapsed_ms: float) -> None:
        """Log a user/assistant pair appended to the room history."""
        self._log.info(
            "exchange_recorded",
            event_type="room.exchange_recorded",
            turns=turns,
            elapsed_ms=elapsed_ms,
        )


def init_logging(json_format: bool = True, level: str = "INFO") -> None:
    """Initialize logging with defaults.

    Call this once at application startup.
    """
    configure_logging(level=level, json_format=json_format)
