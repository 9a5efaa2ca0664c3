"""Async Timeout Utilities.

Provides timeout wrappers for adapter calls:
- Operation timeout helper
- Timeout exception handling

Backend calls are bounded so a stalled external service cannot leave a
pending task per inbound event.
"""

import asyncio
from typing import Awaitable, TypeVar

from src.exceptions import RelayError

T = TypeVar("T")


class AsyncTimeoutError(RelayError):
    """Raised when an async operation times out."""

    def __init__(
        self,
        operation: str,
        timeout_s: float,
        details: dict | None = None,
    ) -> None:
        super().__init__(
            message=f"{operation} timed out after {timeout_s}s",
            details={
                "operation": operation,
                "timeout_s": timeout_s,
                **(details or {}),
            },
            recoverable=True,  # Caller can retry
        )
        self.operation = operation
        self.timeout_s = timeout_s


async def with_timeout(
    coro: Awaitable[T],
    timeout_s: float,
    operation: str = "operation",
) -> T:
    """Execute a coroutine with a timeout.

    Simple wrapper around asyncio.wait_for with custom exception.

    Args:
        coro: Coroutine to execute
        timeout_s: Maximum time in seconds
        operation: Name of operation for error messages

    Returns:
        Result of the coroutine

    Raises:
        AsyncTimeoutError: If operation times out

    Example:
        text = await with_timeout(
            transcriber.transcribe(audio),
            timeout_s=60.0,
            operation="transcription",
        )
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout_s)
    except asyncio.TimeoutError:
        raise AsyncTimeoutError(operation, timeout_s)
