"""Bounded retry with exponential backoff for external API calls.

Every failure is retryable up to the attempt cap. There is no jitter and no
per-error classification; the error types below only let adapters describe
what went wrong in logs and API responses.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryableError(Exception):
    """Base class for transport-level failures raised by provider adapters."""


class NetworkError(RetryableError):
    """Connection reset, DNS failure, read timeout and the like."""


class APIRateLimitError(RetryableError):
    """Provider answered with a rate limit (HTTP 429 or equivalent)."""


class TemporaryServiceError(RetryableError):
    """Provider answered with a 5xx or reported itself unavailable."""


def backoff_delay_ms(attempt: int, base_delay_ms: float) -> float:
    """Delay to wait after a failed ``attempt`` (1-based)."""
    return base_delay_ms * 2 ** (attempt - 1)


async def with_retry(
    operation: Callable[[int], Awaitable[T]],
    max_attempts: int = 3,
    base_delay_ms: float = 500,
    *,
    label: str = "operation",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run ``operation`` until it succeeds or ``max_attempts`` is reached.

    Args:
        operation: Callable receiving the 1-based attempt number and returning
            an awaitable.
        max_attempts: Total number of attempts, including the first one.
        base_delay_ms: Delay after the first failure. Doubles after each
            subsequent failure.
        label: Name used in log messages.
        sleep: Awaitable sleep taking seconds. Injected by tests.

    Returns:
        Whatever the first successful attempt returned.

    Raises:
        The exception raised by the final attempt.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    last_error: Exception | None = None
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation(attempt)
        except Exception as e:
            last_error = e
            if attempt == max_attempts:
                break
            delay_ms = backoff_delay_ms(attempt, base_delay_ms)
            logger.warning(
                f"{label} failed (attempt {attempt}/{max_attempts}): {e}. "
                f"Retrying in {delay_ms:.0f}ms"
            )
            await sleep(delay_ms / 1000)

    logger.error(f"{label} failed after {max_attempts} attempts: {last_error}")
    assert last_error is not None
    raise last_error
