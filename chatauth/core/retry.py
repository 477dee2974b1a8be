"""Retry utilities for async operations.

Exponential backoff for transient failures talking to the identity provider.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 2
DEFAULT_BASE_DELAY = 0.2  # seconds


def _calculate_delay(attempt: int, base_delay: float = DEFAULT_BASE_DELAY) -> float:
    """Return base_delay * 2^attempt for a zero-indexed attempt."""
    return base_delay * (2**attempt)


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    attempts: int = DEFAULT_ATTEMPTS,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    base_delay: float = DEFAULT_BASE_DELAY,
) -> T:
    """Execute async function with exponential backoff retry.

    Args:
        fn: Async function to execute (typically a lambda or closure)
        attempts: Maximum number of attempts
        exceptions: Tuple of exception types to catch and retry
        base_delay: Base delay in seconds for exponential backoff

    Returns:
        Result from successful function execution

    Raises:
        The last exception if all attempts fail
    """
    last_error: Exception | None = None

    for attempt in range(attempts):
        try:
            return await fn()
        except exceptions as e:
            last_error = e
            if attempt < attempts - 1:
                delay = _calculate_delay(attempt, base_delay)
                logger.warning(
                    "Attempt %d/%d failed (%s), retrying in %.2fs",
                    attempt + 1,
                    attempts,
                    e.__class__.__name__,
                    delay,
                )
                await asyncio.sleep(delay)

    raise last_error  # type: ignore[misc]
