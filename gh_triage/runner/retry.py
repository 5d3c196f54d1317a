"""Bounded retry for remote calls.

Attempts are made back to back with no delay between them.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3


def with_retry(
    operation: Callable[[], T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    description: str = "operation",
) -> T:
    """Run ``operation`` until it succeeds or ``max_attempts`` are used up.

    Args:
        operation: Zero-argument callable performing the remote call
        max_attempts: Total number of attempts, including the first
        description: Short label used in log messages

    Returns:
        The value returned by the first successful attempt

    Raises:
        Exception: The exception of the final attempt, unchanged
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return operation()
        except Exception as e:
            if attempt == max_attempts:
                logger.error(
                    "%s failed after %d attempts: %s", description, attempt, e
                )
                raise
            logger.warning(
                "%s failed: %s. Retrying (attempt %d out of %d)...",
                description,
                e,
                attempt,
                max_attempts,
            )

    raise RuntimeError(f"{description} completed without result or exception")
