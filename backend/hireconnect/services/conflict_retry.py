"""Bounded retry for optimistic-lock conflicts.

A ConcurrentModificationError means another writer touched the same
progress record between our read and our compare-and-swap. The operation
is re-run from the read, a bounded number of times, with a short jittered
pause. Every other error propagates on the first attempt.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from hireconnect.services.progress_errors import ConcurrentModificationError

__all__ = ["DEFAULT_MAX_ATTEMPTS", "with_conflict_retries"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
"""Attempts (including the first) before a conflict is surfaced."""

_BASE_DELAY_MS = 10
_MAX_DELAY_MS = 100


async def with_conflict_retries(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> T:
    """Execute a read-modify-write operation, retrying on CAS conflicts.

    Args:
        func: Async function to execute (no arguments). Must re-read the
            record on every call.
        max_attempts: Total attempts, at least 1.

    Returns:
        Result from the first attempt that does not conflict.

    Raises:
        ConcurrentModificationError: If every attempt conflicted.
        ValueError: If max_attempts is less than 1.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    for attempt in range(1, max_attempts + 1):
        try:
            return await func()
        except ConcurrentModificationError as e:
            if attempt == max_attempts:
                logger.warning(
                    "Progress write for subject %s still conflicting after %d attempts",
                    e.subject_id,
                    max_attempts,
                )
                raise

            base_delay = _BASE_DELAY_MS * (2 ** (attempt - 1))
            jitter = random.uniform(0, base_delay * 0.1)  # nosec B311
            delay = min(base_delay + jitter, _MAX_DELAY_MS) / 1000

            logger.info(
                "Progress write conflict for subject %s (attempt %d/%d). Retrying in %.3fs",
                e.subject_id,
                attempt,
                max_attempts,
                delay,
            )
            await asyncio.sleep(delay)

    # Loop always returns or raises
    raise RuntimeError("Retry loop exited without error or result")
