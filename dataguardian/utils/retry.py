"""
Retry utility with exponential backoff for transient upstream failures.
Used around the AI summary call, which is the only remote dependency
that is worth retrying (rate limits and 5xx responses).
"""

from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable, TypeVar

from dataguardian.utils import logger

log = logger.create_logger("Retry")

T = TypeVar("T")


def _status_of(error: BaseException) -> int | None:
    """Return an HTTP status carried by *error*, if any."""
    for attr in ("status", "status_code"):
        status = getattr(error, attr, None)
        if isinstance(status, int):
            return status
    return None


def _is_rate_limit_error(error: BaseException) -> bool:
    """Check if the error is a rate limit (429) error."""
    if _status_of(error) == 429:
        return True
    err_str = str(error)
    return "429" in err_str or "rate limit" in err_str.lower()


def _is_retryable_error(error: BaseException) -> bool:
    """Check if the error is retryable (rate limit, server error or dropped connection)."""
    if _is_rate_limit_error(error):
        return True
    status = _status_of(error)
    if status is not None and 500 <= status < 600:
        return True
    return isinstance(error, (ConnectionError, TimeoutError))


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 2,
    initial_delay_ms: int = 1000,
    max_delay_ms: int = 10000,
    backoff_multiplier: float = 2.0,
    context: str | None = None,
) -> T:
    """
    Execute an async function with automatic retry on transient failures.
    Uses exponential backoff with jitter; non-retryable errors are raised
    immediately.
    """
    delay = initial_delay_ms

    for attempt in range(max_retries + 1):
        try:
            return await fn()
        except Exception as error:
            if not _is_retryable_error(error) or attempt >= max_retries:
                if attempt >= max_retries:
                    log.warn(
                        "All retry attempts exhausted",
                        {"context": context, "attempts": attempt + 1, "error": str(error)},
                    )
                raise

            jitter = delay * 0.2 * (random.random() * 2 - 1)
            delay_with_jitter = min(round(delay + jitter), max_delay_ms)
            log.warn(
                "Retrying after transient error",
                {
                    "context": context,
                    "attempt": attempt + 1,
                    "maxRetries": max_retries,
                    "delayMs": delay_with_jitter,
                    "isRateLimit": _is_rate_limit_error(error),
                    "error": str(error)[:100],
                },
            )
            await asyncio.sleep(delay_with_jitter / 1000)
            delay = min(int(delay * backoff_multiplier), max_delay_ms)

    raise AssertionError("unreachable")
