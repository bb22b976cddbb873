"""
Timeout and retry helpers for remote calls.

Transient failures (timeouts, connection problems, HTTP 5xx) are retried
with exponential backoff and jitter. Client errors (4xx) and anything else
fail immediately.

Example:
    >>> policy = RetryPolicy(max_retries=2, base_delay=0.5, timeout=10.0)
    >>> tasks = await call_with_retry(remote.get_tasks, "2025-01-15", policy=policy)
"""
import asyncio
import logging
import random
from collections.abc import Awaitable
from typing import Any, Callable, Optional, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """
    Configuration for timeout and retry behavior.

    Attributes:
        max_retries: Retry attempts after the first call (default: 2)
        base_delay: Delay in seconds before the first retry (default: 0.5)
        multiplier: Exponential backoff multiplier (default: 2.0)
        jitter_ratio: Random variance applied to each delay (default: 0.2 = ±20%)
        timeout: Per-attempt timeout in seconds, None to wait indefinitely
    """

    def __init__(
        self,
        max_retries: int = 2,
        base_delay: float = 0.5,
        multiplier: float = 2.0,
        jitter_ratio: float = 0.2,
        timeout: Optional[float] = 15.0,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        if multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")
        if not 0.0 <= jitter_ratio <= 1.0:
            raise ValueError("jitter_ratio must be between 0.0 and 1.0")
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive")

        self.max_retries = max_retries
        self.base_delay = base_delay
        self.multiplier = multiplier
        self.jitter_ratio = jitter_ratio
        self.timeout = timeout

    def calculate_delay(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (0-indexed)."""
        delay = self.base_delay * (self.multiplier**attempt)
        variance = delay * self.jitter_ratio
        delay += random.uniform(-variance, variance)
        return max(0.0, delay)


def is_retryable_error(exception: BaseException) -> bool:
    """
    Determine if an exception represents a transient, retryable error.

    Args:
        exception: Exception raised by a remote call

    Returns:
        True for timeouts, transport errors and HTTP 5xx responses
    """
    # HTTPStatusError first: only 5xx is transient
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code >= 500
    if isinstance(exception, (asyncio.TimeoutError, httpx.TimeoutException)):
        return True
    if isinstance(exception, httpx.TransportError):
        return True
    return False


async def call_with_retry(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    policy: Optional[RetryPolicy] = None,
    **kwargs: Any,
) -> T:
    """
    Await ``func(*args, **kwargs)`` with a per-attempt timeout and bounded retry.

    Args:
        func: Coroutine function to call
        policy: Retry configuration (defaults to ``RetryPolicy()``)

    Returns:
        Result of the first successful attempt

    Raises:
        The last exception once retries are exhausted, or immediately for
        non-retryable errors
    """
    policy = policy or RetryPolicy()
    name = getattr(func, "__name__", repr(func))

    attempt = 0
    while True:
        try:
            if policy.timeout is None:
                return await func(*args, **kwargs)
            return await asyncio.wait_for(func(*args, **kwargs), timeout=policy.timeout)
        except Exception as e:
            if attempt >= policy.max_retries or not is_retryable_error(e):
                raise
            delay = policy.calculate_delay(attempt)
            attempt += 1
            logger.warning(
                "%s failed (%s), retrying in %.2fs (attempt %d/%d)",
                name,
                e.__class__.__name__,
                delay,
                attempt,
                policy.max_retries,
            )
            await asyncio.sleep(delay)
