# utils/retry.py
"""
Retry with exponential backoff for idempotent API reads.

Only transient failures are retried: connection errors, timeouts and 5xx
responses. 4xx responses are returned to the caller untouched.

Example:
    >>> policy = RetryPolicy(max_retries=2, base_delay=0.5)
    >>> response = await policy.run(lambda: client.get("/teams"), "GET /teams")
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_retryable_error(exception: Exception) -> bool:
    # HTTPStatusError is also an HTTPError, check it first
    if isinstance(exception, httpx.HTTPStatusError):
        return 500 <= exception.response.status_code < 600
    if isinstance(exception, (httpx.TimeoutException, httpx.TransportError)):
        return True
    return False


class RetryPolicy:
    """
    Backoff settings for one gateway.

    Attributes:
        max_retries: retry attempts after the first call (0 disables retrying)
        base_delay: delay in seconds before the first retry
        multiplier: growth factor per attempt
        jitter_ratio: random variance applied to each delay (0.2 = ±20%)
    """

    def __init__(
        self,
        max_retries: int = 2,
        base_delay: float = 0.5,
        multiplier: float = 2.0,
        jitter_ratio: float = 0.2,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if base_delay <= 0:
            raise ValueError("base_delay must be positive")
        if multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")
        if not 0.0 <= jitter_ratio <= 1.0:
            raise ValueError("jitter_ratio must be between 0.0 and 1.0")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.multiplier = multiplier
        self.jitter_ratio = jitter_ratio

    def calculate_delay(self, attempt: int) -> float:
        delay = self.base_delay * (self.multiplier**attempt)
        variance = delay * self.jitter_ratio
        return max(0.0, delay + random.uniform(-variance, variance))

    async def run(self, call: Callable[[], Awaitable[T]], label: str = "request") -> T:
        last_exception: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            try:
                return await call()
            except Exception as e:
                last_exception = e
                if not is_retryable_error(e):
                    raise
                if attempt >= self.max_retries:
                    logger.warning(f"{label}: giving up after {attempt + 1} attempt(s): {e}")
                    raise
                delay = self.calculate_delay(attempt)
                logger.info(
                    f"{label}: retry {attempt + 1}/{self.max_retries} after {delay:.2f}s due to: {e}"
                )
                await asyncio.sleep(delay)

        # unreachable, keeps type checkers quiet
        if last_exception:
            raise last_exception
        raise RuntimeError("Retry loop completed without success or exception")
