"""Retry policy with exponential backoff and jitter."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

import httpx

from tada_llm.errors import GatewayError

T = TypeVar("T")

_logger = logging.getLogger(__name__)

# Substrings that mark a foreign exception as transient.
_TRANSIENT_MARKERS = (
    "rate limit",
    "429",
    "500",
    "502",
    "503",
    "504",
    "network",
    "timeout",
    "econnrefused",
    "econnreset",
    "connection refused",
    "connection reset",
)


def is_retryable(error: BaseException) -> bool:
    """Default retryability predicate."""
    if isinstance(error, GatewayError):
        return error.retryable
    if isinstance(error, (httpx.TimeoutException, httpx.TransportError)):
        return True
    message = str(error).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


@dataclass
class RetryPolicy:
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    jitter: bool = True
    retry_on: Callable[[Exception], bool] = is_retryable
    on_retry: Callable[[Exception, int, float], Any] | None = None

    def calculate_delay(self, attempt: int) -> float:
        """Delay before retrying after the zero-indexed ``attempt`` failed.

        ``min(base * 2**attempt + jitter, max_delay)`` with jitter drawn
        uniformly from ``[0, 0.3 * base * 2**attempt]``.
        """
        exponential = self.base_delay * (2 ** attempt)
        jitter = random.uniform(0, 0.3 * exponential) if self.jitter else 0.0
        return min(exponential + jitter, self.max_delay)


async def retry(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
) -> T:
    """Execute fn with retry according to policy.

    The last error is re-raised unchanged once attempts are exhausted.
    """
    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as err:
            if attempt >= policy.max_retries or not policy.retry_on(err):
                raise

            delay = policy.calculate_delay(attempt)
            _logger.warning(
                "Attempt %d/%d failed, retrying in %.2fs: %s",
                attempt + 1, policy.max_retries + 1, delay, err,
            )
            if policy.on_retry:
                policy.on_retry(err, attempt, delay)

            await asyncio.sleep(delay)
            attempt += 1
