"""Retry policy for upstream HTTP delivery."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TypeVar
from collections.abc import Awaitable, Callable

from loguru import logger

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Linear-backoff retry policy.

    ``max_attempts`` counts every try, the first one included. The delay
    before attempt ``n`` is ``base_delay_seconds * (n - 1)``.
    """

    max_attempts: int = 3
    base_delay_seconds: float = 1.0

    def delay_before(self, attempt: int) -> float:
        return self.base_delay_seconds * max(0, attempt - 1)


async def with_retry(
    fn: Callable[[int], Awaitable[T]],
    policy: RetryPolicy,
    *,
    is_retryable: Callable[[Exception], bool],
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """Run ``fn(attempt)`` until it succeeds, fails non-retryably, or attempts run out.

    The last observed failure is re-raised.
    """
    attempts = max(1, policy.max_attempts)
    last_exc: Exception | None = None
    for attempt in range(1, attempts + 1):
        if attempt > 1:
            delay = policy.delay_before(attempt)
            logger.debug("Retrying in {:.2f}s (attempt {}/{})", delay, attempt, attempts)
            await sleep(delay)
        try:
            return await fn(attempt)
        except Exception as exc:
            last_exc = exc
            if not is_retryable(exc):
                raise
            logger.debug("Attempt {}/{} failed: {}", attempt, attempts, exc)
    assert last_exc is not None
    raise last_exc
