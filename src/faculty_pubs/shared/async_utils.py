"""
Async Utilities for Efficient API Calls.

Provides:
- All-settled parallel execution (results and exceptions, in call order)
- Fixed-size batching for bulk lookups
- Circuit breaker for fault tolerance
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from .exceptions import RateLimitError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Iterator, Sequence

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Parallel Execution
# =============================================================================


async def gather_settled(*coros: Awaitable[T]) -> list[T | BaseException]:
    """
    Run coroutines concurrently and wait for every one of them to settle.

    Never short-circuits: a failing coroutine does not cancel its siblings.
    The returned list is in the same order as ``coros``; failed slots hold
    the raised exception instead of a result.

    Example:
        outcomes = await gather_settled(fetch_a(), fetch_b())
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                ...
    """
    if not coros:
        return []
    return list(await asyncio.gather(*coros, return_exceptions=True))


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive fixed-size chunks of ``items`` (last one may be shorter)."""
    if size <= 0:
        msg = f"chunk size must be positive, got {size}"
        raise ValueError(msg)
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


# =============================================================================
# Circuit Breaker Pattern
# =============================================================================


@dataclass
class CircuitBreaker:
    """
    Circuit breaker for fault tolerance.

    States:
    - CLOSED: Normal operation
    - OPEN: Failing, reject requests immediately
    - HALF_OPEN: Testing if service recovered

    Example:
        breaker = CircuitBreaker(failure_threshold=5)

        async with breaker:
            result = await risky_api_call()
    """

    failure_threshold: int = 5
    recovery_timeout: float = 30.0
    half_open_max_calls: int = 3

    _failure_count: int = field(init=False, default=0)
    _last_failure_time: float | None = field(init=False, default=None)
    _state: str = field(init=False, default="closed")
    _half_open_calls: int = field(init=False, default=0)
    _lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_open(self) -> bool:
        """Check if circuit is open (rejecting requests)."""
        if self._state == "open":
            if self._last_failure_time is not None:
                if time.monotonic() - self._last_failure_time > self.recovery_timeout:
                    return False  # Move to half-open
            return True
        return False

    async def __aenter__(self) -> CircuitBreaker:
        async with self._lock:
            if self.is_open:
                raise RateLimitError("Circuit breaker is open", retry_after=self.recovery_timeout)

            if self._state == "open":
                self._state = "half_open"
                self._half_open_calls = 0

            if self._state == "half_open":
                if self._half_open_calls >= self.half_open_max_calls:
                    raise RateLimitError(
                        "Circuit breaker is half-open (max calls reached)",
                        retry_after=self.recovery_timeout / 2,
                    )
                self._half_open_calls += 1

        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        async with self._lock:
            if exc_val is not None:
                self._failure_count += 1
                self._last_failure_time = time.monotonic()

                if self._failure_count >= self.failure_threshold:
                    self._state = "open"
                    logger.warning(f"Circuit breaker opened after {self._failure_count} failures")
            elif self._state == "half_open":
                self._state = "closed"
                self._failure_count = 0
                logger.info("Circuit breaker closed (recovered)")
            elif self._state == "closed":
                self._failure_count = max(0, self._failure_count - 1)
