"""
Retry Executor for provider calls

Retries a single provider call according to the kind of error:
- Quota / rate limit: raised immediately so the dispatcher can fail over
- Overload: one retry after a fixed delay
- Anything else: exponential backoff up to the attempt limit
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, TypeVar

from interviewer.core.providers import ProviderOverloadedError, QuotaExceededError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Retry-relevant classification of a provider error."""

    QUOTA = "quota"
    OVERLOAD = "overload"
    OTHER = "other"


_QUOTA_MARKERS = ("quota", "429", "rate limit", "resource_exhausted")
_OVERLOAD_MARKERS = ("503", "overloaded", "unavailable")


def classify_error(error: BaseException) -> ErrorKind:
    """Classify by type first, then by message for errors from foreign clients."""
    if isinstance(error, QuotaExceededError):
        return ErrorKind.QUOTA
    if isinstance(error, ProviderOverloadedError):
        return ErrorKind.OVERLOAD

    message = str(error).lower()
    if any(marker in message for marker in _QUOTA_MARKERS):
        return ErrorKind.QUOTA
    if any(marker in message for marker in _OVERLOAD_MARKERS):
        return ErrorKind.OVERLOAD
    return ErrorKind.OTHER


class RetryExecutor:
    """Bounded retry around a zero-argument async operation."""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        overload_delay: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.overload_delay = overload_delay
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        """Delay after the given failed attempt (1-based)."""
        return self.base_delay * (2 ** (attempt - 1))

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        label: str = "operation",
    ) -> T:
        overload_retried = False
        attempt = 0

        while True:
            attempt += 1
            try:
                return await operation()
            except Exception as e:
                kind = classify_error(e)

                if kind == ErrorKind.QUOTA:
                    logger.warning(f"{label}: quota exceeded, not retrying")
                    raise

                if attempt >= self.max_attempts:
                    logger.error(f"{label}: giving up after {attempt} attempt(s): {e}")
                    raise

                if kind == ErrorKind.OVERLOAD:
                    if overload_retried:
                        logger.warning(f"{label}: still overloaded after retry, failing over")
                        raise
                    overload_retried = True
                    delay = self.overload_delay
                    logger.warning(f"{label}: overloaded, retrying once in {delay:.1f}s")
                else:
                    delay = self.backoff_delay(attempt)
                    logger.warning(
                        f"{label}: attempt {attempt}/{self.max_attempts} failed ({e}), "
                        f"retrying in {delay:.1f}s"
                    )

                await self._sleep(delay)
