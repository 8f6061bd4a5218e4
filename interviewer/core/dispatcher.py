"""
Failover Dispatcher

Sends a prompt to the first provider in the pool that can answer it.
Providers are always tried in configuration order; quota failures
mark a provider exhausted so later calls skip it.
"""

import logging

from interviewer.core.providers import ProviderError, ProviderPool
from interviewer.core.retry import ErrorKind, RetryExecutor, classify_error

logger = logging.getLogger(__name__)


class AllProvidersUnavailableError(ProviderError):
    """No provider produced a result."""

    def __init__(self, exhausted: int, total: int, last_error: Exception | None = None):
        self.exhausted = exhausted
        self.total = total
        self.last_error = last_error
        message = f"All AI providers unavailable ({exhausted}/{total} quota exhausted)"
        if last_error is not None:
            message += f"; last error: {last_error}"
        super().__init__(message)


class FailoverDispatcher:
    """Static, order-based failover across a ProviderPool."""

    def __init__(self, pool: ProviderPool, retry: RetryExecutor | None = None):
        self.pool = pool
        self.retry = retry or RetryExecutor()

    async def generate(self, prompt: str) -> str:
        """
        Generate text for a prompt.

        Raises:
            AllProvidersUnavailableError: every provider failed or none is configured
        """
        if not len(self.pool):
            raise AllProvidersUnavailableError(exhausted=0, total=0)

        if not self.pool.available():
            self.pool.reset_all()

        last_error: Exception | None = None

        for provider in self.pool.providers:
            if provider.exhausted:
                continue

            try:
                text = await self.retry.run(
                    lambda: provider.generate(prompt),
                    label=provider.name,
                )
            except Exception as e:
                last_error = e
                if classify_error(e) == ErrorKind.QUOTA:
                    self.pool.mark_exhausted(provider)
                else:
                    logger.warning(f"{provider.name} failed, trying next provider: {e}")
                continue

            logger.debug(f"{provider.name} answered ({len(text)} chars)")
            return text

        raise AllProvidersUnavailableError(
            exhausted=len(self.pool.exhausted()),
            total=len(self.pool),
            last_error=last_error,
        )
