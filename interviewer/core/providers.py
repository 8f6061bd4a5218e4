"""
Text-generation providers for the AI Interviewer

A provider wraps one Gemini credential. The pool keeps them in
configuration order together with their quota exhaustion flags.
"""

import logging
from typing import Any

import httpx

from interviewer.config.settings import Settings

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """A provider call failed."""


class QuotaExceededError(ProviderError):
    """Provider reported a quota or rate limit. Never retried on the same provider."""


class ProviderOverloadedError(ProviderError):
    """Provider is temporarily overloaded (503)."""


class Provider:
    """
    Base text-generation provider.

    Subclasses implement `generate`. The `exhausted` flag is owned
    by the ProviderPool and should only be changed through it.
    """

    def __init__(self, provider_id: int, key_name: str):
        self.id = provider_id
        self.key_name = key_name
        self.exhausted = False

    @property
    def name(self) -> str:
        return f"Gemini Provider {self.id}"

    async def generate(self, prompt: str) -> str:
        raise NotImplementedError

    async def close(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} key={self.key_name} exhausted={self.exhausted}>"


class GeminiProvider(Provider):
    """Provider calling the Gemini generateContent REST endpoint."""

    QUOTA_MARKERS = ("quota", "resource_exhausted", "rate limit")
    OVERLOAD_MARKERS = ("overloaded", "unavailable")

    def __init__(
        self,
        provider_id: int,
        key_name: str,
        api_key: str,
        client: httpx.AsyncClient,
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        temperature: float = 0.7,
    ):
        if not api_key or any(ch.isspace() for ch in api_key):
            raise ValueError(f"Malformed API key in {key_name}")

        super().__init__(provider_id, key_name)
        self._api_key = api_key
        self.client = client
        self.model = model
        self.endpoint = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self.temperature = temperature

    async def generate(self, prompt: str) -> str:
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": self.temperature},
        }

        try:
            response = await self.client.post(
                self.endpoint,
                headers={"x-goog-api-key": self._api_key},
                json=payload,
            )
        except httpx.HTTPError as e:
            logger.error(f"{self.name} transport error: {e}")
            raise ProviderError(f"{self.name} request failed: {e}") from e

        if response.status_code >= 400:
            raise self._error_for(response)

        return self._extract_text(response.json())

    def _error_for(self, response: httpx.Response) -> ProviderError:
        """Map an error response onto the provider error taxonomy."""
        body = response.text[:500]
        lowered = body.lower()
        message = f"{self.name} returned {response.status_code}: {body}"

        if response.status_code == 429 or any(m in lowered for m in self.QUOTA_MARKERS):
            return QuotaExceededError(message)
        if response.status_code == 503 or any(m in lowered for m in self.OVERLOAD_MARKERS):
            return ProviderOverloadedError(message)
        return ProviderError(message)

    def _extract_text(self, result: dict[str, Any]) -> str:
        """Extract text content from a generateContent response."""
        candidates = result.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise ProviderError(f"{self.name} returned no candidates")

        parts = candidates[0].get("content", {}).get("parts", [])
        text = "".join(
            part.get("text", "") for part in parts if isinstance(part, dict)
        ).strip()
        if not text:
            raise ProviderError(f"{self.name} returned empty text")
        return text


class ProviderPool:
    """
    Ordered set of providers with per-provider exhaustion flags.

    All flag changes happen synchronously, so on a single event loop
    a read-modify-write is never interleaved with another request.
    """

    def __init__(
        self,
        providers: list[Provider],
        daily_quota: int = 0,
        client: httpx.AsyncClient | None = None,
    ):
        self.providers = list(providers)
        self.daily_quota = daily_quota
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
    ) -> "ProviderPool":
        """Build one GeminiProvider per configured credential slot."""
        client = client or httpx.AsyncClient(timeout=settings.gemini_timeout_seconds)
        providers: list[Provider] = []

        for key_name, api_key in settings.provider_credentials():
            try:
                provider = GeminiProvider(
                    provider_id=len(providers) + 1,
                    key_name=key_name,
                    api_key=api_key,
                    client=client,
                    model=settings.gemini_model,
                    base_url=settings.gemini_base_url,
                    temperature=settings.gemini_temperature,
                )
            except ValueError as e:
                logger.error(f"Skipping provider for {key_name}: {e}")
                continue
            providers.append(provider)

        if providers:
            logger.info(f"Initialized {len(providers)} Gemini provider(s)")
        else:
            logger.warning("No Gemini API keys configured; all AI calls will use fallback content")

        return cls(providers, daily_quota=settings.provider_daily_quota, client=client)

    def __len__(self) -> int:
        return len(self.providers)

    def available(self) -> list[Provider]:
        return [p for p in self.providers if not p.exhausted]

    def exhausted(self) -> list[Provider]:
        return [p for p in self.providers if p.exhausted]

    def mark_exhausted(self, provider: Provider) -> None:
        if not provider.exhausted:
            provider.exhausted = True
            logger.warning(f"{provider.name} ({provider.key_name}) marked as quota exhausted")

    def reset_all(self) -> None:
        """Clear every exhaustion flag (assumes the daily quota window rolled over)."""
        for provider in self.providers:
            provider.exhausted = False
        logger.warning(f"All {len(self.providers)} providers were exhausted; resetting quota flags")

    def status(self) -> dict[str, Any]:
        """Diagnostic snapshot of the pool."""
        total = len(self.providers)
        available = len(self.available())
        return {
            "summary": {
                "total": total,
                "available": available,
                "exhausted": total - available,
                "total_quota": total * self.daily_quota,
                "available_quota": available * self.daily_quota,
            },
            "providers": [
                {
                    "id": p.id,
                    "name": p.name,
                    "key_name": p.key_name,
                    "is_exhausted": p.exhausted,
                    "status": "exhausted" if p.exhausted else "available",
                }
                for p in self.providers
            ],
        }

    async def close(self) -> None:
        for provider in self.providers:
            await provider.close()
        if self._client is not None:
            await self._client.aclose()
            self._client = None
