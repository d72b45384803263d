"""
Provider router with ordered fallback and prompt caching.

Tries registered providers in registration order and returns the first
successful completion. Successful results are memoized by exact prompt text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from llmgate.core.config import ProvidersConfig
from llmgate.llm.cache import ResponseCache
from llmgate.llm.errors import (
    AllProvidersFailed,
    NoUsableOutput,
    ProviderError,
    ProviderNotFound,
)
from llmgate.llm.providers import build_providers
from llmgate.llm.providers.base import LLMProvider
from llmgate.utils.logging import RoutingLogger


@dataclass(frozen=True)
class GenerationResult:
    """Result returned by both router entry points."""

    output: str
    provider: str
    cached: bool

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict."""
        return {
            "provider": self.provider,
            "output": self.output,
            "cached": self.cached,
        }


class ProviderRouter:
    """Routes prompts across providers with fallback and caching.

    Providers are registered before serving begins and are never removed.
    The provider list and cache are shared by all concurrent requests; only
    the cache is mutated after startup.

    Example:
        router = ProviderRouter()
        router.add_provider(OpenAIProvider(config.providers.openai))
        result = await router.generate("Hello")
    """

    def __init__(self, cache: Optional[ResponseCache] = None) -> None:
        self._providers: list[LLMProvider] = []
        self.cache = cache if cache is not None else ResponseCache()
        self.logger = RoutingLogger()

    @property
    def providers(self) -> tuple[LLMProvider, ...]:
        """Registered providers in fallback order."""
        return tuple(self._providers)

    def add_provider(self, provider: LLMProvider) -> None:
        """Append a provider to the end of the fallback chain.

        Raises:
            ValueError: If a provider with the same name is already registered.
        """
        if self.get_provider(provider.name) is not None:
            raise ValueError(f"Provider already registered: {provider.name}")
        self._providers.append(provider)

    def get_provider(self, name: str) -> Optional[LLMProvider]:
        """Find a registered provider by exact, case-sensitive name."""
        for provider in self._providers:
            if provider.name == name:
                return provider
        return None

    async def generate(self, prompt: str) -> GenerationResult:
        """Generate a completion, falling back through providers in order.

        Args:
            prompt: Prompt text. Used verbatim as the cache key.

        Returns:
            GenerationResult from the cache or the first provider that succeeds.

        Raises:
            AllProvidersFailed: If every provider fails or none are registered.
        """
        entry = self.cache.get(prompt)
        if entry is not None:
            self.logger.cache_hit(entry.provider)
            return GenerationResult(output=entry.response, provider=entry.provider, cached=True)

        last_error: Optional[ProviderError] = None
        for provider in self._providers:
            try:
                return await self._attempt(provider, prompt)
            except ProviderError as e:
                last_error = e

        self.logger.exhausted(len(self._providers))
        raise AllProvidersFailed(last_error)

    async def generate_with_provider(self, prompt: str, provider_name: str) -> GenerationResult:
        """Generate a completion with one named provider, without fallback.

        A cache entry is only served when it was produced by the requested
        provider. Successful results are cached the same way as ``generate``.

        Args:
            prompt: Prompt text. Used verbatim as the cache key.
            provider_name: Exact name of a registered provider.

        Returns:
            GenerationResult from the cache or the named provider.

        Raises:
            ProviderNotFound: If no registered provider has that name.
            AllProvidersFailed: If the named provider fails.
        """
        provider = self.get_provider(provider_name)
        if provider is None:
            raise ProviderNotFound(provider_name)

        entry = self.cache.get(prompt)
        if entry is not None and entry.provider == provider.name:
            self.logger.cache_hit(entry.provider)
            return GenerationResult(output=entry.response, provider=entry.provider, cached=True)

        try:
            return await self._attempt(provider, prompt)
        except ProviderError as e:
            raise AllProvidersFailed(e) from e

    async def close(self) -> None:
        """Close every provider's transport client and drop cached responses."""
        for provider in self._providers:
            await provider.close()
        self.cache.clear()

    async def _attempt(self, provider: LLMProvider, prompt: str) -> GenerationResult:
        """Run one provider call, caching on success and logging on failure."""
        self.logger.attempt(provider.name)
        try:
            response = await provider.generate(prompt)
            if not isinstance(response, str) or not response.strip():
                raise NoUsableOutput(provider.name, f"No response from {provider.name}")
        except ProviderError as e:
            self.logger.failed(provider.name, e)
            raise
        except Exception as e:
            error = ProviderError(provider.name, f"Unexpected error: {e}")
            self.logger.failed(provider.name, error)
            raise error from e

        self.logger.succeeded(provider.name)
        self.cache.set(prompt, response, provider.name)
        return GenerationResult(output=response, provider=provider.name, cached=False)


def create_router(config: ProvidersConfig) -> ProviderRouter:
    """Build a router with every configured provider registered in order."""
    router = ProviderRouter()
    for provider in build_providers(config):
        router.add_provider(provider)
    return router
