"""LLM provider implementations (OpenAI, Gemini)."""

from __future__ import annotations

from llmgate.core.config import ProvidersConfig
from llmgate.llm.providers.base import LLMProvider
from llmgate.llm.providers.gemini import GeminiProvider
from llmgate.llm.providers.openai import OpenAIProvider
from llmgate.utils.logging import get_logger

PROVIDER_CLASSES: dict[str, type[LLMProvider]] = {
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
}

_logger = get_logger("providers", parent="llm")


def build_providers(config: ProvidersConfig) -> list[LLMProvider]:
    """Instantiate providers in fallback order.

    Providers without an API key are skipped with a warning.

    Args:
        config: Provider credentials and fallback order.

    Returns:
        Providers in the configured order.
    """
    providers: list[LLMProvider] = []
    for key in config.order:
        provider_config = getattr(config, key)
        if not provider_config.api_key:
            _logger.warning("Skipping provider without API key", provider=key)
            continue
        providers.append(PROVIDER_CLASSES[key](provider_config))
    return providers


__all__ = [
    "GeminiProvider",
    "LLMProvider",
    "OpenAIProvider",
    "PROVIDER_CLASSES",
    "build_providers",
]
