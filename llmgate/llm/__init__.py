"""LLM routing module with provider fallback and caching."""

from llmgate.llm.cache import CacheEntry, ResponseCache
from llmgate.llm.errors import (
    AllProvidersFailed,
    BackendRejected,
    GatewayError,
    MalformedResponse,
    NoUsableOutput,
    ProviderError,
    ProviderNotFound,
    TransportFailure,
)
from llmgate.llm.providers import GeminiProvider, LLMProvider, OpenAIProvider
from llmgate.llm.router import GenerationResult, ProviderRouter, create_router

__all__ = [
    "AllProvidersFailed",
    "BackendRejected",
    "CacheEntry",
    "GatewayError",
    "GeminiProvider",
    "GenerationResult",
    "LLMProvider",
    "MalformedResponse",
    "NoUsableOutput",
    "OpenAIProvider",
    "ProviderError",
    "ProviderNotFound",
    "ProviderRouter",
    "ResponseCache",
    "TransportFailure",
    "create_router",
]
