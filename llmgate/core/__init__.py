"""Core module containing configuration."""

from llmgate.core.config import (
    GatewayConfig,
    GeminiConfig,
    LoggingConfig,
    OpenAIConfig,
    ProvidersConfig,
    ServerConfig,
    validate_config,
)

__all__ = [
    "GatewayConfig",
    "GeminiConfig",
    "LoggingConfig",
    "OpenAIConfig",
    "ProvidersConfig",
    "ServerConfig",
    "validate_config",
]
