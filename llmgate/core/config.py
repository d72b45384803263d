"""
Hierarchical configuration management for llmgate.

Configuration priority (highest to lowest):
1. CLI arguments
2. Conventional provider environment variables (OPENAI_API_KEY, GEMINI_API_KEY, PORT)
3. Environment variables (LLMGATE_*) and .env
4. Project config (.llmgate.yml, or the file named by --config or LLMGATE_CONFIG_FILE)
5. User config (~/.llmgate/config.yml)
6. Default values

YAML files are read through pydantic-settings sources ranked below the
environment, so an exported LLMGATE_* variable always beats a file.
"""

from __future__ import annotations

import os
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

KNOWN_PROVIDERS = ("openai", "gemini")
CONFIG_FILE_ENV = "LLMGATE_CONFIG_FILE"

# YAML files for the GatewayConfig being built by load(), lowest priority first
_yaml_files: ContextVar[tuple[Path, ...]] = ContextVar("llmgate_yaml_files", default=())


class OpenAIConfig(BaseModel):
    """Configuration for the OpenAI chat completions backend."""

    api_key: Optional[str] = None
    model: str = "gpt-3.5-turbo"
    temperature: float = 0.7
    timeout: int = 60
    base_url: Optional[str] = None

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("temperature must be between 0.0 and 2.0")
        return v


class GeminiConfig(BaseModel):
    """Configuration for the Gemini generateContent backend."""

    api_key: Optional[str] = None
    model: str = "gemini-2.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: int = 60


class ProvidersConfig(BaseModel):
    """Provider credentials and fallback order."""

    order: list[str] = Field(default_factory=lambda: list(KNOWN_PROVIDERS))
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)

    @field_validator("order")
    @classmethod
    def validate_order(cls, v: list[str]) -> list[str]:
        """Validate fallback order only names known providers, once each."""
        normalized = [name.lower() for name in v]
        for name in normalized:
            if name not in KNOWN_PROVIDERS:
                raise ValueError(
                    f"Invalid provider: {name}. Must be one of {set(KNOWN_PROVIDERS)}"
                )
        if len(set(normalized)) != len(normalized):
            raise ValueError("Provider order must not contain duplicates")
        return normalized


class ServerConfig(BaseModel):
    """HTTP server bind settings."""

    host: str = "0.0.0.0"
    port: int = 8080

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("port must be between 1 and 65535")
        return v


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    file: Optional[Path] = None
    json_format: bool = False
    max_file_size_mb: int = 10
    backup_count: int = 5

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: Any) -> Optional[Path]:
        if v is None:
            return None
        if isinstance(v, str):
            return Path(v)
        return v


class GatewayConfig(BaseSettings):
    """
    Main configuration model with hierarchical loading.

    Loads configuration from:
    1. Default values (lowest priority)
    2. User config file (~/.llmgate/config.yml)
    3. Project config file (.llmgate.yml)
    4. Environment variables (LLMGATE_*) and .env
    5. Conventional provider environment variables
    6. CLI arguments (highest priority)
    """

    model_config = SettingsConfigDict(
        env_prefix="LLMGATE_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # One source per file so sections merge across files; project file first
        yaml_settings = tuple(
            YamlConfigSettingsSource(settings_cls, yaml_file=path)
            for path in reversed(_yaml_files.get())
        )
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            *yaml_settings,
            file_secret_settings,
        )

    @classmethod
    def load(
        cls,
        cli_args: Optional[dict[str, Any]] = None,
        project_path: Optional[Path] = None,
        config_file: Optional[Path] = None,
    ) -> GatewayConfig:
        """
        Load configuration from multiple sources with priority.

        Args:
            cli_args: Command-line arguments (highest priority)
            project_path: Directory searched for .llmgate.yml
            config_file: Explicit config file, used instead of .llmgate.yml.
                Falls back to the path in LLMGATE_CONFIG_FILE.

        Returns:
            Merged configuration
        """
        project_path = project_path or Path.cwd()
        if config_file is None and os.environ.get(CONFIG_FILE_ENV):
            config_file = Path(os.environ[CONFIG_FILE_ENV])

        user_config_path = Path.home() / ".llmgate" / "config.yml"
        project_config_path = config_file or project_path / ".llmgate.yml"
        yaml_files = tuple(p for p in (user_config_path, project_config_path) if p.exists())

        config_dict: dict[str, Any] = {}

        # Conventional variable names used by the provider SDKs and PaaS hosts
        if os.environ.get("OPENAI_API_KEY"):
            config_dict.setdefault("providers", {}).setdefault("openai", {})[
                "api_key"
            ] = os.environ["OPENAI_API_KEY"]
        if os.environ.get("GEMINI_API_KEY"):
            config_dict.setdefault("providers", {}).setdefault("gemini", {})[
                "api_key"
            ] = os.environ["GEMINI_API_KEY"]
        if os.environ.get("PORT"):
            config_dict.setdefault("server", {})["port"] = int(os.environ["PORT"])

        if cli_args:
            config_dict = _deep_merge(config_dict, _flatten_cli_args(cli_args))

        token = _yaml_files.set(yaml_files)
        try:
            return cls(**config_dict)
        finally:
            _yaml_files.reset(token)

    def to_yaml(self, path: Path) -> None:
        """Write configuration to YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary with values to override

    Returns:
        Merged dictionary
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _flatten_cli_args(args: dict[str, Any]) -> dict[str, Any]:
    """
    Convert flat CLI arguments to nested config structure.

    Examples:
        {"port": 9000} -> {"server": {"port": 9000}}
        {"order": "gemini,openai"} -> {"providers": {"order": ["gemini", "openai"]}}
    """
    result: dict[str, Any] = {}

    mappings = {
        "verbose": ("logging", "level", lambda v: "DEBUG" if v else None),
        "quiet": ("logging", "level", lambda v: "ERROR" if v else None),
        "log_file": ("logging", "file", Path),
        "json_logs": ("logging", "json_format", lambda v: True if v else None),
        "host": ("server", "host", str),
        "port": ("server", "port", int),
        "order": ("providers", "order", lambda v: [p.strip() for p in v.split(",") if p.strip()]),
    }

    for key, value in args.items():
        if value is None or key not in mappings:
            continue
        section, subkey, transform = mappings[key]
        transformed = transform(value)
        if transformed is not None:
            result.setdefault(section, {})[subkey] = transformed

    return result


def get_default_config() -> GatewayConfig:
    """Get configuration with all defaults, ignoring files and the environment."""
    return GatewayConfig.model_construct()


def validate_config(config: GatewayConfig) -> list[str]:
    """
    Validate configuration and return list of warnings.

    Returns:
        List of warning messages (empty if all valid)
    """
    warnings: list[str] = []

    configured = [
        name for name in config.providers.order
        if getattr(config.providers, name).api_key
    ]
    for name in config.providers.order:
        if name not in configured:
            warnings.append(f"Provider '{name}' is in the fallback order but has no API key")
    if not configured:
        warnings.append("No provider has an API key; every generation will fail")

    return warnings
