"""
Centralized structured logging for llmgate.

Provides:
- Rich console output with colors and formatting
- Optional JSON format for machine parsing
- File logging with rotation
- Component-aware logging with context
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

ROOT_LOGGER = "llmgate"
DEFAULT_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for machine parsing."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "context"):
            log_data["context"] = record.context

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = False,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path for file logging
        json_format: Use JSON format for log output
        max_file_size_mb: Maximum log file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        Configured llmgate logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)
    logger.handlers.clear()

    if json_format:
        console_handler: logging.Handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))

    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        if json_format:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))

        # File gets all messages
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


class ComponentLogger:
    """
    Logger with component context for structured logging.

    Every message is emitted twice over: as a readable ``msg | k=v`` line and
    as a ``context`` dict attached to the record for the JSON formatter.
    """

    def __init__(self, component: str, parent: Optional[str] = None):
        self.component = component
        logger_name = (
            f"{ROOT_LOGGER}.{parent}.{component}" if parent else f"{ROOT_LOGGER}.{component}"
        )
        self._logger = logging.getLogger(logger_name)

    def _format_message(self, msg: str, **context: Any) -> str:
        if context:
            context_str = " | ".join(f"{k}={v}" for k, v in context.items())
            return f"{msg} | {context_str}"
        return msg

    def _add_context(self, **context: Any) -> dict[str, Any]:
        return {"component": self.component, **context}

    def debug(self, msg: str, **context: Any) -> None:
        extra = {"context": self._add_context(**context)}
        self._logger.debug(self._format_message(msg, **context), extra=extra)

    def info(self, msg: str, **context: Any) -> None:
        extra = {"context": self._add_context(**context)}
        self._logger.info(self._format_message(msg, **context), extra=extra)

    def warning(self, msg: str, **context: Any) -> None:
        extra = {"context": self._add_context(**context)}
        self._logger.warning(self._format_message(msg, **context), extra=extra)

    def error(self, msg: str, exc: Optional[BaseException] = None, **context: Any) -> None:
        """Log error message with optional exception."""
        extra = {"context": self._add_context(**context)}
        self._logger.error(
            self._format_message(msg, **context),
            exc_info=exc,
            extra=extra,
        )


class RoutingLogger(ComponentLogger):
    """
    Logger for the provider router.

    Wraps the fallback-chain events in fixed message shapes so that every
    attempt can be traced by provider name in the logs.
    """

    def __init__(self) -> None:
        super().__init__("router", parent="llm")

    def attempt(self, provider: str) -> None:
        self.info(f"Trying provider: {provider}", provider=provider)

    def succeeded(self, provider: str) -> None:
        self.info(f"Provider {provider} succeeded", provider=provider)

    def failed(self, provider: str, error: BaseException) -> None:
        """Log a provider failure with its error kind and detail."""
        self.warning(
            f"Provider {provider} failed: {error}",
            provider=provider,
            kind=type(error).__name__,
        )

    def cache_hit(self, provider: str) -> None:
        self.info("Cache hit for prompt", provider=provider)

    def exhausted(self, attempted: int) -> None:
        self.warning("All providers failed", attempted=attempted)


def get_logger(component: str, parent: Optional[str] = None) -> ComponentLogger:
    """
    Factory function to get a component logger.

    Args:
        component: Name of the component
        parent: Optional parent component name

    Returns:
        ComponentLogger instance
    """
    return ComponentLogger(component, parent)
