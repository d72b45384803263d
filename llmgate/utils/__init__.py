"""Utility modules for logging."""

from llmgate.utils.logging import ComponentLogger, RoutingLogger, get_logger, setup_logging

__all__ = ["ComponentLogger", "RoutingLogger", "get_logger", "setup_logging"]
