"""
llmgate - text-generation gateway

Routes a prompt across an ordered chain of LLM providers, returns the first
successful completion and memoizes prompt results in memory.
"""

__version__ = "1.0.0"

from llmgate.core.config import GatewayConfig

__all__ = ["__version__", "GatewayConfig"]
