"""
llmgate API Server.

FastAPI-based REST API for text generation.
"""

from llmgate.api.app import create_app
from llmgate.api.models import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    HealthResponse,
)

__all__ = [
    "create_app",
    "ErrorResponse",
    "GenerateRequest",
    "GenerateResponse",
    "HealthResponse",
]
