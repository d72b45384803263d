"""
API Request/Response Models.

Pydantic models for the REST API.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class GenerateRequest(BaseModel):
    """Request to generate text."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "prompt": "Write a haiku about the sea",
                "provider": "Gemini",
            }
        }
    )

    prompt: str = Field(..., description="Prompt text, used verbatim")
    provider: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("provider", "model"),
        description="Exact provider name to use without fallback",
    )


class GenerateResponse(BaseModel):
    """Generated text and the provider that produced it."""

    provider: str
    output: str
    cached: bool = False


class HealthResponse(BaseModel):
    """Liveness probe response."""

    status: str = "healthy"
    version: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: Optional[str] = None
    code: Optional[str] = None
