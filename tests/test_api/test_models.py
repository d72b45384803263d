"""Tests for API models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from llmgate.api.models import ErrorResponse, GenerateRequest, GenerateResponse, HealthResponse


class TestGenerateRequest:
    """Test GenerateRequest model."""

    def test_prompt_only(self):
        request = GenerateRequest(prompt="Hello")
        assert request.prompt == "Hello"
        assert request.provider is None

    def test_with_provider(self):
        request = GenerateRequest.model_validate({"prompt": "Hello", "provider": "OpenAI"})
        assert request.provider == "OpenAI"

    def test_model_alias(self):
        request = GenerateRequest.model_validate({"prompt": "Hello", "model": "Gemini"})
        assert request.provider == "Gemini"

    def test_prompt_is_not_trimmed(self):
        request = GenerateRequest(prompt="  Hello \n")
        assert request.prompt == "  Hello \n"

    def test_prompt_required(self):
        with pytest.raises(ValidationError):
            GenerateRequest.model_validate({"provider": "OpenAI"})


class TestResponses:
    """Test response models."""

    def test_generate_response_shape(self):
        response = GenerateResponse(provider="OpenAI", output="hi", cached=True)
        assert response.model_dump() == {"provider": "OpenAI", "output": "hi", "cached": True}

    def test_health_defaults(self):
        health = HealthResponse(version="1.0.0")
        assert health.status == "healthy"
        assert health.timestamp.tzinfo is not None

    def test_error_response(self):
        error = ErrorResponse(error="Request failed", detail="boom", code="all_providers_failed")
        assert error.model_dump()["code"] == "all_providers_failed"
