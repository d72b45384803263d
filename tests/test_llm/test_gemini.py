"""
Tests for the Gemini provider.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from llmgate.core.config import GeminiConfig
from llmgate.llm.errors import (
    BackendRejected,
    MalformedResponse,
    NoUsableOutput,
    TransportFailure,
)
from llmgate.llm.providers.base import LLMProvider
from llmgate.llm.providers.gemini import GeminiProvider


def _mock_session(status=200, json_data=None, text="", json_error=None, post_error=None):
    """Build an aiohttp.ClientSession stand-in returning one canned response."""
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.text = AsyncMock(return_value=text)
    if json_error is not None:
        mock_response.json = AsyncMock(side_effect=json_error)
    else:
        mock_response.json = AsyncMock(return_value=json_data)
    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)

    mock_session = MagicMock()
    if post_error is not None:
        mock_session.post = MagicMock(side_effect=post_error)
    else:
        mock_session.post = MagicMock(return_value=mock_response)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    return mock_session


def _candidates(text):
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


class TestGeminiProviderInit:
    """Test Gemini provider initialization."""

    def test_creates_with_config(self):
        config = GeminiConfig(
            api_key="g-key",
            model="gemini-1.5-pro",
            base_url="https://example.test/v1beta/",
            timeout=15,
        )
        provider = GeminiProvider(config)
        assert provider.api_key == "g-key"
        assert provider.model == "gemini-1.5-pro"
        assert provider.base_url == "https://example.test/v1beta"
        assert provider.timeout == 15

    def test_endpoint(self):
        provider = GeminiProvider(GeminiConfig(api_key="g-key"))
        assert provider.endpoint == (
            "https://generativelanguage.googleapis.com/v1beta/models/"
            "gemini-2.5-flash:generateContent"
        )

    @pytest.mark.parametrize("api_key", [None, ""])
    def test_requires_api_key(self, api_key):
        with pytest.raises(ValueError, match="API key"):
            GeminiProvider(GeminiConfig(api_key=api_key))

    def test_inherits_from_base_provider(self):
        assert isinstance(GeminiProvider(GeminiConfig(api_key="k")), LLMProvider)

    def test_has_correct_name(self):
        assert GeminiProvider(GeminiConfig(api_key="k")).name == "Gemini"


class TestGeminiGenerate:
    """Test Gemini provider generation and error mapping."""

    @pytest.fixture
    def provider(self):
        return GeminiProvider(GeminiConfig(api_key="g-key", timeout=30))

    @pytest.mark.asyncio
    async def test_generate_success(self, provider):
        session = _mock_session(json_data=_candidates("Hello from Gemini"))

        with patch("aiohttp.ClientSession", return_value=session):
            result = await provider.generate("Hi")

        assert result == "Hello from Gemini"
        args, kwargs = session.post.call_args
        assert args[0] == provider.endpoint
        assert kwargs["params"] == {"key": "g-key"}
        assert kwargs["json"] == {"contents": [{"parts": [{"text": "Hi"}]}]}
        assert kwargs["timeout"].total == 30

    @pytest.mark.asyncio
    async def test_non_success_status(self, provider):
        body = '{"error": {"code": 400, "message": "API key not valid"}}'
        session = _mock_session(status=400, text=body)

        with patch("aiohttp.ClientSession", return_value=session):
            with pytest.raises(BackendRejected) as exc_info:
                await provider.generate("Hi")

        assert exc_info.value.status == 400
        assert exc_info.value.body == body
        assert exc_info.value.provider == "Gemini"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data",
        [
            {"candidates": []},
            {"promptFeedback": {"blockReason": "SAFETY"}},
            {"candidates": [{"content": {"parts": []}}]},
            {"candidates": [{"finishReason": "SAFETY"}]},
            _candidates(""),
            _candidates("   "),
            {"candidates": [{"content": {"parts": [{"inlineData": {}}]}}]},
        ],
    )
    async def test_no_usable_output(self, provider, data):
        session = _mock_session(json_data=data)

        with patch("aiohttp.ClientSession", return_value=session):
            with pytest.raises(NoUsableOutput):
                await provider.generate("Hi")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data",
        [
            ["not", "an", "object"],
            {"candidates": "oops"},
            {"candidates": [{"content": {"parts": "oops"}}]},
        ],
    )
    async def test_unexpected_structure(self, provider, data):
        session = _mock_session(json_data=data)

        with patch("aiohttp.ClientSession", return_value=session):
            with pytest.raises(MalformedResponse):
                await provider.generate("Hi")

    @pytest.mark.asyncio
    async def test_unparseable_body(self, provider):
        session = _mock_session(json_error=json.JSONDecodeError("Expecting value", "<html>", 0))

        with patch("aiohttp.ClientSession", return_value=session):
            with pytest.raises(MalformedResponse, match="Failed to parse"):
                await provider.generate("Hi")

    @pytest.mark.asyncio
    async def test_undecodable_body(self, provider):
        error = UnicodeDecodeError("utf-8", b'{"candidates": "\xff\xfe"}', 16, 17, "invalid start byte")
        session = _mock_session(json_error=error)

        with patch("aiohttp.ClientSession", return_value=session):
            with pytest.raises(MalformedResponse, match="Failed to parse"):
                await provider.generate("Hi")

    @pytest.mark.asyncio
    async def test_error_body_is_decoded_leniently(self, provider):
        session = _mock_session(status=502, text="bad gateway �")
        response = session.post.return_value

        with patch("aiohttp.ClientSession", return_value=session):
            with pytest.raises(BackendRejected):
                await provider.generate("Hi")

        response.text.assert_awaited_once_with(errors="replace")

    @pytest.mark.asyncio
    async def test_connection_error(self, provider):
        session = _mock_session(post_error=aiohttp.ClientConnectionError("refused"))

        with patch("aiohttp.ClientSession", return_value=session):
            with pytest.raises(TransportFailure, match="refused"):
                await provider.generate("Hi")

    @pytest.mark.asyncio
    async def test_timeout(self, provider):
        session = _mock_session(post_error=asyncio.TimeoutError())

        with patch("aiohttp.ClientSession", return_value=session):
            with pytest.raises(TransportFailure, match="timed out after 30s"):
                await provider.generate("Hi")
