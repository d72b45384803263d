"""
Google Gemini provider.

Calls the Gemini REST ``generateContent`` endpoint with aiohttp.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import aiohttp

from llmgate.core.config import GeminiConfig
from llmgate.llm.errors import (
    BackendRejected,
    MalformedResponse,
    NoUsableOutput,
    TransportFailure,
)
from llmgate.llm.providers.base import LLMProvider


class GeminiProvider(LLMProvider):
    """Gemini generateContent provider.

    Returns the text of the first part of the first candidate.
    """

    name = "Gemini"

    def __init__(self, config: GeminiConfig) -> None:
        """Initialize the Gemini provider.

        Args:
            config: Gemini configuration with api_key, model, base_url, timeout.

        Raises:
            ValueError: If no API key is configured.
        """
        if not config.api_key:
            raise ValueError("Gemini provider requires an API key")

        self.api_key = config.api_key
        self.model = config.model
        self.base_url = config.base_url.rstrip("/")
        self.timeout = config.timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(self, prompt: str) -> str:
        """Generate a completion using the Gemini API.

        Args:
            prompt: Prompt text sent as the single content part.

        Returns:
            Text of the first candidate part.
        """
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as resp:
                    if not 200 <= resp.status < 300:
                        error_text = await resp.text(errors="replace")
                        raise BackendRejected(self.name, resp.status, error_text)

                    try:
                        data = await resp.json(content_type=None)
                    except (aiohttp.ContentTypeError, json.JSONDecodeError, UnicodeDecodeError) as e:
                        raise MalformedResponse(
                            self.name, f"Failed to parse response: {e}"
                        ) from e

        except asyncio.TimeoutError as e:
            raise TransportFailure(
                self.name, f"Gemini request timed out after {self.timeout}s"
            ) from e
        except aiohttp.ClientError as e:
            raise TransportFailure(self.name, f"HTTP request failed: {e}") from e

        return self._require_text(self._extract_text(data))

    def _extract_text(self, data: Any) -> Any:
        """Pull ``candidates[0].content.parts[0].text`` out of a response body."""
        if not isinstance(data, dict):
            raise MalformedResponse(self.name, "Response body is not a JSON object")

        candidates = data.get("candidates")
        if not candidates:
            raise NoUsableOutput(self.name, "No response from Gemini")
        if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
            raise MalformedResponse(self.name, "Unexpected candidates structure")

        content = candidates[0].get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        if not parts:
            raise NoUsableOutput(self.name, "No response from Gemini")
        if not isinstance(parts, list) or not isinstance(parts[0], dict):
            raise MalformedResponse(self.name, "Unexpected content parts structure")

        return parts[0].get("text")
