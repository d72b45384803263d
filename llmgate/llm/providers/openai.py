"""
OpenAI chat completions provider.

Provides integration with OpenAI's API through the official SDK.
"""

from __future__ import annotations

from typing import Optional

import openai

from llmgate.core.config import OpenAIConfig
from llmgate.llm.errors import (
    BackendRejected,
    MalformedResponse,
    NoUsableOutput,
    TransportFailure,
)
from llmgate.llm.providers.base import LLMProvider


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions provider.

    Sends the prompt as a single user message and returns the content of the
    first choice.
    """

    name = "OpenAI"

    def __init__(self, config: OpenAIConfig) -> None:
        """Initialize the OpenAI provider.

        Args:
            config: OpenAI configuration with api_key, model, temperature, timeout.

        Raises:
            ValueError: If no API key is configured.
        """
        if not config.api_key:
            raise ValueError("OpenAI provider requires an API key")

        self.api_key = config.api_key
        self.model = config.model
        self.temperature = config.temperature
        self.timeout = config.timeout

        # SDK retries are disabled; the router's fallback chain is the only recovery
        self._client: Optional[openai.AsyncOpenAI] = openai.AsyncOpenAI(
            api_key=self.api_key,
            base_url=config.base_url,
            timeout=self.timeout,
            max_retries=0,
        )

    async def generate(self, prompt: str) -> str:
        """Generate a completion using the chat completions API.

        Args:
            prompt: Prompt text sent as the user message.

        Returns:
            Content of the first choice.
        """
        if self._client is None:
            raise TransportFailure(self.name, "client is closed")

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
            )
        except openai.APIConnectionError as e:
            # Also covers APITimeoutError
            raise TransportFailure(self.name, f"HTTP request failed: {e}") from e
        except openai.APIStatusError as e:
            raise BackendRejected(self.name, e.status_code, e.response.text) from e
        except openai.APIResponseValidationError as e:
            raise MalformedResponse(self.name, f"Failed to parse response: {e}") from e

        if not response.choices:
            raise NoUsableOutput(self.name, "No choices found")

        return self._require_text(response.choices[0].message.content)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
