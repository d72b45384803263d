"""
Base LLM provider interface.

Defines the abstract base class that all text-generation backends implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from llmgate.llm.errors import NoUsableOutput


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    A provider is one named backend that turns a prompt into text. Instances
    are built once from configuration and shared across concurrent requests,
    so ``generate`` must not keep per-call state on the instance.
    """

    name: str = "base"

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Send the prompt to the backend and return its completion.

        Args:
            prompt: The prompt text, passed through unmodified.

        Returns:
            The generated text. Never empty or whitespace-only.

        Raises:
            TransportFailure: If the backend cannot be reached.
            BackendRejected: If the backend answers with a non-success status.
            MalformedResponse: If the success body cannot be parsed.
            NoUsableOutput: If the response contains no text.
        """

    async def close(self) -> None:
        """Release the underlying transport client."""

    def _require_text(self, text: object) -> str:
        """Return text unchanged, or raise NoUsableOutput when it is blank."""
        if not isinstance(text, str) or not text.strip():
            raise NoUsableOutput(self.name, f"No response from {self.name}")
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
