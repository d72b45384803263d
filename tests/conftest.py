"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import pytest

from llmgate.llm.providers.base import LLMProvider
from llmgate.llm.router import ProviderRouter


class FakeProvider(LLMProvider):
    """In-memory provider that records every prompt it receives."""

    def __init__(
        self,
        name: str,
        response: Optional[str] = None,
        error: Optional[BaseException] = None,
        call_log: Optional[list[str]] = None,
    ) -> None:
        self.name = name
        self.response = response
        self.error = error
        self.prompts: list[str] = []
        self._call_log = call_log

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self._call_log is not None:
            self._call_log.append(self.name)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def call_log() -> list[str]:
    """Shared, ordered record of provider names as they are called."""
    return []


@pytest.fixture
def make_provider(call_log: list[str]) -> Callable[..., FakeProvider]:
    """Factory for fake providers that report into ``call_log``."""

    def _make(
        name: str,
        response: Optional[str] = None,
        error: Optional[BaseException] = None,
    ) -> FakeProvider:
        return FakeProvider(name, response=response, error=error, call_log=call_log)

    return _make


@pytest.fixture
def make_router() -> Callable[..., ProviderRouter]:
    """Build a router with the given providers registered in order."""

    def _make(*providers: LLMProvider) -> ProviderRouter:
        router = ProviderRouter()
        for provider in providers:
            router.add_provider(provider)
        return router

    return _make


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run with an empty HOME and cwd and no provider environment variables."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    for var in ("OPENAI_API_KEY", "GEMINI_API_KEY", "PORT"):
        monkeypatch.delenv(var, raising=False)
    import os

    for var in list(os.environ):
        if var.startswith("LLMGATE_"):
            monkeypatch.delenv(var, raising=False)
    return tmp_path


@pytest.fixture
def gateway_logs(caplog, monkeypatch):
    """Capture llmgate log records even after setup_logging disabled propagation."""
    monkeypatch.setattr(logging.getLogger("llmgate"), "propagate", True)
    caplog.set_level(logging.INFO, logger="llmgate")
    return caplog
