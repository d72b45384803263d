"""
In-memory prompt cache.

Maps the exact prompt text to the last successful response and the name of
the provider that produced it. Keys are not normalized, entries never expire
and the store is unbounded for the life of the process.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CacheEntry:
    """A memoized answer."""

    response: str
    provider: str


class ResponseCache:
    """Thread-safe exact-match cache for generated responses."""

    def __init__(self) -> None:
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, prompt: str) -> Optional[CacheEntry]:
        """Get the cached entry for this exact prompt, if any."""
        with self._lock:
            return self._store.get(prompt)

    def set(self, prompt: str, response: str, provider: str) -> None:
        """Store a response. Last writer for a prompt wins."""
        with self._lock:
            self._store[prompt] = CacheEntry(response=response, provider=provider)

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
