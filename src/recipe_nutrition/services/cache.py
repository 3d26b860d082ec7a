"""Embedding vector cache abstractions."""

import threading
from dataclasses import dataclass, field
from typing import Protocol

Vector = tuple[float, ...]


class EmbeddingCache(Protocol):
    """Cache interface mapping embedded text to its vector."""

    def get(self, key: str) -> Vector | None:
        """Return the cached vector for the exact embedded text."""

    def set(self, key: str, value: Vector) -> None:
        """Store a vector for the exact embedded text."""

    def clear(self) -> None:
        """Drop every cached vector."""


@dataclass
class InMemoryEmbeddingCache(EmbeddingCache):
    """Process-wide, lock-guarded vector cache without eviction.

    Racing writers for the same key store equal vectors, so the last write wins.
    """

    _entries: dict[str, Vector] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def get(self, key: str) -> Vector | None:
        """Return a cached vector if present."""
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, value: Vector) -> None:
        """Store a vector."""
        with self._lock:
            self._entries[key] = value

    def clear(self) -> None:
        """Reset the cache, mainly for tests."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
