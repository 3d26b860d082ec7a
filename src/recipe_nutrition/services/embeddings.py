"""Embedding-based candidate matching with caching."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

from recipe_nutrition.domain.matching import (
    SemanticMatch,
    SemanticNoMatch,
    SemanticOutcome,
    SemanticUnavailable,
)
from recipe_nutrition.domain.nutrition import FoodRecord
from recipe_nutrition.services.cache import EmbeddingCache, Vector

DEFAULT_SEMANTIC_THRESHOLD = 0.75

_logger = logging.getLogger(__name__)


class EmbeddingProviderError(RuntimeError):
    """Raised when an embedding cannot be obtained from the provider."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmbeddingClient(Protocol):
    """Interface for an external text embedding provider."""

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for ``text``."""


def cosine_similarity(left: Sequence[float], right: Sequence[float]) -> float:
    """Cosine similarity in [-1, 1]; zero when either vector has no magnitude."""
    a = np.asarray(left, dtype=np.float64)
    b = np.asarray(right, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Vector dimensions differ: {a.shape} vs {b.shape}")
    if not (np.all(np.isfinite(a)) and np.all(np.isfinite(b))):
        raise ValueError("Vectors contain non-finite values")
    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    value = float(np.dot(a, b)) / (norm_a * norm_b)
    if not np.isfinite(value):
        raise ValueError("Cosine similarity is not finite")
    return max(-1.0, min(1.0, value))


@dataclass
class CachedEmbedder:
    """Embeds text at most once per distinct string.

    Concurrent requests for a text that is already being fetched await the
    same in-flight call instead of issuing another one.
    """

    client: EmbeddingClient
    cache: EmbeddingCache
    _pending: dict[str, "asyncio.Task[Vector]"] = field(
        default_factory=dict, repr=False
    )

    async def embed(self, text: str) -> Vector:
        """Return the cached vector for ``text``, fetching it on a miss."""
        cached = self.cache.get(text)
        if cached is not None:
            return cached
        task = self._pending.get(text)
        if task is None or task.get_loop() is not asyncio.get_running_loop():
            task = asyncio.ensure_future(self._fetch(text))
            self._pending[text] = task
            task.add_done_callback(lambda done: self._forget(text, done))
        # One requester timing out must not cancel the fetch for the others.
        return await asyncio.shield(task)

    def _forget(self, text: str, task: "asyncio.Task[Vector]") -> None:
        if self._pending.get(text) is task:
            del self._pending[text]

    async def _fetch(self, text: str) -> Vector:
        try:
            raw = await self.client.embed(text)
        except EmbeddingProviderError:
            raise
        except Exception as exc:
            raise EmbeddingProviderError(f"Embedding request failed: {exc}") from exc
        try:
            vector = tuple(float(value) for value in raw)
        except (TypeError, ValueError) as exc:
            raise EmbeddingProviderError(f"Malformed embedding for {text!r}") from exc
        if not vector:
            raise EmbeddingProviderError(f"Empty embedding for {text!r}")
        if not np.all(np.isfinite(vector)):
            raise EmbeddingProviderError(f"Non-finite embedding for {text!r}")
        self.cache.set(text, vector)
        return vector


@dataclass
class SemanticMatcher:
    """Ranks candidates by embedding similarity to an ingredient name."""

    embedder: CachedEmbedder
    threshold: float = DEFAULT_SEMANTIC_THRESHOLD
    timeout_seconds: float | None = 10.0
    query_prefix: str = ""
    document_prefix: str = ""
    debug: bool = False

    async def resolve(
        self, name: str, candidates: Sequence[FoodRecord]
    ) -> SemanticOutcome:
        """Pick the most similar candidate at or above the threshold."""
        if not candidates:
            return SemanticNoMatch()
        try:
            query, documents = await asyncio.wait_for(
                self._embed_all(name, candidates), timeout=self.timeout_seconds
            )
            scores = [cosine_similarity(query, document) for document in documents]
        except EmbeddingProviderError as exc:
            _logger.warning(
                "Embedding provider failed for %r (status=%s): %s",
                name,
                exc.status_code if exc.status_code is not None else "n/a",
                exc,
            )
            return SemanticUnavailable(reason=str(exc))
        except TimeoutError:
            _logger.warning(
                "Embedding lookup for %r timed out after %ss",
                name,
                self.timeout_seconds,
            )
            return SemanticUnavailable(reason="timeout")
        except ValueError as exc:
            _logger.warning("Embedding vectors for %r are unusable: %s", name, exc)
            return SemanticUnavailable(reason=str(exc))

        best_index = 0
        for index, score in enumerate(scores):
            if score > scores[best_index]:
                best_index = index
        best_score = scores[best_index]
        if self.debug:
            _logger.info(
                "Semantic best for %r: %s (%.3f)",
                name,
                candidates[best_index].description,
                best_score,
            )
        if best_score < self.threshold:
            return SemanticNoMatch(best_score=best_score)
        return SemanticMatch(record=candidates[best_index], score=best_score)

    async def _embed_all(
        self, name: str, candidates: Sequence[FoodRecord]
    ) -> tuple[Vector, list[Vector]]:
        vectors = await asyncio.gather(
            self.embedder.embed(f"{self.query_prefix}{name}"),
            *(
                self.embedder.embed(f"{self.document_prefix}{record.description}")
                for record in candidates
            ),
        )
        return vectors[0], list(vectors[1:])
