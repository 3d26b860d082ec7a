"""Outcomes of the embedding-based matching step."""

from dataclasses import dataclass

from recipe_nutrition.domain.nutrition import FoodRecord


@dataclass(frozen=True)
class SemanticMatch:
    """A candidate cleared the similarity threshold."""

    record: FoodRecord
    score: float


@dataclass(frozen=True)
class SemanticNoMatch:
    """Embeddings were available but no candidate cleared the threshold."""

    best_score: float | None = None


@dataclass(frozen=True)
class SemanticUnavailable:
    """Embeddings could not be obtained for this line."""

    reason: str


SemanticOutcome = SemanticMatch | SemanticNoMatch | SemanticUnavailable
