"""Ingredient matching and nutrition aggregation."""

import asyncio
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from recipe_nutrition.domain.matching import SemanticMatch
from recipe_nutrition.domain.nutrition import (
    FoodMatch,
    FoodRecord,
    NutritionProfile,
    NutritionResult,
)
from recipe_nutrition.domain.recipes import Recipe
from recipe_nutrition.services.catalog import FoodCatalog
from recipe_nutrition.services.embeddings import SemanticMatcher
from recipe_nutrition.services.lexical import (
    DEFAULT_CANDIDATE_LIMIT,
    DEFAULT_LEXICAL_THRESHOLD,
    best_lexical_match,
    rank_candidates,
)
from recipe_nutrition.services.parser import parse_ingredient_line

_logger = logging.getLogger(__name__)


@dataclass
class MatchResolver:
    """Resolves one ingredient line to a scaled catalog match."""

    catalog: FoodCatalog
    semantic_matcher: SemanticMatcher | None = None
    lexical_threshold: int = DEFAULT_LEXICAL_THRESHOLD
    candidate_limit: int = DEFAULT_CANDIDATE_LIMIT
    debug: bool = False

    async def match(self, line: str) -> FoodMatch | None:
        """Parse, rank, optionally re-rank by embeddings, and scale."""
        parsed = parse_ingredient_line(line)
        if parsed is None:
            if self.debug:
                _logger.info("Skipping unparsable ingredient line: %r", line)
            return None
        if self.catalog.is_empty():
            return None

        candidates = rank_candidates(
            parsed.name, self.catalog, limit=self.candidate_limit
        )
        if self.semantic_matcher is not None:
            outcome = await self.semantic_matcher.resolve(
                parsed.name, [record for record, _ in candidates]
            )
            if isinstance(outcome, SemanticMatch):
                score = min(max(int(outcome.score * 100), 0), 100)
                return _scaled(
                    outcome.record, parsed.quantity_grams, score, line, "semantic"
                )

        lexical = best_lexical_match(
            parsed.name,
            (record for record, _ in candidates),
            threshold=self.lexical_threshold,
        )
        if lexical is None:
            if self.debug:
                _logger.info("No catalog match for %r", parsed.name)
            return None
        record, score = lexical
        return _scaled(record, parsed.quantity_grams, score, line, "lexical")


def aggregate(
    matches: Iterable[FoodMatch], servings: int
) -> tuple[NutritionProfile, NutritionProfile]:
    """Sum matches into recipe totals and derive the per-serving profile."""
    items = list(matches)
    total = NutritionProfile(
        calories=math.fsum(item.calories for item in items),
        protein_g=math.fsum(item.protein_g for item in items),
        carbs_g=math.fsum(item.carbs_g for item in items),
        fat_g=math.fsum(item.fat_g for item in items),
    )
    return total, total.per_serving(servings)


@dataclass
class NutritionService:
    """Computes recipe nutrition from ingredient lines."""

    resolver: MatchResolver

    async def match_ingredient(self, line: str) -> FoodMatch | None:
        """Resolve a single ingredient line."""
        return await self.resolver.match(line)

    async def compute_nutrition(self, recipe: Recipe) -> NutritionResult:
        """Match every ingredient line and aggregate totals.

        Unparsable or unmatched lines are reported in ``unmatched`` and
        contribute nothing.
        """
        results = await asyncio.gather(
            *(self.resolver.match(line) for line in recipe.ingredients)
        )
        matches = tuple(match for match in results if match is not None)
        unmatched = tuple(
            line
            for line, match in zip(recipe.ingredients, results, strict=True)
            if match is None
        )
        total, per_serving = aggregate(matches, recipe.servings)
        return NutritionResult(
            matches=matches,
            unmatched=unmatched,
            total=total,
            per_serving=per_serving,
        )


def _scaled(
    record: FoodRecord, quantity: float, score: int, line: str, method: str
) -> FoodMatch:
    """Scale per-100 values by the parsed quantity."""
    factor = quantity / 100.0
    return FoodMatch(
        description=record.description,
        match_score=score,
        calories=record.calories * factor,
        protein_g=record.protein_g * factor,
        carbs_g=record.carbs_g * factor,
        fat_g=record.fat_g * factor,
        ingredient=line,
        method=method,
    )
