"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from recipe_nutrition.domain.nutrition import FoodRecord
from recipe_nutrition.domain.recipes import Recipe
from recipe_nutrition.services.cache import InMemoryEmbeddingCache
from recipe_nutrition.services.catalog import FoodCatalog
from recipe_nutrition.services.embeddings import (
    CachedEmbedder,
    EmbeddingClient,
    EmbeddingProviderError,
    SemanticMatcher,
)
from recipe_nutrition.services.nutrition import MatchResolver, NutritionService
from recipe_nutrition.services.recipes import (
    DuplicateRecipeError,
    RecipeNotFoundError,
    RecipeRepository,
)


@dataclass
class FakeEmbeddingClient(EmbeddingClient):
    """Returns fixed vectors per text and records every call."""

    vectors: dict[str, list[float]] = field(default_factory=dict)
    default: list[float] = field(default_factory=lambda: [0.0, 0.0, 1.0])
    calls: list[str] = field(default_factory=list)
    delay_seconds: float = 0.0

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        return list(self.vectors.get(text, self.default))


@dataclass
class FailingEmbeddingClient(EmbeddingClient):
    """Embedding client whose provider is always down."""

    calls: int = 0

    async def embed(self, text: str) -> list[float]:
        self.calls += 1
        raise EmbeddingProviderError("provider unreachable", status_code=503)


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests."""

    recipes: list[Recipe] = field(default_factory=list)

    def list_recipes(self) -> list[Recipe]:
        return list(self.recipes)

    def get_recipe(self, title: str) -> Recipe | None:
        for recipe in self.recipes:
            if recipe.title.casefold() == title.casefold():
                return recipe
        return None

    def add_recipe(self, recipe: Recipe) -> None:
        if self.get_recipe(recipe.title) is not None:
            raise DuplicateRecipeError(recipe.title)
        self.recipes.append(recipe)

    def update_recipe(self, original_title: str, recipe: Recipe) -> None:
        existing = self.get_recipe(original_title)
        if existing is None:
            raise RecipeNotFoundError(original_title)
        self.recipes[self.recipes.index(existing)] = recipe

    def delete_recipe(self, title: str) -> None:
        existing = self.get_recipe(title)
        if existing is None:
            raise RecipeNotFoundError(title)
        self.recipes.remove(existing)


OLIVE_OIL = FoodRecord(
    description="olive oil", calories=884, protein_g=0, carbs_g=0, fat_g=100
)
CHICKEN = FoodRecord(
    description="chicken breast, raw",
    calories=120,
    protein_g=22.5,
    carbs_g=0,
    fat_g=2.6,
)
ONION = FoodRecord(
    description="onion, raw", calories=40, protein_g=1.1, carbs_g=9.3, fat_g=0.1
)
RICE = FoodRecord(
    description="rice, white, cooked",
    calories=130,
    protein_g=2.7,
    carbs_g=28.2,
    fat_g=0.3,
)


def build_service(
    catalog: FoodCatalog, client: EmbeddingClient | None = None
) -> NutritionService:
    """Wire a nutrition service, with a semantic layer when a client is given."""
    matcher = None
    if client is not None:
        matcher = SemanticMatcher(
            embedder=CachedEmbedder(client=client, cache=InMemoryEmbeddingCache()),
            timeout_seconds=1.0,
        )
    return NutritionService(
        resolver=MatchResolver(catalog=catalog, semantic_matcher=matcher)
    )


@pytest.fixture
def catalog() -> FoodCatalog:
    return FoodCatalog(records=(OLIVE_OIL, CHICKEN, ONION, RICE))


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()
