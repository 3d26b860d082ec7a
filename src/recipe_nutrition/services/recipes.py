"""Recipe store seam that keeps nutrition in step with ingredient edits."""

from dataclasses import dataclass
from typing import Protocol

from recipe_nutrition.domain.nutrition import NutritionResult
from recipe_nutrition.domain.recipes import Recipe, RecipeList
from recipe_nutrition.services.nutrition import NutritionService


class RecipeNotFoundError(ValueError):
    """Raised when no recipe has the requested title."""


class DuplicateRecipeError(ValueError):
    """Raised when a recipe title is already taken."""


class RecipeRepository(Protocol):
    """Persistence interface for recipes keyed by case-insensitive title."""

    def list_recipes(self) -> list[Recipe]:
        """Return all stored recipes."""

    def get_recipe(self, title: str) -> Recipe | None:
        """Return a recipe by title, if present."""

    def add_recipe(self, recipe: Recipe) -> None:
        """Store a new recipe."""

    def update_recipe(self, original_title: str, recipe: Recipe) -> None:
        """Replace the recipe stored under ``original_title``."""

    def delete_recipe(self, title: str) -> None:
        """Remove a recipe by title."""


@dataclass
class RecipeService:
    """Application service for recipe operations."""

    repository: RecipeRepository
    nutrition_service: NutritionService

    def list_recipes(self) -> RecipeList:
        """Return every recipe with a total count."""
        recipes = self.repository.list_recipes()
        return RecipeList(recipes=recipes, total_count=len(recipes))

    def get_recipe(self, title: str) -> Recipe | None:
        """Return a recipe by title."""
        return self.repository.get_recipe(title)

    async def get_nutrition(self, title: str) -> NutritionResult | None:
        """Compute nutrition for a stored recipe."""
        recipe = self.repository.get_recipe(title)
        if recipe is None:
            return None
        return await self.nutrition_service.compute_nutrition(recipe)

    async def add_recipe(self, recipe: Recipe) -> NutritionResult:
        """Store a recipe and return its freshly computed nutrition."""
        self.repository.add_recipe(recipe)
        return await self.nutrition_service.compute_nutrition(recipe)

    async def update_recipe(
        self, original_title: str, recipe: Recipe
    ) -> NutritionResult:
        """Replace a recipe and recompute its nutrition."""
        self.repository.update_recipe(original_title, recipe)
        return await self.nutrition_service.compute_nutrition(recipe)

    def delete_recipe(self, title: str) -> None:
        """Delete a recipe by title."""
        self.repository.delete_recipe(title)
