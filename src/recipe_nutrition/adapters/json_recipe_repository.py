"""File-backed recipe repository."""

import threading
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import TypeAdapter

from recipe_nutrition.domain.recipes import Recipe
from recipe_nutrition.services.recipes import (
    DuplicateRecipeError,
    RecipeNotFoundError,
    RecipeRepository,
)

_RECIPES = TypeAdapter(list[Recipe])


@dataclass
class JsonRecipeRepository(RecipeRepository):
    """Stores all recipes in a single JSON array file."""

    path: Path
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def list_recipes(self) -> list[Recipe]:
        with self._lock:
            return self._load()

    def get_recipe(self, title: str) -> Recipe | None:
        with self._lock:
            recipes = self._load()
        return next((r for r in recipes if _same_title(r.title, title)), None)

    def add_recipe(self, recipe: Recipe) -> None:
        with self._lock:
            recipes = self._load()
            if any(_same_title(r.title, recipe.title) for r in recipes):
                raise DuplicateRecipeError("A recipe with this title already exists.")
            recipes.append(recipe)
            self._save(recipes)

    def update_recipe(self, original_title: str, recipe: Recipe) -> None:
        with self._lock:
            recipes = self._load()
            index = _find_index(recipes, original_title)
            if index is None:
                raise RecipeNotFoundError("Recipe not found.")
            renamed = not _same_title(recipe.title, original_title)
            if renamed and any(_same_title(r.title, recipe.title) for r in recipes):
                raise DuplicateRecipeError(
                    "A recipe with the new title already exists."
                )
            recipes[index] = recipe.model_copy(deep=True)
            self._save(recipes)

    def delete_recipe(self, title: str) -> None:
        with self._lock:
            recipes = self._load()
            remaining = [r for r in recipes if not _same_title(r.title, title)]
            if len(remaining) == len(recipes):
                raise RecipeNotFoundError("Recipe not found.")
            self._save(remaining)

    def _load(self) -> list[Recipe]:
        if not self.path.exists():
            return []
        return _RECIPES.validate_json(self.path.read_bytes())

    def _save(self, recipes: list[Recipe]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(_RECIPES.dump_json(recipes, by_alias=True, indent=2))


def _same_title(left: str, right: str) -> bool:
    return left.casefold() == right.casefold()


def _find_index(recipes: list[Recipe], title: str) -> int | None:
    for index, recipe in enumerate(recipes):
        if _same_title(recipe.title, title):
            return index
    return None
