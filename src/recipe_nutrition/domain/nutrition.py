"""Nutrition domain models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FoodRecord:
    """Reference food with macros per 100 units of the catalog's unit."""

    description: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class ParsedIngredient:
    """Quantity and name extracted from an ingredient line."""

    quantity_grams: float
    name: str
    unit: str | None = None


@dataclass(frozen=True)
class FoodMatch:
    """Catalog match for an ingredient line, scaled to its quantity."""

    description: str
    match_score: int
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    ingredient: str = ""
    method: str = "lexical"


@dataclass(frozen=True)
class NutritionProfile:
    """Macro totals for a recipe or a single serving."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0

    def per_serving(self, servings: int) -> "NutritionProfile":
        """Divide every field by the serving count, floored to one."""
        divisor = max(servings, 1)
        return NutritionProfile(
            calories=self.calories / divisor,
            protein_g=self.protein_g / divisor,
            carbs_g=self.carbs_g / divisor,
            fat_g=self.fat_g / divisor,
        )


@dataclass(frozen=True)
class NutritionResult:
    """Computed nutrition for one recipe."""

    matches: tuple[FoodMatch, ...] = ()
    unmatched: tuple[str, ...] = ()
    total: NutritionProfile = field(default_factory=NutritionProfile)
    per_serving: NutritionProfile = field(default_factory=NutritionProfile)
