"""Ingredient line parsing."""

import re

from recipe_nutrition.domain.nutrition import ParsedIngredient

# Accepted but never converted: catalog values are per 100 of whatever unit it uses.
_UNITS = (
    "g",
    "gr",
    "gram",
    "grams",
    "kg",
    "mg",
    "ml",
    "l",
    "oz",
    "lb",
    "lbs",
    "tbsp",
    "tsp",
    "cup",
    "cups",
)

_LINE_PATTERN = re.compile(
    r"^(?P<quantity>\d+(?:\.\d+)?)\s*"
    r"(?:(?P<unit>" + "|".join(sorted(_UNITS, key=len, reverse=True)) + r")\b\.?)?"
    r"\s*(?P<name>.+)$",
    re.IGNORECASE,
)


def parse_ingredient_line(line: str) -> ParsedIngredient | None:
    """Split a line like ``"200g chicken breast"`` into quantity, unit and name.

    Returns None for lines without a leading number or without a name.
    """
    match = _LINE_PATTERN.match(line.strip())
    if match is None:
        return None
    name = match.group("name").strip().lower()
    if not name or name in _UNITS:
        return None
    unit = match.group("unit")
    return ParsedIngredient(
        quantity_grams=float(match.group("quantity")),
        name=name,
        unit=unit.lower() if unit else None,
    )
