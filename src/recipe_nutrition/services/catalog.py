"""Reference food catalog loaded from CSV."""

import csv
import logging
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from recipe_nutrition.domain.nutrition import FoodRecord

_COLUMNS = {
    "calories": "calories",
    "protein_g": "proteinInGrams",
    "carbs_g": "carbohydratesInGrams",
    "fat_g": "fatInGrams",
}

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FoodCatalog:
    """Immutable, ordered collection of reference foods."""

    records: tuple[FoodRecord, ...] = ()

    @classmethod
    def from_rows(cls, rows: Iterable[dict[str, object]]) -> "FoodCatalog":
        """Build a catalog from raw tabular rows, dropping rows without a name."""
        records = [record for row in rows if (record := _to_record(row)) is not None]
        return cls(records=tuple(records))

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[FoodRecord]:
        return iter(self.records)

    def is_empty(self) -> bool:
        """Return True when no records were loaded."""
        return not self.records


def load_food_catalog(path: str | Path) -> FoodCatalog:
    """Load the catalog CSV; a missing or unreadable file yields an empty catalog."""
    catalog_path = Path(path)
    try:
        with catalog_path.open(newline="", encoding="utf-8-sig") as handle:
            catalog = FoodCatalog.from_rows(csv.DictReader(handle))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        _logger.warning("Food catalog unavailable at %s: %s", catalog_path, exc)
        return FoodCatalog()
    _logger.info("Loaded %s foods from %s", len(catalog), catalog_path)
    return catalog


def _to_record(row: dict[str, object]) -> FoodRecord | None:
    """Normalize one CSV row; rows with an empty description are skipped."""
    description = str(row.get("description") or "").strip().lower()
    if not description:
        return None
    values = {field: _coerce_amount(row.get(column)) for field, column in _COLUMNS.items()}
    return FoodRecord(description=description, **values)


def _coerce_amount(raw: object) -> float:
    """Parse a nutrient amount, defaulting to zero for anything unusable."""
    if raw is None:
        return 0.0
    try:
        value = float(str(raw).strip())
    except ValueError:
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value
