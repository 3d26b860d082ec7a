"""Token-set string similarity ranking over the food catalog."""

from collections.abc import Iterable

from rapidfuzz import fuzz, utils

from recipe_nutrition.domain.nutrition import FoodRecord

DEFAULT_LEXICAL_THRESHOLD = 70
DEFAULT_CANDIDATE_LIMIT = 50


def lexical_score(name: str, description: str) -> int:
    """Return an order-independent token-set similarity between 0 and 100."""
    score = fuzz.token_set_ratio(name, description, processor=utils.default_process)
    return int(round(score))


def rank_candidates(
    name: str, records: Iterable[FoodRecord], limit: int | None = None
) -> list[tuple[FoodRecord, int]]:
    """Score every record against ``name``, best first.

    Ties keep catalog order because ``sorted`` is stable.
    """
    scored = [(record, lexical_score(name, record.description)) for record in records]
    ranked = sorted(scored, key=lambda pair: pair[1], reverse=True)
    if limit is not None:
        return ranked[: max(limit, 0)]
    return ranked


def best_lexical_match(
    name: str,
    records: Iterable[FoodRecord],
    threshold: int = DEFAULT_LEXICAL_THRESHOLD,
) -> tuple[FoodRecord, int] | None:
    """Return the top-ranked record scoring at least ``threshold``, if any."""
    ranked = rank_candidates(name, records, limit=1)
    if not ranked:
        return None
    record, score = ranked[0]
    if score < threshold:
        return None
    return record, score
