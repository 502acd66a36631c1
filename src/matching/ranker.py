"""Candidate ranker: threshold, order and truncate scored recipes."""

from typing import Sequence

from src.models.models import ScoredRecipe

DEFAULT_MATCH_THRESHOLD = 50.0
DEFAULT_RANK_LIMIT = 10


def rank(
    scored: Sequence[ScoredRecipe],
    limit: int = DEFAULT_RANK_LIMIT,
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> list[ScoredRecipe]:
    """Keep recipes scoring strictly above threshold, best first, at most limit of them.

    sorted() is stable, so recipes with equal scores keep their input order (the store
    returns candidates newest first). A non-positive limit returns an empty list.
    """
    if limit <= 0:
        return []
    passing = [recipe for recipe in scored if recipe.match_percentage > threshold]
    passing = sorted(passing, key=lambda recipe: recipe.match_percentage, reverse=True)
    return passing[:limit]
