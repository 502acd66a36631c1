"""Similarity keywords for "more like this" lookups.

A reference recipe is described by its title words, its category and a handful of key
ingredients. Similar recipes must contain every one of these keywords somewhere in their
title, category or ingredients; the store evaluates that predicate, nothing is scored.
"""

from src.matching.tokenizer import extract_key_ingredients
from src.models.models import Recipe


def build_keyword_set(recipe: Recipe, key_ingredient_limit: int = 5, key_ingredient_min_length: int = 3) -> list[str]:
    """Title words, then category (if any), then key ingredients. Order kept, no dedup.

    Example:
        Recipe(title="Garlic Chicken", category="Italian", ingredients="chicken, garlic, olive oil")
        -> ["Garlic", "Chicken", "Italian", "chicken", "garlic", "olive oil"]
    """
    keywords = recipe.title.split()
    if recipe.category:
        keywords.append(recipe.category)
    keywords.extend(
        extract_key_ingredients(
            recipe.ingredients,
            limit=key_ingredient_limit,
            min_length=key_ingredient_min_length,
        )
    )
    return keywords
