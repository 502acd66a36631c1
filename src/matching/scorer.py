"""Match scorer: how much of a recipe a pantry covers.

For a recipe and a list of available ingredients:

    matching = number of available ingredients found in the recipe text
    total    = number of ingredient tokens in the recipe
    match_percentage          = 100 * matching / total
    missing_ingredients_count = total - matching

"Found" is decided by a MatchStrategy. The default is case-insensitive substring
containment against the whole ingredient text, which is tolerant but imprecise:
"oil" matches "olive oil" and "sesame oil", and "salt" matches "unsalted butter".

matching counts available ingredients (duplicates included), not recipe tokens, so it
can exceed total. missing_ingredients_count is then negative and is reported as is.
"""

from dataclasses import dataclass
from typing import Protocol, Sequence

from src.matching.tokenizer import tokenize
from src.models.models import Recipe, ScoredRecipe


class MatchStrategy(Protocol):
    """Decides whether one available ingredient is present in a recipe."""

    def matches(self, recipe_text: str, ingredient: str) -> bool:
        """Both arguments are already lower-cased."""
        ...


class SubstringMatchStrategy:
    """An ingredient is present when it occurs anywhere in the recipe's ingredient text."""

    def matches(self, recipe_text: str, ingredient: str) -> bool:
        return ingredient in recipe_text


@dataclass(frozen=True)
class MatchScore:
    match_percentage: float
    missing_ingredients_count: int


class MatchScorer:
    """Scores recipes against a pantry using a pluggable match strategy."""

    def __init__(self, strategy: MatchStrategy | None = None) -> None:
        self.strategy = strategy or SubstringMatchStrategy()

    def count_matching(self, recipe: Recipe, available_ingredients: Sequence[str]) -> int:
        recipe_text = recipe.ingredients.lower()
        return sum(
            1 for ingredient in available_ingredients if self.strategy.matches(recipe_text, ingredient.lower())
        )

    def score(self, recipe: Recipe, available_ingredients: Sequence[str]) -> MatchScore:
        """Compute match percentage and missing count for one recipe.

        A recipe with no ingredient tokens scores 0.0 instead of dividing by zero.
        """
        matching = self.count_matching(recipe, available_ingredients)
        total = len(tokenize(recipe.ingredients))

        match_percentage = 100.0 * matching / total if total else 0.0
        return MatchScore(
            match_percentage=match_percentage,
            missing_ingredients_count=total - matching,
        )

    def score_all(self, recipes: Sequence[Recipe], available_ingredients: Sequence[str]) -> list[ScoredRecipe]:
        """Score every recipe, preserving input order."""
        scored = []
        for recipe in recipes:
            result = self.score(recipe, available_ingredients)
            scored.append(
                ScoredRecipe(
                    **recipe.model_dump(),
                    match_percentage=result.match_percentage,
                    missing_ingredients_count=result.missing_ingredients_count,
                )
            )
        return scored
