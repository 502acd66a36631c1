"""Recipe service: the operations offered to tools, the CLI and other callers.

The store is injected; the service owns no connection and keeps no state between calls.
Pantry search and similar-recipe lookup go through the matching core; the structured
searches translate options into store predicates and paginate.
"""

from typing import Optional, Sequence

from src.matching.ranker import rank
from src.matching.scorer import MatchScorer
from src.matching.similarity import build_keyword_set
from src.models.models import AuthorCount, PaginatedResult, Recipe, RecipeSearchOptions, ScoredRecipe
from src.store.filters import build_keyword_filter, build_search_filter
from src.store.recipe_store import RecipeStore
from src.utils.config import config
from src.utils.logger import logger


class RecipeService:
    """Recipe retrieval over an injected RecipeStore."""

    def __init__(
        self,
        store: RecipeStore,
        scorer: Optional[MatchScorer] = None,
        candidate_pool_size: Optional[int] = None,
        match_threshold: Optional[float] = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Connected recipe store.
            scorer: Match scorer, substring matching by default.
            candidate_pool_size: Most recent recipes scored per pantry search. Recipes beyond
                this cap are never returned. Defaults to config.CANDIDATE_POOL_SIZE.
            match_threshold: Exclusive lower bound on match percentage. Defaults to
                config.MATCH_THRESHOLD.
        """
        self.store = store
        self.scorer = scorer or MatchScorer()
        self.candidate_pool_size = (
            config.CANDIDATE_POOL_SIZE if candidate_pool_size is None else candidate_pool_size
        )
        self.match_threshold = config.MATCH_THRESHOLD if match_threshold is None else match_threshold

    async def find_by_available_ingredients(
        self,
        ingredients: Sequence[str],
        limit: Optional[int] = None,
    ) -> list[ScoredRecipe]:
        """Recipes best covered by the available ingredients.

        Scores the candidate pool (the most recent candidate_pool_size recipes), keeps those
        above the match threshold and returns at most limit of them, best first. An empty
        ingredient list or a non-positive limit returns [] without touching the store.
        """
        limit = config.DEFAULT_MATCH_LIMIT if limit is None else limit
        if not ingredients or limit <= 0:
            return []

        candidates = await self.store.fetch_candidate_pool(self.candidate_pool_size)
        scored = self.scorer.score_all(candidates, ingredients)
        ranked = rank(scored, limit=limit, threshold=self.match_threshold)

        logger.info(
            f"Pantry search: {len(ingredients)} ingredient(s), "
            f"{len(candidates)} candidate(s), {len(ranked)} result(s)",
            extra={"operation": "find_by_available_ingredients", "candidate_count": len(candidates),
                   "result_count": len(ranked)},
        )
        return ranked

    async def find_similar(self, recipe_id: int, limit: Optional[int] = None) -> list[Recipe]:
        """Recipes sharing every keyword of the reference recipe, newest first.

        Raises:
            RecipeNotFoundError: If recipe_id does not exist.
        """
        limit = config.DEFAULT_SIMILAR_LIMIT if limit is None else limit
        reference = await self.store.fetch_by_id(recipe_id)
        if limit <= 0:
            return []

        keywords = build_keyword_set(
            reference,
            key_ingredient_limit=config.KEY_INGREDIENT_LIMIT,
            key_ingredient_min_length=config.KEY_INGREDIENT_MIN_LENGTH,
        )
        if not keywords:
            # Nothing describes the reference, so nothing can be similar to it
            logger.info(f"Recipe {recipe_id} has no similarity keywords", extra={"recipe_id": recipe_id})
            return []

        similar = await self.store.query_matching(build_keyword_filter(keywords, recipe_id), limit=limit)
        logger.info(
            f"Similar to recipe {recipe_id}: {len(keywords)} keyword(s), {len(similar)} result(s)",
            extra={"operation": "find_similar", "recipe_id": recipe_id, "result_count": len(similar)},
        )
        return similar

    async def get_recipe_by_id(self, recipe_id: int) -> Recipe:
        """Raises RecipeNotFoundError if recipe_id does not exist."""
        return await self.store.fetch_by_id(recipe_id)

    async def search_recipes(self, options: RecipeSearchOptions) -> PaginatedResult[Recipe]:
        """One page of recipes matching every criterion in options, newest first."""
        predicate = build_search_filter(options)
        recipes = await self.store.query_matching(predicate, limit=options.limit, offset=options.offset)
        total = await self.store.count_matching(predicate)
        logger.debug(f"Search matched {total} recipe(s), returning {len(recipes)}")
        return PaginatedResult[Recipe].build(recipes, total=total, limit=options.limit, offset=options.offset)

    async def search_recipes_by_title(
        self, title: str, limit: Optional[int] = None, offset: int = 0
    ) -> PaginatedResult[Recipe]:
        return await self._search_single_field(limit, offset, title=title)

    async def search_recipes_by_ingredient(
        self, ingredient: str, limit: Optional[int] = None, offset: int = 0
    ) -> PaginatedResult[Recipe]:
        return await self._search_single_field(limit, offset, ingredients=[ingredient])

    async def search_recipes_by_category(
        self, category: str, limit: Optional[int] = None, offset: int = 0
    ) -> PaginatedResult[Recipe]:
        return await self._search_single_field(limit, offset, category=category)

    async def _search_single_field(self, limit: Optional[int], offset: int, **criteria) -> PaginatedResult[Recipe]:
        limit = config.DEFAULT_PAGE_SIZE if limit is None else limit
        if limit <= 0:
            return PaginatedResult[Recipe].empty()
        return await self.search_recipes(RecipeSearchOptions(limit=limit, offset=offset, **criteria))

    async def get_available_categories(self) -> list[str]:
        return await self.store.list_categories()

    async def get_popular_authors(self, limit: Optional[int] = None) -> list[AuthorCount]:
        return await self.store.popular_authors(config.POPULAR_AUTHORS_LIMIT if limit is None else limit)
