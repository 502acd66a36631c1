"""Agno toolkit exposing the recipe service to LLM agents.

Every tool returns a JSON string built with serialize_for_wire, so large integers
survive the trip to the model. Method docstrings are the tool descriptions the agent
sees; keep them short and imperative.
"""

import json
from typing import Any, Optional

from agno.tools import Toolkit

from src.models.models import PaginatedResult, Recipe, RecipeSearchOptions
from src.services.recipe_service import RecipeService
from src.store.errors import RecipeNotFoundError
from src.utils.logger import logger
from src.utils.serialization import serialize_for_wire


def _to_json(value: Any) -> str:
    return json.dumps(serialize_for_wire(value), ensure_ascii=False)


class RecipeTools(Toolkit):
    """Recipe search, lookup and pantry matching tools backed by a RecipeService."""

    def __init__(self, service: RecipeService, **kwargs) -> None:
        self.service = service
        tools = [
            self.search_recipes,
            self.search_recipes_by_title,
            self.search_recipes_by_ingredient,
            self.search_recipes_by_category,
            self.get_recipe_by_id,
            self.get_similar_recipes,
            self.get_available_categories,
            self.get_popular_authors,
            self.find_recipes_by_available_ingredients,
        ]
        super().__init__(name="recipe_tools", tools=tools, **kwargs)

    async def search_recipes(
        self,
        query: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
        category: Optional[str] = None,
        ingredient: Optional[str] = None,
    ) -> str:
        """Search recipes with pagination using optional criteria.

        Args:
            query: General search term matched against title, description and ingredients.
            limit: Number of recipes to return.
            offset: Number of recipes to skip.
            category: Recipe category.
            ingredient: Ingredient the recipe must contain.

        Returns:
            JSON page with data, total, page, page_size and total_pages.
        """
        if limit <= 0:
            return _to_json(PaginatedResult[Recipe].empty())
        options = RecipeSearchOptions(
            search_term=query,
            limit=limit,
            offset=offset,
            category=category,
            ingredients=[ingredient] if ingredient else None,
        )
        return _to_json(await self.service.search_recipes(options))

    async def search_recipes_by_title(self, title: str, limit: int = 10, offset: int = 0) -> str:
        """Search recipes whose title contains the given text.

        Args:
            title: Title or part of the title.
            limit: Maximum number of recipes to return.
            offset: Number of recipes to skip (pagination).
        """
        return _to_json(await self.service.search_recipes_by_title(title, limit=limit, offset=offset))

    async def search_recipes_by_ingredient(self, ingredient: str, limit: int = 10, offset: int = 0) -> str:
        """Search recipes containing an ingredient.

        Args:
            ingredient: Ingredient to look for.
            limit: Maximum number of recipes to return.
            offset: Number of recipes to skip (pagination).
        """
        return _to_json(await self.service.search_recipes_by_ingredient(ingredient, limit=limit, offset=offset))

    async def search_recipes_by_category(self, category: str, limit: int = 10, offset: int = 0) -> str:
        """Search recipes in a category.

        Args:
            category: Category to look for.
            limit: Maximum number of recipes to return.
            offset: Number of recipes to skip (pagination).
        """
        return _to_json(await self.service.search_recipes_by_category(category, limit=limit, offset=offset))

    async def get_recipe_by_id(self, recipe_id: int) -> str:
        """Get a recipe by its id.

        Args:
            recipe_id: Recipe id.
        """
        try:
            return _to_json(await self.service.get_recipe_by_id(recipe_id))
        except RecipeNotFoundError as e:
            logger.warning(f"Tool get_recipe_by_id: {e}")
            return _to_json({"error": str(e)})

    async def get_similar_recipes(self, recipe_id: int, limit: int = 5) -> str:
        """Find recipes similar to a given recipe.

        Args:
            recipe_id: Id of the reference recipe.
            limit: Maximum number of recipes to return.
        """
        try:
            return _to_json(await self.service.find_similar(recipe_id, limit=limit))
        except RecipeNotFoundError as e:
            logger.warning(f"Tool get_similar_recipes: {e}")
            return _to_json({"error": str(e)})

    async def get_available_categories(self, limit: int = 100) -> str:
        """List the available recipe categories.

        Args:
            limit: Maximum number of categories to return.
        """
        categories = await self.service.get_available_categories()
        return _to_json(categories[:limit] if limit > 0 else [])

    async def get_popular_authors(self, limit: int = 20) -> str:
        """List the authors with the most recipes.

        Args:
            limit: Number of authors to return.
        """
        return _to_json(await self.service.get_popular_authors(limit))

    async def find_recipes_by_available_ingredients(self, ingredients: list[str], limit: int = 10) -> str:
        """Find recipes that can be made with the available ingredients.

        Only recipes covering more than half of their ingredient list are returned, best
        match first, with match_percentage and missing_ingredients_count. Only the most
        recent recipes in the database are considered.

        Args:
            ingredients: Available ingredients.
            limit: Maximum number of recipes to return.
        """
        return _to_json(await self.service.find_by_available_ingredients(ingredients, limit=limit))
