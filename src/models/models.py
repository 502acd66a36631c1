"""Data models and schemas for the recipe finder.

Defines Pydantic models for recipe records, scored results, search options and
paginated responses. All models use Pydantic v2.
"""

import math
from typing import Generic, List, Optional, TypeVar, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


T = TypeVar("T")

MIN_RATING = 0.0
MAX_RATING = 5.0


class Recipe(BaseModel):
    """Domain model for a stored recipe.

    Only id, title and ingredients carry meaning for matching. Every other field is
    passed through unchanged from the store to the caller.
    """

    model_config = ConfigDict(from_attributes=True)

    id: Annotated[int, Field(description="Unique, stable recipe identifier")]
    title: Annotated[str, Field(min_length=1, description="Recipe title")]
    ingredients: Annotated[
        str,
        Field("", description="Free-text ingredient list separated by commas or semicolons"),
    ]
    category: Annotated[Optional[str], Field(None, description="Recipe category")]
    rating: Annotated[Optional[float], Field(None, ge=MIN_RATING, le=MAX_RATING, description="Average rating (0-5)")]
    url: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    rating_count: Optional[int] = None
    review_count: Optional[int] = None
    directions: str = ""
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    total_time: Optional[str] = None
    servings: Optional[int] = None
    yields: Optional[str] = None
    calories: Optional[int] = None
    carbohydrates_g: Optional[float] = None
    sugars_g: Optional[float] = None
    fat_g: Optional[float] = None
    protein_g: Optional[float] = None
    sodium_mg: Optional[int] = None
    instructions_list: Optional[str] = None
    image: Optional[str] = None


class ScoredRecipe(Recipe):
    """Recipe annotated with how completely a pantry covers it.

    missing_ingredients_count is total tokens minus matching ingredients and is not
    clamped: it goes negative when more pantry items match than the recipe lists.
    """

    match_percentage: Annotated[float, Field(description="100 * matching / total recipe tokens")]
    missing_ingredients_count: Annotated[int, Field(description="Total recipe tokens minus matches")]


class RecipeSearchOptions(BaseModel):
    """Structured search criteria. Every criterion is optional and they combine with AND."""

    model_config = ConfigDict(str_strip_whitespace=True)

    search_term: Annotated[
        Optional[str], Field(None, description="Matched against title, description or ingredients")
    ]
    title: Annotated[Optional[str], Field(None, description="Substring of the title")]
    ingredients: Annotated[
        Optional[List[str]], Field(None, description="Every ingredient must appear in the recipe")
    ]
    category: Annotated[Optional[str], Field(None, description="Substring of the category")]
    author: Annotated[Optional[str], Field(None, description="Substring of the author")]
    min_rating: Annotated[Optional[float], Field(None, ge=MIN_RATING, le=MAX_RATING, description="Minimum rating")]
    max_cook_time: Annotated[
        Optional[str], Field(None, description="Upper bound on the stored cook time text")
    ]
    limit: Annotated[int, Field(10, ge=1, le=1000, description="Page size (1-1000)")]
    offset: Annotated[int, Field(0, ge=0, description="Number of recipes to skip")]

    @field_validator("ingredients", mode="before")
    @classmethod
    def drop_blank_ingredients(cls, ingredients: Optional[List[str]]) -> Optional[List[str]]:
        """Remove blank entries so they cannot turn into match-everything clauses."""
        if not ingredients:
            return None
        cleaned = [item.strip() for item in ingredients if isinstance(item, str) and item.strip()]
        return cleaned or None


class PaginatedResult(BaseModel, Generic[T]):
    """One page of results plus the totals needed to request the next one."""

    data: List[T] = Field(default_factory=list)
    total: Annotated[int, Field(ge=0)]
    page: Annotated[int, Field(ge=1)]
    page_size: Annotated[int, Field(ge=0)]
    total_pages: Annotated[int, Field(ge=0)]

    @classmethod
    def build(cls, data: List[T], total: int, limit: int, offset: int) -> "PaginatedResult[T]":
        """Derive page and total_pages from limit/offset arithmetic."""
        return cls(
            data=data,
            total=total,
            page=offset // limit + 1,
            page_size=limit,
            total_pages=math.ceil(total / limit),
        )

    @classmethod
    def empty(cls) -> "PaginatedResult[T]":
        """Page returned for a non-positive limit: no data, no query."""
        return cls(data=[], total=0, page=1, page_size=0, total_pages=0)


class AuthorCount(BaseModel):
    """Author with the number of recipes attributed to them."""

    author: str
    count: Annotated[int, Field(ge=0)]
