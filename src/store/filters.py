"""Translate search criteria into SQLAlchemy WHERE predicates over the Recipe table.

All text criteria use substring containment (LIKE with escaped wildcards). The store
turns on case-sensitive LIKE for SQLite, so matching is case-sensitive on every backend.
"""

from typing import Sequence

from sqlalchemy import and_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from src.models.models import RecipeSearchOptions
from src.store.schema import RecipeRecord


def contains(column, value: str) -> ColumnElement[bool]:
    """LIKE '%value%' with % and _ in value matched literally."""
    return column.contains(value, autoescape=True)


def match_all() -> ColumnElement[bool]:
    """Predicate that every recipe satisfies."""
    return true()


def build_search_filter(options: RecipeSearchOptions) -> ColumnElement[bool]:
    """Build the AND of every criterion set in options.

    - search_term: title OR description OR ingredients contains it
    - title, category, author: the column contains the value
    - ingredients: the ingredients column contains every listed ingredient
    - min_rating: rating >= value (recipes without a rating never match)
    - max_cook_time: cook_time <= value, compared as stored text
    """
    clauses: list[ColumnElement[bool]] = []

    if options.search_term:
        term = options.search_term
        clauses.append(
            or_(
                contains(RecipeRecord.title, term),
                contains(RecipeRecord.description, term),
                contains(RecipeRecord.ingredients, term),
            )
        )
    if options.title:
        clauses.append(contains(RecipeRecord.title, options.title))
    for ingredient in options.ingredients or []:
        clauses.append(contains(RecipeRecord.ingredients, ingredient))
    if options.category:
        clauses.append(contains(RecipeRecord.category, options.category))
    if options.author:
        clauses.append(contains(RecipeRecord.author, options.author))
    if options.min_rating is not None:
        clauses.append(RecipeRecord.rating >= options.min_rating)
    if options.max_cook_time:
        clauses.append(RecipeRecord.cook_time <= options.max_cook_time)

    return and_(match_all(), *clauses)


def build_keyword_filter(keywords: Sequence[str], exclude_id: int) -> ColumnElement[bool]:
    """Recipes other than exclude_id where each keyword appears in title, category or ingredients.

    AND across keywords, OR across the three columns for a single keyword. With no
    keywords only the id exclusion remains.
    """
    clauses: list[ColumnElement[bool]] = [RecipeRecord.id != exclude_id]
    for keyword in keywords:
        clauses.append(
            or_(
                contains(RecipeRecord.title, keyword),
                contains(RecipeRecord.category, keyword),
                contains(RecipeRecord.ingredients, keyword),
            )
        )
    return and_(*clauses)
