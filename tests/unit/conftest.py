"""Shared fixtures for unit tests: an in-memory recipe store and a service over it."""

import pytest
import pytest_asyncio

from src.services.recipe_service import RecipeService
from src.store.recipe_store import RecipeStore


SAMPLE_RECIPES = [
    # id 1
    {
        "title": "Chicken Fried Rice",
        "category": "Asian",
        "author": "Ana",
        "rating": 4.5,
        "ingredients": "chicken, rice, onion, garlic, salt",
        "cook_time": "20 mins",
    },
    # id 2
    {
        "title": "Garlic Chicken",
        "category": "Italian",
        "author": "Ana",
        "rating": 4.0,
        "ingredients": "chicken, garlic",
        "cook_time": "35 mins",
    },
    # id 3
    {
        "title": "Tomato Basil Pasta",
        "category": "Italian",
        "author": "Bruno",
        "rating": 3.5,
        "description": "Quick weeknight pasta",
        "ingredients": "pasta; tomato; basil; olive oil",
        "cook_time": "15 mins",
    },
    # id 4
    {
        "title": "Creamy Garlic Chicken Pasta",
        "category": "Italian",
        "author": "Bruno",
        "rating": 4.8,
        "ingredients": "chicken, garlic, butter, cream, pasta, Garlic Chicken seasoning",
        "cook_time": "30 mins",
    },
    # id 5
    {
        "title": "Garlic Chicken",
        "category": "Italian",
        "author": "Chloe",
        "ingredients": "chicken, garlic, butter",
    },
    # id 6
    {
        "title": "Plain Toast",
        "category": None,
        "author": "",
        "ingredients": "",
    },
]


@pytest_asyncio.fixture
async def store():
    """Connected in-memory store, disposed after the test."""
    async with RecipeStore("sqlite://", max_retries=1, retry_delays=[0]) as recipe_store:
        yield recipe_store


@pytest_asyncio.fixture
async def seeded_store(store):
    """Store holding SAMPLE_RECIPES with ids 1..6."""
    await store.add_recipes(SAMPLE_RECIPES)
    return store


@pytest.fixture
def service(seeded_store) -> RecipeService:
    return RecipeService(seeded_store)
