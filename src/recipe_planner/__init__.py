"""
Recipe Planner - ingestion and search core.

Loads the Indian food CSV dataset into a recipe store and provides
relevance-ranked search and time sorting over it.
"""

from recipe_planner.data.models import Recipe
from recipe_planner.data.store import RecipeStore
from recipe_planner.data.memory_store import InMemoryRecipeStore
from recipe_planner.data.database import SqliteRecipeStore
from recipe_planner.service import RecipeService

__version__ = "0.1.0"

__all__ = [
    "Recipe",
    "RecipeStore",
    "InMemoryRecipeStore",
    "SqliteRecipeStore",
    "RecipeService",
]
