"""
Pytest configuration and shared fixtures.

Fixtures are reusable test setup that can be injected into tests.
"""

import os
import pytest
import tempfile
import shutil
from pathlib import Path

from recipe_planner.data.database import SqliteRecipeStore
from recipe_planner.data.memory_store import InMemoryRecipeStore
from recipe_planner.data.models import Recipe


CSV_HEADER = (
    "TranslatedRecipeName,TranslatedIngredients,TotalTimeInMins,Cuisine,"
    "TranslatedInstructions,URL,Cleaned-Ingredients,image-url,Ingredient-count"
)


@pytest.fixture
def temp_db_dir():
    """
    Create a temporary database directory for testing.

    This fixture is automatically cleaned up after each test.
    """
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def db(temp_db_dir):
    """
    Create a fresh SqliteRecipeStore for each test.

    Usage in tests:
        def test_something(db):
            db.create(...)
    """
    return SqliteRecipeStore(db_path=os.path.join(temp_db_dir, "recipes.db"))


@pytest.fixture
def memory_store():
    """Fresh in-memory store."""
    return InMemoryRecipeStore()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, temp_db_dir):
    """
    Each store realization in turn, both with match_ingredients disabled.

    Tests using this fixture check the shared contract.
    """
    if request.param == "memory":
        return InMemoryRecipeStore(match_ingredients=False)
    return SqliteRecipeStore(
        db_path=os.path.join(temp_db_dir, "recipes.db"),
        match_ingredients=False,
    )


@pytest.fixture
def sample_recipe():
    """Sample seeded recipe for testing."""
    return Recipe(
        name="Palak Paneer",
        description="Cottage cheese in spinach gravy",
        cuisine="North Indian",
        total_time_mins=45,
        owner_id=0,
        source_url="https://example.com/palak-paneer",
        image_url="https://example.com/palak-paneer.jpg",
        raw_ingredients="200 grams Paneer, 1 bunch Spinach, 2 Onions, 1 teaspoon Cumin seeds",
        instructions=[
            "Blanch the spinach and puree it",
            "Saute onions with cumin seeds",
            "Add the puree and simmer",
            "Fold in the paneer cubes and serve",
        ],
    )


@pytest.fixture
def sample_recipes():
    """A small corpus with mixed cuisines, times and owners."""
    return [
        Recipe(name="Masala Dosa", cuisine="South Indian", total_time_mins=45,
               raw_ingredients="2 cups Rice, 1 cup Urad dal, 3 Potatoes"),
        Recipe(name="Paneer", cuisine="North Indian", total_time_mins=10,
               raw_ingredients="1 litre Milk, 2 tablespoons Lemon juice"),
        Recipe(name="Palak Paneer", cuisine="North Indian", total_time_mins=10,
               raw_ingredients="200 grams Paneer, 1 bunch Spinach"),
        Recipe(name="Chicken Chettinad", cuisine="Chettinad", total_time_mins=30,
               raw_ingredients="500 grams Chicken, 2 tablespoons Pepper", owner_id=7),
    ]


@pytest.fixture
def write_csv(tmp_path):
    """
    Write a dataset file from data rows (header added automatically).

    Usage:
        path = write_csv(['Dal,"lentil, 1 cup",40,North Indian,"Cook dal. Serve hot."'])
    """
    def _write(rows, header=CSV_HEADER, name="recipes.csv") -> Path:
        path = tmp_path / name
        path.write_text("\n".join([header, *rows]) + "\n", encoding="utf-8")
        return path

    return _write
