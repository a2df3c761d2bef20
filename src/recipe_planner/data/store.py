"""
Recipe store contract.

Two realizations satisfy this contract:
- InMemoryRecipeStore: transient, process-local
- SqliteRecipeStore: durable, one table in a SQLite database

Both assign strictly increasing ids that are never reused, both treat
``save`` as a full overwrite when the id exists (create otherwise), and
neither raises for a missing id.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from recipe_planner.exceptions import RecipeValidationError
from .models import Recipe, normalize_name


class RecipeStore(ABC):
    """CRUD and query operations over Recipe records."""

    def __init__(self, match_ingredients: bool = False):
        """
        Args:
            match_ingredients: If True, search_by_name also matches the raw
                ingredients text
        """
        self.match_ingredients = match_ingredients

    @abstractmethod
    def create(self, recipe: Recipe) -> Recipe:
        """Persist a new recipe under a fresh id and return it with the id set."""

    @abstractmethod
    def save(self, recipe: Recipe) -> Recipe:
        """Replace the stored record with the same id, or create it if absent."""

    @abstractmethod
    def find_by_id(self, recipe_id: int) -> Optional[Recipe]:
        """Return the recipe or None."""

    @abstractmethod
    def find_all(self) -> List[Recipe]:
        """Snapshot of every recipe in ascending id order."""

    @abstractmethod
    def search_by_name(self, term: str) -> List[Recipe]:
        """Case-insensitive substring match on name (and ingredients, if enabled)."""

    @abstractmethod
    def find_by_cuisine(self, cuisine: str) -> List[Recipe]:
        """Case-insensitive exact match on cuisine."""

    @abstractmethod
    def find_by_owner(self, owner_id: int) -> List[Recipe]:
        """Recipes created by the given user (0 = seeded recipes)."""

    @abstractmethod
    def delete(self, recipe_id: int) -> bool:
        """Remove a recipe. True iff it existed."""

    @abstractmethod
    def count(self) -> int:
        """Number of stored recipes."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every recipe. Ids handed out so far are still never reused."""

    def create_many(self, recipes: Iterable[Recipe]) -> int:
        """Bulk insert. Returns the number of recipes that received an id."""
        created = 0
        for recipe in recipes:
            if self.create(recipe).id > 0:
                created += 1
        return created

    def find_page(self, limit: int, offset: int = 0) -> List[Recipe]:
        """A window of find_all(), for paginated display."""
        if limit <= 0 or offset < 0:
            return []
        return self.find_all()[offset:offset + limit]

    @staticmethod
    def validate(recipe: Recipe) -> None:
        """
        Check that a recipe can be persisted.

        Raises:
            RecipeValidationError: If the recipe is missing or its name is blank
        """
        if recipe is None:
            raise RecipeValidationError("Recipe cannot be None")
        if not normalize_name(recipe.name):
            raise RecipeValidationError("Recipe name cannot be empty")
        if recipe.total_time_mins is None or recipe.total_time_mins < 0:
            raise RecipeValidationError(
                f"Recipe '{recipe.name}' has invalid total time: {recipe.total_time_mins}"
            )
