"""
In-memory recipe store.

Records live in a dictionary for the lifetime of the process. Every record
going in or coming out is copied, so callers holding a result never see
later mutations and cannot mutate the store behind its back.
"""

import copy
import logging
from typing import Dict, List, Optional

from .models import Recipe, normalize_steps
from .store import RecipeStore

logger = logging.getLogger(__name__)


class InMemoryRecipeStore(RecipeStore):
    """Transient RecipeStore backed by a dict keyed by id."""

    def __init__(self, match_ingredients: bool = False):
        super().__init__(match_ingredients=match_ingredients)
        self._recipes: Dict[int, Recipe] = {}
        self._last_id = 0

    def create(self, recipe: Recipe) -> Recipe:
        self.validate(recipe)

        self._last_id += 1
        recipe.id = self._last_id
        self._recipes[recipe.id] = self._stored_copy(recipe)
        logger.debug(f"Created recipe {recipe.id}: {recipe.name}")
        return recipe

    def save(self, recipe: Recipe) -> Recipe:
        self.validate(recipe)

        if recipe.id not in self._recipes:
            return self.create(recipe)

        self._recipes[recipe.id] = self._stored_copy(recipe)
        logger.debug(f"Updated recipe {recipe.id}: {recipe.name}")
        return recipe

    def find_by_id(self, recipe_id: int) -> Optional[Recipe]:
        recipe = self._recipes.get(recipe_id)
        return copy.deepcopy(recipe) if recipe is not None else None

    def find_all(self) -> List[Recipe]:
        return [copy.deepcopy(self._recipes[key]) for key in sorted(self._recipes)]

    def search_by_name(self, term: str) -> List[Recipe]:
        if not term or not term.strip():
            return []

        needle = term.strip().lower()
        results = []
        for recipe in self.find_all():
            if needle in recipe.name.lower():
                results.append(recipe)
            elif self.match_ingredients and needle in (recipe.raw_ingredients or "").lower():
                results.append(recipe)
        return results

    def find_by_cuisine(self, cuisine: str) -> List[Recipe]:
        if cuisine is None:
            return []

        wanted = cuisine.strip().lower()
        return [
            recipe for recipe in self.find_all()
            if recipe.cuisine is not None and recipe.cuisine.strip().lower() == wanted
        ]

    def find_by_owner(self, owner_id: int) -> List[Recipe]:
        return [recipe for recipe in self.find_all() if recipe.owner_id == owner_id]

    def delete(self, recipe_id: int) -> bool:
        if self._recipes.pop(recipe_id, None) is None:
            return False
        logger.debug(f"Deleted recipe {recipe_id}")
        return True

    def count(self) -> int:
        return len(self._recipes)

    def clear(self) -> None:
        self._recipes.clear()
        logger.info("All recipes cleared from memory")

    @staticmethod
    def _stored_copy(recipe: Recipe) -> Recipe:
        # One trimmed line per step, blank steps dropped
        stored = copy.deepcopy(recipe)
        stored.instructions = normalize_steps(stored.instructions)
        return stored
