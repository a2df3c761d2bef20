"""
Recipe service - the query surface used by the UI layer.

Wraps a RecipeStore (passed in, never looked up globally) with relevance
search, time sorting, ownership checks and "add to my recipes".
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional

from recipe_planner.data.models import Recipe, SYSTEM_OWNER_ID
from recipe_planner.data.store import RecipeStore
from recipe_planner.exceptions import RecipePermissionError
from recipe_planner.permissions import Actor, can_delete, can_edit
from recipe_planner import search as ranking

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "ingredient", "cuisine")


class RecipeService:
    """Business operations over a recipe store."""

    def __init__(self, store: RecipeStore):
        """
        Args:
            store: The store every operation reads from and writes to
        """
        self.store = store

    def create_or_update(self, recipe: Recipe, actor: Optional[Actor] = None) -> Recipe:
        """
        Save a recipe: insert if new, full overwrite if it exists.

        Args:
            recipe: Recipe to save
            actor: User on whose behalf the save happens (None = system)

        Returns:
            The saved recipe, with id set

        Raises:
            RecipeValidationError: If the recipe has no name
            RecipePermissionError: If actor may not write this recipe
        """
        if actor is not None:
            self._check_can_write(recipe, actor)
        return self.store.save(recipe)

    def delete(self, recipe_id: int, actor: Optional[Actor] = None) -> bool:
        """
        Delete a recipe.

        Returns:
            True if the recipe existed, was allowed, and was removed
        """
        if actor is not None:
            existing = self.store.find_by_id(recipe_id)
            if existing is None:
                return False
            if not can_delete(actor, existing):
                logger.warning(f"User {actor.user_id} may not delete recipe {recipe_id}")
                return False
        return self.store.delete(recipe_id)

    def get_by_id(self, recipe_id: int) -> Optional[Recipe]:
        return self.store.find_by_id(recipe_id)

    def get_all(self) -> List[Recipe]:
        return self.store.find_all()

    def search(self, term: Optional[str], limit: Optional[int] = None) -> List[Recipe]:
        """
        Relevance-ranked search over every recipe.

        A blank term returns all recipes unranked.
        """
        if not term or not term.strip():
            recipes = self.store.find_all()
            return recipes[:limit] if limit is not None else recipes
        return ranking.rank_recipes(term, self.store.find_all(), limit=limit)

    def search_by(self, term: Optional[str], field: str = "name") -> List[Recipe]:
        """
        Search a single field using the store's own queries.

        Args:
            term: Search text (blank returns all recipes)
            field: "name", "ingredient", or "cuisine"

        Raises:
            ValueError: If field is not one of the supported fields
        """
        field = (field or "name").lower()
        if field not in SEARCH_FIELDS:
            raise ValueError(
                f"Invalid search field: {field}. Must be one of {', '.join(SEARCH_FIELDS)}"
            )

        if not term or not term.strip():
            return self.store.find_all()

        if field == "cuisine":
            return self.store.find_by_cuisine(term)
        if field == "ingredient":
            needle = term.strip().lower()
            return [r for r in self.store.find_all() if needle in (r.raw_ingredients or "").lower()]
        return self.store.search_by_name(term)

    def by_owner(self, owner_id: int) -> List[Recipe]:
        return self.store.find_by_owner(owner_id)

    def sort_by_time(self, recipes: Iterable[Recipe]) -> List[Recipe]:
        return ranking.sort_by_time(recipes)

    def add_to_collection(self, recipe_id: int, user_id: int) -> Optional[Recipe]:
        """
        Copy a recipe into a user's collection.

        Args:
            recipe_id: Recipe to copy
            user_id: Owner of the copy (must be a real user, > 0)

        Returns:
            The new recipe (fresh id), or None if recipe_id doesn't exist
            or user_id is not a user
        """
        if user_id is None or user_id <= SYSTEM_OWNER_ID:
            logger.warning(f"Cannot add recipe {recipe_id} for invalid user id {user_id}")
            return None

        source = self.store.find_by_id(recipe_id)
        if source is None:
            logger.warning(f"Recipe {recipe_id} not found")
            return None

        user_recipe = self.store.create(source.copy_for_owner(user_id))
        logger.info(f"Added '{source.name}' to recipes of user {user_id} as {user_recipe.id}")
        return user_recipe

    def name_exists(self, name: Optional[str]) -> bool:
        if not name or not name.strip():
            return False
        return bool(self.store.search_by_name(name.strip()))

    def count_by_cuisine(self) -> Dict[str, int]:
        """Number of recipes per cuisine, most common first."""
        counts = Counter(r.cuisine for r in self.store.find_all() if r.cuisine)
        return dict(counts.most_common())

    def summary(self) -> str:
        return f"Total recipes available: {self.store.count()}"

    def _check_can_write(self, recipe: Recipe, actor: Actor) -> None:
        existing = self.store.find_by_id(recipe.id) if recipe.id > 0 else None
        if existing is not None:
            if not can_edit(actor, existing):
                raise RecipePermissionError(
                    f"User {actor.user_id} may not edit recipe {recipe.id}"
                )
            if not actor.is_admin and recipe.owner_id != existing.owner_id:
                raise RecipePermissionError("Only admins can change a recipe's owner")
        elif not actor.is_admin and recipe.owner_id != actor.user_id:
            raise RecipePermissionError(
                f"User {actor.user_id} may not create recipes for owner {recipe.owner_id}"
            )
