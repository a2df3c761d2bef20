"""
Who may change which recipe.

Stores don't enforce ownership; callers check these rules before
updating or deleting on a user's behalf.
"""

from dataclasses import dataclass
from enum import Enum

from recipe_planner.data.models import Recipe


class UserRole(str, Enum):
    REGULAR = "regular"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    """The user performing an action."""
    user_id: int
    role: UserRole = UserRole.REGULAR

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def can_edit(actor: Actor, recipe: Recipe) -> bool:
    """Admins may edit anything; regular users only their own, never seeded ones."""
    if actor.is_admin:
        return True
    return recipe.owner_id == actor.user_id and not recipe.is_seeded()


def can_delete(actor: Actor, recipe: Recipe) -> bool:
    """Same rule as editing: seeded recipes are admin-only."""
    return can_edit(actor, recipe)
