"""
Exception types raised by the Recipe Planner core.

Parsing and storage failures are recovered locally (skipped record, empty
result) and never reach callers as exceptions. These types cover the cases
that must be surfaced: invalid records, denied actions and bad configuration.
"""


class RecipePlannerError(Exception):
    """Base class for Recipe Planner errors."""
    pass


class RecipeValidationError(RecipePlannerError, ValueError):
    """Raised when a recipe cannot be saved (e.g. empty name)."""
    pass


class RecipePermissionError(RecipePlannerError, PermissionError):
    """Raised when an actor is not allowed to modify a recipe."""
    pass


class ConfigurationError(RecipePlannerError):
    """Raised when settings from the environment are invalid."""
    pass
