"""
Relevance ranking and time sorting for recipe lists.

Scoring (per recipe, capped at 100):
- exact name match (case-insensitive): 100, nothing else added
- otherwise name contains query: +50
- cuisine equals query: +30, or cuisine contains query: +15
- raw ingredients contain query: +20

Only recipes scoring above zero are returned.
"""

from typing import Iterable, List, Optional

from recipe_planner.data.models import Recipe

MAX_SCORE = 100
EXACT_NAME_SCORE = 100
NAME_MATCH_SCORE = 50
CUISINE_EXACT_SCORE = 30
CUISINE_MATCH_SCORE = 15
INGREDIENT_MATCH_SCORE = 20


def _normalize_query(query: Optional[str]) -> str:
    return query.strip().lower() if query else ""


def relevance_score(recipe: Recipe, query: str) -> int:
    """
    Score how well a recipe matches a free-text query.

    Args:
        recipe: Recipe to score
        query: Search text (trimmed, case-insensitive)

    Returns:
        Score from 0 (no match) to 100
    """
    needle = _normalize_query(query)
    if not needle:
        return 0

    name = (recipe.name or "").lower()
    if name == needle:
        return EXACT_NAME_SCORE

    score = 0
    if needle in name:
        score += NAME_MATCH_SCORE

    cuisine = (recipe.cuisine or "").lower()
    if cuisine == needle:
        score += CUISINE_EXACT_SCORE
    elif needle in cuisine:
        score += CUISINE_MATCH_SCORE

    if needle in (recipe.raw_ingredients or "").lower():
        score += INGREDIENT_MATCH_SCORE

    return min(score, MAX_SCORE)


def rank_recipes(query: str, recipes: Iterable[Recipe], limit: Optional[int] = None) -> List[Recipe]:
    """
    Filter recipes to those matching the query, best match first.

    Equal scores keep their original relative order.

    Args:
        query: Search text
        recipes: Corpus to search
        limit: Maximum number of results (default: all)

    Returns:
        Matching recipes by descending relevance
    """
    scored = [(relevance_score(recipe, query), recipe) for recipe in recipes]
    matches = [(score, recipe) for score, recipe in scored if score > 0]

    # sorted() is stable, so ties stay in corpus order
    matches = sorted(matches, key=lambda item: item[0], reverse=True)

    ranked = [recipe for _, recipe in matches]
    return ranked[:limit] if limit is not None else ranked


def sort_by_time(recipes: Iterable[Recipe]) -> List[Recipe]:
    """Return recipes ordered by total time, shortest first (stable)."""
    return sorted(recipes, key=lambda recipe: recipe.total_time_mins)
