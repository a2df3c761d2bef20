#!/usr/bin/env python3
"""
Command line entry point for the Recipe Planner.

Builds the recipe store once, seeds it from the CSV dataset on first run,
and runs one query against it.

Usage:
    recipe-planner load --input Cleaned_Indian_Food_Dataset.csv
    recipe-planner search --query paneer --sort-time
    recipe-planner add --recipe-id 12 --user-id 3
"""

import logging
import argparse
from typing import List, Optional

from recipe_planner.config import Settings, load_settings
from recipe_planner.csv_loader import QuoteMode, seed_store_if_empty
from recipe_planner.data.database import SqliteRecipeStore
from recipe_planner.data.memory_store import InMemoryRecipeStore
from recipe_planner.data.models import Recipe
from recipe_planner.data.store import RecipeStore
from recipe_planner.exceptions import ConfigurationError
from recipe_planner.service import RecipeService

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> RecipeStore:
    """Create the configured store realization."""
    if settings.backend == "memory":
        match = settings.match_ingredients if settings.match_ingredients is not None else False
        return InMemoryRecipeStore(match_ingredients=match)

    match = settings.match_ingredients if settings.match_ingredients is not None else True
    return SqliteRecipeStore(db_path=settings.db_path, match_ingredients=match)


def print_recipe_summary(recipe: Recipe):
    """Print the full details of a recipe."""
    print(f"\n{'='*60}")
    print(f"📗 {recipe.name}  (#{recipe.id})")
    print(f"{'='*60}")
    print(f"⏱️  Time: {recipe.formatted_time()}")
    if recipe.cuisine:
        print(f"🌍 Cuisine: {recipe.cuisine}")
    print(f"👤 Owner: {'system' if recipe.is_seeded() else recipe.owner_id}")

    items = recipe.ingredient_items()
    print(f"\n📋 Ingredients ({len(items)} items):")
    for i, ingredient in enumerate(items, 1):
        print(f"  {i}. {ingredient}")

    print(f"\n👨‍🍳 Steps ({recipe.instruction_count}):")
    for i, step in enumerate(recipe.instructions, 1):
        print(f"  {i}. {step}")

    if recipe.source_url:
        print(f"\n🔗 {recipe.source_url}")


class RecipePlanner:
    """Wires settings, store and service together for the CLI."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.store = build_store(settings)
        self.service = RecipeService(self.store)

    def seed(self, csv_path: Optional[str] = None) -> int:
        return seed_store_if_empty(
            self.store,
            csv_path or self.settings.csv_path,
            batch_size=self.settings.batch_size,
            mode=self.settings.quote_mode,
        )

    def print_list(self, recipes: List[Recipe], limit: Optional[int] = None):
        shown = recipes[:limit] if limit is not None else recipes
        print(f"\nFound {len(recipes)} recipes:\n")
        for i, recipe in enumerate(shown, 1):
            print(f"{i}. [{recipe.id}] {recipe.search_display_text()}")
        if len(shown) < len(recipes):
            print(f"   ... and {len(recipes) - len(shown)} more")

    def search(self, query: str, sort_time: bool = False, limit: Optional[int] = None):
        recipes = self.service.search(query)
        if sort_time:
            recipes = self.service.sort_by_time(recipes)
        self.print_list(recipes, limit)

    def list_recipes(
        self,
        cuisine: Optional[str] = None,
        owner: Optional[int] = None,
        sort_time: bool = False,
        limit: Optional[int] = None,
    ):
        if cuisine:
            recipes = self.service.search_by(cuisine, "cuisine")
        elif owner is not None:
            recipes = self.service.by_owner(owner)
        else:
            recipes = self.service.get_all()
        if sort_time:
            recipes = self.service.sort_by_time(recipes)
        self.print_list(recipes, limit)

    def show(self, recipe_id: int) -> bool:
        recipe = self.service.get_by_id(recipe_id)
        if recipe is None:
            print(f"❌ Recipe {recipe_id} not found")
            return False
        print_recipe_summary(recipe)
        return True

    def add(self, recipe_id: int, user_id: int) -> bool:
        if user_id <= 0:
            print(f"❌ Error: --user-id must be a positive user ID, got {user_id}")
            return False
        recipe = self.service.add_to_collection(recipe_id, user_id)
        if recipe is None:
            print(f"❌ Recipe {recipe_id} not found")
            return False
        print(f"✓ '{recipe.name}' has been added to your recipes (#{recipe.id})")
        return True

    def stats(self):
        print(self.service.summary())
        print("\nRecipes by Cuisine:")
        for cuisine, count in self.service.count_by_cuisine().items():
            print(f"- {cuisine}: {count}")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Recipe Planner")
    parser.add_argument(
        "command",
        choices=["load", "search", "list", "show", "add", "stats"],
        help="Command to run",
    )
    parser.add_argument("--query", type=str, help="Search text for 'search'")
    parser.add_argument("--recipe-id", type=int, help="Recipe ID for 'show' and 'add'")
    parser.add_argument("--user-id", type=int, help="User ID for 'add'")
    parser.add_argument("--cuisine", type=str, help="Cuisine filter for 'list'")
    parser.add_argument("--owner", type=int, help="Owner filter for 'list' (0 = seeded)")
    parser.add_argument("--sort-time", action="store_true", help="Sort results by total time")
    parser.add_argument("--limit", type=int, help="Maximum number of results to print")
    parser.add_argument("--input", type=str, help="CSV dataset (default: from settings)")
    parser.add_argument("--db", type=str, help="SQLite database file (default: from settings)")
    parser.add_argument("--backend", choices=["sqlite", "memory"], help="Store backend")
    parser.add_argument(
        "--quote-mode",
        choices=[mode.value for mode in QuoteMode],
        help="Quote handling when loading the CSV (default: from settings)",
    )
    parser.add_argument(
        "--match-ingredients",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Name search also matches ingredients text",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        overrides = {}
        if args.db:
            overrides["db_path"] = args.db
        if args.backend:
            overrides["backend"] = args.backend
        if args.input:
            overrides["csv_path"] = args.input
        if args.match_ingredients is not None:
            overrides["match_ingredients"] = args.match_ingredients
        if args.quote_mode:
            overrides["quote_mode"] = QuoteMode(args.quote_mode)
        if overrides:
            settings = settings.model_copy(update=overrides)
    except ConfigurationError as e:
        print(f"❌ Error: {e}")
        return 2

    # Setup logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        planner = RecipePlanner(settings)
    except OSError as e:
        print(f"❌ Error: cannot open recipe store at {settings.db_path}: {e}")
        return 2

    loaded = planner.seed()

    if args.command == "load":
        print(f"✓ Loaded {loaded} recipes ({planner.store.count()} in store)")

    elif args.command == "search":
        if not args.query:
            print("❌ Error: --query required for 'search' command")
            return 1
        planner.search(args.query, sort_time=args.sort_time, limit=args.limit)

    elif args.command == "list":
        planner.list_recipes(
            cuisine=args.cuisine,
            owner=args.owner,
            sort_time=args.sort_time,
            limit=args.limit,
        )

    elif args.command == "show":
        if args.recipe_id is None:
            print("❌ Error: --recipe-id required for 'show' command")
            return 1
        if not planner.show(args.recipe_id):
            return 1

    elif args.command == "add":
        if args.recipe_id is None or args.user_id is None:
            print("❌ Error: --recipe-id and --user-id required for 'add' command")
            return 1
        if not planner.add(args.recipe_id, args.user_id):
            return 1

    elif args.command == "stats":
        planner.stats()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
