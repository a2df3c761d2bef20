"""
Database interface for the Recipe Planner.

Manages one SQLite database:
- recipes.db: CSV-seeded recipes (owner 0) and user copies (owner > 0)

Every operation opens its own connection and closes it on the way out.
Connection and query failures are logged and turned into an empty result
(empty list, None, 0 or False) so callers always get a well-typed value.
"""

import sqlite3
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .models import Recipe, DEFAULT_TOTAL_TIME, normalize_steps
from .store import RecipeStore

logger = logging.getLogger(__name__)

RECIPE_COLUMNS = (
    "id, name, description, cuisine, total_time_mins, owner_id, "
    "source_url, image_url, raw_ingredients, instructions"
)


def _lower(value: Optional[str]) -> Optional[str]:
    """Unicode-aware lower() for SQL (SQLite's own lower() is ASCII only)."""
    return value.lower() if value is not None else None


def serialize_instructions(steps: List[str]) -> str:
    """Join steps with newlines for the instructions column.

    Line breaks inside a step become spaces so the step reads back as one.
    """
    return "\n".join(normalize_steps(steps))


def deserialize_instructions(text: Optional[str]) -> List[str]:
    """Split the instructions column back into steps, dropping blank ones."""
    if not text or not text.strip():
        return []
    return [step for step in text.split("\n") if step.strip()]


class SqliteRecipeStore(RecipeStore):
    """Durable RecipeStore backed by a single ``recipes`` table."""

    def __init__(self, db_path: str = "data/recipes.db", match_ingredients: bool = True):
        """
        Initialize database interface.

        Args:
            db_path: Path of the SQLite database file
            match_ingredients: search_by_name also matches raw ingredients text
                (default: True)
        """
        super().__init__(match_ingredients=match_ingredients)
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_database()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection for one operation; always closed afterwards."""
        conn = sqlite3.connect(self.db_path)
        try:
            conn.row_factory = sqlite3.Row
            conn.create_function("py_lower", 1, _lower, deterministic=True)
            yield conn
        finally:
            conn.close()

    def _init_database(self):
        """Initialize recipes table schema."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()

                # AUTOINCREMENT keeps ids from being reused after deletes
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS recipes (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        name TEXT NOT NULL,
                        description TEXT,
                        cuisine TEXT,
                        total_time_mins INTEGER DEFAULT 30,
                        owner_id INTEGER DEFAULT 0,
                        source_url TEXT,
                        image_url TEXT,
                        raw_ingredients TEXT,
                        instructions TEXT,
                        created_at TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                """)

                cursor.execute("CREATE INDEX IF NOT EXISTS idx_recipe_name ON recipes(name)")
                cursor.execute("CREATE INDEX IF NOT EXISTS idx_cuisine ON recipes(cuisine)")
                cursor.execute("CREATE INDEX IF NOT EXISTS idx_owner_id ON recipes(owner_id)")
                cursor.execute("CREATE INDEX IF NOT EXISTS idx_time ON recipes(total_time_mins)")

                conn.commit()
                logger.info(f"Recipe database initialized at {self.db_path}")
        except sqlite3.Error as e:
            logger.error(f"Error initializing recipe database {self.db_path}: {e}")

    # ==================== Write Operations ====================

    def create(self, recipe: Recipe) -> Recipe:
        """
        Insert a new recipe.

        Args:
            recipe: Recipe to insert (its id is ignored and replaced)

        Returns:
            The same recipe with its new id, or unchanged if the insert failed
        """
        self.validate(recipe)

        try:
            with self._connect() as conn:
                new_id = self._insert(conn.cursor(), recipe)
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Error inserting recipe '{recipe.name}': {e}")
            return recipe

        recipe.id = new_id
        return recipe

    def create_many(self, recipes: Iterable[Recipe]) -> int:
        """
        Insert a batch of recipes in one transaction.

        Args:
            recipes: Recipes to insert

        Returns:
            Number of recipes inserted (0 if the batch failed)
        """
        batch = list(recipes)
        for recipe in batch:
            self.validate(recipe)

        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                new_ids = [self._insert(cursor, recipe) for recipe in batch]
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Error inserting batch of {len(batch)} recipes: {e}")
            return 0

        # Only hand out ids once the transaction is committed
        for recipe, new_id in zip(batch, new_ids):
            recipe.id = new_id
        return len(batch)

    def save(self, recipe: Recipe) -> Recipe:
        """
        Update an existing recipe (full overwrite) or insert it if its id is unknown.

        Args:
            recipe: Recipe to save

        Returns:
            The saved recipe
        """
        self.validate(recipe)

        if recipe.id <= 0:
            return self.create(recipe)

        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    UPDATE recipes SET name = ?, description = ?, cuisine = ?,
                        total_time_mins = ?, owner_id = ?, source_url = ?,
                        image_url = ?, raw_ingredients = ?, instructions = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (*self._recipe_params(recipe), datetime.now().isoformat(), recipe.id),
                )
                new_id = self._insert(cursor, recipe) if cursor.rowcount == 0 else recipe.id
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Error saving recipe {recipe.id}: {e}")
            return recipe

        recipe.id = new_id
        return recipe

    def delete(self, recipe_id: int) -> bool:
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM recipes WHERE id = ?", (recipe_id,))
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Error deleting recipe {recipe_id}: {e}")
            return False

    def clear(self) -> None:
        """Delete every recipe. WARNING: this removes all data."""
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM recipes")
                conn.commit()
                logger.info("All recipes cleared from database")
        except sqlite3.Error as e:
            logger.error(f"Error clearing recipes: {e}")

    # ==================== Read Operations ====================

    def find_by_id(self, recipe_id: int) -> Optional[Recipe]:
        """
        Get a specific recipe by ID.

        Args:
            recipe_id: Recipe ID

        Returns:
            Recipe object or None if not found
        """
        rows = self._query(f"SELECT {RECIPE_COLUMNS} FROM recipes WHERE id = ?", (recipe_id,))
        return rows[0] if rows else None

    def find_all(self) -> List[Recipe]:
        return self._query(f"SELECT {RECIPE_COLUMNS} FROM recipes ORDER BY id")

    def find_page(self, limit: int, offset: int = 0) -> List[Recipe]:
        if limit <= 0 or offset < 0:
            return []
        return self._query(
            f"SELECT {RECIPE_COLUMNS} FROM recipes ORDER BY id LIMIT ? OFFSET ?",
            (limit, offset),
        )

    def search_by_name(self, term: str) -> List[Recipe]:
        """
        Search recipes by name, case-insensitive.

        Also searches the raw ingredients text when match_ingredients is set.
        """
        if not term or not term.strip():
            return []

        needle = term.strip().lower()
        sql = f"SELECT {RECIPE_COLUMNS} FROM recipes WHERE instr(py_lower(name), ?) > 0"
        params = [needle]
        if self.match_ingredients:
            sql += " OR instr(py_lower(coalesce(raw_ingredients, '')), ?) > 0"
            params.append(needle)
        sql += " ORDER BY id"

        return self._query(sql, params)

    def find_by_cuisine(self, cuisine: str) -> List[Recipe]:
        if cuisine is None:
            return []
        return self._query(
            f"SELECT {RECIPE_COLUMNS} FROM recipes WHERE py_lower(trim(cuisine)) = ? ORDER BY id",
            (cuisine.strip().lower(),),
        )

    def find_by_owner(self, owner_id: int) -> List[Recipe]:
        return self._query(
            f"SELECT {RECIPE_COLUMNS} FROM recipes WHERE owner_id = ? ORDER BY id",
            (owner_id,),
        )

    def count(self) -> int:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT COUNT(*) FROM recipes").fetchone()
                return row[0] if row else 0
        except sqlite3.Error as e:
            logger.error(f"Error counting recipes: {e}")
            return 0

    # ==================== Helpers ====================

    def _query(self, sql: str, params=()) -> List[Recipe]:
        """Run a SELECT and map rows to recipes; empty list on failure."""
        try:
            with self._connect() as conn:
                rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Recipe query failed: {e}")
            return []

        return [self._row_to_recipe(row) for row in rows]

    def _insert(self, cursor: sqlite3.Cursor, recipe: Recipe) -> int:
        """Insert a row and return its new id. The caller assigns it after commit."""
        now = datetime.now().isoformat()
        cursor.execute(
            """
            INSERT INTO recipes (name, description, cuisine, total_time_mins,
                owner_id, source_url, image_url, raw_ingredients, instructions,
                created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (*self._recipe_params(recipe), now, now),
        )
        return cursor.lastrowid

    @staticmethod
    def _recipe_params(recipe: Recipe) -> tuple:
        return (
            recipe.name,
            recipe.description,
            recipe.cuisine,
            recipe.total_time_mins,
            recipe.owner_id,
            recipe.source_url,
            recipe.image_url,
            recipe.raw_ingredients,
            serialize_instructions(recipe.instructions),
        )

    @staticmethod
    def _row_to_recipe(row: sqlite3.Row) -> Recipe:
        """Convert database row to Recipe object."""
        total_time = row["total_time_mins"]
        return Recipe(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            cuisine=row["cuisine"],
            total_time_mins=total_time if total_time is not None else DEFAULT_TOTAL_TIME,
            owner_id=row["owner_id"] or 0,
            source_url=row["source_url"],
            image_url=row["image_url"],
            raw_ingredients=row["raw_ingredients"] or "",
            instructions=deserialize_instructions(row["instructions"]),
        )
