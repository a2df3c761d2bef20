"""
Load recipes from the Indian food CSV dataset into a recipe store.

The dataset quotes free-text fields, and those fields contain commas and
newlines. A record can therefore span several physical lines. Loading runs
in three stages:

1. iter_logical_records() joins physical lines into logical records by
   tracking whether a quoted field is still open.
2. split_fields() splits one logical record on unquoted commas.
3. parse_recipe_fields() maps the fixed column layout onto a Recipe.

Quote handling follows the dataset's convention: every double quote toggles
the "inside quotes" state and is dropped from the value. A doubled quote
inside a quoted field is two toggles, so it disappears instead of becoming
one literal quote. QuoteMode.RFC4180 is available for sources that escape
quotes by doubling them.

CSV Format:
    0: TranslatedRecipeName
    1: TranslatedIngredients (with quantities)
    2: TotalTimeInMins
    3: Cuisine
    4: TranslatedInstructions
    5: URL
    6: Cleaned-Ingredients (quantities stripped, not used)
    7: image-url
    8: Ingredient-count
"""

import csv
import io
import logging
import re
import time
from enum import Enum, IntEnum
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from recipe_planner.data.models import (
    Recipe,
    DEFAULT_TOTAL_TIME,
    SYSTEM_OWNER_ID,
    normalize_name,
)
from recipe_planner.data.store import RecipeStore

logger = logging.getLogger(__name__)

DEFAULT_CSV_FILE = "Cleaned_Indian_Food_Dataset.csv"
DEFAULT_BATCH_SIZE = 500

QUOTE = '"'
DELIMITER = ","

# Rows with fewer fields than this are rejected
MIN_FIELDS = 5
MIN_NAME_LENGTH = 2
# Instruction fragments of this length or shorter are dropped
MIN_STEP_LENGTH = 5

_STEP_SEPARATOR = re.compile(r"[\n.]")


class QuoteMode(str, Enum):
    """How split_fields() treats double quotes."""
    TOGGLE = "toggle"  # Dataset convention: quotes toggle, doubled quotes vanish
    RFC4180 = "rfc4180"  # Doubled quotes inside quoted fields become one quote


class Column(IntEnum):
    """Positions of the dataset's columns."""
    NAME = 0
    INGREDIENTS = 1
    TOTAL_TIME = 2
    CUISINE = 3
    INSTRUCTIONS = 4
    URL = 5
    CLEANED_INGREDIENTS = 6
    IMAGE_URL = 7
    INGREDIENT_COUNT = 8


# ==================== Line Reassembly ====================

def iter_logical_records(lines: Iterable[str]) -> Iterator[str]:
    """
    Join physical lines into logical CSV records.

    The first line is the header and is always discarded. A record whose
    quotes are still open at the end of the input is truncated and dropped.

    Args:
        lines: Physical lines, with or without trailing newlines

    Yields:
        Logical records, newline-joined from their physical lines
    """
    lines = iter(lines)
    if next(lines, None) is None:
        return

    buffer: List[str] = []
    in_quotes = False

    for line in lines:
        line = line.rstrip("\r\n")

        # Each quote toggles; an odd count flips the state for the line
        if line.count(QUOTE) % 2 == 1:
            in_quotes = not in_quotes

        buffer.append(line)
        if in_quotes:
            continue

        yield "\n".join(buffer)
        buffer = []

    if buffer:
        logger.warning(
            f"Input ended inside a quoted field; discarding incomplete record "
            f"({len(buffer)} lines)"
        )


# ==================== Field Splitting ====================

def split_fields(line: str, mode: QuoteMode = QuoteMode.TOGGLE) -> List[str]:
    """
    Split one logical record into raw field values.

    Commas inside quotes are content; quotes themselves are not kept.
    The number of fields is not checked here.

    Args:
        line: A complete logical record
        mode: Quote handling (default: dataset toggle convention)

    Returns:
        Field values in column order
    """
    if mode == QuoteMode.RFC4180:
        reader = csv.reader(io.StringIO(line, newline=""))
        return next(reader, [""])

    fields = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)

    fields.append("".join(current))
    return fields


# ==================== Record Parsing ====================

def parse_total_time(value: Optional[str]) -> int:
    """Parse the TotalTimeInMins column, falling back to 30 minutes."""
    if value is None:
        return DEFAULT_TOTAL_TIME

    cleaned = value.strip()
    if not cleaned:
        return DEFAULT_TOTAL_TIME

    try:
        minutes = int(cleaned)
    except ValueError:
        return DEFAULT_TOTAL_TIME

    return minutes if minutes >= 0 else DEFAULT_TOTAL_TIME


def split_instructions(text: Optional[str]) -> List[str]:
    """
    Split an instructions blob into steps on newlines and periods.

    Fragments of MIN_STEP_LENGTH characters or fewer (after trimming) are
    dropped. This is a heuristic, not sentence detection.
    """
    if not text:
        return []

    steps = []
    for fragment in _STEP_SEPARATOR.split(text):
        step = fragment.strip()
        if len(step) > MIN_STEP_LENGTH:
            steps.append(step)
    return steps


def _optional_field(fields: List[str], column: Column) -> Optional[str]:
    if len(fields) <= column:
        return None
    value = fields[column].strip()
    return value or None


def parse_recipe_fields(fields: List[str]) -> Optional[Recipe]:
    """
    Build a seeded Recipe from one row's field values.

    Args:
        fields: Output of split_fields()

    Returns:
        Recipe (id 0, owner 0), or None if the row is rejected
    """
    if not fields or len(fields) < MIN_FIELDS:
        return None

    name = normalize_name(fields[Column.NAME])
    if len(name) < MIN_NAME_LENGTH:
        return None

    # Always TranslatedIngredients: Cleaned-Ingredients loses the quantities
    recipe = Recipe(
        name=name,
        cuisine=_optional_field(fields, Column.CUISINE),
        total_time_mins=parse_total_time(fields[Column.TOTAL_TIME]),
        owner_id=SYSTEM_OWNER_ID,
        source_url=_optional_field(fields, Column.URL),
        image_url=_optional_field(fields, Column.IMAGE_URL),
        raw_ingredients=fields[Column.INGREDIENTS].strip(),
    )

    for step in split_instructions(fields[Column.INSTRUCTIONS]):
        recipe.add_instruction(step)

    return recipe


def parse_recipe_line(line: str, mode: QuoteMode = QuoteMode.TOGGLE) -> Optional[Recipe]:
    """Parse one logical record. Returns None for blank or malformed records."""
    if line is None or not line.strip():
        return None

    try:
        fields = split_fields(line, mode)
    except csv.Error as e:
        logger.debug(f"Unsplittable record: {e}")
        return None
    return parse_recipe_fields(fields)


# ==================== Loading ====================

def load_recipes(
    lines: Iterable[str],
    store: RecipeStore,
    batch_size: int = DEFAULT_BATCH_SIZE,
    mode: QuoteMode = QuoteMode.TOGGLE,
) -> int:
    """
    Parse CSV lines and insert the recipes into a store.

    Malformed records are skipped individually; they never stop the load.

    Args:
        lines: Physical lines of the CSV source, header first
        store: Store to insert into
        batch_size: Number of recipes per bulk insert
        mode: Quote handling for field splitting

    Returns:
        Number of recipes stored
    """
    batch: List[Recipe] = []
    total_count = 0
    skipped_count = 0

    for record_number, record in enumerate(iter_logical_records(lines), start=1):
        recipe = parse_recipe_line(record, mode)
        if recipe is None:
            if record.strip():
                skipped_count += 1
                logger.debug(f"Skipping malformed record {record_number}: {record[:60]!r}")
            continue

        batch.append(recipe)

        if len(batch) >= batch_size:
            total_count += store.create_many(batch)
            logger.info(f"Loaded {total_count} recipes...")
            batch = []

    if batch:
        total_count += store.create_many(batch)

    logger.info(f"Loaded {total_count} recipes successfully")
    if skipped_count > 0:
        logger.warning(f"Skipped {skipped_count} malformed records")

    return total_count


def load_recipes_from_csv(
    csv_file: Union[str, Path] = DEFAULT_CSV_FILE,
    store: Optional[RecipeStore] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    mode: QuoteMode = QuoteMode.TOGGLE,
) -> int:
    """
    Load recipes from a CSV file into a store.

    Args:
        csv_file: Path to the dataset
        store: Store to insert into
        batch_size: Number of recipes per bulk insert
        mode: Quote handling for field splitting

    Returns:
        Number of recipes stored (0 if the file can't be read)
    """
    if store is None:
        raise ValueError("A recipe store is required")

    csv_file = Path(csv_file)
    if not csv_file.exists():
        logger.error(f"CSV file not found: {csv_file}")
        return 0

    logger.info(f"Loading recipes from {csv_file}")

    try:
        with open(csv_file, "r", encoding="utf-8", errors="replace") as f:
            return load_recipes(f, store, batch_size=batch_size, mode=mode)
    except OSError as e:
        logger.error(f"Error loading recipes from {csv_file}: {e}")
        return 0


def seed_store_if_empty(
    store: RecipeStore,
    csv_file: Union[str, Path] = DEFAULT_CSV_FILE,
    batch_size: int = DEFAULT_BATCH_SIZE,
    mode: QuoteMode = QuoteMode.TOGGLE,
) -> int:
    """
    Run the one-time CSV load, unless the store already holds recipes.

    Args:
        store: Store to seed
        csv_file: Path to the dataset
        batch_size: Number of recipes per bulk insert
        mode: Quote handling for field splitting

    Returns:
        Number of recipes loaded (0 when skipped)
    """
    existing_count = store.count()
    if existing_count > 0:
        logger.info(f"Store already contains {existing_count} recipes, skipping CSV load")
        return 0

    logger.info("Store is empty - loading recipes from CSV (one-time operation)")
    start_time = time.time()
    loaded_count = load_recipes_from_csv(csv_file, store, batch_size=batch_size, mode=mode)
    logger.info(f"Loaded {loaded_count} recipes in {time.time() - start_time:.1f} seconds")

    return loaded_count
