"""
Data models for the Recipe Planner.

These models define the core entities used throughout the system:
- Recipe: a catalog recipe, either seeded from the CSV dataset (owner 0)
  or a user's personal copy (owner > 0)
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict
import re

# Used when the dataset's TotalTimeInMins column is missing or unparsable
DEFAULT_TOTAL_TIME = 30

# Owner id of records created by bulk ingestion
SYSTEM_OWNER_ID = 0

_WHITESPACE = re.compile(r"\s+")
_LINE_BREAKS = re.compile(r"\s*[\r\n]+\s*")


def normalize_name(name: Optional[str]) -> str:
    """Trim a recipe name and collapse internal whitespace (including newlines)."""
    if not name:
        return ""
    return _WHITESPACE.sub(" ", name).strip()


def normalize_step(step: Optional[str]) -> str:
    """Trim an instruction step and join any line breaks inside it with a space."""
    if not step:
        return ""
    return _LINE_BREAKS.sub(" ", step).strip()


def normalize_steps(steps: Optional[List[str]]) -> List[str]:
    """Normalize each step and drop the ones left blank."""
    return [s for s in (normalize_step(step) for step in steps or []) if s]


@dataclass
class Recipe:
    """Recipe from the Indian food dataset or a user's collection.

    An id of 0 means the recipe has not been persisted yet. Stores assign
    ids on first save and never reassign them.
    """

    name: str
    id: int = 0
    description: Optional[str] = None
    cuisine: Optional[str] = None
    total_time_mins: int = DEFAULT_TOTAL_TIME
    owner_id: int = SYSTEM_OWNER_ID  # 0 = seeded from CSV
    source_url: Optional[str] = None
    image_url: Optional[str] = None
    raw_ingredients: str = ""  # Original text with quantities
    instructions: List[str] = field(default_factory=list)  # Cooking order

    def add_instruction(self, step: Optional[str]) -> None:
        """Append a step, trimmed and on one line. Blank steps are ignored."""
        step = normalize_step(step)
        if step:
            self.instructions.append(step)

    def is_seeded(self) -> bool:
        """True for records loaded by ingestion rather than created by a user."""
        return self.owner_id == SYSTEM_OWNER_ID

    def has_image(self) -> bool:
        return bool(self.image_url and self.image_url.strip())

    @property
    def instruction_count(self) -> int:
        return len(self.instructions)

    def ingredient_items(self) -> List[str]:
        """Split the raw ingredients text on commas for display.

        Quantities stay attached to their items verbatim; this is not a
        structured quantity model.
        """
        if not self.raw_ingredients:
            return []
        return [item.strip() for item in self.raw_ingredients.split(",") if item.strip()]

    def formatted_time(self) -> str:
        """Human-readable cooking time, e.g. "45 mins" or "1 hr 30 mins"."""
        if self.total_time_mins <= 0:
            return "Time not specified"
        if self.total_time_mins < 60:
            return f"{self.total_time_mins} mins"

        hours, mins = divmod(self.total_time_mins, 60)
        hours_text = f"{hours} hr" + ("s" if hours > 1 else "")
        if mins == 0:
            return hours_text
        return f"{hours} hr {mins} mins"

    def summary(self) -> str:
        """One-line summary: name (cuisine) - time - ingredient count."""
        text = self.name
        if self.cuisine and self.cuisine.strip():
            text += f" ({self.cuisine})"
        return f"{text} - {self.formatted_time()} - {len(self.ingredient_items())} ingredients"

    def search_display_text(self) -> str:
        """Text shown for this recipe in a search result list."""
        return (
            f"{self.name} ({self.cuisine or 'Unknown'}) - "
            f"{self.formatted_time()} - {len(self.ingredient_items())} ingredients"
        )

    def copy_for_owner(self, owner_id: int) -> "Recipe":
        """Create an unsaved copy of this recipe belonging to another owner.

        Args:
            owner_id: User ID the copy is attributed to

        Returns:
            New Recipe with id 0 (original unchanged)
        """
        return Recipe(
            name=self.name,
            description=self.description,
            cuisine=self.cuisine,
            total_time_mins=self.total_time_mins,
            owner_id=owner_id,
            source_url=self.source_url,
            image_url=self.image_url,
            raw_ingredients=self.raw_ingredients,
            instructions=list(self.instructions),
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "cuisine": self.cuisine,
            "total_time_mins": self.total_time_mins,
            "owner_id": self.owner_id,
            "source_url": self.source_url,
            "image_url": self.image_url,
            "raw_ingredients": self.raw_ingredients,
            "instructions": list(self.instructions),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Recipe":
        """Create Recipe from dictionary.

        Args:
            data: Dictionary representation of Recipe

        Returns:
            Recipe object
        """
        return cls(
            id=data.get("id", 0),
            name=data["name"],
            description=data.get("description"),
            cuisine=data.get("cuisine"),
            total_time_mins=data.get("total_time_mins", DEFAULT_TOTAL_TIME),
            owner_id=data.get("owner_id", SYSTEM_OWNER_ID),
            source_url=data.get("source_url"),
            image_url=data.get("image_url"),
            raw_ingredients=data.get("raw_ingredients") or "",
            instructions=list(data.get("instructions") or []),
        )

    def __str__(self) -> str:
        return self.summary()
