"""
Runtime settings for the Recipe Planner.

Values come from environment variables (a .env file in the working
directory is loaded first):

    RECIPE_CSV_PATH            dataset to ingest
    RECIPE_DB_PATH             SQLite database file
    RECIPE_STORE_BACKEND       "sqlite" or "memory"
    RECIPE_MATCH_INGREDIENTS   "true"/"false"; unset = store default
    RECIPE_BATCH_SIZE          recipes per bulk insert
    RECIPE_LOG_LEVEL           DEBUG, INFO, WARNING, ...
    RECIPE_QUOTE_MODE          "toggle" (dataset convention) or "rfc4180"
"""

import logging
import os
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

from recipe_planner.csv_loader import QuoteMode
from recipe_planner.exceptions import ConfigurationError

BACKENDS = ("sqlite", "memory")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Settings(BaseModel):
    """Validated configuration."""
    csv_path: str = "Cleaned_Indian_Food_Dataset.csv"
    db_path: str = "data/recipes.db"
    backend: str = "sqlite"
    match_ingredients: Optional[bool] = None  # None = realization default
    batch_size: int = 500
    log_level: str = "INFO"
    quote_mode: QuoteMode = QuoteMode.TOGGLE

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in BACKENDS:
            raise ValueError(f"backend must be one of {', '.join(BACKENDS)}, got '{v}'")
        return v

    @field_validator("batch_size")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("batch_size must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown log level: {v}")
        return v

    @field_validator("quote_mode", mode="before")
    @classmethod
    def validate_quote_mode(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


def _parse_bool(name: str, value: Optional[str]) -> Optional[bool]:
    if value is None or not value.strip():
        return None
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be true or false, got '{value}'")


def load_settings(environ: Optional[Mapping[str, str]] = None, use_dotenv: bool = True) -> Settings:
    """
    Build Settings from the environment.

    Args:
        environ: Variables to read (default: os.environ)
        use_dotenv: Load a .env file into os.environ first

    Raises:
        ConfigurationError: If any value is invalid
    """
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))
    env = os.environ if environ is None else environ

    values = {}
    for field, var in (
        ("csv_path", "RECIPE_CSV_PATH"),
        ("db_path", "RECIPE_DB_PATH"),
        ("backend", "RECIPE_STORE_BACKEND"),
        ("batch_size", "RECIPE_BATCH_SIZE"),
        ("log_level", "RECIPE_LOG_LEVEL"),
        ("quote_mode", "RECIPE_QUOTE_MODE"),
    ):
        if env.get(var):
            values[field] = env[var]

    values["match_ingredients"] = _parse_bool(
        "RECIPE_MATCH_INGREDIENTS", env.get("RECIPE_MATCH_INGREDIENTS")
    )

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
