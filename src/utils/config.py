"""Configuration management for Recipe Finder.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


DEFAULT_RECIPES_CSV_URL = "https://huggingface.co/datasets/Shengtao/recipe/resolve/main/recipe.csv"


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Database URL: SQLAlchemy connection string for the recipe store
        # SQLite by default; use postgresql://... for a shared database
        self.DATABASE_URL: str = os.getenv("DATABASE_URL") or "sqlite:///recipes.db"
        # Echo SQL statements through the sqlalchemy.engine logger
        self.DB_ECHO: bool = os.getenv("DB_ECHO", "false").lower() in ("true", "1", "yes")

        # Candidate pool: number of most recent recipes scored per pantry search.
        # Recipes older than the pool are never considered (recall cap).
        self.CANDIDATE_POOL_SIZE: int = int(os.getenv("CANDIDATE_POOL_SIZE", "1000"))
        # Minimum match percentage (exclusive) a recipe needs to be returned
        self.MATCH_THRESHOLD: float = float(os.getenv("MATCH_THRESHOLD", "50.0"))
        # Default number of scored recipes returned by a pantry search
        self.DEFAULT_MATCH_LIMIT: int = int(os.getenv("DEFAULT_MATCH_LIMIT", "10"))
        # Default number of similar recipes returned
        self.DEFAULT_SIMILAR_LIMIT: int = int(os.getenv("DEFAULT_SIMILAR_LIMIT", "5"))
        # Key ingredients used as similarity keywords: first N tokens longer than MIN_LENGTH chars
        self.KEY_INGREDIENT_LIMIT: int = int(os.getenv("KEY_INGREDIENT_LIMIT", "5"))
        self.KEY_INGREDIENT_MIN_LENGTH: int = int(os.getenv("KEY_INGREDIENT_MIN_LENGTH", "3"))

        # Default page size for structured searches
        self.DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
        # Default number of authors listed by get_popular_authors
        self.POPULAR_AUTHORS_LIMIT: int = int(os.getenv("POPULAR_AUTHORS_LIMIT", "20"))

        # CSV import settings
        self.RECIPES_CSV_URL: str = os.getenv("RECIPES_CSV_URL", DEFAULT_RECIPES_CSV_URL)
        # Rows inserted per transaction during import
        self.IMPORT_BATCH_SIZE: int = int(os.getenv("IMPORT_BATCH_SIZE", "500"))
        # Individual row failures logged before the importer goes quiet
        self.IMPORT_MAX_ERRORS: int = int(os.getenv("IMPORT_MAX_ERRORS", "10"))
        # Timeout for the CSV download (seconds)
        self.REQUEST_TIMEOUT_SECONDS: int = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "60"))

        # Store connectivity check retries (startup only, queries are never retried)
        # MAX_RETRIES: Number of connection attempts
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
        # DELAY_BETWEEN_RETRIES: Initial delay in seconds (doubled on each retry)
        self.DELAY_BETWEEN_RETRIES: int = int(os.getenv("DELAY_BETWEEN_RETRIES", "1"))

    @property
    def retry_delays(self) -> list[int]:
        """Exponential backoff delays derived from DELAY_BETWEEN_RETRIES."""
        return [self.DELAY_BETWEEN_RETRIES * (2**attempt) for attempt in range(self.MAX_RETRIES)]

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a value is missing or out of range.
        """
        if not self.DATABASE_URL:
            raise ValueError("DATABASE_URL must not be empty")
        if self.CANDIDATE_POOL_SIZE < 1:
            raise ValueError(
                f"CANDIDATE_POOL_SIZE must be at least 1, got: {self.CANDIDATE_POOL_SIZE}"
            )
        if not (0.0 <= self.MATCH_THRESHOLD <= 100.0):
            raise ValueError(
                f"MATCH_THRESHOLD must be between 0.0 and 100.0, got: {self.MATCH_THRESHOLD}"
            )
        if self.DEFAULT_MATCH_LIMIT < 1:
            raise ValueError(
                f"DEFAULT_MATCH_LIMIT must be at least 1, got: {self.DEFAULT_MATCH_LIMIT}"
            )
        if self.DEFAULT_SIMILAR_LIMIT < 1:
            raise ValueError(
                f"DEFAULT_SIMILAR_LIMIT must be at least 1, got: {self.DEFAULT_SIMILAR_LIMIT}"
            )
        if self.KEY_INGREDIENT_LIMIT < 0:
            raise ValueError(
                f"KEY_INGREDIENT_LIMIT must not be negative, got: {self.KEY_INGREDIENT_LIMIT}"
            )
        if self.KEY_INGREDIENT_MIN_LENGTH < 0:
            raise ValueError(
                f"KEY_INGREDIENT_MIN_LENGTH must not be negative, got: {self.KEY_INGREDIENT_MIN_LENGTH}"
            )
        if self.DEFAULT_PAGE_SIZE < 1:
            raise ValueError(
                f"DEFAULT_PAGE_SIZE must be at least 1, got: {self.DEFAULT_PAGE_SIZE}"
            )
        if self.IMPORT_BATCH_SIZE < 1:
            raise ValueError(
                f"IMPORT_BATCH_SIZE must be at least 1, got: {self.IMPORT_BATCH_SIZE}"
            )
        if self.MAX_RETRIES < 1:
            raise ValueError(
                f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}"
            )
        if self.DELAY_BETWEEN_RETRIES < 0:
            raise ValueError(
                f"DELAY_BETWEEN_RETRIES must not be negative, got: {self.DELAY_BETWEEN_RETRIES}"
            )


# Create module-level config instance and validate immediately
config = Config()
config.validate()
