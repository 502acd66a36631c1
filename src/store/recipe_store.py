"""Recipe store: SQLAlchemy-backed persistence for recipe records.

The engine is synchronous; every public method is a coroutine that runs the query in a
worker thread via asyncio.to_thread. Driver errors are wrapped in StoreUnavailableError and
never retried here, except for the startup connectivity check in connect().
"""

import asyncio
from typing import Any, Callable, Iterable, Optional, TypeVar

from sqlalchemy import Engine, create_engine, delete, desc, distinct, event, func, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.elements import ColumnElement

from src.models.models import AuthorCount, Recipe
from src.store.errors import RecipeNotFoundError, StoreUnavailableError
from src.store.filters import match_all
from src.store.schema import Base, RecipeRecord
from src.utils.config import config
from src.utils.logger import logger

R = TypeVar("R")


def _enable_case_sensitive_like(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA case_sensitive_like = ON")
    cursor.close()


def mask_database_url(database_url: str) -> str:
    """Render database_url with its password replaced by ***."""
    return make_url(database_url).render_as_string(hide_password=True)


def create_store_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for database_url.

    SQLite connections are shared with worker threads, so check_same_thread is disabled;
    in-memory databases use a single static connection so every session sees the same data.
    """
    url = make_url(database_url)
    kwargs: dict[str, Any] = {"echo": echo}

    is_sqlite = url.get_backend_name() == "sqlite"
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **kwargs)
    if is_sqlite:
        event.listen(engine, "connect", _enable_case_sensitive_like)
    return engine


class RecipeStore:
    """Persistence collaborator for recipes.

    Use as an async context manager so the engine is always disposed:

        async with RecipeStore("sqlite:///recipes.db") as store:
            recipe = await store.fetch_by_id(42)
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        echo: Optional[bool] = None,
        max_retries: Optional[int] = None,
        retry_delays: Optional[list[int]] = None,
        engine: Optional[Engine] = None,
    ) -> None:
        """Initialize the store without touching the database.

        Args:
            database_url: SQLAlchemy URL. Defaults to config.DATABASE_URL.
            echo: Log every SQL statement. Defaults to config.DB_ECHO.
            max_retries: Connection attempts made by connect(). Defaults to config.MAX_RETRIES.
            retry_delays: Seconds to wait after each failed attempt. Defaults to config.retry_delays.
            engine: Pre-built engine, takes precedence over database_url.
        """
        self.database_url = database_url or config.DATABASE_URL
        self.max_retries = config.MAX_RETRIES if max_retries is None else max_retries
        self.retry_delays = config.retry_delays if retry_delays is None else retry_delays
        self.engine = engine or create_store_engine(
            self.database_url, echo=config.DB_ECHO if echo is None else echo
        )
        self._session_factory = sessionmaker(self.engine, expire_on_commit=False)

    async def __aenter__(self) -> "RecipeStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def display_url(self) -> str:
        """Database URL with the password masked, safe for logs."""
        return mask_database_url(str(self.engine.url))

    async def connect(self) -> None:
        """Create the schema if needed and check the database answers.

        Raises:
            StoreUnavailableError: If the database cannot be reached after all attempts.
        """
        logger.info(f"Connecting to recipe store at {self.display_url}...")

        last_exception: Optional[Exception] = None
        for attempt in range(self.max_retries):
            try:
                logger.debug(f"Connection attempt {attempt + 1}/{self.max_retries}...")
                await asyncio.to_thread(self._initialize_schema)
                logger.info("Recipe store connected successfully")
                return
            except DBAPIError as e:
                last_exception = e
                logger.debug(f"Connection attempt {attempt + 1} failed: {e}")

                if attempt < self.max_retries - 1:
                    delay = self.retry_delays[min(attempt, len(self.retry_delays) - 1)] if self.retry_delays else 0
                    logger.warning(
                        f"Connection failed, retrying in {delay}s... (attempt {attempt + 1}/{self.max_retries})"
                    )
                    await asyncio.sleep(delay)

        error_msg = f"Failed to connect to recipe store after {self.max_retries} attempts"
        logger.error(f"{error_msg}: {last_exception}")
        raise StoreUnavailableError(error_msg) from last_exception

    async def close(self) -> None:
        """Release every pooled connection."""
        await asyncio.to_thread(self.engine.dispose)
        logger.debug("Recipe store connection closed")

    def _initialize_schema(self) -> None:
        Base.metadata.create_all(self.engine)
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    async def _run(self, operation_name: str, operation: Callable[..., R], *args: Any) -> R:
        """Run a blocking session function in a worker thread, wrapping driver errors."""
        try:
            return await asyncio.to_thread(operation, *args)
        except DBAPIError as e:
            logger.error(f"{operation_name} failed: {e}")
            raise StoreUnavailableError(f"{operation_name} failed: {e}") from e

    def _session(self) -> Session:
        return self._session_factory()

    # ------------------------------------------------------------------
    # Queries consumed by the matching core
    # ------------------------------------------------------------------

    async def fetch_candidate_pool(self, max_count: int) -> list[Recipe]:
        """Fetch up to max_count recipes, most recent (highest id) first."""
        if max_count <= 0:
            return []
        return await self._run("Fetch candidate pool", self._fetch_candidate_pool, max_count)

    def _fetch_candidate_pool(self, max_count: int) -> list[Recipe]:
        statement = select(RecipeRecord).order_by(RecipeRecord.id.desc()).limit(max_count)
        with self._session() as session:
            return [Recipe.model_validate(row) for row in session.scalars(statement)]

    async def fetch_by_id(self, recipe_id: int) -> Recipe:
        """Fetch one recipe.

        Raises:
            RecipeNotFoundError: If no recipe has this id.
        """
        recipe = await self._run("Fetch recipe by id", self._fetch_by_id, recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        return recipe

    def _fetch_by_id(self, recipe_id: int) -> Optional[Recipe]:
        with self._session() as session:
            row = session.get(RecipeRecord, recipe_id)
            return Recipe.model_validate(row) if row is not None else None

    async def count_matching(self, predicate: ColumnElement[bool]) -> int:
        """Count recipes satisfying predicate."""
        return await self._run("Count recipes", self._count_matching, predicate)

    def _count_matching(self, predicate: ColumnElement[bool]) -> int:
        statement = select(func.count()).select_from(RecipeRecord).where(predicate)
        with self._session() as session:
            return session.scalar(statement) or 0

    async def query_matching(
        self,
        predicate: ColumnElement[bool],
        limit: int,
        offset: int = 0,
    ) -> list[Recipe]:
        """Fetch one page of recipes satisfying predicate, most recent first."""
        if limit <= 0:
            return []
        return await self._run("Query recipes", self._query_matching, predicate, limit, offset)

    def _query_matching(self, predicate: ColumnElement[bool], limit: int, offset: int) -> list[Recipe]:
        statement = (
            select(RecipeRecord)
            .where(predicate)
            .order_by(RecipeRecord.id.desc())
            .limit(limit)
            .offset(offset)
        )
        with self._session() as session:
            return [Recipe.model_validate(row) for row in session.scalars(statement)]

    # ------------------------------------------------------------------
    # Catalogue queries
    # ------------------------------------------------------------------

    async def list_categories(self) -> list[str]:
        """Distinct non-empty categories in alphabetical order."""
        return await self._run("List categories", self._list_categories)

    def _list_categories(self) -> list[str]:
        statement = (
            select(distinct(RecipeRecord.category))
            .where(RecipeRecord.category.is_not(None), RecipeRecord.category != "")
            .order_by(RecipeRecord.category)
        )
        with self._session() as session:
            return list(session.scalars(statement))

    async def popular_authors(self, limit: int) -> list[AuthorCount]:
        """Authors with the most recipes, most prolific first."""
        if limit <= 0:
            return []
        return await self._run("List popular authors", self._popular_authors, limit)

    def _popular_authors(self, limit: int) -> list[AuthorCount]:
        recipe_count = func.count(RecipeRecord.id).label("count")
        statement = (
            select(RecipeRecord.author, recipe_count)
            .where(RecipeRecord.author.is_not(None), RecipeRecord.author != "")
            .group_by(RecipeRecord.author)
            .order_by(desc(recipe_count), RecipeRecord.author)
            .limit(limit)
        )
        with self._session() as session:
            return [AuthorCount(author=author, count=count) for author, count in session.execute(statement)]

    # ------------------------------------------------------------------
    # Writes (used by the CSV loader and tests)
    # ------------------------------------------------------------------

    async def add_recipes(self, records: Iterable[dict[str, Any]]) -> list[int]:
        """Insert recipes in a single transaction and return their new ids.

        Raises:
            ValueError: If a record carries a rating outside 0-5; nothing is inserted.
            StoreUnavailableError: If the driver rejects the batch.
        """
        return await self._run("Insert recipes", self._add_recipes, list(records))

    def _add_recipes(self, records: list[dict[str, Any]]) -> list[int]:
        rows = [RecipeRecord(**record) for record in records]
        with self._session() as session, session.begin():
            session.add_all(rows)
            session.flush()
            return [row.id for row in rows]

    async def count(self) -> int:
        """Total number of stored recipes."""
        return await self.count_matching(match_all())

    async def reset(self) -> int:
        """Delete every recipe and return how many were removed."""
        return await self._run("Reset recipes", self._reset)

    def _reset(self) -> int:
        with self._session() as session, session.begin():
            result = session.execute(delete(RecipeRecord))
            return result.rowcount or 0
