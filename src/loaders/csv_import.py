"""CSV import for the recipe store.

Downloads the recipe dataset (one recipe per row, headers matching the Recipe table),
converts cells to typed values and inserts the rows in batches:

- fetch_csv_text(): download the CSV (async, aiohttp)
- parse_recipes_csv(): rows to insertable dicts, skipping malformed rows
- import_recipes(): batched inserts, falling back to one record at a time when a batch fails
- initialize_database(): reset + fetch + parse + import + count
"""

import csv
import io
import math
from dataclasses import dataclass, field
from typing import Any, Optional

import aiohttp

from src.models.models import MAX_RATING, MIN_RATING
from src.store.errors import StoreUnavailableError
from src.store.recipe_store import RecipeStore
from src.utils.config import config
from src.utils.logger import logger

UNTITLED = "Untitled"

TEXT_COLUMNS = (
    "url", "category", "author", "description", "prep_time", "cook_time",
    "total_time", "yields", "instructions_list", "image",
)
INT_COLUMNS = ("rating_count", "review_count", "servings", "calories", "sodium_mg")
FLOAT_COLUMNS = ("rating", "carbohydrates_g", "sugars_g", "fat_g", "protein_g")

# Integer columns are 32-bit on PostgreSQL
INT_COLUMN_MIN = -(2**31)
INT_COLUMN_MAX = 2**31 - 1

# Record-level failures: validation, driver rejection, values the driver cannot bind
RECORD_ERRORS = (ValueError, OverflowError, StoreUnavailableError)


@dataclass
class ParseResult:
    records: list[dict[str, Any]] = field(default_factory=list)
    skipped: int = 0


def to_str_or_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


def to_int_or_none(value: Optional[str]) -> Optional[int]:
    """Blank, non-numeric or out-of-range cells become None; "12.0" becomes 12."""
    if value is None or not value.strip():
        return None
    try:
        number = int(float(value))
    except (ValueError, OverflowError):
        return None
    return number if INT_COLUMN_MIN <= number <= INT_COLUMN_MAX else None


def to_float_or_none(value: Optional[str]) -> Optional[float]:
    """Blank, non-numeric, NaN and infinite cells become None."""
    if value is None or not value.strip():
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def row_to_record(row: dict[str, Optional[str]]) -> dict[str, Any]:
    """Convert one CSV row to keyword arguments for RecipeRecord."""
    record: dict[str, Any] = {
        "title": (row.get("title") or "").strip() or UNTITLED,
        "ingredients": row.get("ingredients") or "",
        "directions": row.get("directions") or "",
    }
    for column in TEXT_COLUMNS:
        record[column] = to_str_or_none(row.get(column))
    for column in INT_COLUMNS:
        record[column] = to_int_or_none(row.get(column))
    for column in FLOAT_COLUMNS:
        record[column] = to_float_or_none(row.get(column))
    # Ratings outside 0-5 are dropped, the rest of the row is kept
    if record["rating"] is not None and not (MIN_RATING <= record["rating"] <= MAX_RATING):
        record["rating"] = None
    return record


async def fetch_csv_text(url: str, timeout_seconds: Optional[int] = None) -> str:
    """Download the CSV file.

    Raises:
        aiohttp.ClientError: On connection failure or a non-2xx response.
    """
    timeout = aiohttp.ClientTimeout(total=timeout_seconds or config.REQUEST_TIMEOUT_SECONDS)
    logger.info(f"Downloading recipes CSV from {url}...")
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(url) as response:
            response.raise_for_status()
            content = await response.text()
    logger.info(f"CSV downloaded ({len(content) / 1024 / 1024:.2f} MB)")
    return content


def parse_recipes_csv(content: str, max_errors: Optional[int] = None) -> ParseResult:
    """Parse CSV text into insertable records.

    Rows with more cells than headers are skipped. The first max_errors skipped rows are
    logged individually, the rest only counted.
    """
    max_errors = config.IMPORT_MAX_ERRORS if max_errors is None else max_errors
    result = ParseResult()
    reader = csv.DictReader(io.StringIO(content))

    for line_number, row in enumerate(reader, start=2):
        if not any((value or "").strip() for key, value in row.items() if key is not None):
            continue
        if None in row:
            result.skipped += 1
            if result.skipped <= max_errors:
                logger.warning(f"Skipping malformed CSV row {line_number}: {len(row[None])} extra cell(s)")
            elif result.skipped == max_errors + 1:
                logger.warning("Too many malformed rows, no longer logging them individually")
            continue
        result.records.append(row_to_record(row))

    logger.info(f"Parsed {len(result.records)} recipe(s), skipped {result.skipped} malformed row(s)")
    return result


async def import_recipes(
    store: RecipeStore,
    records: list[dict[str, Any]],
    batch_size: Optional[int] = None,
    max_errors: Optional[int] = None,
) -> int:
    """Insert records in batches and return how many were inserted.

    A batch the store rejects is retried one record at a time so a single bad record
    only costs itself. Failed records are counted; the first max_errors are logged.
    """
    batch_size = batch_size or config.IMPORT_BATCH_SIZE
    max_errors = config.IMPORT_MAX_ERRORS if max_errors is None else max_errors
    imported = 0
    failed = 0
    logger.info(f"Importing {len(records)} recipe(s) in batches of {batch_size}...")

    for start in range(0, len(records), batch_size):
        batch = records[start:start + batch_size]
        try:
            ids = await store.add_recipes(batch)
        except RECORD_ERRORS as e:
            logger.warning(f"Batch starting at record {start + 1} rejected ({e}), inserting one by one")
            ids = []
            for position, record in enumerate(batch, start=start + 1):
                try:
                    ids.extend(await store.add_recipes([record]))
                except RECORD_ERRORS as record_error:
                    failed += 1
                    if failed <= max_errors:
                        logger.error(f"Failed to import record {position} ({record.get('title')}): {record_error}")
                    elif failed == max_errors + 1:
                        logger.warning("Too many import errors, no longer logging them individually")

        imported += len(ids)
        if imported // 1000 > (imported - len(ids)) // 1000:
            logger.info(f"{imported} recipe(s) imported...")

    logger.info(f"Import finished: {imported} recipe(s) imported, {failed} failed")
    return imported


async def initialize_database(store: RecipeStore, csv_url: Optional[str] = None) -> int:
    """Replace the store's contents with the CSV dataset and return the final recipe count."""
    logger.info("Initializing recipe database...")

    removed = await store.reset()
    logger.info(f"Database reset ({removed} recipe(s) removed)")

    content = await fetch_csv_text(csv_url or config.RECIPES_CSV_URL)
    parsed = parse_recipes_csv(content)
    await import_recipes(store, parsed.records)

    total = await store.count()
    logger.info(f"Database contains {total} recipe(s)")
    return total
