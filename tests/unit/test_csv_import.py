"""Unit tests for the CSV recipe importer."""

from unittest.mock import AsyncMock, patch

import pytest

from src.loaders.csv_import import (
    UNTITLED,
    import_recipes,
    initialize_database,
    parse_recipes_csv,
    row_to_record,
    to_float_or_none,
    to_int_or_none,
    to_str_or_none,
)

CSV_HEADER = "title,ingredients,directions,category,author,rating,calories,fat_g,cook_time\n"

SAMPLE_CSV = (
    CSV_HEADER
    + 'Pancakes,"flour, milk, eggs",Mix and fry.,Breakfast,Dana,4.6,350.0,12.5,15 mins\n'
    + '"Tomato Soup","tomato; water; salt",Simmer.,Soup,,,,,\n'
    + ",,,,,,,,\n"
    + ',"rice, water",Boil.,,,not-a-number,,,\n'
)


class TestConverters:
    """Test cell conversion helpers."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_cells_become_none(self, value):
        assert to_str_or_none(value) is None
        assert to_int_or_none(value) is None
        assert to_float_or_none(value) is None

    def test_text_is_kept_as_is(self):
        assert to_str_or_none(" 15 mins ") == " 15 mins "

    def test_int_accepts_float_text(self):
        assert to_int_or_none("12.0") == 12
        assert to_int_or_none("7") == 7

    def test_invalid_numbers_become_none(self):
        assert to_int_or_none("abc") is None
        assert to_int_or_none("inf") is None
        assert to_float_or_none("abc") is None

    def test_out_of_range_numbers_become_none(self):
        assert to_int_or_none("1e20") is None
        assert to_int_or_none(str(2**31)) is None
        assert to_int_or_none(str(2**31 - 1)) == 2**31 - 1
        assert to_float_or_none("nan") is None
        assert to_float_or_none("-inf") is None

    def test_float(self):
        assert to_float_or_none("4.5") == 4.5


class TestRowToRecord:
    """Test row conversion."""

    def test_missing_title_becomes_untitled(self):
        assert row_to_record({"title": "  "})["title"] == UNTITLED

    def test_missing_ingredients_and_directions_become_empty(self):
        record = row_to_record({"title": "Soup"})
        assert record["ingredients"] == ""
        assert record["directions"] == ""
        assert record["category"] is None
        assert record["rating"] is None

    def test_typed_columns(self):
        record = row_to_record({"title": "Soup", "servings": "4", "rating": "3.5", "sodium_mg": "120.0"})
        assert record["servings"] == 4
        assert record["rating"] == 3.5
        assert record["sodium_mg"] == 120

    def test_out_of_range_rating_is_dropped(self):
        record = row_to_record({"title": "Soup", "rating": "7", "calories": "1e20", "servings": "2"})
        assert record["rating"] is None
        assert record["calories"] is None
        assert record["servings"] == 2


class TestParseRecipesCsv:
    """Test CSV parsing."""

    def test_parses_rows_and_skips_blank_lines(self):
        result = parse_recipes_csv(SAMPLE_CSV)

        assert [record["title"] for record in result.records] == ["Pancakes", "Tomato Soup", UNTITLED]
        assert result.skipped == 0

    def test_converts_cells(self):
        pancakes = parse_recipes_csv(SAMPLE_CSV).records[0]

        assert pancakes["ingredients"] == "flour, milk, eggs"
        assert pancakes["rating"] == 4.6
        assert pancakes["calories"] == 350
        assert pancakes["fat_g"] == 12.5
        assert pancakes["cook_time"] == "15 mins"

    def test_blank_optional_cells_become_none(self):
        soup = parse_recipes_csv(SAMPLE_CSV).records[1]
        assert soup["author"] is None
        assert soup["rating"] is None

    def test_rows_with_extra_cells_are_skipped(self):
        content = CSV_HEADER + "Bad,a,b,c,d,1,2,3,4,EXTRA\n" + "Good,x,y,,,,,,\n"

        result = parse_recipes_csv(content)

        assert result.skipped == 1
        assert [record["title"] for record in result.records] == ["Good"]

    @patch("src.loaders.csv_import.logger")
    def test_malformed_row_logging_is_capped(self, mock_logger):
        content = CSV_HEADER + "Bad,a,b,c,d,1,2,3,4,EXTRA\n" * 5

        result = parse_recipes_csv(content, max_errors=2)

        assert result.skipped == 5
        # two individual warnings plus one "too many" notice
        assert mock_logger.warning.call_count == 3


class TestImportRecipes:
    """Test batched inserts against the in-memory store."""

    @pytest.mark.asyncio
    async def test_imports_in_batches(self, store):
        records = [{"title": f"Recipe {i}", "ingredients": "salt"} for i in range(5)]

        with patch.object(store, "add_recipes", wraps=store.add_recipes) as spy:
            imported = await import_recipes(store, records, batch_size=2)

        assert imported == 5
        assert [len(call.args[0]) for call in spy.call_args_list] == [2, 2, 1]
        assert await store.count() == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_field", [{"calories": 10**20}, {"rating": 7.0}])
    async def test_bad_record_only_costs_itself(self, store, bad_field):
        records = [
            {"title": "A", "ingredients": "salt"},
            {"title": "B", "ingredients": "salt", **bad_field},
            {"title": "C", "ingredients": "salt"},
        ]

        imported = await import_recipes(store, records, batch_size=10)

        assert imported == 2
        assert [recipe.title for recipe in await store.fetch_candidate_pool(10)] == ["C", "A"]

    @pytest.mark.asyncio
    @patch("src.loaders.csv_import.logger")
    async def test_failed_record_logging_is_capped(self, mock_logger, store):
        records = [{"title": f"Bad {i}", "rating": 9.0} for i in range(4)] + [{"title": "Good"}]

        imported = await import_recipes(store, records, batch_size=10, max_errors=2)

        assert imported == 1
        assert mock_logger.error.call_count == 2
        # one batch fallback notice plus one "too many" notice
        assert mock_logger.warning.call_count == 2
        assert "1 recipe(s) imported, 4 failed" in mock_logger.info.call_args_list[-1].args[0]

    @pytest.mark.asyncio
    async def test_empty_import(self, store):
        assert await import_recipes(store, [], batch_size=2) == 0


class TestInitializeDatabase:
    """Test the reset + download + import flow with the download mocked."""

    @pytest.mark.asyncio
    @patch("src.loaders.csv_import.fetch_csv_text", new_callable=AsyncMock)
    async def test_replaces_existing_recipes(self, mock_fetch, seeded_store):
        mock_fetch.return_value = SAMPLE_CSV

        total = await initialize_database(seeded_store, csv_url="https://example.com/recipes.csv")

        mock_fetch.assert_awaited_once_with("https://example.com/recipes.csv")
        assert total == 3
        pool = await seeded_store.fetch_candidate_pool(10)
        assert [recipe.title for recipe in pool] == [UNTITLED, "Tomato Soup", "Pancakes"]

    @pytest.mark.asyncio
    @patch("src.loaders.csv_import.fetch_csv_text", new_callable=AsyncMock)
    async def test_download_failure_propagates(self, mock_fetch, store):
        mock_fetch.side_effect = ConnectionError("offline")

        with pytest.raises(ConnectionError):
            await initialize_database(store)
