"""Unit tests for configuration management."""

import pytest

from src.utils.config import DEFAULT_RECIPES_CSV_URL, Config


CONFIG_VARS = (
    "DATABASE_URL",
    "DB_ECHO",
    "CANDIDATE_POOL_SIZE",
    "MATCH_THRESHOLD",
    "DEFAULT_MATCH_LIMIT",
    "DEFAULT_SIMILAR_LIMIT",
    "KEY_INGREDIENT_LIMIT",
    "KEY_INGREDIENT_MIN_LENGTH",
    "DEFAULT_PAGE_SIZE",
    "POPULAR_AUTHORS_LIMIT",
    "RECIPES_CSV_URL",
    "IMPORT_BATCH_SIZE",
    "IMPORT_MAX_ERRORS",
    "REQUEST_TIMEOUT_SECONDS",
    "MAX_RETRIES",
    "DELAY_BETWEEN_RETRIES",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConfigInitialization:
    """Test Config class initialization and environment variable loading."""

    def test_config_loads_default_values(self, clean_env):
        """Test that Config uses default values when env vars not set."""
        config = Config()

        assert config.DATABASE_URL == "sqlite:///recipes.db"
        assert config.DB_ECHO is False
        assert config.CANDIDATE_POOL_SIZE == 1000
        assert config.MATCH_THRESHOLD == 50.0
        assert config.DEFAULT_MATCH_LIMIT == 10
        assert config.DEFAULT_SIMILAR_LIMIT == 5
        assert config.KEY_INGREDIENT_LIMIT == 5
        assert config.KEY_INGREDIENT_MIN_LENGTH == 3
        assert config.DEFAULT_PAGE_SIZE == 10
        assert config.POPULAR_AUTHORS_LIMIT == 20
        assert config.RECIPES_CSV_URL == DEFAULT_RECIPES_CSV_URL
        assert config.IMPORT_BATCH_SIZE == 500
        assert config.MAX_RETRIES == 3

    def test_config_loads_from_environment(self, clean_env):
        """Test that Config loads values from environment variables."""
        clean_env.setenv("DATABASE_URL", "postgresql://localhost/recipes")
        clean_env.setenv("CANDIDATE_POOL_SIZE", "250")
        clean_env.setenv("MATCH_THRESHOLD", "75.5")
        clean_env.setenv("RECIPES_CSV_URL", "https://example.com/recipes.csv")

        config = Config()

        assert config.DATABASE_URL == "postgresql://localhost/recipes"
        assert config.CANDIDATE_POOL_SIZE == 250
        assert config.MATCH_THRESHOLD == 75.5
        assert config.RECIPES_CSV_URL == "https://example.com/recipes.csv"

    def test_empty_database_url_falls_back_to_sqlite(self, clean_env):
        clean_env.setenv("DATABASE_URL", "")
        assert Config().DATABASE_URL == "sqlite:///recipes.db"

    @pytest.mark.parametrize("value, expected", [("true", True), ("1", True), ("YES", True), ("no", False)])
    def test_db_echo_flag(self, clean_env, value, expected):
        clean_env.setenv("DB_ECHO", value)
        assert Config().DB_ECHO is expected

    def test_config_converts_numeric_types(self, clean_env):
        """Test that Config properly converts numeric environment variables."""
        clean_env.setenv("CANDIDATE_POOL_SIZE", "10")
        clean_env.setenv("MATCH_THRESHOLD", "60")

        config = Config()

        assert isinstance(config.CANDIDATE_POOL_SIZE, int)
        assert isinstance(config.MATCH_THRESHOLD, float)


class TestRetryDelays:
    """Test exponential backoff derived from retry settings."""

    def test_default_retry_delays(self, clean_env):
        assert Config().retry_delays == [1, 2, 4]

    def test_custom_retry_delays(self, clean_env):
        clean_env.setenv("MAX_RETRIES", "4")
        clean_env.setenv("DELAY_BETWEEN_RETRIES", "3")
        assert Config().retry_delays == [3, 6, 12, 24]


class TestConfigValidation:
    """Test Config validation logic."""

    def test_defaults_are_valid(self, clean_env):
        Config().validate()  # Should not raise

    @pytest.mark.parametrize(
        "name, value",
        [
            ("CANDIDATE_POOL_SIZE", "0"),
            ("MATCH_THRESHOLD", "-1"),
            ("MATCH_THRESHOLD", "100.5"),
            ("DEFAULT_MATCH_LIMIT", "0"),
            ("DEFAULT_SIMILAR_LIMIT", "0"),
            ("KEY_INGREDIENT_LIMIT", "-1"),
            ("KEY_INGREDIENT_MIN_LENGTH", "-2"),
            ("DEFAULT_PAGE_SIZE", "0"),
            ("IMPORT_BATCH_SIZE", "0"),
            ("MAX_RETRIES", "0"),
            ("DELAY_BETWEEN_RETRIES", "-1"),
        ],
    )
    def test_out_of_range_values_raise(self, clean_env, name, value):
        """Test that validate() names the offending variable."""
        clean_env.setenv(name, value)

        config = Config()
        with pytest.raises(ValueError, match=name):
            config.validate()

    def test_threshold_bounds_are_inclusive(self, clean_env):
        clean_env.setenv("MATCH_THRESHOLD", "0")
        Config().validate()
        clean_env.setenv("MATCH_THRESHOLD", "100")
        Config().validate()
