"""Tests for configuration manager and settings."""
import os
import unittest
import tempfile
import shutil
from pathlib import Path
from unittest import mock

from spendlens.analysis.models import Category
from spendlens.config import AppSettings, Config, ConfigManager
from spendlens.utils.exceptions import ConfigError


class TestConfigManager(unittest.TestCase):
    """Test ConfigManager functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.config_manager = ConfigManager()
        # Override config directory for testing
        self.config_manager.config_dir = self.test_dir
        self.config_manager.config_file = self.test_dir / "config.json"

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_save_and_load_config(self):
        """Test saving and loading configuration."""
        config = Config(openai_api_key="sk-file", use_ai=False, currency_code="EUR")

        self.config_manager.save_config(config)
        loaded_config = self.config_manager.load_config()

        self.assertEqual(loaded_config, config)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_defaults_when_missing(self):
        self.assertEqual(self.config_manager.load_config(), Config())

    @mock.patch.dict(os.environ, {"OPENAI_API_KEY": "sk-env"})
    def test_environment_key_overrides_file(self):
        self.config_manager.save_config(Config(openai_api_key="sk-file"))

        self.assertEqual(self.config_manager.load_config().openai_api_key, "sk-env")

    def test_corrupt_file_raises(self):
        self.config_manager.config_file.write_text("{not json", encoding="utf-8")

        with self.assertRaises(ConfigError):
            self.config_manager.load_config()

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_wrongly_typed_values_raise(self):
        for content in (
            '{"use_ai": "false"}',
            '{"use_ai": 0}',
            '{"openai_api_key": 123}',
            '{"currency_code": null}',
            '{"unexpected": true}',
            '["use_ai"]',
        ):
            self.config_manager.config_file.write_text(content, encoding="utf-8")
            with self.assertRaises(ConfigError):
                self.config_manager.load_config()

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_boolean_use_ai_accepted(self):
        self.config_manager.config_file.write_text('{"use_ai": false, "database_path": null}', encoding="utf-8")

        self.assertFalse(self.config_manager.load_config().use_ai)

    def test_validate_config(self):
        """Test validation rules."""
        is_valid, _ = self.config_manager.validate_config(Config(openai_api_key="sk-test"))
        self.assertTrue(is_valid)

        is_valid, _ = self.config_manager.validate_config(Config(use_ai=False))
        self.assertTrue(is_valid)

        is_valid, message = self.config_manager.validate_config(Config(use_ai=True))
        self.assertFalse(is_valid)
        self.assertIn("API key", message)

        is_valid, message = self.config_manager.validate_config(Config(use_ai=False, currency_code="XYZ"))
        self.assertFalse(is_valid)
        self.assertIn("currency", message)

    def test_resolve_database_path(self):
        self.assertEqual(
            self.config_manager.resolve_database_path(Config()),
            self.test_dir / "spendlens.db"
        )
        self.assertEqual(
            self.config_manager.resolve_database_path(Config(database_path="/tmp/other.db")),
            Path("/tmp/other.db")
        )


class TestAppSettings(unittest.TestCase):
    """Test AppSettings loading."""

    def test_bundled_defaults(self):
        settings = AppSettings.load()

        self.assertEqual(settings.auto_window_days, 7)
        self.assertEqual(settings.top_category_limit, 5)
        self.assertEqual(settings.llm_temperature, 0.7)
        self.assertEqual(settings.llm_model_name, "gpt-4o-mini")

    def test_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            AppSettings.load(Path("/nonexistent/settings.yaml"))


class TestCategoryMapping(unittest.TestCase):
    """Test free-text category mapping."""

    def test_aliases(self):
        self.assertEqual(Category.from_string(" Groceries "), Category.FOOD)
        self.assertEqual(Category.from_string("uber"), Category.TRANSPORT)
        self.assertEqual(Category.from_string("utilities"), Category.BILLS)
        self.assertEqual(Category.from_string("rent"), Category.RENT)
        self.assertEqual(Category.from_string("gym"), Category.HEALTH)
        self.assertIsNone(Category.from_string("crypto"))
        self.assertIsNone(Category.from_string("  "))
        self.assertIsNone(Category.from_string(None))


if __name__ == "__main__":
    unittest.main()
