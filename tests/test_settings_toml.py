import unittest
import tomllib
from pathlib import Path


class TestSettingsToml(unittest.TestCase):
    """Test suite to validate settings.toml structure and contents."""

    @classmethod
    def setUpClass(cls):
        """Load settings.toml once for all tests."""
        settings_path = Path(__file__).parent.parent / "settings.toml"
        with open(settings_path, "rb") as f:
            cls.settings = tomllib.load(f)

    def test_toml_file_can_be_loaded(self):
        """Test that settings.toml exists and can be parsed without errors."""
        settings_path = Path(__file__).parent.parent / "settings.toml"
        self.assertTrue(settings_path.exists(), "settings.toml file does not exist")

        with open(settings_path, "rb") as f:
            settings = tomllib.load(f)

        self.assertIsInstance(settings, dict)

    def test_required_sections_exist(self):
        for section in ["env", "api", "ui", "regions"]:
            with self.subTest(section=section):
                self.assertIn(section, self.settings, f"{section} section is missing")

    def test_log_level_is_valid(self):
        self.assertIn(
            self.settings["env"]["log_level"],
            ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        )

    def test_api_section(self):
        api = self.settings["api"]
        self.assertTrue(api["base_url"].startswith("http"), "base_url should be an http(s) URL")
        self.assertFalse(api["base_url"].endswith("/"), "base_url should not end with a slash")
        self.assertGreater(api["timeout_seconds"], 0)
        self.assertIsInstance(api["verify_ssl"], bool)

    def test_rows_per_page(self):
        ui = self.settings["ui"]
        options = ui["rows_per_page_options"]
        self.assertIsInstance(options, list)
        self.assertTrue(all(isinstance(o, int) and o > 0 for o in options))
        self.assertEqual(options, sorted(options), "rows_per_page_options should be ascending")
        self.assertIn(ui["default_rows"], options, "default_rows must be one of rows_per_page_options")

    def test_regions_match_built_in_region_codes(self):
        """Fallback region names must cover every RegionCode key with the same name."""
        from domain.enums import RegionCode

        regions = {int(k): v for k, v in self.settings["regions"].items()}
        for code in RegionCode:
            with self.subTest(region=code.name):
                self.assertIn(int(code), regions)
                self.assertEqual(regions[int(code)], code.display_name)


class TestSettingsService(unittest.TestCase):
    def test_properties(self):
        from settings_service import SettingsService

        settings = SettingsService()
        self.assertEqual(settings.env, settings.settings_dict["env"]["env"])
        self.assertIsInstance(settings.api_timeout, float)
        self.assertEqual(settings.default_rows, 10)
        self.assertEqual(settings.rows_per_page_options, [10, 25, 50, 75, 100])

    def test_fallback_region_names_are_int_keyed(self):
        from settings_service import get_fallback_region_names

        names = get_fallback_region_names()
        self.assertEqual(sorted(names), [1, 2, 3])


if __name__ == "__main__":
    unittest.main()
