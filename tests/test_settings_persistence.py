"""Unit tests for settings persistence."""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path

from notemark.font_config import A4_WIDTH_POINTS, PageSettings
from notemark.settings_persistence import SettingsPersistence


class TestSettingsPersistence(unittest.TestCase):
    """Test settings persistence functionality."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.persistence = SettingsPersistence(config_dir=Path(self.temp_dir) / "config")
        self.test_doc_path = os.path.join(self.temp_dir, "notes.txt")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_save_and_load_settings(self):
        settings = {"page_size": "a4", "margin": 36, "body_size": 11, "font_family": "Times"}
        self.assertTrue(self.persistence.save_settings(self.test_doc_path, settings))
        self.assertEqual(self.persistence.load_settings(self.test_doc_path), settings)

    def test_settings_survive_new_instance(self):
        self.persistence.save_settings(self.test_doc_path, {"margin": 50})
        fresh = SettingsPersistence(config_dir=Path(self.temp_dir) / "config")
        self.assertEqual(fresh.load_settings(self.test_doc_path), {"margin": 50})

    def test_none_document_path(self):
        self.assertFalse(self.persistence.save_settings(None, {"margin": 10}))
        self.assertEqual(self.persistence.load_settings(None), {})

    def test_load_nonexistent_document(self):
        self.assertEqual(self.persistence.load_settings("/nonexistent/document.txt"), {})

    def test_invalid_values_dropped(self):
        self.persistence.save_settings(self.test_doc_path, {
            "page_size": "legal",
            "margin": 500,
            "body_size": True,
            "font_family": "Comic",
            "future_option": "kept",
        })
        with self.assertLogs("notemark.settings_persistence", level="WARNING"):
            loaded = self.persistence.load_settings(self.test_doc_path)
        self.assertEqual(loaded, {"future_option": "kept"})

    def test_validate_setting(self):
        self.assertTrue(self.persistence.validate_setting("margin", 0))
        self.assertTrue(self.persistence.validate_setting("margin", None))
        self.assertFalse(self.persistence.validate_setting("margin", -1))
        self.assertTrue(self.persistence.validate_setting("body_size", 6))
        self.assertFalse(self.persistence.validate_setting("body_size", 73))
        self.assertTrue(self.persistence.validate_setting("page_size", "letter"))

    def test_corrupted_file_is_ignored(self):
        config_dir = Path(self.temp_dir) / "config"
        config_dir.mkdir()
        (config_dir / "settings.json").write_text("{not json", encoding="utf-8")
        with self.assertLogs("notemark.settings_persistence", level="WARNING"):
            self.assertEqual(self.persistence.load_settings(self.test_doc_path), {})

    def test_file_contents_are_json(self):
        self.persistence.save_settings(self.test_doc_path, {"margin": 20})
        data = json.loads((Path(self.temp_dir) / "config" / "settings.json").read_text())
        self.assertEqual(data, {os.path.abspath(self.test_doc_path): {"margin": 20}})

    def test_page_settings_defaults(self):
        self.assertEqual(self.persistence.page_settings_for(self.test_doc_path), PageSettings())

    def test_page_settings_from_saved(self):
        self.persistence.save_settings(self.test_doc_path, {
            "page_size": "a4", "margin": 0, "body_size": 10, "font_family": "Times",
        })
        settings = self.persistence.page_settings_for(self.test_doc_path)
        self.assertEqual(settings.page_width, A4_WIDTH_POINTS)
        self.assertEqual(settings.left_margin, 0)
        self.assertEqual(settings.bottom_margin, 0)
        self.assertEqual(settings.body_size, 10)
        self.assertEqual(settings.body_family, "Times")

    def test_clear_cache(self):
        self.persistence.save_settings(self.test_doc_path, {"margin": 20})
        other = SettingsPersistence(config_dir=Path(self.temp_dir) / "config")
        other.save_settings(self.test_doc_path, {"margin": 30})
        self.assertEqual(self.persistence.load_settings(self.test_doc_path), {"margin": 20})
        self.persistence.clear_cache()
        self.assertEqual(self.persistence.load_settings(self.test_doc_path), {"margin": 30})


if __name__ == '__main__':
    unittest.main()
