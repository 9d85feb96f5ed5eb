"""Settings persistence for per-document export preferences.

This module provides persistent storage for export settings (page size,
margins, body text size, font family) indexed by document path. Settings
are stored in an OS-appropriate location and survive application restarts.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants
from .font_config import FONT_CONFIGS, PageSettings

logger = logging.getLogger(__name__)

PAGE_SIZES = ("letter", "a4")


class SettingsPersistence:
    """Manages persistent storage of per-document settings.

    Settings are stored in a JSON file in the user's config directory,
    indexed by the absolute path of the document being edited.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = config_dir or Path(platformdirs.user_config_dir("notemark"))
        self._settings_file = self._config_dir / "settings.json"
        self._settings_cache: Optional[Dict[str, Dict[str, Any]]] = None

    def _ensure_config_dir(self) -> None:
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
        except (OSError, PermissionError) as e:
            logger.warning(f"Could not create config directory {self._config_dir}: {e}")

    def _load_all_settings(self) -> Dict[str, Dict[str, Any]]:
        """Load all settings from disk.

        Returns:
            Dictionary mapping document paths to their settings.
            Returns empty dict if file doesn't exist or can't be read.
        """
        if self._settings_cache is not None:
            return self._settings_cache

        if not self._settings_file.exists():
            self._settings_cache = {}
            return self._settings_cache

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            self._settings_cache = {}
            return self._settings_cache

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            data = {}
        self._settings_cache = data
        return self._settings_cache

    def _save_all_settings(self, settings: Dict[str, Dict[str, Any]]) -> bool:
        """Save all settings to disk atomically (temp file + rename)."""
        self._ensure_config_dir()
        temp_file = self._settings_file.with_suffix(EditorConstants.ATOMIC_SAVE_SUFFIX)

        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2)
            temp_file.replace(self._settings_file)
            self._settings_cache = settings
            return True
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

    def load_settings(self, document_path: Optional[str]) -> Dict[str, Any]:
        """Load settings for a specific document.

        Invalid values are dropped with a warning. Returns an empty dict if
        there are no settings or document_path is None.
        """
        if document_path is None:
            return {}

        abs_path = os.path.abspath(document_path)
        doc_settings = self._load_all_settings().get(abs_path, {})
        if not isinstance(doc_settings, dict):
            logger.warning(f"Settings for {abs_path} are not a dict, ignoring")
            return {}

        valid = {}
        for key, value in doc_settings.items():
            if self.validate_setting(key, value):
                valid[key] = value
            else:
                logger.warning(f"Ignoring invalid setting {key}={value!r} for {abs_path}")
        return valid

    def save_settings(self, document_path: Optional[str], settings: Dict[str, Any]) -> bool:
        """Save settings for a specific document.

        Returns:
            True if save was successful, False otherwise.
        """
        if document_path is None:
            return False

        abs_path = os.path.abspath(document_path)
        all_settings = dict(self._load_all_settings())
        all_settings[abs_path] = settings
        return self._save_all_settings(all_settings)

    def validate_setting(self, key: str, value: Any) -> bool:
        """Validate a setting value."""
        if value is None:
            return True  # None is valid (means "not set")

        if key == 'page_size':
            return value in PAGE_SIZES

        if key == 'font_family':
            return isinstance(value, str) and value in FONT_CONFIGS

        # bool is an int subclass; reject it for numeric settings
        if key == 'margin':
            return isinstance(value, (int, float)) and not isinstance(value, bool) and 0 <= value <= 144

        if key == 'body_size':
            return isinstance(value, (int, float)) and not isinstance(value, bool) and 6 <= value <= 72

        # Unknown settings are considered valid (forward compatibility)
        return True

    def page_settings_for(self, document_path: Optional[str]) -> PageSettings:
        """Page geometry for exporting a document, from its saved settings."""
        settings = self.load_settings(document_path)
        margin = settings.get('margin')
        if margin is None:
            margin = EditorConstants.DEFAULT_MARGIN
        extra: Dict[str, Any] = {}
        if settings.get('body_size'):
            extra['body_size'] = settings['body_size']
        if settings.get('font_family'):
            extra['body_family'] = settings['font_family']
        if settings.get('page_size') == 'a4':
            return PageSettings.a4(margin=margin, **extra)
        return PageSettings.letter(margin=margin, **extra)

    def clear_cache(self) -> None:
        """Clear the in-memory cache of settings."""
        self._settings_cache = None


# Global instance
_persistence: Optional[SettingsPersistence] = None


def get_persistence() -> SettingsPersistence:
    """Get the global settings persistence instance."""
    global _persistence
    if _persistence is None:
        _persistence = SettingsPersistence()
    return _persistence
