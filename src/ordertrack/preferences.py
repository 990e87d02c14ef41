"""Persisted session preferences for ordertrack."""

import json
import logging
from pathlib import Path

from .errors import StoreError
from .models import Preferences
from .utils import atomic_write_json, data_dir

logger = logging.getLogger(__name__)

PREFERENCES_FILE = "preferences.json"


class PreferenceStore:
    """Small key-value file holding the login flag and remembered username."""

    def __init__(self, config_dir: Path | None = None):
        """
        Initialize PreferenceStore.

        Args:
            config_dir: Override data directory (for testing).
        """
        self.config_dir = config_dir or data_dir()
        self.preferences_path = self.config_dir / PREFERENCES_FILE

    def load(self) -> Preferences:
        """Load preferences, defaulting to logged out when the file is missing."""
        if not self.preferences_path.exists():
            return Preferences()

        try:
            with open(self.preferences_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to read %s: %s", self.preferences_path, e)
            raise StoreError(f"Failed to read preferences: {e}", str(self.preferences_path)) from e

        if not isinstance(data, dict):
            raise StoreError("Malformed preferences", str(self.preferences_path))

        return Preferences.from_dict(data)

    def save(self, prefs: Preferences) -> None:
        """Save preferences atomically."""
        try:
            atomic_write_json(self.preferences_path, prefs.to_dict(), prefix=".preferences_")
        except OSError as e:
            logger.error("Failed to write %s: %s", self.preferences_path, e)
            raise StoreError(f"Failed to write preferences: {e}", str(self.preferences_path)) from e
