"""Settings blob storage (configuration plus the Local Sync Map)."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from schedule_gcal.exceptions import PersistenceError
from schedule_gcal.models.settings import SyncSettings
from schedule_gcal.utils import atomic_write_text

logger = logging.getLogger(__name__)


class SettingsStore:
    """Load and save ``SyncSettings`` as a JSON file."""

    def __init__(self, path: Path):
        """
        Initialize store.

        Args:
            path: Location of the JSON settings blob
        """
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> SyncSettings:
        """
        Load settings, falling back to defaults when no blob exists yet.

        Raises:
            PersistenceError: If the file exists but can't be read or parsed
        """
        if not self.path.exists():
            logger.debug(f"No settings at {self.path}; using defaults")
            return SyncSettings()

        try:
            raw = self.path.read_text(encoding="utf-8")
            data = json.loads(raw) if raw.strip() else {}
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read settings {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceError(f"Settings {self.path} must contain a JSON object")

        try:
            return SyncSettings.model_validate(data)
        except ValidationError as e:
            raise PersistenceError(f"Invalid settings in {self.path}: {e}") from e

    def save(self, settings: SyncSettings) -> Path:
        """
        Durably write settings (atomic replace).

        Raises:
            PersistenceError: On any filesystem failure. Losing the sync map
                means the next run may create duplicate events, so callers
                must surface this.
        """
        try:
            atomic_write_text(self.path, settings.model_dump_json(indent=2))
        except OSError as e:
            raise PersistenceError(f"Could not save settings {self.path}: {e}") from e
        logger.debug(f"Saved settings ({len(settings.event_map)} mapped events)")
        return self.path

    def init(self) -> bool:
        """Write a default settings blob if none exists. Returns True if created."""
        if self.path.exists():
            return False
        self.save(SyncSettings())
        return True
