"""Storage layer: settings blob and document vault."""

from schedule_gcal.storage.settings_store import SettingsStore
from schedule_gcal.storage.vault import FileSystemVault

__all__ = ["SettingsStore", "FileSystemVault"]
