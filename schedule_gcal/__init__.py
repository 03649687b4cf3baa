"""Sync a daily note's schedule section to a Google Calendar."""

from schedule_gcal.service import ScheduleSyncService
from schedule_gcal.storage import FileSystemVault, SettingsStore

__version__ = "0.1.0"

__all__ = ["ScheduleSyncService", "FileSystemVault", "SettingsStore", "__version__"]
