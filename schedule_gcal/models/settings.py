"""Durable sync settings model (the host's settings blob)."""

import json
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schedule_gcal.exceptions import ConfigurationError

DEFAULT_CALENDAR_ID = "primary"
DEFAULT_DAILY_FILENAME_FORMAT = "%Y-%m-%d"
DEFAULT_SCHEDULE_HEADING = "Schedule"


def _default_time_zone() -> str:
    tz_name = os.environ.get("TZ", "").strip()
    if tz_name:
        try:
            ZoneInfo(tz_name)
            return tz_name
        except (ZoneInfoNotFoundError, ValueError):
            pass
    return "UTC"


class SyncSettings(BaseModel):
    """Per-vault sync settings plus the Local Sync Map.

    Stored as JSON by ``SettingsStore``. ``event_map`` maps event keys
    ("YYYY-MM-DD::line") to remote event ids and is only mutated by the
    reconciler.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    calendar_id: str = DEFAULT_CALENDAR_ID
    sa_client_email: str = ""
    sa_private_key: str = ""
    sa_key_file: str | None = None
    daily_folder: str = "Daily"
    daily_filename_format: str = DEFAULT_DAILY_FILENAME_FORMAT
    schedule_heading: str = DEFAULT_SCHEDULE_HEADING
    default_duration_minutes: int = Field(default=60, gt=0)
    time_zone: str = Field(default_factory=_default_time_zone)
    vault_name: str | None = None
    event_map: dict[str, str] = Field(default_factory=dict)
    auto_sync_on_modify: bool = False

    @field_validator("calendar_id", mode="before")
    @classmethod
    def default_calendar_id(cls, v):
        return (v or "").strip() or DEFAULT_CALENDAR_ID

    @field_validator("schedule_heading", mode="before")
    @classmethod
    def default_schedule_heading(cls, v):
        return (v or "").strip() or DEFAULT_SCHEDULE_HEADING

    @field_validator("daily_filename_format", mode="before")
    @classmethod
    def default_filename_format(cls, v):
        return (v or "").strip() or DEFAULT_DAILY_FILENAME_FORMAT

    @field_validator("daily_folder", mode="before")
    @classmethod
    def normalize_folder(cls, v):
        """Strip leading/trailing slashes like the vault paths we compare with."""
        return (v or "").strip().strip("/")

    @field_validator("sa_client_email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return (v or "").strip()

    @field_validator("sa_private_key", mode="before")
    @classmethod
    def unescape_private_key(cls, v):
        """Accept PEMs pasted on one line with literal ``\\n`` escapes."""
        key = (v or "").strip()
        if "\\n" in key and "\n" not in key:
            key = key.replace("\\n", "\n")
        return key

    @field_validator("time_zone")
    @classmethod
    def validate_time_zone(cls, v: str) -> str:
        v = v.strip()
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown IANA time zone: {v!r}") from e
        return v

    def service_account(self, base_dir: Path | None = None) -> tuple[str, str]:
        """Resolve the service account email and PEM key.

        Inline settings win; ``sa_key_file`` (a Google service-account JSON
        key) fills whatever is missing.

        Args:
            base_dir: Directory relative key file paths are resolved against

        Returns:
            Tuple of (client_email, private_key_pem)

        Raises:
            ConfigurationError: If either value cannot be resolved
        """
        email = self.sa_client_email
        key = self.sa_private_key
        if (not email or not key) and self.sa_key_file:
            key_path = Path(self.sa_key_file).expanduser()
            if not key_path.is_absolute() and base_dir is not None:
                key_path = base_dir / key_path
            try:
                info = json.loads(key_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigurationError(
                    f"Could not read service account key file {key_path}: {e}"
                ) from e
            email = email or str(info.get("client_email", "")).strip()
            key = key or str(info.get("private_key", "")).strip()

        if not email or not key:
            raise ConfigurationError(
                "Service account email and private key must be configured"
            )
        return email, key
