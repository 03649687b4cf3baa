"""Configuration for schedule sync."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from schedule_gcal.constants import (
    GOOGLE_CALENDAR_API_BASE_URL,
    GOOGLE_OAUTH_TOKEN_URL,
)


class SyncConfig(BaseModel):
    """Process configuration with Pydantic validation.

    These are deployment settings (where the vault lives, where to log,
    which endpoints to talk to). Per-vault sync settings such as the
    calendar id and the service account live in the settings blob, see
    ``schedule_gcal.models.settings.SyncSettings``.
    """

    # Storage paths
    vault_dir: Path = Field(default=Path("."))
    settings_file: Path = Field(default=Path(".schedule-gcal/data.json"))
    log_dir: Path = Field(default=Path("logs"))

    # File naming
    log_filename: str = Field(default="schedule_gcal.log")

    # Endpoints
    token_url: str = Field(default=GOOGLE_OAUTH_TOKEN_URL)
    api_base_url: str = Field(default=GOOGLE_CALENDAR_API_BASE_URL)

    # Transport / watch defaults
    http_timeout_seconds: float = Field(default=30.0, gt=0)
    watch_interval_seconds: float = Field(default=2.0, gt=0)

    @property
    def settings_path(self) -> Path:
        """Settings blob path, resolved against the vault directory."""
        if self.settings_file.is_absolute():
            return self.settings_file
        return self.vault_dir / self.settings_file

    @classmethod
    def from_env(cls) -> "SyncConfig":
        """Load configuration from environment variables and .env file."""
        load_dotenv()

        config_dict = {}

        # Storage paths
        if "VAULT_DIR" in os.environ:
            config_dict["vault_dir"] = Path(os.environ["VAULT_DIR"])
        if "SETTINGS_FILE" in os.environ:
            config_dict["settings_file"] = Path(os.environ["SETTINGS_FILE"])
        if "LOG_DIR" in os.environ:
            config_dict["log_dir"] = Path(os.environ["LOG_DIR"])

        # File naming
        if "LOG_FILENAME" in os.environ:
            config_dict["log_filename"] = os.environ["LOG_FILENAME"]

        # Endpoints
        if "GOOGLE_TOKEN_URL" in os.environ:
            config_dict["token_url"] = os.environ["GOOGLE_TOKEN_URL"]
        if "GOOGLE_CALENDAR_API_BASE_URL" in os.environ:
            config_dict["api_base_url"] = os.environ["GOOGLE_CALENDAR_API_BASE_URL"]

        # Numeric defaults
        for env_key, field_name in (
            ("HTTP_TIMEOUT_SECONDS", "http_timeout_seconds"),
            ("WATCH_INTERVAL_SECONDS", "watch_interval_seconds"),
        ):
            if env_key in os.environ:
                try:
                    value = float(os.environ[env_key])
                except ValueError:
                    continue  # Keep default if invalid
                if value > 0:
                    config_dict[field_name] = value

        return cls(**config_dict)
