"""Display configuration and sync settings."""

import os
from pathlib import Path

import typer
from rich.table import Table

from schedule_gcal.config import SyncConfig
from schedule_gcal.exceptions import PersistenceError
from schedule_gcal.models.settings import SyncSettings
from schedule_gcal_cli.context import get_context
from schedule_gcal_cli.display import SummaryRenderer, console

# Environment variable behind each config field
CONFIG_ENV_KEYS = {
    "vault_dir": "VAULT_DIR",
    "settings_file": "SETTINGS_FILE",
    "log_dir": "LOG_DIR",
    "log_filename": "LOG_FILENAME",
    "token_url": "GOOGLE_TOKEN_URL",
    "api_base_url": "GOOGLE_CALENDAR_API_BASE_URL",
    "http_timeout_seconds": "HTTP_TIMEOUT_SECONDS",
    "watch_interval_seconds": "WATCH_INTERVAL_SECONDS",
}


def _find_env_file() -> Path | None:
    """Find .env file by searching current directory and parent directories."""
    current = Path.cwd()

    # Check current directory and all parent directories
    for path in [current] + list(current.parents):
        env_file = path / ".env"
        if env_file.exists():
            return env_file.resolve()

    return None


def _get_source(env_key: str, value, default_value) -> str:
    """Determine the source of a config value."""
    if env_key in os.environ or value != default_value:
        return "env"
    return "default"


def _create_table() -> Table:
    """Create a styled table for a config section."""
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("SETTING", style="cyan", min_width=24, no_wrap=True)
    table.add_column("SOURCE", style="dim", min_width=8, no_wrap=True)
    table.add_column("VALUE")
    return table


def config_rows(cfg: SyncConfig) -> list[tuple[str, str, str]]:
    """(setting, source, value) rows for the process configuration."""
    default_config = SyncConfig()
    rows = []
    for field_name, env_key in CONFIG_ENV_KEYS.items():
        value = getattr(cfg, field_name)
        source = _get_source(env_key, value, getattr(default_config, field_name))
        rows.append((field_name, source, str(value)))
    return rows


def settings_rows(settings: SyncSettings) -> list[tuple[str, str]]:
    """(setting, value) rows for the settings blob, with the key redacted."""
    private_key = "[green]set[/green]" if settings.sa_private_key else "[dim]None[/dim]"
    return [
        ("calendar_id", settings.calendar_id),
        ("sa_client_email", settings.sa_client_email or "[dim]None[/dim]"),
        ("sa_private_key", private_key),
        ("sa_key_file", settings.sa_key_file or "[dim]None[/dim]"),
        ("daily_folder", settings.daily_folder or "[dim]None[/dim]"),
        ("daily_filename_format", settings.daily_filename_format),
        ("schedule_heading", settings.schedule_heading),
        ("default_duration_minutes", str(settings.default_duration_minutes)),
        ("time_zone", settings.time_zone),
        ("vault_name", settings.vault_name or "[dim]None[/dim]"),
        ("auto_sync_on_modify", str(settings.auto_sync_on_modify)),
        ("event_map", f"{len(settings.event_map)} mapped events"),
    ]


def config_command() -> None:
    """Display configuration file path and settings."""
    ctx = get_context()
    cfg = ctx.config

    env_file = _find_env_file()
    console.print(f"\n[bold].env file:[/bold] {env_file or '[dim]not found[/dim]'}")

    console.print("\n[bold cyan]Configuration[/bold cyan]")
    table = _create_table()
    for name, source, value in config_rows(cfg):
        table.add_row(name, source, value)
    console.print(table)

    console.print(f"\n[bold cyan]Settings[/bold cyan] ({ctx.store.path.resolve()})")
    try:
        settings = ctx.load_settings()
    except PersistenceError as e:
        SummaryRenderer().render_error(str(e))
        raise typer.Exit(1)

    settings_table = Table(show_header=False, box=None, padding=(0, 2))
    settings_table.add_column("SETTING", style="cyan", min_width=24, no_wrap=True)
    settings_table.add_column("VALUE")
    for name, value in settings_rows(settings):
        settings_table.add_row(name, value)
    console.print(settings_table)


config = config_command
