"""CLI commands package."""

from schedule_gcal_cli.commands.config import config_command
from schedule_gcal_cli.commands.init import init_command
from schedule_gcal_cli.commands.show import show_command
from schedule_gcal_cli.commands.sync import sync_all_command, sync_command
from schedule_gcal_cli.commands.watch import watch_command

__all__ = [
    "config_command",
    "init_command",
    "show_command",
    "sync_all_command",
    "sync_command",
    "watch_command",
]
