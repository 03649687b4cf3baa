"""Typer application and command routing."""

import logging

import typer
from typing_extensions import Annotated

from schedule_gcal_cli import setup_logging
from schedule_gcal_cli.commands import (
    config_command,
    init_command,
    show_command,
    sync_all_command,
    sync_command,
    watch_command,
)
from schedule_gcal_cli.context import CLIContext, set_context

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Sync the schedule section of daily notes to Google Calendar.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show info-level log output")
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Only show errors")
    ] = False,
) -> None:
    """Set up logging and the shared CLI context."""
    ctx = CLIContext(verbose=verbose, quiet=quiet)
    setup_logging(verbose=verbose, quiet=quiet, config=ctx.config)
    set_context(ctx)


app.command("init")(init_command)
app.command("sync")(sync_command)
app.command("sync-all")(sync_all_command)
app.command("show")(show_command)
app.command("watch")(watch_command)
app.command("config")(config_command)
