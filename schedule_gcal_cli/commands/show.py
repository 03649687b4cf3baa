"""Preview the schedule entries parsed from a daily note (no network)."""

import logging

import typer
from typing_extensions import Annotated

from schedule_gcal.change_detector import ChangeDetector
from schedule_gcal.exceptions import DocumentNotFoundError
from schedule_gcal.schedule_parser import parse_schedule
from schedule_gcal.service import date_from_filename
from schedule_gcal_cli.context import get_context
from schedule_gcal_cli.display import EntryRenderer, SummaryRenderer
from schedule_gcal_cli.utils import parse_date_option

logger = logging.getLogger(__name__)


def show_command(
    path: Annotated[
        str,
        typer.Argument(help="Vault-relative note path"),
    ],
    date_str: Annotated[
        str | None,
        typer.Option("--date", "-d", help="Date for event keys (default: from filename)"),
    ] = None,
) -> None:
    """Show parsed schedule entries, their event keys and the schedule digest."""
    ctx = get_context()
    settings = ctx.load_settings()
    vault = ctx.vault

    try:
        text = vault.read_document(path)
    except DocumentNotFoundError as e:
        SummaryRenderer().render_error(str(e))
        raise typer.Exit(1)

    day = parse_date_option(date_str)
    if day is None:
        day = date_from_filename(path, settings.daily_filename_format) or vault.now().date()

    entries = parse_schedule(text, settings.schedule_heading)
    digest = ChangeDetector(settings.schedule_heading).digest(text)
    EntryRenderer().render_entries(path, day, entries, digest)


show = show_command
