"""Sync daily note schedules to Google Calendar."""

import logging

import typer
from typing_extensions import Annotated

from schedule_gcal.models.summary import BulkSyncSummary, SyncSummary
from schedule_gcal_cli.context import get_context
from schedule_gcal_cli.display import SummaryRenderer, console
from schedule_gcal_cli.utils import parse_date_option, run_or_exit

logger = logging.getLogger(__name__)

STATUS_PREFIX = "Schedule→GCal"


def sync_command(
    path: Annotated[
        str | None,
        typer.Argument(help="Vault-relative note path (default: today's daily note)"),
    ] = None,
    date_str: Annotated[
        str | None,
        typer.Option(
            "--date", "-d", help="Date to sync as YYYY-MM-DD (default: from filename)"
        ),
    ] = None,
) -> None:
    """Sync one daily note's schedule section to Google Calendar."""
    ctx = get_context()
    renderer = SummaryRenderer()
    day = parse_date_option(date_str)

    async def _run() -> SyncSummary | None:
        with console.status(f"{STATUS_PREFIX}: Idle") as status:
            service = ctx.build_service(
                on_state=lambda state: status.update(f"{STATUS_PREFIX}: {state.value}…")
            )
            async with service:
                if path is None:
                    return await service.sync_today()
                target_day = day or service.date_for_path(path)
                if target_day is None:
                    raise typer.BadParameter(
                        f"Cannot derive a date from {path!r}; pass --date"
                    )
                return await service.sync_one(path, target_day)

    summary = run_or_exit(_run())
    if summary is None:
        console.print("No daily note for today")
        return
    renderer.render_sync_summary(summary)
    if summary.failed:
        raise typer.Exit(1)


def sync_all_command() -> None:
    """Sync the schedule sections of all daily notes in the configured folder."""
    ctx = get_context()
    renderer = SummaryRenderer()

    async def _run() -> BulkSyncSummary:
        with console.status(f"{STATUS_PREFIX}: Idle") as status:
            service = ctx.build_service(
                on_state=lambda state: status.update(f"{STATUS_PREFIX}: {state.value}…")
            )
            async with service:
                return await service.sync_all()

    renderer.render_header("Syncing", "all daily notes")
    bulk = run_or_exit(_run())
    renderer.render_bulk_summary(bulk)
    if bulk.failed:
        raise typer.Exit(1)


# Aliases for CLI registration
sync = sync_command
sync_all = sync_all_command
