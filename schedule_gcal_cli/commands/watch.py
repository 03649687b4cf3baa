"""Watch daily notes and auto-sync schedules when they change."""

import asyncio
import logging

import typer
from typing_extensions import Annotated

from schedule_gcal.exceptions import DocumentNotFoundError, ScheduleSyncError
from schedule_gcal.service import ScheduleSyncService
from schedule_gcal_cli.context import get_context
from schedule_gcal_cli.display import SummaryRenderer, console
from schedule_gcal_cli.utils import run_or_exit

logger = logging.getLogger(__name__)


def _snapshot(service: ScheduleSyncService) -> dict[str, float]:
    """Modification times of all daily notes."""
    mtimes = {}
    for path in service.daily_documents():
        try:
            mtimes[path] = service.vault.mtime(path)
        except DocumentNotFoundError:
            continue
    return mtimes


async def watch_loop(
    service: ScheduleSyncService,
    interval: float,
    renderer: SummaryRenderer,
    max_polls: int | None = None,
) -> None:
    """
    Poll daily notes and hand modified ones to ``service.handle_modified``.
    A note whose sync fails is logged and polling carries on.

    Args:
        service: Open sync service
        interval: Seconds between polls
        renderer: Renderer for sync results
        max_polls: Stop after this many polls (None: run until cancelled)
    """
    primed = service.prime()
    logger.info(f"Primed schedule digests for {primed} daily notes")
    known = _snapshot(service)

    polls = 0
    while max_polls is None or polls < max_polls:
        await asyncio.sleep(interval)
        polls += 1
        current = _snapshot(service)
        for path, mtime in current.items():
            if known.get(path) == mtime:
                continue
            try:
                summary = await service.handle_modified(path)
            except ScheduleSyncError as e:
                logger.error(f"Auto-sync modify handler failed for {path}: {e}")
                continue
            if summary is not None and not summary.skipped:
                renderer.render_sync_summary(summary)
        known = current


def watch_command(
    interval: Annotated[
        float | None,
        typer.Option(
            "--interval", "-i", help="Seconds between polls (default: from config)"
        ),
    ] = None,
) -> None:
    """Auto-sync daily notes whose schedule section changes (Ctrl-C to stop)."""
    ctx = get_context()
    renderer = SummaryRenderer()

    settings = ctx.load_settings()
    if not settings.auto_sync_on_modify:
        renderer.render_error(
            "Auto-sync on modify is disabled; set auto_sync_on_modify in the settings"
        )
        raise typer.Exit(1)

    poll_interval = interval or ctx.config.watch_interval_seconds

    async def _run() -> None:
        async with ctx.build_service() as service:
            await watch_loop(service, poll_interval, renderer)

    console.print(
        f"Watching {settings.daily_folder!r} every {poll_interval:g}s (Ctrl-C to stop)"
    )
    try:
        run_or_exit(_run())
    except KeyboardInterrupt:
        console.print("\nStopped")


watch = watch_command
