"""Create a default settings file."""

import logging

import typer

from schedule_gcal.exceptions import PersistenceError
from schedule_gcal_cli.context import get_context
from schedule_gcal_cli.display import SummaryRenderer, console

logger = logging.getLogger(__name__)


def init_command() -> None:
    """Write a default settings file if none exists."""
    ctx = get_context()
    store = ctx.store
    renderer = SummaryRenderer()

    try:
        created = store.init()
    except PersistenceError as e:
        logger.error(str(e))
        renderer.render_error(str(e))
        raise typer.Exit(1)

    if created:
        logger.info(f"Created settings at {store.path}")
        renderer.render_success(
            "Settings created",
            f"{store.path.resolve()} (add the service account and calendar id)",
        )
    else:
        console.print(f"Settings already exist at {store.path.resolve()}")


init = init_command
