"""CLI utilities for running sync coroutines and reporting failures."""

import asyncio
import logging
from datetime import date, datetime
from typing import Awaitable, TypeVar

import typer

from schedule_gcal.exceptions import (
    AuthError,
    ConfigurationError,
    DocumentNotFoundError,
    PersistenceError,
    ScheduleSyncError,
)
from schedule_gcal_cli.display import SummaryRenderer

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_or_exit(awaitable: Awaitable[T]) -> T:
    """
    Run a coroutine to completion, turning sync errors into exit code 1.

    Args:
        awaitable: Coroutine to run on a fresh event loop

    Returns:
        The coroutine's result
    """
    renderer = SummaryRenderer()
    try:
        return asyncio.run(awaitable)
    except AuthError as e:
        logger.error(f"Authentication failed: {e}")
        renderer.render_error("Google auth failed: check service account settings")
    except ConfigurationError as e:
        logger.error(str(e))
        renderer.render_error(f"Configuration error: {e}")
    except PersistenceError as e:
        logger.error(f"Persistence error: {e}")
        renderer.render_error(
            f"Could not save the sync map ({e}); the next run may create duplicates"
        )
    except DocumentNotFoundError as e:
        logger.error(str(e))
        renderer.render_error(str(e))
    except ScheduleSyncError as e:
        logger.error(f"Sync error: {e}")
        renderer.render_error(f"Sync failed: {e}")
    raise typer.Exit(1)


def parse_date_option(value: str | None) -> date | None:
    """Parse a YYYY-MM-DD option value."""
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise typer.BadParameter("Invalid date format. Use YYYY-MM-DD")
