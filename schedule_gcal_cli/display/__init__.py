"""Display module for rendering CLI output.

This module provides:
- console: Shared Rich console instance
- SummaryRenderer: Sync results and bulk totals
- EntryRenderer: Parsed schedule entries
"""

from schedule_gcal_cli.display.console import console
from schedule_gcal_cli.display.entry_renderer import EntryRenderer
from schedule_gcal_cli.display.summary_renderer import SummaryRenderer

__all__ = [
    "console",
    "EntryRenderer",
    "SummaryRenderer",
]
