"""Table renderer for parsed schedule entries."""

from datetime import date

from rich.markup import escape
from rich.table import Table

from schedule_gcal.models.entry import ScheduleEntry
from schedule_gcal_cli.display.console import console


class EntryRenderer:
    """Render the entries parsed from a daily note."""

    def render_entries(
        self, path: str, day: date, entries: list[ScheduleEntry], digest: str
    ) -> None:
        """Render entries with their source lines, event keys and the schedule digest.

        Args:
            path: Note path (for the header)
            day: Date the note describes
            entries: Parsed schedule entries
            digest: Change-detection digest of the schedule section
        """
        console.print(f"\n[bold]{escape(path)}[/bold] · {day.isoformat()} · digest [digest]{digest}[/digest]")
        if not entries:
            console.print("[muted]No schedule entries[/muted]")
            return

        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("TIME", style="cyan", no_wrap=True)
        table.add_column("TITLE")
        table.add_column("LINE")
        table.add_column("KEY", style="dim")

        for entry in entries:
            if entry.is_timed:
                when = f"{entry.start}–{entry.end}" if entry.end else entry.start
            else:
                when = "all day"
            table.add_row(
                when, escape(entry.title), escape(entry.raw_line), escape(entry.key(day))
            )

        console.print(table)
