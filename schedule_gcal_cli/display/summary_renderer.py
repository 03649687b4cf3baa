"""Summary renderer for sync results."""

from rich.markup import escape

from schedule_gcal.models.summary import BulkSyncSummary, SyncSummary
from schedule_gcal_cli.display.console import console


def _plural_entries(count: int) -> str:
    return f"{count} schedule entr{'y' if count == 1 else 'ies'}"


class SummaryRenderer:
    """Render sync results.

    Used by the sync, sync-all and watch commands to display:
    - Command headers
    - Per-note sync results with failures
    - Bulk totals
    """

    def render_header(self, title: str, subject: str) -> None:
        """Render a styled header for a command.

        Args:
            title: Command title (e.g., "Syncing").
            subject: What is being processed (a note path, "all daily notes").
        """
        console.print()
        console.print("━" * 40)
        console.print(f"[bold]  {title}: {subject}[/bold]")
        console.print("━" * 40)

    def sync_message(self, summary: SyncSummary) -> str | None:
        """One-line description of a sync result, or None if nothing happened."""
        if summary.skipped:
            return f"Schedule unchanged for {summary.date}"
        if summary.entries_synced:
            message = f"Synced {_plural_entries(summary.entries_synced)} for {summary.date}"
            if summary.events_removed:
                message += f", removed {summary.events_removed}"
            return message
        if summary.events_removed:
            return f"Removed {summary.events_removed} events for {summary.date}"
        if summary.failed:
            return None
        return f"Nothing to sync for {summary.date}"

    def render_sync_summary(self, summary: SyncSummary) -> None:
        """Render the result of syncing one note, including failures."""
        message = self.sync_message(summary)
        if message:
            console.print(f"[ok]✓[/ok] {message}")
        if summary.failed:
            console.print(
                f"[fail]✗[/fail] {summary.failed} operation(s) failed for {summary.date}"
            )
            for error in summary.errors:
                console.print(f"  [red]{escape(error)}[/red]")

    def render_bulk_summary(self, bulk: BulkSyncSummary) -> None:
        """Render totals for a sync-all run."""
        if bulk.documents_processed == 0:
            console.print("No daily notes found")
            return
        for summary in bulk.summaries:
            if summary.failed:
                self.render_sync_summary(summary)
        notes = "note" if bulk.documents_processed == 1 else "notes"
        console.print(
            f"\n[ok]✓[/ok] Processed {bulk.documents_processed} daily {notes}"
        )
        console.print(
            f"  {_plural_entries(bulk.entries_synced)} synced · "
            f"{bulk.events_removed} removed · {bulk.failed} failed"
        )

    def render_error(self, message: str) -> None:
        console.print(f"\n[fail]✗[/fail] {escape(message)}")

    def render_success(self, message: str, detail: str | None = None) -> None:
        """Render a success message with an optional detail line."""
        console.print(f"\n[ok]✓[/ok] {message}")
        if detail:
            console.print(f"  {detail}")
