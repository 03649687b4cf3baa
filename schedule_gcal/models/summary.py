"""Sync cycle states and result summaries."""

from enum import Enum

from pydantic import BaseModel, Field


class SyncState(str, Enum):
    """States of one (document, date) sync cycle."""

    IDLE = "Idle"
    PARSING = "Parsing"
    AUTHENTICATING = "Authenticating"
    INDEXING = "Indexing"
    SYNCING = "Syncing"
    DONE = "Done"
    ERROR = "Error"


class SyncSummary(BaseModel):
    """Outcome of syncing one daily note."""

    date: str
    path: str | None = None
    entries_synced: int = 0
    events_removed: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.failed == 0


class BulkSyncSummary(BaseModel):
    """Totals over a sync-all run."""

    documents_processed: int = 0
    entries_synced: int = 0
    events_removed: int = 0
    failed: int = 0
    summaries: list[SyncSummary] = Field(default_factory=list)

    def add(self, summary: SyncSummary) -> None:
        """Fold one per-document summary into the totals."""
        self.summaries.append(summary)
        self.documents_processed += 1
        self.entries_synced += summary.entries_synced
        self.events_removed += summary.events_removed
        self.failed += summary.failed
