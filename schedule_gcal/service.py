"""Host-facing sync service: sync one note, today's note, or all daily notes."""

import logging
from datetime import date, datetime
from pathlib import PurePosixPath

import httpx

from schedule_gcal.auth.credential_broker import CredentialBroker, TokenCache
from schedule_gcal.change_detector import ChangeDetector
from schedule_gcal.config import SyncConfig
from schedule_gcal.constants import DOCUMENT_EXTENSION
from schedule_gcal.exceptions import DocumentNotFoundError
from schedule_gcal.gateway.calendar_gateway import CalendarGateway
from schedule_gcal.gateway.event_body import build_note_link
from schedule_gcal.models.summary import BulkSyncSummary, SyncSummary
from schedule_gcal.processing.reconciler import Reconciler, StateCallback
from schedule_gcal.storage.settings_store import SettingsStore
from schedule_gcal.storage.vault import FileSystemVault

logger = logging.getLogger(__name__)


def date_from_filename(path: str, filename_format: str) -> date | None:
    """Date encoded in a daily note's filename, or None if it doesn't match."""
    name = PurePosixPath(path).name
    base = name[: -len(DOCUMENT_EXTENSION)] if name.endswith(DOCUMENT_EXTENSION) else name
    try:
        parsed = datetime.strptime(base, filename_format)
    except ValueError:
        return None
    # Strict: the name must be exactly what the format produces
    if parsed.strftime(filename_format) != base:
        return None
    return parsed.date()


class ScheduleSyncService:
    """Entry point used by the CLI (or any other host).

    Owns the process-scoped state: the HTTP client, the access token
    cache and the change detector's last-digest table. Days are synced one
    after another, never concurrently.

    Usage:
        async with ScheduleSyncService(store, vault) as service:
            summary = await service.sync_one("Daily/2025-01-06.md", date(2025, 1, 6))
    """

    def __init__(
        self,
        store: SettingsStore,
        vault: FileSystemVault,
        *,
        config: SyncConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        token_cache: TokenCache | None = None,
        on_state: StateCallback | None = None,
    ):
        self.config = config or SyncConfig()
        self.store = store
        self.vault = vault
        self.settings = store.load()
        self.change_detector = ChangeDetector(self.settings.schedule_heading)
        self._on_state = on_state

        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=self.config.http_timeout_seconds
        )
        self.broker = CredentialBroker(
            self._http_client, token_url=self.config.token_url, cache=token_cache
        )
        self._gateway: CalendarGateway | None = None

    async def __aenter__(self) -> "ScheduleSyncService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http_client.aclose()

    @property
    def gateway(self) -> CalendarGateway:
        """Calendar gateway for the configured service account (lazy-loaded).

        Raises:
            ConfigurationError: If no service account is configured
        """
        if self._gateway is None:
            email, private_key = self.settings.service_account(base_dir=self.vault.root)
            self._gateway = CalendarGateway(
                self.broker,
                email,
                private_key,
                http_client=self._http_client,
                api_base_url=self.config.api_base_url,
            )
        return self._gateway

    # ─────────────────────────────────────────────────────────────────────────
    # Daily note helpers
    # ─────────────────────────────────────────────────────────────────────────

    def date_for_path(self, path: str) -> date | None:
        """Date encoded in a daily note's filename, or None if it doesn't match."""
        return date_from_filename(path, self.settings.daily_filename_format)

    def daily_note_path(self, day: date) -> str:
        """Vault path of the daily note for ``day``."""
        name = day.strftime(self.settings.daily_filename_format)
        if not name.endswith(DOCUMENT_EXTENSION):
            name += DOCUMENT_EXTENSION
        folder = self.settings.daily_folder
        return f"{folder}/{name}" if folder else name

    def is_in_daily_folder(self, path: str) -> bool:
        folder = self.settings.daily_folder
        if not folder:
            return False
        return path.strip("/").startswith(folder + "/")

    def daily_documents(self) -> list[str]:
        folder = self.settings.daily_folder
        if not folder:
            return []
        return self.vault.list_documents(folder)

    # ─────────────────────────────────────────────────────────────────────────
    # Sync operations
    # ─────────────────────────────────────────────────────────────────────────

    async def sync_one(self, path: str, day: date) -> SyncSummary:
        """
        Sync one document's schedule for ``day``.

        The document's schedule digest is recorded before syncing, whether
        or not the sync succeeds, so a failing note doesn't re-trigger
        auto-sync on every modification.

        Raises:
            DocumentNotFoundError: If the document doesn't exist
            ConfigurationError: If no service account is configured
            AuthError: If authentication fails
            PersistenceError: If the sync map can't be saved
        """
        text = self.vault.read_document(path)
        self.change_detector.record_text(path, text)

        reconciler = Reconciler(
            self.gateway, self.settings, self.store, on_state=self._on_state
        )
        return await reconciler.sync_day(
            text,
            day,
            path=path,
            note_link=build_note_link(path, self.settings.vault_name),
        )

    async def sync_today(self) -> SyncSummary | None:
        """Sync today's daily note; None if it doesn't exist."""
        today = self.vault.now().date()
        path = self.daily_note_path(today)
        if not self.vault.exists(path):
            logger.info(f"No daily note for today at {path}")
            return None
        return await self.sync_one(path, today)

    async def sync_all(self) -> BulkSyncSummary:
        """
        Sync every daily note, one at a time.

        Notes whose filename doesn't parse as a date are skipped. An
        authentication or configuration failure stops the whole run.
        """
        bulk = BulkSyncSummary()
        for path in self.daily_documents():
            day = self.date_for_path(path)
            if day is None:
                logger.debug(f"Skipping {path}: filename is not a date")
                continue
            try:
                summary = await self.sync_one(path, day)
            except DocumentNotFoundError as e:
                logger.warning(str(e))
                continue
            bulk.add(summary)
        logger.info(
            f"Processed {bulk.documents_processed} daily notes: "
            f"{bulk.entries_synced} entries synced, {bulk.events_removed} removed"
        )
        return bulk

    async def handle_modified(self, path: str) -> SyncSummary | None:
        """
        Auto-sync hook for a modified document.

        Returns None when auto-sync doesn't apply to ``path``, a skipped
        summary when the schedule section is unchanged, otherwise the
        result of ``sync_one``.
        """
        if not self.settings.auto_sync_on_modify:
            return None
        if not self.is_in_daily_folder(path):
            return None
        day = self.date_for_path(path)
        if day is None:
            return None

        text = self.vault.read_document(path)
        if not self.change_detector.has_changed(path, text):
            return SyncSummary(date=day.isoformat(), path=path, skipped=True)
        return await self.sync_one(path, day)

    def prime(self) -> int:
        """Record schedule digests of all daily notes without syncing them."""
        primed = 0
        for path in self.daily_documents():
            try:
                self.change_detector.record_text(path, self.vault.read_document(path))
            except (DocumentNotFoundError, OSError, UnicodeDecodeError) as e:
                logger.debug(f"Failed to prime schedule digest for {path}: {e}")
                continue
            primed += 1
        return primed
