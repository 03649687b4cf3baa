"""Reconcile one day's schedule with the remote calendar.

Two sources of truth are merged: the Local Sync Map in the settings blob
(what this tool believes it created) and the ``Key:`` markers embedded in
remote event descriptions (what the calendar says it has). The local map
wins when both know a key; a key only the calendar knows is backfilled.

A cycle moves Idle → Parsing → Authenticating → Indexing → Syncing → Done,
or to Error from any step. Work inside a cycle is strictly sequential.
"""

import logging
from datetime import date
from typing import Callable

from schedule_gcal.exceptions import AuthError, GatewayError, PersistenceError
from schedule_gcal.gateway.calendar_gateway import GONE_STATUS_CODES, CalendarGateway
from schedule_gcal.gateway.event_body import build_event_body
from schedule_gcal.models.entry import ScheduleEntry, event_key_prefix
from schedule_gcal.models.remote import RemoteEvent
from schedule_gcal.models.settings import SyncSettings
from schedule_gcal.models.summary import SyncState, SyncSummary
from schedule_gcal.schedule_parser import parse_schedule
from schedule_gcal.storage.settings_store import SettingsStore

logger = logging.getLogger(__name__)

StateCallback = Callable[[SyncState], None]


def build_remote_key_map(events: list[RemoteEvent], day: date) -> dict[str, str]:
    """Map embedded event keys of ``day`` to remote ids (first occurrence wins)."""
    prefix = event_key_prefix(day)
    remote_map: dict[str, str] = {}
    for event in events:
        key = event.event_key
        if not key or not key.startswith(prefix):
            continue
        if key in remote_map:
            logger.debug(f"Duplicate remote event for {key!r}: {event.id}")
            continue
        remote_map[key] = event.id
    return remote_map


class Reconciler:
    """Drive create/patch/delete calls for one day and keep the sync map current."""

    def __init__(
        self,
        gateway: CalendarGateway,
        settings: SyncSettings,
        store: SettingsStore,
        on_state: StateCallback | None = None,
    ):
        self.gateway = gateway
        self.settings = settings
        self.store = store
        self._on_state = on_state
        self.state = SyncState.IDLE

    def _transition(self, state: SyncState) -> None:
        logger.debug(f"Sync state: {self.state.value} -> {state.value}")
        self.state = state
        if self._on_state is not None:
            self._on_state(state)

    async def sync_day(
        self,
        text: str,
        day: date,
        *,
        path: str | None = None,
        note_link: str | None = None,
    ) -> SyncSummary:
        """
        Sync the schedule section of ``text`` to the calendar for ``day``.

        Args:
            text: Full daily note text
            day: Calendar date the note describes
            path: Document path, for reporting
            note_link: Link embedded in event descriptions

        Returns:
            SyncSummary with counts of synced entries, removed events and failures

        Raises:
            AuthError: Authentication failed; no mutation happened if it failed
                before Syncing, otherwise completed work has been persisted
            PersistenceError: The sync map could not be saved
        """
        summary = SyncSummary(date=day.isoformat(), path=path)
        calendar_id = self.settings.calendar_id

        # ─────────────────────────────────────────────────────────────────────
        # Parse
        # ─────────────────────────────────────────────────────────────────────
        self._transition(SyncState.PARSING)
        entries = parse_schedule(text, self.settings.schedule_heading)
        keyed = [(entry.key(day), entry) for entry in entries]
        current_keys = {key for key, _ in keyed}
        logger.info(f"Parsed {len(entries)} schedule entries for {day}")

        # ─────────────────────────────────────────────────────────────────────
        # Authenticate
        # ─────────────────────────────────────────────────────────────────────
        self._transition(SyncState.AUTHENTICATING)
        try:
            await self.gateway.authenticate()
        except AuthError:
            self._transition(SyncState.ERROR)
            raise

        # ─────────────────────────────────────────────────────────────────────
        # Index remote events (degrades to an empty index on failure)
        # ─────────────────────────────────────────────────────────────────────
        self._transition(SyncState.INDEXING)
        try:
            remote_events = await self.gateway.list_for_date(calendar_id, day)
        except GatewayError as e:
            logger.warning(f"Listing events for {day} failed, continuing without: {e}")
            remote_events = []
        except AuthError:
            self._transition(SyncState.ERROR)
            raise
        remote_map = build_remote_key_map(remote_events, day)

        # ─────────────────────────────────────────────────────────────────────
        # Create / patch current entries, then remove stale events
        # ─────────────────────────────────────────────────────────────────────
        self._transition(SyncState.SYNCING)
        try:
            for key, entry in keyed:
                await self._sync_entry(key, entry, day, remote_map, note_link, summary)
            await self._remove_stale(day, current_keys, remote_map, summary)
        except AuthError:
            self._transition(SyncState.ERROR)
            self._persist_after_failure()
            raise

        # ─────────────────────────────────────────────────────────────────────
        # Persist
        # ─────────────────────────────────────────────────────────────────────
        try:
            self.store.save(self.settings)
        except PersistenceError:
            self._transition(SyncState.ERROR)
            raise

        self._transition(SyncState.DONE)
        logger.info(
            f"Synced {summary.entries_synced} entries for {day}, "
            f"removed {summary.events_removed}, {summary.failed} failed"
        )
        return summary

    async def _sync_entry(
        self,
        key: str,
        entry: ScheduleEntry,
        day: date,
        remote_map: dict[str, str],
        note_link: str | None,
        summary: SyncSummary,
    ) -> None:
        event_map = self.settings.event_map
        calendar_id = self.settings.calendar_id

        existing_id = event_map.get(key)
        if existing_id is None and key in remote_map:
            existing_id = remote_map[key]
            event_map[key] = existing_id
            logger.info(f"Recovered mapping for {key!r} from calendar: {existing_id}")

        body = build_event_body(
            entry,
            day,
            key=key,
            time_zone=self.settings.time_zone,
            default_duration_minutes=self.settings.default_duration_minutes,
            note_link=note_link,
        )

        try:
            if existing_id is not None:
                try:
                    event = await self.gateway.patch(calendar_id, existing_id, body)
                except GatewayError as e:
                    if e.status_code not in GONE_STATUS_CODES:
                        raise
                    logger.info(f"Event {existing_id} for {key!r} is gone; recreating")
                    event_map.pop(key, None)
                    event = await self.gateway.create(calendar_id, body)
            else:
                event = await self.gateway.create(calendar_id, body)
        except GatewayError as e:
            logger.error(f"Event sync error for {key!r}: {e}")
            summary.failed += 1
            summary.errors.append(f"{entry.title}: {e}")
            return

        event_map[key] = event.id
        summary.entries_synced += 1

    async def _remove_stale(
        self,
        day: date,
        current_keys: set[str],
        remote_map: dict[str, str],
        summary: SyncSummary,
    ) -> None:
        event_map = self.settings.event_map
        calendar_id = self.settings.calendar_id
        prefix = event_key_prefix(day)

        local_keys = {key for key in event_map if key.startswith(prefix)}
        stale_keys = (local_keys | set(remote_map)) - current_keys

        for key in sorted(stale_keys):
            event_ids = []
            for event_id in (event_map.get(key), remote_map.get(key)):
                if event_id is not None and event_id not in event_ids:
                    event_ids.append(event_id)

            try:
                for event_id in event_ids:
                    await self.gateway.delete(calendar_id, event_id)
            except GatewayError as e:
                logger.error(f"Delete event failed for {key!r}: {e}")
                summary.failed += 1
                summary.errors.append(f"delete {key}: {e}")
                continue

            event_map.pop(key, None)
            summary.events_removed += 1

    def _persist_after_failure(self) -> None:
        try:
            self.store.save(self.settings)
        except PersistenceError as e:
            logger.error(f"Could not save sync map after failed cycle: {e}")
