"""Pydantic models for schedule sync."""

from schedule_gcal.models.entry import (
    ScheduleEntry,
    event_key_prefix,
    make_event_key,
    strip_checkbox,
)
from schedule_gcal.models.remote import EventTime, RemoteEvent
from schedule_gcal.models.settings import SyncSettings
from schedule_gcal.models.summary import BulkSyncSummary, SyncState, SyncSummary

__all__ = [
    "ScheduleEntry",
    "event_key_prefix",
    "make_event_key",
    "strip_checkbox",
    "EventTime",
    "RemoteEvent",
    "SyncSettings",
    "BulkSyncSummary",
    "SyncState",
    "SyncSummary",
]
