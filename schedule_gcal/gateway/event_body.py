"""Build calendar API event bodies from schedule entries (no I/O)."""

from datetime import date, datetime, time, timedelta
from urllib.parse import quote

from schedule_gcal.constants import EVENT_DESCRIPTION_NOTE, EVENT_KEY_MARKER
from schedule_gcal.models.entry import ScheduleEntry

LOCAL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:00"


def build_note_link(path: str, vault_name: str | None = None) -> str:
    """Link back to the daily note: an obsidian:// URI when the vault is named."""
    if vault_name:
        return (
            f"obsidian://open?vault={quote(vault_name, safe='')}"
            f"&file={quote(path, safe='')}"
        )
    return path


def build_description(key: str, note_link: str | None = None) -> str:
    """Human readable note plus a machine readable ``Key:`` line."""
    note = f"{EVENT_DESCRIPTION_NOTE}: {note_link}" if note_link else EVENT_DESCRIPTION_NOTE
    return f"{note}\n{EVENT_KEY_MARKER} {key}"


def _clock(value: str) -> time:
    hours, minutes = (int(part) for part in value.split(":", 1))
    return time(hours, minutes)


def build_event_body(
    entry: ScheduleEntry,
    day: date,
    *,
    key: str,
    time_zone: str,
    default_duration_minutes: int,
    note_link: str | None = None,
) -> dict:
    """
    Event resource for ``entry`` on ``day``.

    Entries without a start time (explicit all-day or plain titles) become
    all-day events spanning [day, day + 1). Timed entries get local wall
    clock date-times in ``time_zone``; a missing end is start plus the
    default duration, and an end that isn't after the start rolls over to
    the next day.
    """
    body = {
        "summary": entry.title,
        "description": build_description(key, note_link),
    }

    if not entry.is_timed:
        body["start"] = {"date": day.isoformat()}
        body["end"] = {"date": (day + timedelta(days=1)).isoformat()}
        return body

    start_dt = datetime.combine(day, _clock(entry.start))
    if entry.end is not None:
        end_dt = datetime.combine(day, _clock(entry.end))
        if end_dt <= start_dt:
            end_dt += timedelta(days=1)
    else:
        end_dt = start_dt + timedelta(minutes=default_duration_minutes)

    body["start"] = {
        "dateTime": start_dt.strftime(LOCAL_DATETIME_FORMAT),
        "timeZone": time_zone,
    }
    body["end"] = {
        "dateTime": end_dt.strftime(LOCAL_DATETIME_FORMAT),
        "timeZone": time_zone,
    }
    return body
