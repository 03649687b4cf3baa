"""Schedule entry model and event key derivation."""

import re
from datetime import date

from pydantic import BaseModel, field_validator

from schedule_gcal.constants import EVENT_KEY_SEPARATOR

# Leading task-list checkbox: "[ ]", "[x]" or "[X]". A bare marker with
# nothing after it also matches, so "- [ ]" alone is an empty item.
CHECKBOX_PATTERN = re.compile(r"^\s*\[(?: |x|X)\](?:\s+|$)")


def strip_checkbox(text: str) -> str:
    """Remove a leading checkbox marker, if any."""
    return CHECKBOX_PATTERN.sub("", text, count=1)


def event_key_prefix(day: date | str) -> str:
    """Key prefix shared by every event key of one day."""
    day_str = day.isoformat() if isinstance(day, date) else day
    return f"{day_str}{EVENT_KEY_SEPARATOR}"


def make_event_key(day: date | str, raw_line: str) -> str:
    """Build the sync identity of a schedule line on a given day.

    The checkbox marker is ignored and surrounding whitespace trimmed;
    everything else, including case, is kept exactly as written.
    """
    return f"{event_key_prefix(day)}{strip_checkbox(raw_line).strip()}"


class ScheduleEntry(BaseModel):
    """One calendar-worthy list item found under the schedule heading."""

    raw_line: str
    title: str
    start: str | None = None  # HH:MM
    end: str | None = None  # HH:MM
    all_day: bool = False

    @field_validator("raw_line")
    @classmethod
    def require_raw_line(cls, v: str) -> str:
        """Entries always originate from a non-empty line."""
        if not v.strip():
            raise ValueError("raw_line must not be empty")
        return v

    @property
    def is_timed(self) -> bool:
        """True when the entry becomes a date-time event."""
        return not self.all_day and self.start is not None

    def key(self, day: date | str) -> str:
        """Event key of this entry on ``day``."""
        return make_event_key(day, self.raw_line)
