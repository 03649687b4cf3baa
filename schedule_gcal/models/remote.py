"""Remote calendar event representation."""

import re

from pydantic import BaseModel, ConfigDict, Field

from schedule_gcal.constants import EVENT_KEY_MARKER

_KEY_LINE = re.compile(rf"^\s*{re.escape(EVENT_KEY_MARKER)}\s*(.+?)\s*$", re.MULTILINE)


class EventTime(BaseModel):
    """Start or end of an event: either ``date`` or ``dateTime`` + ``timeZone``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    date: str | None = None
    date_time: str | None = Field(default=None, alias="dateTime")
    time_zone: str | None = Field(default=None, alias="timeZone")


class RemoteEvent(BaseModel):
    """Event as returned by the calendar API (only the fields we use)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    summary: str | None = None
    description: str | None = None
    status: str | None = None
    start: EventTime | None = None
    end: EventTime | None = None

    @property
    def event_key(self) -> str | None:
        """Event key embedded in the description, if any."""
        if not self.description:
            return None
        match = _KEY_LINE.search(self.description)
        return match.group(1) if match else None

    @property
    def is_cancelled(self) -> bool:
        return self.status == "cancelled"
