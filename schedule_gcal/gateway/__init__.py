"""Calendar REST gateway and event body construction."""

from schedule_gcal.gateway.calendar_gateway import CalendarGateway
from schedule_gcal.gateway.event_body import (
    build_description,
    build_event_body,
    build_note_link,
)

__all__ = [
    "CalendarGateway",
    "build_description",
    "build_event_body",
    "build_note_link",
]
