"""Extract schedule entries and a change fingerprint from daily note text.

The grammar is deliberately small: find the schedule heading, then look at
list items until the next heading of the same or a shallower level.
Anything that isn't a list item is ignored, and malformed items degrade to
plain titled entries rather than raising.
"""

import re
from typing import Iterator, List, Optional

from schedule_gcal.models.entry import ScheduleEntry, strip_checkbox

# --- Patterns ----------------------------------------------------------------

HEADING_PATTERN = re.compile(r"^\s{0,3}(#{1,6})\s+(.*)$")
LIST_ITEM_PATTERN = re.compile(r"^\s*[-*+]\s+(.*)$")

TIME_RANGE_PATTERN = re.compile(r"^(\d{1,2}:\d{2})\s*-\s*(\d{1,2}:\d{2})\s+(.+)$")
TIME_START_PATTERN = re.compile(r"^(\d{1,2}:\d{2})\s+(.+)$")
ALL_DAY_PATTERN = re.compile(r"^all-?day\s*[:-]?\s*(.+)$", re.IGNORECASE)

_WHITESPACE = re.compile(r"\s+")

# --- Helper Functions --------------------------------------------------------


def fix_time(value: str) -> str:
    """
    Normalize an "H:MM" / "HH:MM" string to zero-padded "HH:MM".
    Hours wrap modulo 24 and minutes modulo 60, so "25:70" becomes "01:10".
    """
    hours, minutes = (int(part) for part in value.split(":", 1))
    return f"{hours % 24:02d}:{minutes % 60:02d}"


def _heading_match(line: str) -> Optional[tuple[int, str]]:
    """Return (level, text) if ``line`` is an ATX heading."""
    m = HEADING_PATTERN.match(line)
    if not m:
        return None
    return len(m.group(1)), m.group(2).strip()


def find_section(lines: List[str], heading: str) -> Optional[tuple[int, int]]:
    """
    Locate the body of the first heading whose text matches ``heading``.

    Matching is on trimmed, case-insensitive text. The body runs from the
    line after the heading up to (not including) the next heading of equal
    or shallower level, or to the end of the text.

    Returns:
        Half-open (start, end) line index range, or None if the heading is absent
    """
    wanted = heading.strip().lower()
    for idx, line in enumerate(lines):
        found = _heading_match(line)
        if found is None or found[1].lower() != wanted:
            continue
        level = found[0]
        for end in range(idx + 1, len(lines)):
            nested = _heading_match(lines[end])
            if nested is not None and nested[0] <= level:
                return idx + 1, end
        return idx + 1, len(lines)
    return None


def iter_section_items(text: str, heading: str) -> Iterator[str]:
    """Yield the trimmed text of each list item in the schedule section."""
    lines = text.splitlines()
    bounds = find_section(lines, heading)
    if bounds is None:
        return
    start, end = bounds
    for line in lines[start:end]:
        m = LIST_ITEM_PATTERN.match(line)
        if not m:
            continue
        item = m.group(1).strip()
        if item:
            yield item


def parse_schedule_line(text: str) -> Optional[ScheduleEntry]:
    """
    Classify one list item. First match wins:

    1. "HH:MM - HH:MM Title"  timed, both bounds
    2. "HH:MM Title"          timed, open end
    3. "all-day: Title"       all-day
    4. anything else          title only, no time

    Returns None for items that are empty once the checkbox is removed.
    """
    normalized = strip_checkbox(text).strip()
    if not normalized:
        return None

    m = TIME_RANGE_PATTERN.match(normalized)
    if m:
        return ScheduleEntry(
            raw_line=text,
            title=m.group(3).strip(),
            start=fix_time(m.group(1)),
            end=fix_time(m.group(2)),
        )

    m = TIME_START_PATTERN.match(normalized)
    if m:
        return ScheduleEntry(
            raw_line=text, title=m.group(2).strip(), start=fix_time(m.group(1))
        )

    m = ALL_DAY_PATTERN.match(normalized)
    if m:
        return ScheduleEntry(raw_line=text, title=m.group(1).strip(), all_day=True)

    return ScheduleEntry(raw_line=text, title=normalized)


# --- Main Parsing Routines ---------------------------------------------------


def parse_schedule(text: str, heading: str) -> List[ScheduleEntry]:
    """
    Parse the schedule section of a daily note into entries, in document order.
    A missing heading yields an empty list.
    """
    entries = []
    for item in iter_section_items(text, heading):
        entry = parse_schedule_line(item)
        if entry is not None:
            entries.append(entry)
    return entries


def extract_schedule_normalized(text: str, heading: str) -> str:
    """
    Build the change-detection fingerprint of the schedule section.

    Each list item has its checkbox removed and internal whitespace collapsed;
    the results are joined with newlines. Computed from the raw items rather
    than from parsed entries so classification never affects the fingerprint.
    """
    collected = []
    for item in iter_section_items(text, heading):
        cleaned = _WHITESPACE.sub(" ", strip_checkbox(item)).strip()
        collected.append(cleaned)
    return "\n".join(collected)
