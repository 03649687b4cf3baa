"""Cheap change detection for schedule sections.

Auto-sync fires on every document modification; most edits don't touch the
schedule. Comparing a short digest of the normalized schedule section lets
the host skip those without any network calls.
"""

import logging

from schedule_gcal.schedule_parser import extract_schedule_normalized

logger = logging.getLogger(__name__)


def simple_hash(text: str) -> str:
    """
    Rolling multiplicative hash (seed 5381, ``h = (h * 33) ^ c`` mod 2**32).

    Characters are fed as UTF-16 code units so digests match those produced
    by JavaScript-based tools hashing the same text. Not cryptographic.

    Returns:
        8 lowercase hex digits
    """
    value = 5381
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        value = ((value * 33) ^ code_unit) & 0xFFFFFFFF
    return f"{value:08x}"


class ChangeDetector:
    """Remembers the last schedule digest per document path.

    Process-scoped state owned by the sync service. Not safe for
    concurrent cycles; all access happens from one event loop.
    """

    def __init__(self, heading: str):
        self.heading = heading
        self._last_digest: dict[str, str] = {}

    def digest(self, text: str) -> str:
        """Digest of the schedule section of ``text``."""
        return simple_hash(extract_schedule_normalized(text, self.heading))

    def last_digest(self, path: str) -> str | None:
        return self._last_digest.get(path)

    def record(self, path: str, digest: str) -> None:
        """Remember ``digest`` as the last one seen for ``path``."""
        self._last_digest[path] = digest

    def record_text(self, path: str, text: str) -> str:
        """Digest ``text`` and record it for ``path``."""
        digest = self.digest(text)
        self.record(path, digest)
        return digest

    def has_changed(self, path: str, text: str) -> bool:
        """
        Compare ``text`` against the last recorded digest for ``path``.

        Does not record anything; callers record when they attempt a sync.
        """
        digest = self.digest(text)
        changed = self._last_digest.get(path) != digest
        if not changed:
            logger.debug(f"Schedule unchanged for {path} ({digest})")
        return changed

    def forget(self, path: str) -> None:
        self._last_digest.pop(path, None)
