"""Tests for schedule change detection."""

from schedule_gcal.change_detector import ChangeDetector, simple_hash

from conftest import SAMPLE_NOTE


def test_simple_hash_known_values():
    """Test the hash seed and a single-character fold."""
    assert simple_hash("") == "00001505"
    assert simple_hash("a") == "0002b5c4"


def test_simple_hash_format():
    """Test digests are 8 lowercase hex digits and deterministic."""
    digest = simple_hash("09:00 Standup\n14:30 Dentist")
    assert len(digest) == 8
    assert digest == digest.lower()
    int(digest, 16)
    assert digest == simple_hash("09:00 Standup\n14:30 Dentist")
    assert digest != simple_hash("09:00 Standup\n14:31 Dentist")


def test_simple_hash_uses_utf16_code_units():
    """Test characters outside the BMP are folded as two surrogate units."""
    value = 5381
    for unit in (0xD83D, 0xDE00):
        value = ((value * 33) ^ unit) & 0xFFFFFFFF
    assert simple_hash("\U0001F600") == f"{value:08x}"


def test_has_changed_before_anything_recorded():
    """Test an unseen path always counts as changed."""
    detector = ChangeDetector("Schedule")
    assert detector.has_changed("Daily/2025-01-06.md", SAMPLE_NOTE) is True
    assert detector.last_digest("Daily/2025-01-06.md") is None


def test_record_then_unchanged():
    """Test recording a digest makes the same text unchanged."""
    detector = ChangeDetector("Schedule")
    digest = detector.record_text("Daily/2025-01-06.md", SAMPLE_NOTE)

    assert detector.last_digest("Daily/2025-01-06.md") == digest
    assert detector.has_changed("Daily/2025-01-06.md", SAMPLE_NOTE) is False


def test_has_changed_does_not_record():
    """Test checking for changes leaves the stored digest alone."""
    detector = ChangeDetector("Schedule")
    detector.has_changed("a.md", SAMPLE_NOTE)
    assert detector.last_digest("a.md") is None


def test_edits_outside_schedule_are_ignored():
    """Test edits elsewhere in the note don't count as changes."""
    detector = ChangeDetector("Schedule")
    detector.record_text("a.md", SAMPLE_NOTE)

    edited = SAMPLE_NOTE.replace("Some intro text.", "Rewritten intro.")
    edited += "\n- appended under notes\n"
    assert detector.has_changed("a.md", edited) is False


def test_checkbox_toggle_and_spacing_are_ignored():
    """Test ticking a checkbox or reflowing spaces doesn't count."""
    detector = ChangeDetector("Schedule")
    detector.record_text("a.md", SAMPLE_NOTE)

    edited = SAMPLE_NOTE.replace("- [ ] 09:00 - 10:00 Standup", "- [x]  09:00 -  10:00   Standup")
    assert detector.has_changed("a.md", edited) is False


def test_schedule_edit_is_detected():
    """Test changing a schedule line counts as a change."""
    detector = ChangeDetector("Schedule")
    detector.record_text("a.md", SAMPLE_NOTE)

    edited = SAMPLE_NOTE.replace("14:30 Dentist", "15:00 Dentist")
    assert detector.has_changed("a.md", edited) is True


def test_digests_are_per_path():
    """Test each path keeps its own digest, and forget drops one."""
    detector = ChangeDetector("Schedule")
    detector.record_text("a.md", SAMPLE_NOTE)

    assert detector.has_changed("b.md", SAMPLE_NOTE) is True
    detector.forget("a.md")
    assert detector.has_changed("a.md", SAMPLE_NOTE) is True
