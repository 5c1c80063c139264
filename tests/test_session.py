"""Tests for session dataclass."""

from datetime import datetime

from tasktracker.core.session import EDITABLE_FIELDS, Session, normalize_field


def test_session_creation():
    """Test creating a session with defaults for derived fields."""
    session = Session(
        title="Test task",
        start_time=datetime(2024, 1, 1, 9, 0, 0),
        end_time=datetime(2024, 1, 1, 10, 0, 0),
        hourly_rate=20.0,
    )
    assert session.id is None
    assert session.external_id == ""
    assert session.description == ""
    assert session.duration_seconds == 0
    assert session.earnings == 0.0


def test_session_hours():
    """Test hours derives from duration_seconds."""
    session = Session(
        title="Test",
        start_time=datetime(2024, 1, 1, 9, 0, 0),
        end_time=datetime(2024, 1, 1, 10, 30, 0),
        hourly_rate=20.0,
        duration_seconds=5400,
    )
    assert session.hours == 1.5


def test_normalize_field_aliases():
    """Test short field names resolve to field names."""
    assert normalize_field("start") == "start_time"
    assert normalize_field("END") == "end_time"
    assert normalize_field("rate") == "hourly_rate"
    assert normalize_field("hourly-rate") == "hourly_rate"
    assert normalize_field("title") == "title"


def test_derived_fields_not_editable():
    """Test duration and earnings are not editable fields."""
    assert "duration_seconds" not in EDITABLE_FIELDS
    assert "earnings" not in EDITABLE_FIELDS
    assert "external_id" not in EDITABLE_FIELDS
