"""Tests for the timer command."""

import pytest
from click.testing import CliRunner

from tasktracker.cli import main
from tasktracker.core.config import set_default_rate
from tasktracker.core.errors import StoreUnavailable
from tasktracker.core.store import SessionStore


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


def invoke(runner, db_path, *args, **kwargs):
    return runner.invoke(main, ["--db", str(db_path), *args], **kwargs)


def test_timer_saves_session(runner, db_path):
    """Test stopping the timer and entering details saves a session."""
    result = invoke(runner, db_path, "timer", input="\nDemo task\n\n20\n")

    assert result.exit_code == 0, result.output
    assert "Timer started at" in result.output
    assert "Timer stopped after" in result.output
    assert "Saved session 1" in result.output

    with SessionStore(db_path) as store:
        session = store.get(1)
    assert session.title == "Demo task"
    assert session.description == ""
    assert session.hourly_rate == 20.0
    assert session.end_time >= session.start_time
    assert session.start_time.microsecond == 0


def test_timer_with_options(runner, db_path):
    """Test title, description and rate given as options are not prompted."""
    result = invoke(
        runner,
        db_path,
        "timer",
        "--title",
        "Call",
        "--description",
        "Weekly sync",
        "--rate",
        "40",
        input="\n",
    )

    assert result.exit_code == 0, result.output
    assert "Title:" not in result.output
    with SessionStore(db_path) as store:
        session = store.get(1)
    assert session.title == "Call"
    assert session.description == "Weekly sync"
    assert session.hourly_rate == 40.0


def test_timer_uses_configured_rate(runner, db_path):
    """Test the configured default rate is used without prompting."""
    set_default_rate(15.0)
    result = invoke(runner, db_path, "timer", "--title", "x", input="\n\n")

    assert result.exit_code == 0, result.output
    assert "Hourly rate" not in result.output
    with SessionStore(db_path) as store:
        assert store.get(1).hourly_rate == 15.0


def test_timer_reprompts_blank_title(runner, db_path):
    """Test a whitespace title is rejected and asked again."""
    result = invoke(runner, db_path, "timer", input="\n   \nDemo\n\n20\n")

    assert result.exit_code == 0, result.output
    assert "Title must not be empty" in result.output
    with SessionStore(db_path) as store:
        assert store.get(1).title == "Demo"


def test_timer_reprompts_bad_rate(runner, db_path):
    """Test an unparseable rate is asked again."""
    result = invoke(runner, db_path, "timer", "--title", "x", input="\n\nabc\n-3\n12,5\n")

    assert result.exit_code == 0, result.output
    assert "Invalid hourly rate" in result.output
    assert "must not be negative" in result.output
    with SessionStore(db_path) as store:
        assert store.get(1).hourly_rate == 12.5


def test_timer_negative_rate_option(runner, db_path):
    """Test a negative --rate fails before the timer starts."""
    result = invoke(runner, db_path, "timer", "--rate=-1")

    assert result.exit_code == 1
    assert "Timer started" not in result.output


def test_timer_store_failure_reports_interval(runner, db_path, monkeypatch):
    """Test a failed save reports the timed interval for re-entry."""

    def fail(self, session):
        raise StoreUnavailable("Session store failed: disk I/O error")

    monkeypatch.setattr(SessionStore, "create", fail)
    result = invoke(runner, db_path, "timer", "--title", "x", "--rate", "10", input="\n\n")

    assert result.exit_code == 1
    assert "disk I/O error" in result.output
    assert "Session not saved. Re-enter it with: tasktracker add --start" in result.output
    assert "Traceback" not in result.output
