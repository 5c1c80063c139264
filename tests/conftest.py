"""Shared pytest fixtures for tasktracker tests."""

import pytest
from loguru import logger

from tasktracker.core.store import SessionStore
from tests.helpers import make_session


@pytest.fixture(autouse=True)
def mock_tracker_home(tmp_path, monkeypatch):
    """Point TASKTRACKER_HOME at a temporary directory for test isolation.

    This ensures tests don't write to the real ~/.tasktracker/ directory.
    Also clears TASKTRACKER_DB and TASKTRACKER_LOG so the configured values are used.
    """
    home = tmp_path / "home"
    monkeypatch.setenv("TASKTRACKER_HOME", str(home))
    monkeypatch.delenv("TASKTRACKER_DB", raising=False)
    monkeypatch.delenv("TASKTRACKER_LOG", raising=False)
    return home


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop sinks added by CLI invocations, whose streams close after each test."""
    yield
    logger.remove()


@pytest.fixture
def db_path(tmp_path):
    """Path of a fresh session database."""
    return tmp_path / "data" / "tracker.db"


@pytest.fixture
def store(db_path):
    """An open SessionStore on a fresh database."""
    with SessionStore(db_path) as session_store:
        yield session_store


@pytest.fixture
def scenario_id(store):
    """Id of the 2024-01-01 09:00-17:00 session at 20.00/h."""
    return store.create(make_session())
