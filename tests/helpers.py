"""Test helpers for tasktracker tests."""

import threading
from datetime import datetime, timedelta

from tasktracker.core.session import Session

DEVICE_ID = "test-device"


def make_session(**overrides) -> Session:
    """Build an unsaved session; defaults are 09:00-17:00 at 20.00/h."""
    values = {
        "title": "Client work",
        "description": "",
        "start_time": datetime(2024, 1, 1, 9, 0, 0),
        "end_time": datetime(2024, 1, 1, 17, 0, 0),
        "hourly_rate": 20.0,
        "created_by": DEVICE_ID,
    }
    values.update(overrides)
    return Session(**values)


class FakeClock:
    """Clock advancing by a fixed step on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start
        self.step = step
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            current = self.now
            self.now += self.step
            self.calls += 1
            return current
