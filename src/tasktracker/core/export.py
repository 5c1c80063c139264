"""Export rows for sessions inside an optional time window."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple

from tasktracker.core.errors import InvalidRange
from tasktracker.core.session import Session
from tasktracker.core.timefmt import format_duration, format_timestamp


class ExportRow(NamedTuple):
    title: str
    description: str
    start_time: str
    end_time: str
    duration: str
    hourly_rate: float
    earnings: float


EXPORT_COLUMNS = ExportRow._fields


@dataclass(frozen=True)
class ExportWindow:
    """Inclusive filter window; either bound may be open.

    A session matches when it starts at or after `start` and ends at or
    before `end`.
    """

    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if self.start is not None and self.end is not None and self.end < self.start:
            raise InvalidRange(f"Window end {self.end} is before window start {self.start}")

    def contains(self, session: Session) -> bool:
        if self.start is not None and session.start_time < self.start:
            return False
        if self.end is not None:
            if session.end_time is None or session.end_time > self.end:
                return False
        return True


def to_row(session: Session) -> ExportRow:
    return ExportRow(
        title=session.title,
        description=session.description,
        start_time=format_timestamp(session.start_time),
        end_time=format_timestamp(session.end_time) if session.end_time else "",
        duration=format_duration(session.duration_seconds),
        hourly_rate=session.hourly_rate,
        earnings=session.earnings,
    )


def export_rows(
    sessions: Iterable[Session], window: ExportWindow | None = None
) -> list[ExportRow]:
    """Project sessions to export rows, keeping those inside the window."""
    window = window or ExportWindow()
    return [to_row(s) for s in sessions if window.contains(s)]
