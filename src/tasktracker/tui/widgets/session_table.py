"""Session list widget for tasktracker TUI."""

from textual.widgets import DataTable

from tasktracker.core.session import Session
from tasktracker.core.timefmt import format_duration, format_money, format_timestamp

COLUMNS = ("ID", "Title", "Start", "End", "Duration", "Rate", "Earnings")


class SessionTable(DataTable):
    """DataTable widget displaying stored sessions.

    Columns: ID, Title, Start, End, Duration, Rate, Earnings
    Rows are keyed by session id.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._sessions: list[Session] = []

    def on_mount(self) -> None:
        """Set up the table columns on mount."""
        self._ensure_columns()
        self.cursor_type = "row"

    def _ensure_columns(self) -> None:
        if not self.columns:
            self.add_columns(*COLUMNS)

    def update_sessions(self, sessions: list[Session]) -> None:
        """Replace the table contents with the given sessions."""
        self._sessions = sessions
        self._ensure_columns()
        self.clear()

        for session in sessions:
            title = session.title
            # Truncate long titles
            if len(title) > 30:
                title = title[:27] + "..."
            end = format_timestamp(session.end_time) if session.end_time else "-"
            self.add_row(
                str(session.id),
                title,
                format_timestamp(session.start_time),
                end,
                format_duration(session.duration_seconds),
                format_money(session.hourly_rate),
                format_money(session.earnings),
                key=str(session.id),
            )

    def selected_session_id(self) -> int | None:
        """Return the id of the session under the cursor, if any."""
        if self.row_count == 0 or self.cursor_row is None:
            return None
        row = self.get_row_at(self.cursor_row)
        if not row:
            return None
        return int(row[0])
