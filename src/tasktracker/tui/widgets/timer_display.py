"""Live timer line for tasktracker TUI."""

from textual.widgets import Static

from tasktracker.core.timer import TimerSnapshot
from tasktracker.core.timefmt import format_duration, format_money


def describe_snapshot(snapshot: TimerSnapshot) -> str:
    """Text shown for a timer snapshot."""
    if not snapshot.running:
        return "Timer stopped - press t to start"
    text = f"Running {format_duration(snapshot.elapsed_seconds)}"
    if snapshot.earnings is not None:
        text += f"  earned {format_money(snapshot.earnings)}"
    return text


class TimerDisplay(Static):
    """Shows the latest published timer snapshot."""

    def show_snapshot(self, snapshot: TimerSnapshot) -> None:
        self.update(describe_snapshot(snapshot))
