"""Top command - launch the tasktracker TUI."""

import click

from tasktracker.context import TrackerContext, pass_tracker
from tasktracker.core.config import get_default_rate, get_tick_interval


@click.command()
@pass_tracker
def top(tracker: TrackerContext) -> None:
    """Launch the tasktracker TUI.

    Live timer, session table, and forms to add, edit and delete sessions.
    """
    from tasktracker.tui.app import TrackerApp

    app = TrackerApp(
        store=tracker.store,
        device_id=tracker.device_id,
        default_rate=get_default_rate(),
        tick_interval=get_tick_interval(),
    )
    app.run()
