"""Show command for tasktracker."""

import click

from tasktracker.commands.common import format_details, load_or_exit
from tasktracker.context import TrackerContext, pass_tracker


@click.command()
@click.argument("session_id", type=int)
@pass_tracker
def show(tracker: TrackerContext, session_id: int) -> None:
    """Show all fields of a session.

    SESSION_ID is the numeric id shown by 'tasktracker list'.
    """
    session = load_or_exit(tracker.store, session_id)
    click.echo(format_details(session))
