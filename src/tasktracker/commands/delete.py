"""Delete command for tasktracker."""

import click

from tasktracker.commands.common import format_details, load_or_exit
from tasktracker.context import TrackerContext, pass_tracker
from tasktracker.core.errors import NotFound


@click.command()
@click.argument("session_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@pass_tracker
def delete(tracker: TrackerContext, session_id: int, yes: bool) -> None:
    """Delete a session permanently.

    Shows the session and asks for confirmation first.
    """
    session = load_or_exit(tracker.store, session_id)
    click.echo(format_details(session))

    if not yes and not click.confirm(f"Delete session {session_id}?", default=False):
        click.echo("Delete cancelled.")
        return

    try:
        tracker.store.delete(session_id)
    except NotFound:
        click.echo(f"Session {session_id} not found", err=True)
        raise SystemExit(1)
    click.echo(f"Deleted session {session_id}")
