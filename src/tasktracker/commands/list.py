"""List command for tasktracker."""

import click
import orjson

from tasktracker.commands.common import format_line, session_to_dict
from tasktracker.context import TrackerContext, pass_tracker
from tasktracker.core.timefmt import format_duration, format_money


@click.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output sessions as JSON")
@pass_tracker
def list_sessions(tracker: TrackerContext, as_json: bool) -> None:
    """List all sessions, most recently ended first."""
    sessions = tracker.store.list()

    if as_json:
        click.echo(orjson.dumps([session_to_dict(s) for s in sessions]).decode())
        return

    if not sessions:
        click.echo("No sessions")
        return

    for session in sessions:
        click.echo(format_line(session))

    total_seconds = sum(s.duration_seconds for s in sessions)
    total_earnings = sum(s.earnings for s in sessions)
    click.echo(
        f"{len(sessions)} sessions, {format_duration(total_seconds)}, "
        f"total earnings {format_money(total_earnings)}"
    )
