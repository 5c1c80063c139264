"""Add command for tasktracker.

Records a session manually from typed start and end times.
"""

import click

from tasktracker.commands.common import format_line
from tasktracker.context import TrackerContext, pass_tracker
from tasktracker.core.config import get_default_rate
from tasktracker.core.errors import TrackerError
from tasktracker.core.session import Session
from tasktracker.core.timefmt import (
    TIME_FORMAT_HINT,
    parse_rate,
    parse_timestamp,
    parse_title,
)


def _configured_rate() -> str | None:
    rate = get_default_rate()
    return None if rate is None else f"{rate:g}"


@click.command()
@click.option("--title", prompt=True, help="Session title")
@click.option("--description", default="", help="Optional description")
@click.option("--start", "start_text", prompt=f"Start ({TIME_FORMAT_HINT})", help="Start time")
@click.option("--end", "end_text", prompt=f"End ({TIME_FORMAT_HINT})", help="End time")
@click.option(
    "--rate",
    "rate_text",
    prompt="Hourly rate",
    default=_configured_rate,
    help="Hourly rate (defaults to the configured rate)",
)
@pass_tracker
def add(
    tracker: TrackerContext,
    title: str,
    description: str,
    start_text: str,
    end_text: str,
    rate_text: str,
) -> None:
    """Add a session with explicit start and end times.

    Duration and earnings are computed from the times and the rate.

    Examples:

        tasktracker add --title "Review" --start "2024-01-01 09:00:00" \\
            --end "2024-01-01 17:00:00" --rate 20
    """
    try:
        session = Session(
            title=parse_title(title),
            description=description.strip(),
            start_time=parse_timestamp(start_text),
            end_time=parse_timestamp(end_text),
            hourly_rate=parse_rate(rate_text),
            created_by=tracker.device_id,
        )
        session_id = tracker.store.create(session)
    except TrackerError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Saved session {session_id}")
    click.echo(format_line(tracker.store.get(session_id)))
