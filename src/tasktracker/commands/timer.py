"""Timer command for tasktracker.

Runs the live timer in the terminal and saves the session when it stops.
"""

import click

from tasktracker.commands.common import format_line, rate_value, title_value
from tasktracker.context import TrackerContext, pass_tracker
from tasktracker.core.config import get_default_rate, get_tick_interval
from tasktracker.core.errors import TrackerError, ValidationError
from tasktracker.core.session import Session
from tasktracker.core.timefmt import format_duration, format_money, format_timestamp
from tasktracker.core.timer import LiveTimer, TimerSnapshot


def _print_tick(snapshot: TimerSnapshot) -> None:
    line = f"\r{format_duration(snapshot.elapsed_seconds)}"
    if snapshot.earnings is not None:
        line += f"  {format_money(snapshot.earnings)}"
    click.echo(line, nl=False)


@click.command()
@click.option("--title", default="", help="Session title (prompted after stopping if omitted)")
@click.option("--description", default=None, help="Optional description")
@click.option(
    "--rate",
    type=float,
    default=None,
    help="Hourly rate (defaults to the configured rate, prompted if unset)",
)
@pass_tracker
def timer(
    tracker: TrackerContext, title: str, description: str | None, rate: float | None
) -> None:
    """Run a live timer and save the session.

    Shows elapsed time (and earnings when a rate is known) every tick.
    Press Enter to stop, then enter any missing title, description or rate.

    Examples:

        tasktracker timer

        tasktracker timer --title "Client call" --rate 40
    """
    store = tracker.store
    if rate is None:
        rate = get_default_rate()

    live = LiveTimer(interval=get_tick_interval(), on_tick=_print_tick)
    try:
        live.start(rate)
    except ValidationError as e:
        raise click.ClickException(str(e)) from e

    click.echo(
        f"Timer started at {format_timestamp(live.start_time)}. Press Enter to stop."
    )
    try:
        click.prompt("", default="", show_default=False, prompt_suffix="")
    finally:
        start, end = live.stop()

    snapshot = live.current_snapshot()
    click.echo(f"Timer stopped after {format_duration(snapshot.elapsed_seconds)}.")

    title = title.strip() or click.prompt("Title", value_proc=title_value)
    if description is None:
        description = click.prompt(
            "Description (optional)", default="", show_default=False
        )
    if rate is None:
        rate = click.prompt("Hourly rate", value_proc=rate_value)

    try:
        session_id = store.create(
            Session(
                title=title,
                description=description.strip(),
                start_time=start,
                end_time=end,
                hourly_rate=rate,
                created_by=tracker.device_id,
            )
        )
    except TrackerError as e:
        click.echo(
            f"Session not saved. Re-enter it with: tasktracker add "
            f"--start \"{format_timestamp(start)}\" --end \"{format_timestamp(end)}\"",
            err=True,
        )
        raise click.ClickException(str(e)) from e

    click.echo(f"Saved session {session_id}")
    click.echo(format_line(store.get(session_id)))
