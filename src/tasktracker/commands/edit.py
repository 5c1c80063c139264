"""Edit command for tasktracker.

Changes one field of a stored session. Editing start, end or rate shows the
recomputed duration and earnings and asks for confirmation before saving.
"""

import click

from tasktracker.commands.common import describe_change, format_line, load_or_exit
from tasktracker.context import TrackerContext, pass_tracker
from tasktracker.core.errors import TrackerError
from tasktracker.core.reconciler import EditSession
from tasktracker.core.session import EDITABLE_FIELDS, FIELD_ALIASES, normalize_field

FIELD_CHOICES = list(EDITABLE_FIELDS) + list(FIELD_ALIASES)


@click.command()
@click.argument("session_id", type=int)
@click.argument("field", type=click.Choice(FIELD_CHOICES, case_sensitive=False))
@click.argument("value", required=False)
@click.option("--yes", "-y", is_flag=True, help="Save without asking for confirmation")
@pass_tracker
def edit(
    tracker: TrackerContext, session_id: int, field: str, value: str | None, yes: bool
) -> None:
    """Edit one field of a session.

    FIELD is one of title, description, start, end, rate (or start_time,
    end_time, hourly_rate). VALUE is prompted for when omitted. Times use
    YYYY-MM-DD HH:MM:SS.

    Examples:

        tasktracker edit 3 rate 25

        tasktracker edit 3 end "2024-01-01 12:00:00"
    """
    field = normalize_field(field)
    session = load_or_exit(tracker.store, session_id)

    edit_session = EditSession(tracker.reconciler, session_id)
    edit_session.select_field(field)

    if value is None:
        value = click.prompt(f"New {field}", default="", show_default=False)

    try:
        change = edit_session.propose(value)
    except TrackerError as e:
        edit_session.cancel()
        raise click.ClickException(str(e)) from e

    click.echo(describe_change(session, change))

    if not yes and not click.confirm("Save this change?", default=True):
        edit_session.cancel()
        click.echo("Edit cancelled.")
        return

    try:
        updated = edit_session.confirm()
    except TrackerError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Updated {field} of session {session_id}")
    click.echo(format_line(updated))
