"""Export command for tasktracker.

Writes sessions as JSON rows, optionally limited to a time window.
"""

from pathlib import Path

import click
import orjson

from tasktracker.context import TrackerContext, pass_tracker
from tasktracker.core.errors import ParseError, ValidationError
from tasktracker.core.export import ExportWindow, export_rows
from tasktracker.core.timefmt import parse_timestamp


@click.command()
@click.option("--from", "from_text", default=None, help="Only sessions starting at or after this time")
@click.option("--to", "to_text", default=None, help="Only sessions ending at or before this time")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to this file instead of stdout",
)
@pass_tracker
def export(
    tracker: TrackerContext,
    from_text: str | None,
    to_text: str | None,
    output: Path | None,
) -> None:
    """Export sessions as JSON rows.

    Each row has title, description, start_time, end_time, duration
    (HH:MM:SS), hourly_rate and earnings. Window bounds are inclusive.

    Examples:

        tasktracker export

        tasktracker export --from "2024-01-01 00:00:00" --to "2024-01-31 23:59:59" -o jan.json
    """
    try:
        window = ExportWindow(
            start=parse_timestamp(from_text) if from_text else None,
            end=parse_timestamp(to_text) if to_text else None,
        )
    except (ParseError, ValidationError) as e:
        raise click.ClickException(str(e)) from e

    sessions = tracker.store.list(order_by="start_time", descending=False)
    rows = [row._asdict() for row in export_rows(sessions, window)]
    data = orjson.dumps(rows, option=orjson.OPT_INDENT_2)

    if output is None:
        click.echo(data.decode())
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(data)
    click.echo(f"Exported {len(rows)} sessions to {output}")
