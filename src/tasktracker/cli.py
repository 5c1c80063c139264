"""CLI entry point for tasktracker.

Usage:
    tasktracker                  # Launch TUI
    tasktracker timer            # Live timer, saves a session when stopped
    tasktracker add ...          # Add a session with explicit times
    tasktracker list             # List sessions
    tasktracker edit <id> <field> <value>
    tasktracker delete <id>
"""

from pathlib import Path

import click

from tasktracker.commands.add import add
from tasktracker.commands.config import config
from tasktracker.commands.delete import delete
from tasktracker.commands.edit import edit
from tasktracker.commands.export import export
from tasktracker.commands.list import list_sessions
from tasktracker.commands.show import show
from tasktracker.commands.timer import timer
from tasktracker.commands.top import top
from tasktracker.context import TrackerContext
from tasktracker.core.config import get_database_path
from tasktracker.core.log import setup_logging


@click.group(invoke_without_command=True)
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TASKTRACKER_DB",
    default=None,
    help="Session database file (default: from config)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TASKTRACKER_LOG",
    default=None,
    help="Also write logs to this file",
)
@click.version_option()
@click.pass_context
def main(
    ctx: click.Context, db_path: Path | None, verbose: bool, log_file: Path | None
) -> None:
    """tasktracker - billable work sessions from the terminal.

    Time sessions live or enter them by hand; duration and earnings are
    always derived from start, end and hourly rate.

    Running 'tasktracker' without a subcommand launches the TUI.
    """
    setup_logging("DEBUG" if verbose else "WARNING", log_file)

    tracker = TrackerContext(db_path or get_database_path())
    ctx.obj = tracker
    ctx.call_on_close(tracker.close)

    # If a subcommand was invoked, let it handle things
    if ctx.invoked_subcommand is not None:
        return

    ctx.invoke(top)


# Register commands
main.add_command(timer)
main.add_command(add)
main.add_command(list_sessions)
main.add_command(show)
main.add_command(edit)
main.add_command(delete)
main.add_command(export)
main.add_command(config)
main.add_command(top)
