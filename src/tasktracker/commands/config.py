"""Config command for tasktracker."""

from pathlib import Path

import click
import orjson

from tasktracker.core.config import (
    get_config_path,
    get_or_create_device_id,
    read_config,
    set_database_path,
    set_default_rate,
    set_tick_interval,
)
from tasktracker.core.errors import ValidationError


@click.command()
@click.option("--rate", type=float, default=None, help="Set the default hourly rate")
@click.option("--interval", type=float, default=None, help="Set the timer tick interval in seconds")
@click.option(
    "--database",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Set the database file location",
)
def config(rate: float | None, interval: float | None, database: Path | None) -> None:
    """Show or change configuration.

    Without options prints the current configuration as JSON.
    """
    get_or_create_device_id()
    try:
        if rate is not None:
            set_default_rate(rate)
        if interval is not None:
            set_tick_interval(interval)
    except (ValidationError, ValueError) as e:
        raise click.ClickException(str(e)) from e
    if database is not None:
        set_database_path(database.expanduser().resolve())

    click.echo(f"# {get_config_path()}")
    click.echo(orjson.dumps(read_config(), option=orjson.OPT_INDENT_2).decode())
