"""tasktracker configuration management.

Handles $TASKTRACKER_HOME/config.json (default ~/.tasktracker/config.json):
device id, database location, default hourly rate and timer tick interval.
"""

import os
import uuid
from pathlib import Path

import orjson

from tasktracker.core.timer import DEFAULT_TICK_INTERVAL
from tasktracker.core.timefmt import validate_rate

HOME_ENV = "TASKTRACKER_HOME"
DB_FILENAME = "tasktracker.db"


def get_tracker_home() -> Path:
    """Get the tasktracker home directory."""
    if env_home := os.environ.get(HOME_ENV):
        return Path(env_home)
    return Path.home() / ".tasktracker"


def get_config_path() -> Path:
    """Get the path to tasktracker's config file."""
    return get_tracker_home() / "config.json"


def read_config() -> dict:
    """Read config, returning empty dict if not found or unreadable."""
    config_path = get_config_path()
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_bytes()
        config = orjson.loads(content) if content else {}
    except (orjson.JSONDecodeError, OSError):
        return {}
    return config if isinstance(config, dict) else {}


def write_config(config: dict) -> None:
    """Write config."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_bytes(orjson.dumps(config, option=orjson.OPT_INDENT_2))


def update_config(**values) -> dict:
    """Set the given keys, write the config and return it."""
    config = read_config()
    config.update(values)
    write_config(config)
    return config


def get_or_create_device_id() -> str:
    """Get this device's id, generating and saving one on first use.

    Call once per process and pass the value on.
    """
    config = read_config()
    device_id = config.get("device_id")
    if isinstance(device_id, str) and device_id:
        return device_id
    device_id = str(uuid.uuid4())
    update_config(device_id=device_id)
    return device_id


def get_database_path() -> Path:
    """Get the configured database path (default: $TASKTRACKER_HOME/tasktracker.db)."""
    database = read_config().get("database")
    if isinstance(database, str) and database:
        return Path(database).expanduser()
    return get_tracker_home() / DB_FILENAME


def set_database_path(path: Path) -> None:
    """Set the database path."""
    update_config(database=str(path))


def get_default_rate() -> float | None:
    """Get the default hourly rate, or None if unset."""
    rate = read_config().get("default_rate")
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        return None
    return float(rate)


def set_default_rate(rate: float) -> None:
    """Set the default hourly rate.

    Args:
        rate: The new default (must be >= 0).
    """
    update_config(default_rate=validate_rate(rate))


def get_tick_interval() -> float:
    """Get the live timer tick interval in seconds (default: 1.0)."""
    interval = read_config().get("tick_interval", DEFAULT_TICK_INTERVAL)
    if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval <= 0:
        return DEFAULT_TICK_INTERVAL
    return float(interval)


def set_tick_interval(seconds: float) -> None:
    """Set the live timer tick interval.

    Args:
        seconds: The new interval (must be > 0).
    """
    if seconds <= 0:
        raise ValueError("tick_interval must be > 0")
    update_config(tick_interval=seconds)
