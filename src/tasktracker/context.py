"""Per-invocation state shared by the CLI commands.

The store and device id are created once and passed to the commands through
the click context instead of living in module globals.
"""

from pathlib import Path

import click

from tasktracker.core.config import get_or_create_device_id
from tasktracker.core.errors import StoreUnavailable
from tasktracker.core.reconciler import Reconciler
from tasktracker.core.store import SessionStore


class TrackerContext:
    """Lazily opened store plus the device id of this process."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._store: SessionStore | None = None
        self._device_id: str | None = None

    @property
    def store(self) -> SessionStore:
        """The session store; failing to open it ends the command."""
        if self._store is None:
            try:
                self._store = SessionStore(self.db_path)
            except StoreUnavailable as e:
                raise click.ClickException(str(e)) from e
        return self._store

    @property
    def device_id(self) -> str:
        if self._device_id is None:
            self._device_id = get_or_create_device_id()
        return self._device_id

    @property
    def reconciler(self) -> Reconciler:
        return Reconciler(self.store)

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None


pass_tracker = click.make_pass_decorator(TrackerContext)
