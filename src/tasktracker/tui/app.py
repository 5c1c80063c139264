"""Main Textual app for tasktracker TUI."""

import asyncio

from loguru import logger
from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static

from tasktracker.core.clock import Clock, local_now
from tasktracker.core.errors import InvalidState, NotFound, TrackerError
from tasktracker.core.reconciler import Reconciler
from tasktracker.core.session import Session
from tasktracker.core.store import SessionStore
from tasktracker.core.timefmt import format_money
from tasktracker.core.timer import DEFAULT_TICK_INTERVAL, LiveTimer
from tasktracker.tui.screens import ConfirmDeleteScreen, EditSessionScreen, SessionFormScreen
from tasktracker.tui.widgets.session_table import SessionTable
from tasktracker.tui.widgets.timer_display import TimerDisplay


class TrackerApp(App):
    """tasktracker TUI application.

    Shows the live timer and all stored sessions, and refreshes when the
    database changes on disk.
    """

    TITLE = "tasktracker"
    BINDINGS = [
        ("t", "toggle_timer", "Start/Stop"),
        ("a", "add_session", "Add"),
        ("e", "edit_session", "Edit"),
        ("d", "delete_session", "Delete"),
        ("r", "refresh", "Refresh"),
        ("j", "cursor_down", "Down"),
        ("k", "cursor_up", "Up"),
        ("q", "quit", "Quit"),
    ]
    CSS = """
    TimerDisplay {
        height: 3;
        padding: 1 2;
        background: $boost;
    }

    SessionTable {
        height: 1fr;
    }

    #empty-message {
        width: 100%;
        height: 100%;
        content-align: center middle;
        color: $text-muted;
    }
    """

    def __init__(
        self,
        store: SessionStore,
        device_id: str,
        default_rate: float | None = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        clock: Clock = local_now,
    ) -> None:
        super().__init__()
        self.store = store
        self.device_id = device_id
        self.default_rate = default_rate
        self.reconciler = Reconciler(store)
        self.live_timer = LiveTimer(clock=clock, interval=tick_interval)
        self._watcher_task: asyncio.Task | None = None

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        # Kept as attributes so refreshes work while a modal screen is on top
        self.timer_display = TimerDisplay(id="timer")
        self.session_table = SessionTable()
        self.empty_message = Static("No sessions", id="empty-message")
        yield Header()
        yield self.timer_display
        yield self.session_table
        yield self.empty_message
        yield Footer()

    def on_mount(self) -> None:
        """Called when the app is mounted."""
        self.refresh_sessions()
        self.update_timer_display()
        # Poll the published snapshot twice per tick.
        self.set_interval(self.live_timer.interval / 2, self.update_timer_display)
        self._watcher_task = asyncio.create_task(self._watch_store())

    async def on_unmount(self) -> None:
        """Called when the app is unmounted."""
        if self.live_timer.running:
            start, end = self.live_timer.stop()
            logger.warning(f"Discarded running timer {start} - {end} on exit")
        if self._watcher_task:
            self._watcher_task.cancel()
            try:
                await self._watcher_task
            except asyncio.CancelledError:
                pass

    def update_timer_display(self) -> None:
        """Show the latest timer snapshot."""
        self.timer_display.show_snapshot(self.live_timer.current_snapshot())

    def refresh_sessions(self) -> None:
        """Reload and display all sessions."""
        try:
            sessions = self.store.list()
        except TrackerError as e:
            self.notify(str(e), severity="error")
            return
        table = self.session_table
        empty_msg = self.empty_message

        if sessions:
            table.update_sessions(sessions)
            table.display = True
            empty_msg.display = False
            total = sum(s.earnings for s in sessions)
            self.sub_title = f"{len(sessions)} sessions, {format_money(total)} earned"
        else:
            table.update_sessions([])
            table.display = False
            empty_msg.display = True
            self.sub_title = "0 sessions"

    def action_refresh(self) -> None:
        self.refresh_sessions()

    def action_cursor_down(self) -> None:
        self.session_table.action_cursor_down()

    def action_cursor_up(self) -> None:
        self.session_table.action_cursor_up()

    def action_toggle_timer(self) -> None:
        """Start the timer, or stop it and ask for the session details."""
        try:
            if not self.live_timer.running:
                self.live_timer.start(self.default_rate)
                self.update_timer_display()
                return
            start, end = self.live_timer.stop()
        except InvalidState as e:
            self.notify(str(e), severity="error")
            return
        self.update_timer_display()
        rate = self.live_timer.hourly_rate
        self.push_screen(
            SessionFormScreen(start=start, end=end, rate=rate),
            self._save_session,
        )

    def action_add_session(self) -> None:
        """Open the manual entry form."""
        self.push_screen(SessionFormScreen(rate=self.default_rate), self._save_session)

    def _save_session(self, session: Session | None) -> None:
        if session is None:
            self.notify("Session discarded", severity="warning")
            return
        session.created_by = self.device_id
        try:
            session_id = self.store.create(session)
        except TrackerError as e:
            self.notify(f"Failed to save session: {e}", severity="error")
            return
        self.notify(f"Saved session {session_id}: {session.title}")
        self.refresh_sessions()

    def _selected_session(self) -> Session | None:
        session_id = self.session_table.selected_session_id()
        if session_id is None:
            self.notify("No session selected", severity="warning")
            return None
        try:
            return self.store.get(session_id)
        except NotFound as e:
            self.notify(str(e), severity="error")
            self.refresh_sessions()
            return None

    def action_edit_session(self) -> None:
        """Edit a field of the selected session."""
        session = self._selected_session()
        if session is None:
            return
        self.push_screen(EditSessionScreen(self.reconciler, session), self._edited)

    def _edited(self, session: Session | None) -> None:
        if session is not None:
            self.notify(f"Updated session {session.id}")
        self.refresh_sessions()

    def action_delete_session(self) -> None:
        """Delete the selected session after confirmation."""
        session = self._selected_session()
        if session is None:
            return

        def confirmed(answer: bool | None) -> None:
            if not answer:
                return
            try:
                self.store.delete(session.id)
            except TrackerError as e:
                self.notify(str(e), severity="error")
            else:
                self.notify(f"Deleted session {session.id}")
            self.refresh_sessions()

        self.push_screen(ConfirmDeleteScreen(session), confirmed)

    async def _watch_store(self) -> None:
        """Watch the database directory for changes and refresh."""
        from watchfiles import awatch

        store_dir = self.store.path.parent
        store_dir.mkdir(parents=True, exist_ok=True)

        try:
            async for changes in awatch(store_dir):
                self.refresh_sessions()
        except asyncio.CancelledError:
            pass
        except FileNotFoundError:
            # Directory was deleted, recreate and restart watching
            store_dir.mkdir(parents=True, exist_ok=True)
            self.refresh_sessions()
            self._watcher_task = asyncio.create_task(self._watch_store())
