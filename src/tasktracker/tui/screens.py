"""Modal forms for tasktracker TUI."""

from datetime import datetime

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select, Static

from tasktracker.commands.common import describe_change, format_details
from tasktracker.core.calculator import compute
from tasktracker.core.errors import NotFound, ParseError, TrackerError, ValidationError
from tasktracker.core.reconciler import EditSession, EditState, Reconciler
from tasktracker.core.session import EDITABLE_FIELDS, Session
from tasktracker.core.timefmt import (
    TIME_FORMAT_HINT,
    format_duration,
    format_timestamp,
    parse_rate,
    parse_timestamp,
    parse_title,
)

FORM_CSS = """
.form {
    width: 70;
    height: auto;
    border: thick $primary;
    background: $surface;
    padding: 1 2;
}

.form Input {
    margin-bottom: 1;
}

.buttons {
    height: auto;
}

.error {
    color: $error;
}
"""

FIELD_LABELS = {
    "title": "Title",
    "description": "Description",
    "start_time": "Start time",
    "end_time": "End time",
    "hourly_rate": "Hourly rate",
}


class SessionFormScreen(ModalScreen[Session | None]):
    """Collects a new session.

    With start and end given (a stopped timer) only title, description and
    rate are asked for; otherwise start and end are entered as text.
    Dismisses with the unsaved Session, or None when discarded.
    """

    DEFAULT_CSS = "SessionFormScreen { align: center middle; }" + FORM_CSS
    BINDINGS = [("escape", "discard", "Discard")]

    def __init__(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        rate: float | None = None,
    ) -> None:
        super().__init__()
        self.start = start
        self.end = end
        self.rate = rate

    @property
    def timed(self) -> bool:
        return self.start is not None and self.end is not None

    def compose(self) -> ComposeResult:
        with Vertical(classes="form"):
            if self.timed:
                duration = format_duration(int((self.end - self.start).total_seconds()))
                yield Label(
                    f"Save timed session {format_timestamp(self.start)} - "
                    f"{format_timestamp(self.end)} ({duration})"
                )
            else:
                yield Label("Add session")
            yield Input(placeholder="Title", id="title")
            yield Input(placeholder="Description (optional)", id="description")
            if not self.timed:
                yield Input(placeholder=f"Start ({TIME_FORMAT_HINT})", id="start")
                yield Input(placeholder=f"End ({TIME_FORMAT_HINT})", id="end")
            yield Input(
                value="" if self.rate is None else f"{self.rate:g}",
                placeholder="Hourly rate",
                id="rate",
            )
            yield Static("", id="form-error", classes="error")
            with Horizontal(classes="buttons"):
                yield Button("Save", id="save", variant="primary")
                yield Button("Discard", id="discard")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save":
            self.action_save()
        elif event.button.id == "discard":
            self.action_discard()

    def _value(self, input_id: str) -> str:
        return self.query_one(f"#{input_id}", Input).value

    def action_save(self) -> None:
        """Validate the form and dismiss with the new session."""
        try:
            title = parse_title(self._value("title"))
            if self.timed:
                start, end = self.start, self.end
            else:
                start = parse_timestamp(self._value("start"))
                end = parse_timestamp(self._value("end"))
            rate = parse_rate(self._value("rate"))
            compute(start, end, rate)
        except (ParseError, ValidationError) as e:
            self.query_one("#form-error", Static).update(str(e))
            return

        self.dismiss(
            Session(
                title=title,
                description=self._value("description").strip(),
                start_time=start,
                end_time=end,
                hourly_rate=rate,
            )
        )

    def action_discard(self) -> None:
        self.dismiss(None)


class EditSessionScreen(ModalScreen[Session | None]):
    """Edits one field of a stored session.

    The first Save shows the recomputed duration and earnings, the second
    writes them. Cancel discards without touching the store. Dismisses with
    the updated Session, or None when cancelled.
    """

    DEFAULT_CSS = "EditSessionScreen { align: center middle; }" + FORM_CSS
    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, reconciler: Reconciler, session: Session) -> None:
        super().__init__()
        self.session = session
        self.edit_session = EditSession(reconciler, session.id)

    def compose(self) -> ComposeResult:
        with Vertical(classes="form"):
            yield Label(f"Edit session {self.session.id}: {self.session.title}")
            yield Select(
                [(FIELD_LABELS[field], field) for field in EDITABLE_FIELDS],
                value="title",
                allow_blank=False,
                id="field",
            )
            yield Input(value=self._current_text("title"), id="value")
            yield Static("", id="preview")
            yield Static("", id="form-error", classes="error")
            with Horizontal(classes="buttons"):
                yield Button("Preview", id="save", variant="primary")
                yield Button("Cancel", id="cancel")

    def on_mount(self) -> None:
        self._restart("title")

    def _session_gone(self, error: NotFound) -> None:
        """Close the form after the session was deleted elsewhere."""
        self.app.notify(str(error), severity="error")
        self.dismiss(None)

    def _current_text(self, field: str) -> str:
        value = getattr(self.session, field)
        if value is None:
            return ""
        if isinstance(value, datetime):
            return format_timestamp(value)
        if field == "hourly_rate":
            return f"{value:g}"
        return str(value)

    def _restart(self, field: str) -> bool:
        """Drop any pending value and select a field.

        Returns False (and closes the form) if the session no longer exists.
        """
        if self.edit_session.state in {EditState.FIELD_SELECTED, EditState.AWAITING_CONFIRMATION}:
            self.edit_session.cancel()
        try:
            self.edit_session.select_field(field)
        except NotFound as e:
            self._session_gone(e)
            return False
        self.query_one("#preview", Static).update("")
        self.query_one("#form-error", Static).update("")
        self.query_one("#save", Button).label = "Preview"
        return True

    def choose_field(self, field: str) -> None:
        """Switch the edited field and prefill its current value."""
        if field == self.edit_session.field:
            return
        if not self._restart(field):
            return
        select = self.query_one("#field", Select)
        if select.value != field:
            select.value = field
        self.query_one("#value", Input).value = self._current_text(field)

    def on_select_changed(self, event: Select.Changed) -> None:
        self.choose_field(str(event.value))

    def on_input_changed(self, event: Input.Changed) -> None:
        if self.edit_session.state is EditState.AWAITING_CONFIRMATION:
            self._restart(self.edit_session.field)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save":
            self.action_save()
        elif event.button.id == "cancel":
            self.action_cancel()

    def action_save(self) -> None:
        """Preview the pending change, or write it if already previewed."""
        error = self.query_one("#form-error", Static)
        if self.edit_session.state is EditState.FIELD_SELECTED:
            try:
                change = self.edit_session.propose(self.query_one("#value", Input).value)
            except NotFound as e:
                self._session_gone(e)
                return
            except TrackerError as e:
                error.update(str(e))
                return
            error.update("")
            self.query_one("#preview", Static).update(describe_change(self.session, change))
            self.query_one("#save", Button).label = "Confirm"
            return

        if self.edit_session.state is EditState.AWAITING_CONFIRMATION:
            try:
                updated = self.edit_session.confirm()
            except NotFound as e:
                self._session_gone(e)
                return
            except TrackerError as e:
                error.update(str(e))
                self.query_one("#preview", Static).update("")
                self.query_one("#save", Button).label = "Preview"
                return
            self.dismiss(updated)

    def action_cancel(self) -> None:
        if self.edit_session.state in {EditState.FIELD_SELECTED, EditState.AWAITING_CONFIRMATION}:
            self.edit_session.cancel()
        self.dismiss(None)


class ConfirmDeleteScreen(ModalScreen[bool]):
    """Asks before deleting a session."""

    DEFAULT_CSS = "ConfirmDeleteScreen { align: center middle; }" + FORM_CSS
    BINDINGS = [("escape", "answer(False)", "Cancel"), ("y", "answer(True)", "Delete")]

    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        with Vertical(classes="form"):
            yield Label(f"Delete session {self.session.id}?")
            yield Static(format_details(self.session))
            with Horizontal(classes="buttons"):
                yield Button("Delete", id="delete", variant="error")
                yield Button("Cancel", id="cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.action_answer(event.button.id == "delete")

    def action_answer(self, confirmed: bool) -> None:
        self.dismiss(confirmed)
