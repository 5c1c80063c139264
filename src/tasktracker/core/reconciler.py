"""Single-field edits that keep duration and earnings consistent.

Editing start_time or end_time recomputes duration and earnings from the
stored sibling timestamp and rate. Editing hourly_rate recomputes earnings
from the stored duration. Title and description pass straight through.
"""

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from tasktracker.core.calculator import compute, earnings_for
from tasktracker.core.errors import InvalidState, NotFound, TrackerError, ValidationError
from tasktracker.core.session import EDITABLE_FIELDS, Session, normalize_field
from tasktracker.core.store import SessionStore
from tasktracker.core.timefmt import parse_rate, parse_timestamp, parse_title


@dataclass(frozen=True)
class FieldChange:
    """A computed, not yet written, edit of one session field."""

    session_id: int
    field: str
    value: object
    duration_seconds: int | None = None
    earnings: float | None = None


def _require_field(field: str) -> str:
    field = normalize_field(field)
    if field not in EDITABLE_FIELDS:
        raise ValidationError(
            f"Field {field!r} cannot be edited. Must be one of {list(EDITABLE_FIELDS)}"
        )
    return field


class Reconciler:
    """Applies single-field edits to stored sessions."""

    def __init__(self, store: SessionStore) -> None:
        self.store = store

    def parse_value(self, field: str, raw: str):
        """Parse human-entered text for a field.

        Raises:
            ParseError: Malformed timestamp or number.
            ValidationError: Empty title, negative rate, unknown field.
        """
        field = _require_field(field)
        if field == "title":
            return parse_title(raw)
        if field == "description":
            return raw.strip()
        if field in {"start_time", "end_time"}:
            return parse_timestamp(raw)
        return parse_rate(raw)

    def plan(self, session_id: int, field: str, value) -> FieldChange:
        """Compute the change for an edit without writing it.

        Raises:
            NotFound: If the session does not exist.
            InvalidRange: If the edit would put the end before the start.
        """
        field = _require_field(field)
        session = self.store.get(session_id)

        if field in {"title", "description"}:
            return FieldChange(session_id, field, value)

        if field == "hourly_rate":
            # The stored duration is canonical; timestamps are not re-read.
            earnings = earnings_for(session.duration_seconds, value)
            return FieldChange(session_id, field, value, earnings=earnings)

        if field == "start_time":
            start, end = value, session.end_time
        else:
            start, end = session.start_time, value
        if end is None:
            raise ValidationError(f"Session {session_id} has no end time")
        duration, earnings = compute(start, end, session.hourly_rate)
        return FieldChange(session_id, field, value, duration, earnings)

    def apply(self, session_id: int, field: str, value) -> Session:
        """Edit one field, write it with its derived fields, return the result."""
        change = self.plan(session_id, field, value)
        self.store.update_field(
            change.session_id,
            change.field,
            change.value,
            duration_seconds=change.duration_seconds,
            earnings=change.earnings,
        )
        logger.info(f"Edited {change.field} of session {session_id}")
        return self.store.get(session_id)

    def edit(self, session_id: int, field: str, raw: str) -> Session:
        """Parse a human-entered value and apply it."""
        return self.apply(session_id, field, self.parse_value(field, raw))


class EditState(str, Enum):
    """States of one interactive edit."""

    IDLE = "idle"
    FIELD_SELECTED = "field_selected"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class EditSession:
    """Drives one form-like edit of a stored session.

    Idle -> FieldSelected -> AwaitingConfirmation -> Committed | Cancelled.
    Nothing is written before confirm(); cancelling never touches the store.
    """

    def __init__(self, reconciler: Reconciler, session_id: int) -> None:
        self.reconciler = reconciler
        self.session_id = session_id
        self.state = EditState.IDLE
        self.field: str | None = None
        self.pending: FieldChange | None = None

    def _expect(self, *states: EditState) -> None:
        if self.state not in states:
            raise InvalidState(f"Cannot do that while edit is {self.state.value}")

    def select_field(self, field: str) -> None:
        """Choose the field to edit; the session must exist."""
        self._expect(EditState.IDLE, EditState.COMMITTED, EditState.CANCELLED)
        field = _require_field(field)
        self.reconciler.store.get(self.session_id)
        self.field = field
        self.pending = None
        self.state = EditState.FIELD_SELECTED

    def propose(self, raw: str) -> FieldChange:
        """Parse a new value and compute its effect; await confirmation.

        On a parse or validation error the edit stays at FieldSelected.
        """
        self._expect(EditState.FIELD_SELECTED)
        value = self.reconciler.parse_value(self.field, raw)
        self.pending = self.reconciler.plan(self.session_id, self.field, value)
        self.state = EditState.AWAITING_CONFIRMATION
        return self.pending

    def confirm(self) -> Session:
        """Write the pending value.

        If the write is refused the edit returns to FieldSelected and the
        stored session is unchanged. If the session has disappeared the edit
        is cancelled.
        """
        self._expect(EditState.AWAITING_CONFIRMATION)
        try:
            session = self.reconciler.apply(
                self.session_id, self.pending.field, self.pending.value
            )
        except NotFound:
            self.pending = None
            self.state = EditState.CANCELLED
            raise
        except TrackerError:
            self.pending = None
            self.state = EditState.FIELD_SELECTED
            raise
        self.pending = None
        self.state = EditState.COMMITTED
        return session

    def cancel(self) -> None:
        """Discard the pending value without writing."""
        self._expect(EditState.FIELD_SELECTED, EditState.AWAITING_CONFIRMATION)
        self.pending = None
        self.state = EditState.CANCELLED

    def reset(self) -> None:
        """Return to Idle."""
        self.field = None
        self.pending = None
        self.state = EditState.IDLE
