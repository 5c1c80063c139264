"""Session record store backed by SQLite.

Each public operation runs in its own transaction and either commits fully
or leaves the database untouched. Derived fields (difference, earnings) are
recomputed or verified inside the same transaction that changes their inputs.
"""

import builtins
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session as DBSession
from sqlmodel import create_engine, select

from tasktracker.core.calculator import compute, earnings_for
from tasktracker.core.errors import (
    ConstraintViolation,
    NotFound,
    StoreUnavailable,
    ValidationError,
)
from tasktracker.core.models import SessionRecord
from tasktracker.core.session import (
    EDITABLE_FIELDS,
    TIMING_FIELDS,
    Session,
    normalize_field,
)
from tasktracker.core.timefmt import (
    format_timestamp,
    parse_rate,
    parse_timestamp,
    parse_title,
    validate_rate,
)

ORDERABLE_FIELDS = {"end_time", "start_time", "id", "earnings"}


class SessionStore:
    """Durable keyed storage for sessions.

    Args:
        path: Path of the SQLite database file. Parent directories are created.

    Raises:
        StoreUnavailable: If the database cannot be opened or initialized.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.engine = create_engine(f"sqlite:///{self.path}", echo=False)
            SessionRecord.metadata.create_all(
                self.engine, tables=[SessionRecord.__table__]
            )
        except (OSError, SQLAlchemyError) as e:
            raise StoreUnavailable(
                f"Cannot open session store at {self.path}: {e}"
            ) from e
        logger.debug(f"Opened session store at {self.path}")

    def close(self) -> None:
        """Release all database connections."""
        self.engine.dispose()

    def __enter__(self) -> "SessionStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @contextmanager
    def _transaction(self) -> Iterator[DBSession]:
        """Yield a database session that commits on success, rolls back otherwise."""
        try:
            with DBSession(self.engine) as db:
                yield db
                db.commit()
        except IntegrityError as e:
            raise ConstraintViolation(f"Constraint violated: {e.orig}") from e
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Session store failed: {e}") from e

    def create(self, session: Session) -> int:
        """Persist a new session and return its id.

        Assigns an external id if the session has none and computes duration
        and earnings from the start, end and rate.

        Raises:
            ValidationError: Empty title, missing end, negative rate, end before start.
            ConstraintViolation: If the external id is already taken.
        """
        title = parse_title(session.title)
        if session.end_time is None:
            raise ValidationError("Session needs an end time")
        if not session.created_by:
            raise ValidationError("Session needs a creating device id")
        start = session.start_time.replace(microsecond=0)
        end = session.end_time.replace(microsecond=0)
        rate = validate_rate(session.hourly_rate)
        duration, earnings = compute(start, end, rate)

        record = SessionRecord(
            external_id=session.external_id or str(uuid.uuid4()),
            title=title,
            description=session.description,
            start_time=format_timestamp(start),
            end_time=format_timestamp(end),
            difference=duration,
            hourly_rate=rate,
            earnings=earnings,
            created_by=session.created_by,
        )
        with self._transaction() as db:
            db.add(record)
            db.flush()
            session_id = record.id

        logger.info(f"Created session {session_id} ({title!r}, {duration}s, {earnings:.2f})")
        return session_id

    def get(self, session_id: int) -> Session:
        """Load a session by id.

        Raises:
            NotFound: If no session has this id.
        """
        with self._transaction() as db:
            record = db.get(SessionRecord, session_id)
            if record is None:
                raise NotFound(session_id)
            return _to_session(record)

    def list(
        self, order_by: str = "end_time", descending: bool = True
    ) -> builtins.list[Session]:
        """Return a snapshot of all sessions.

        Args:
            order_by: One of end_time, start_time, id, earnings.
            descending: Sort direction; ties are broken by id in the same direction.
        """
        if order_by not in ORDERABLE_FIELDS:
            raise ValidationError(
                f"Cannot order by {order_by!r}. Must be one of {sorted(ORDERABLE_FIELDS)}"
            )
        column = getattr(SessionRecord, order_by)
        tie = SessionRecord.id
        if descending:
            statement = select(SessionRecord).order_by(column.desc(), tie.desc())
        else:
            statement = select(SessionRecord).order_by(column.asc(), tie.asc())

        with self._transaction() as db:
            return [_to_session(record) for record in db.exec(statement).all()]

    def update_field(
        self,
        session_id: int,
        field: str,
        value,
        duration_seconds: int | None = None,
        earnings: float | None = None,
    ) -> None:
        """Update one field of a session.

        For start_time and end_time the recomputed duration and earnings must
        be supplied; for hourly_rate the recomputed earnings (the stored
        duration is kept). The values are checked against the calculator in
        the same transaction and the write is refused if they disagree.

        Raises:
            NotFound: If no session has this id.
            ParseError: If a text value cannot be parsed.
            ValidationError: If the field is not editable, the value is out of
                range, or the derived values are missing or inconsistent.
        """
        field = normalize_field(field)
        if field not in EDITABLE_FIELDS:
            raise ValidationError(
                f"Field {field!r} cannot be edited. Must be one of {list(EDITABLE_FIELDS)}"
            )
        stored_value = _to_column_value(field, value)

        with self._transaction() as db:
            record = db.get(SessionRecord, session_id)
            if record is None:
                raise NotFound(session_id)
            setattr(record, field, stored_value)
            if field in TIMING_FIELDS:
                _set_derived(record, field, duration_seconds, earnings)
            db.add(record)

        logger.debug(f"Updated {field} of session {session_id}")

    def delete(self, session_id: int) -> None:
        """Delete a session.

        Raises:
            NotFound: If no session has this id.
        """
        with self._transaction() as db:
            record = db.get(SessionRecord, session_id)
            if record is None:
                raise NotFound(session_id)
            db.delete(record)

        logger.info(f"Deleted session {session_id}")


def _to_session(record: SessionRecord) -> Session:
    """Convert a database row to a Session."""
    return Session(
        id=record.id,
        external_id=record.external_id,
        title=record.title,
        description=record.description or "",
        start_time=parse_timestamp(record.start_time),
        end_time=parse_timestamp(record.end_time) if record.end_time else None,
        duration_seconds=record.difference or 0,
        hourly_rate=record.hourly_rate or 0.0,
        earnings=record.earnings or 0.0,
        created_by=record.created_by,
    )


def _to_column_value(field: str, value):
    """Validate a new field value and convert it to its column representation."""
    if field == "title":
        if not isinstance(value, str):
            raise ValidationError("Title must be text")
        return parse_title(value)
    if field == "description":
        return "" if value is None else str(value)
    if field in {"start_time", "end_time"}:
        if isinstance(value, str):
            value = parse_timestamp(value)
        if not isinstance(value, datetime):
            raise ValidationError(f"{field} must be a timestamp")
        return format_timestamp(value)
    # hourly_rate
    if isinstance(value, str):
        return parse_rate(value)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("Hourly rate must be a number")
    return validate_rate(float(value))


def _set_derived(
    record: SessionRecord,
    field: str,
    duration_seconds: int | None,
    earnings: float | None,
) -> None:
    """Check the supplied derived values against the record and store them."""
    if earnings is None or (field != "hourly_rate" and duration_seconds is None):
        raise ValidationError(
            f"Editing {field} requires the recomputed duration and earnings"
        )

    if field == "hourly_rate":
        expected_duration = record.difference or 0
        if duration_seconds is not None and duration_seconds != expected_duration:
            raise ValidationError("Editing hourly_rate must keep the stored duration")
        expected_earnings = earnings_for(expected_duration, record.hourly_rate)
    else:
        if record.end_time is None:
            raise ValidationError("Session has no end time")
        expected_duration, expected_earnings = compute(
            parse_timestamp(record.start_time),
            parse_timestamp(record.end_time),
            record.hourly_rate,
        )

    if (duration_seconds is not None and duration_seconds != expected_duration) or float(
        earnings
    ) != expected_earnings:
        raise ValidationError(
            f"Derived values for {field} do not match: expected "
            f"{expected_duration}s / {expected_earnings:.2f}"
        )
    record.difference = expected_duration
    record.earnings = expected_earnings
