"""Error types raised by the tasktracker core."""


class TrackerError(Exception):
    """Base class for all tasktracker errors."""

    pass


class ParseError(TrackerError, ValueError):
    """Raised when human-entered text cannot be parsed (timestamps, numbers)."""

    pass


class ValidationError(TrackerError, ValueError):
    """Raised when a value parses but is not acceptable (empty title, negative rate)."""

    pass


class InvalidRange(ValidationError):
    """Raised when an end time lies before its start time."""

    pass


class NotFound(TrackerError, LookupError):
    """Raised when a session id does not exist in the store."""

    def __init__(self, session_id: int) -> None:
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class ConstraintViolation(TrackerError):
    """Raised when a write violates a uniqueness constraint."""

    pass


class StoreUnavailable(TrackerError):
    """Raised when the session database cannot be opened or used."""

    pass


class InvalidState(TrackerError):
    """Raised on an illegal timer or edit transition."""

    pass
