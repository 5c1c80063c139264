"""Clock used for timer instants."""

from collections.abc import Callable
from datetime import datetime

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Return the current local time truncated to whole seconds.

    Stored timestamps carry second precision, so instants are truncated at
    capture time and the stored duration always matches the stored text.
    """
    return datetime.now().replace(microsecond=0)
