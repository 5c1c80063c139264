"""Session dataclass for tasktracker."""

from dataclasses import dataclass
from datetime import datetime

# Fields a user may edit; duration_seconds and earnings follow from these.
EDITABLE_FIELDS = ("title", "description", "start_time", "end_time", "hourly_rate")

# Edits to these fields require recomputing the derived fields.
TIMING_FIELDS = {"start_time", "end_time", "hourly_rate"}

FIELD_ALIASES = {
    "start": "start_time",
    "end": "end_time",
    "rate": "hourly_rate",
}


def normalize_field(name: str) -> str:
    """Resolve a field alias ("start", "end", "rate") to its field name."""
    name = name.strip().lower().replace("-", "_")
    return FIELD_ALIASES.get(name, name)


@dataclass
class Session:
    """Represents one recorded work interval.

    Attributes:
        title: Non-empty title of the work done
        start_time: Local start instant (second precision)
        end_time: Local end instant; None only for rows written by other tools
        hourly_rate: Non-negative hourly rate
        description: Optional free text
        duration_seconds: Derived, end_time - start_time in whole seconds
        earnings: Derived, duration in hours times hourly_rate, rounded to cents
        created_by: Identifier of the device that created the session
        external_id: Globally unique id used for external references
        id: Store-assigned id, None until created
    """

    title: str
    start_time: datetime
    end_time: datetime | None
    hourly_rate: float
    description: str = ""
    duration_seconds: int = 0
    earnings: float = 0.0
    created_by: str = ""
    external_id: str = ""
    id: int | None = None

    @property
    def hours(self) -> float:
        """Duration in hours."""
        return self.duration_seconds / 3600
