"""Duration and earnings calculation.

Earnings are rounded to two decimals with round-half-away-from-zero, done in
Decimal so that exact halves (1 second at 18.00/h is 0.005) round up.
"""

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from tasktracker.core.errors import InvalidRange
from tasktracker.core.timefmt import validate_rate

SECONDS_PER_HOUR = Decimal(3600)
CENT = Decimal("0.01")


def round2(value: Decimal) -> float:
    """Round to two decimals, halves away from zero."""
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


def duration_between(start: datetime, end: datetime) -> int:
    """Return the whole seconds between start and end.

    Raises:
        InvalidRange: If end lies before start.
    """
    if end < start:
        raise InvalidRange(f"End time {end} is before start time {start}")
    return math.floor((end - start).total_seconds())


def earnings_for(duration_seconds: int, hourly_rate: float) -> float:
    """Return the earnings for a duration at an hourly rate."""
    hourly_rate = validate_rate(hourly_rate)
    amount = Decimal(int(duration_seconds)) * Decimal(str(hourly_rate)) / SECONDS_PER_HOUR
    return round2(amount)


def compute(start: datetime, end: datetime, hourly_rate: float) -> tuple[int, float]:
    """Compute (duration_seconds, earnings) for a session.

    Raises:
        InvalidRange: If end lies before start.
        ValidationError: If the hourly rate is negative or not finite.
    """
    duration = duration_between(start, end)
    return duration, earnings_for(duration, hourly_rate)
