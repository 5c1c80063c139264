"""Timestamp, rate and title parsing for human-entered values.

Timestamps are stored as text in one canonical format, YYYY-MM-DD HH:MM:SS.
Input also accepts the minute-precision variant YYYY-MM-DD HH:MM.
"""

import math
from datetime import datetime

from tasktracker.core.errors import ParseError, ValidationError

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
INPUT_FORMATS = (TIME_FORMAT, "%Y-%m-%d %H:%M")
TIME_FORMAT_HINT = "YYYY-MM-DD HH:MM:SS"


def format_timestamp(value: datetime) -> str:
    """Format a datetime in the canonical storage format."""
    return value.strftime(TIME_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """Parse a timestamp in the canonical (or minute-precision) format.

    Raises:
        ParseError: If the text matches none of the accepted formats.
    """
    cleaned = text.strip()
    for fmt in INPUT_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    raise ParseError(f"Invalid timestamp {text!r}, expected {TIME_FORMAT_HINT}")


def parse_rate(text: str) -> float:
    """Parse an hourly rate such as "20", "20.5" or "20,50".

    Raises:
        ParseError: If the text is not a finite number.
        ValidationError: If the rate is negative.
    """
    cleaned = text.strip().replace(",", ".")
    try:
        rate = float(cleaned)
    except ValueError:
        raise ParseError(f"Invalid hourly rate {text!r}") from None
    if not math.isfinite(rate):
        raise ParseError(f"Invalid hourly rate {text!r}")
    return validate_rate(rate)


def validate_rate(rate: float) -> float:
    """Check that an hourly rate is finite and non-negative."""
    if not math.isfinite(rate):
        raise ValidationError(f"Hourly rate must be a finite number, got {rate}")
    if rate < 0:
        raise ValidationError(f"Hourly rate must not be negative, got {rate}")
    return float(rate)


def parse_title(text: str) -> str:
    """Strip a title and reject empty ones."""
    title = text.strip()
    if not title:
        raise ValidationError("Title must not be empty")
    return title


def format_duration(seconds: int) -> str:
    """Format seconds as HH:MM:SS (hours may exceed 24)."""
    neg = seconds < 0
    seconds = abs(int(seconds))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    sign = "-" if neg else ""
    return f"{sign}{h:02d}:{m:02d}:{s:02d}"


def format_money(amount: float) -> str:
    """Format a money amount with two decimals."""
    return f"{amount:.2f}"
