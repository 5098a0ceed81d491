# detailing/utils/time_utils.py
"""Helpers for the "HH:MM" / "YYYY-MM-DD" strings used across the schedule"""
import re
from datetime import date, datetime

from detailing.core.exceptions import ValidationError

_HHMM = re.compile(r"^(\d{2}):(\d{2})$")


def time_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight ("24:00" allowed as day end)."""
    match = _HHMM.match(value or "")
    if not match:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59 or hours > 24 or (hours == 24 and minutes != 0):
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")

    return hours * 60 + minutes


def minutes_to_time(total_minutes: int) -> str:
    """Format minutes as zero-padded "HH:MM". Hours are not wrapped at 24."""
    hours = total_minutes // 60
    minutes = total_minutes % 60
    return f"{hours:02d}:{minutes:02d}"


def add_minutes(start_time: str, duration: int) -> str:
    return minutes_to_time(time_to_minutes(start_time) + duration)


def format_display_time(value: str) -> str:
    """Format "13:30" as "1:30 PM"."""
    total = time_to_minutes(value)
    hours, minutes = (total // 60) % 24, total % 60
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {period}"


def parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD")


def day_of_week(value) -> int:
    """Weekday index with 0=Sunday ... 6=Saturday."""
    return (parse_date(value).weekday() + 1) % 7


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open overlap: [a, b) and [c, d) overlap iff a < d and b > c."""
    return start_a < end_b and end_a > start_b
