"""
Parsing and formatting of the date/time strings exchanged with integrations.

Voice agents and workflow tools send dates either ISO style (2026-01-05) or
German style (5.1.2026 / 05.01.2026) and times as HH:MM (optionally HH:MM:SS).
"""
import re
from datetime import date, datetime, time
from typing import Optional

from booking_api.core.exceptions import ValidationError

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
GERMAN_DATE_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")
TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")

GERMAN_WEEKDAYS = [
    "Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag",
]


def parse_date(value: Optional[str], field: str = "date") -> date:
    """Parse YYYY-MM-DD or DD.MM.YYYY into a date."""
    if not value or not value.strip():
        raise ValidationError(f"Missing required field: {field}")

    value = value.strip()
    try:
        if ISO_DATE_RE.match(value):
            return datetime.strptime(value, "%Y-%m-%d").date()

        match = GERMAN_DATE_RE.match(value)
        if match:
            day, month, year = (int(part) for part in match.groups())
            return date(year, month, day)
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value}")

    raise ValidationError(
        f"Invalid {field} format: {value}. Use YYYY-MM-DD or DD.MM.YYYY"
    )


def parse_time(value: Optional[str], field: str = "time") -> time:
    """Parse HH:MM or HH:MM:SS into a time (seconds are dropped)."""
    if not value or not value.strip():
        raise ValidationError(f"Missing required field: {field}")

    match = TIME_RE.match(value.strip())
    if not match:
        raise ValidationError(f"Invalid {field} format: {value}. Use HH:MM")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValidationError(f"Invalid {field}: {value}")

    return time(hour, minute)


def format_time(value: time) -> str:
    return value.strftime("%H:%M")


def format_german_date(value: date) -> str:
    """Montag, 5.1.2026"""
    return f"{GERMAN_WEEKDAYS[value.weekday()]}, {value.day}.{value.month}.{value.year}"
