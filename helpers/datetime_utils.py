"""Local calendar-date helpers.

Dates travel through the app as zero-padded ``YYYY-MM-DD`` strings, so plain
string comparison orders them chronologically. Everything here works on the
host's local clock; there is no timezone handling.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import List, Optional

ISO_FORMAT = "%Y-%m-%d"


def to_iso(value: date) -> str:
    return value.strftime(ISO_FORMAT)


def parse_iso(value: str) -> date:
    """Parse ``YYYY-MM-DD`` into a ``date``; raises ``ValueError`` otherwise."""
    return datetime.strptime(value, ISO_FORMAT).date()


def is_iso_date(value: object) -> bool:
    if not isinstance(value, str) or len(value) != 10:
        return False
    try:
        parse_iso(value)
    except ValueError:
        return False
    return True


def today_iso(now: Optional[datetime] = None) -> str:
    current = now or datetime.now()
    return to_iso(current.date())


def add_days(value: str, days: int) -> str:
    """Shift an ISO date by ``days`` calendar days (month/year roll-over safe)."""
    return to_iso(parse_iso(value) + timedelta(days=days))


def weekday_index(value: str) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6."""
    # date.weekday() is Monday = 0
    return (parse_iso(value).weekday() + 1) % 7


def date_range(start: str, days: int) -> List[str]:
    first = parse_iso(start)
    return [to_iso(first + timedelta(days=i)) for i in range(days)]


def format_hm(hour: int, minute: int) -> Optional[str]:
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return f"{hour:02d}:{minute:02d}"


def current_hm(now: Optional[datetime] = None) -> str:
    current = now or datetime.now()
    return f"{current.hour:02d}:{current.minute:02d}"


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_time_input(value: str | None) -> Optional[str]:
    """Normalize ``HH:MM``, ``HH.MM`` or short ``930`` input to ``HH:mm``."""

    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    for sep in (":", "."):
        if sep in text:
            head, _, tail = text.partition(sep)
            if len(tail) != 2:
                return None
            hours, minutes = _parse_int(head), _parse_int(tail)
            if hours is None or minutes is None:
                return None
            return format_hm(hours, minutes)

    # short hhmm (e.g. 930 -> 09:30)
    if len(text) in {3, 4} and text.isdigit():
        hours = _parse_int(text[:-2])
        minutes = _parse_int(text[-2:])
        if hours is not None and minutes is not None:
            return format_hm(hours, minutes)

    return None


def is_hm(value: object) -> bool:
    return isinstance(value, str) and len(value) == 5 and parse_time_input(value) == value


def format_day_label(value: str, *, today: Optional[str] = None) -> str:
    """Heading for a date: ``Today``/``Tomorrow``/``Yesterday`` or ``Monday, Jan 8``."""
    current = today or today_iso()
    if value == current:
        return "Today"
    if value == add_days(current, 1):
        return "Tomorrow"
    if value == add_days(current, -1):
        return "Yesterday"
    d = parse_iso(value)
    return f"{d.strftime('%A')}, {d.strftime('%b')} {d.day}"


__all__ = [
    "add_days",
    "current_hm",
    "date_range",
    "format_day_label",
    "format_hm",
    "is_hm",
    "is_iso_date",
    "parse_iso",
    "parse_time_input",
    "to_iso",
    "today_iso",
    "weekday_index",
]
