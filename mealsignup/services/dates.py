# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Calendar-date helpers: pure computation, no side effects.

The one place where incoming date values are reduced to date-only
granularity. The commitment index and the reconciler must both key slots
through ``slot_key`` so a commitment can never miss its candidate date.
"""

from collections.abc import Iterator, Mapping
from datetime import date, datetime, timedelta, timezone
from typing import Any

from mealsignup.models.domain import SlotKey

DAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


class InvalidDateError(ValueError):
    """Raised when a value cannot be read as a calendar date."""


def to_calendar_date(value: Any) -> date:
    """
    Reduce a date-like value to a calendar date.

    Accepts ``date``, ``datetime`` (wall-clock date, offset ignored), ISO-8601
    strings, epoch seconds and ``{"seconds": ..., "nanoseconds": ...}``
    timestamp mappings (read in UTC). Anything else raises InvalidDateError.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        raise InvalidDateError(f"Not a date: {value!r}")
    if isinstance(value, (int, float)):
        return _from_epoch(value)
    if isinstance(value, Mapping):
        if "seconds" not in value:
            raise InvalidDateError(f"Timestamp mapping without seconds: {value!r}")
        return _from_epoch(value["seconds"])
    if isinstance(value, str):
        return _from_iso(value.strip())
    raise InvalidDateError(f"Unsupported date value: {value!r}")


def _from_epoch(seconds: Any) -> date:
    try:
        return datetime.fromtimestamp(float(seconds), tz=timezone.utc).date()
    except (TypeError, ValueError, OverflowError, OSError) as exc:
        raise InvalidDateError(f"Bad epoch seconds: {seconds!r}") from exc


def _from_iso(raw: str) -> date:
    if not raw:
        raise InvalidDateError("Empty date string")
    try:
        if len(raw) == 10:
            return date.fromisoformat(raw)
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        return datetime.fromisoformat(raw).date()
    except ValueError as exc:
        raise InvalidDateError(f"Unparseable date string: {raw!r}") from exc


def weekday_number(day: date) -> int:
    """0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def weekday_name(day: date) -> str:
    return DAY_NAMES[weekday_number(day)]


def slot_key(team_id: str, value: Any) -> SlotKey:
    return SlotKey(str(team_id), to_calendar_date(value))


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every date from start to end inclusive, ascending. Empty when start > end."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def week_start(day: date) -> date:
    """The Sunday on or before ``day``."""
    return day - timedelta(days=weekday_number(day))


def week_end(day: date) -> date:
    """The Saturday on or after ``day``."""
    return day + timedelta(days=6 - weekday_number(day))


def month_bounds(year: int, month: int) -> tuple[date, date]:
    first = date(year, month, 1)
    if month == 12:
        last = date(year, 12, 31)
    else:
        last = date(year, month + 1, 1) - timedelta(days=1)
    return first, last
