"""Date helpers shared by the store, scheduler and widget provider.

Local calendar math always runs in the system's named timezone (via
tzlocal), so day boundaries and recurrence keep the wall-clock time across
DST transitions.
"""

from __future__ import annotations

import calendar
from datetime import UTC, date, datetime, time, timedelta, tzinfo

import tzlocal


def utc_now() -> datetime:
    return datetime.now(UTC)


def local_zone() -> tzinfo:
    """The system timezone, e.g. ZoneInfo('America/New_York')."""
    return tzlocal.get_localzone()


def local_now() -> datetime:
    return datetime.now(local_zone())


def ensure_aware(value: datetime) -> datetime:
    """Attach the local timezone to naive datetimes."""
    if value.tzinfo is None:
        return value.replace(tzinfo=local_zone())
    return value


def to_local(value: datetime) -> datetime:
    return ensure_aware(value).astimezone(local_zone())


def to_storage(value: datetime | None) -> str | None:
    """Serialize a datetime as a fixed-width UTC ISO string.

    Fixed microsecond precision keeps lexical order equal to time order.
    """
    if value is None:
        return None
    return ensure_aware(value).astimezone(UTC).isoformat(timespec="microseconds")


def from_storage(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def local_midnight(day: date) -> datetime:
    return datetime.combine(day, time(), tzinfo=local_zone())


def start_of_day(value: datetime) -> datetime:
    """Local midnight at the start of the calendar day containing *value*."""
    return local_midnight(to_local(value).date())


def next_midnight(value: datetime) -> datetime:
    """Local midnight at the start of the following calendar day."""
    return local_midnight(to_local(value).date() + timedelta(days=1))


def add_days(value: datetime, days: int) -> datetime:
    """Shift by whole local calendar days, keeping the wall-clock time."""
    local = to_local(value)
    return datetime.combine(local.date() + timedelta(days=days), local.timetz())


def add_months(value: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def format_due(value: datetime) -> str:
    """Medium date + short time, e.g. 'Oct 18, 2026 at 9:00 AM'."""
    local = to_local(value)
    hour = local.strftime("%I").lstrip("0") or "12"
    return f"{local.strftime('%b')} {local.day}, {local.year} at {hour}:{local.strftime('%M %p')}"
