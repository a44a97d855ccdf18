from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def studio_tz() -> ZoneInfo:
    """Timezone used to decide which calendar day a moment belongs to."""
    name = "UTC"
    if has_app_context():
        name = current_app.config.get("STUDIO_TIMEZONE") or "UTC"
    return ZoneInfo(name)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 datetime string and normalize to UTC-naive datetime.

    - None / "" -> None
    - "YYYY-MM-DDTHH:MM" (naive) is interpreted as UTC
    - "...Z" or "...+/-HH:MM" is converted to UTC and tzinfo is stripped
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None

    # Accept trailing Z
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)

    # Normalize to UTC-naive
    if dt.tzinfo is None:
        # interpret naive as UTC
        return dt.replace(tzinfo=None)

    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_calendar_date(value) -> Optional[date]:
    """
    Normalize a booking/report date to calendar-day granularity.

    - date -> unchanged
    - datetime (UTC-naive) -> studio-local date
    - "YYYY-MM-DD" -> that date
    - full ISO datetime string -> studio-local date of that moment

    Raises ValueError for anything else.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_studio_date(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Not a date: {value!r}")

    s = value.strip()
    if not s:
        return None
    if len(s) == 10:
        return date.fromisoformat(s)
    return to_studio_date(parse_iso_datetime(s))


def to_studio_date(dt: datetime) -> date:
    """Calendar day (studio timezone) of a datetime; naive values are UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(studio_tz()).date()


def studio_today(now: Optional[datetime] = None) -> date:
    return to_studio_date(now or utcnow())


def studio_day_bounds(day: date) -> tuple[datetime, datetime]:
    """
    UTC-naive [start, end) range covering one studio-local calendar day.
    """
    tz = studio_tz()
    start_local = datetime.combine(day, time.min, tzinfo=tz)
    end_local = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return (
        start_local.astimezone(timezone.utc).replace(tzinfo=None),
        end_local.astimezone(timezone.utc).replace(tzinfo=None),
    )


def studio_month_bounds(day: date) -> tuple[datetime, datetime]:
    """UTC-naive [start, end) range covering the studio-local month of `day`."""
    first = day.replace(day=1)
    if first.month == 12:
        next_first = first.replace(year=first.year + 1, month=1)
    else:
        next_first = first.replace(month=first.month + 1)
    return studio_day_bounds(first)[0], studio_day_bounds(next_first)[0]


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")
