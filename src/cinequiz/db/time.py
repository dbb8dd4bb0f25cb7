# src/cinequiz/db/time.py
"""Time utilities for database models and calendar-day arithmetic.

Every notion of "today" in the application (daily rotation, participation
checks) uses the calendar of a single reference time zone.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta

import pytz

from cinequiz.core.settings import settings


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def ensure_aware(moment: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


def reference_zone(name: str | None = None) -> pytz.BaseTzInfo:
    """Return the configured reference time zone."""
    return pytz.timezone(name or settings.reference_timezone)


def local_date(moment: datetime, zone: pytz.BaseTzInfo | None = None) -> date:
    """Return the calendar date of ``moment`` in the reference zone."""
    tz = zone or reference_zone()
    return ensure_aware(moment).astimezone(tz).date()


def start_of_day(day: date, zone: pytz.BaseTzInfo | None = None) -> datetime:
    """Return local midnight of ``day`` as an aware datetime (DST-correct)."""
    tz = zone or reference_zone()
    return tz.localize(datetime.combine(day, time.min))


def next_rotation(moment: datetime, zone: pytz.BaseTzInfo | None = None) -> datetime:
    """Return the start of the calendar day following ``moment``."""
    tz = zone or reference_zone()
    return start_of_day(local_date(moment, tz) + timedelta(days=1), tz)


def day_of_year(moment: datetime, zone: pytz.BaseTzInfo | None = None) -> int:
    """Return the zero-based day of year (1 January is 0)."""
    return local_date(moment, zone).timetuple().tm_yday - 1


def same_calendar_day(
    first: datetime,
    second: datetime,
    zone: pytz.BaseTzInfo | None = None,
) -> bool:
    """Return True when both instants fall on the same reference-zone day."""
    tz = zone or reference_zone()
    return local_date(first, tz) == local_date(second, tz)
