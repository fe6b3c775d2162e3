"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from libs.common.datetime_utils import utc_now

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from libs.common.config import get_settings


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime. Always use this for stored timestamps."""
    return datetime.now(timezone.utc)


def month_bounds(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return ``[start, end)`` of the calendar month containing ``now``.

    The month is taken in the shop's local timezone and returned in UTC.
    """
    tz = ZoneInfo(get_settings().TIMEZONE)
    local_now = (now or utc_now()).astimezone(tz)
    start = local_now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
