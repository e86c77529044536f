"""
Recurrence expansion for repeating bookings.

``expand`` is a pure function: it only knows about calendar days. Turning a
day back into a concrete interval (same wall-clock time and duration as the
anchor, in the branch timezone) is done by ``occurrence_interval``.

Days of week follow the 0 = Sunday ... 6 = Saturday convention.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from roombook.types import (
    RECURRENCE_CUSTOM,
    RECURRENCE_DAILY,
    RECURRENCE_MONTHLY,
    RECURRENCE_WEEKLY,
)
from roombook.utils.time_utils import localize, to_local, to_utc_naive

DEFAULT_MONTHS_AHEAD = 3


def day_of_week(day: date) -> int:
    """Day of week with Sunday as 0."""
    return day.isoweekday() % 7


def add_months(day: date, months: int) -> date:
    """Shift by calendar months, clamping to the last day of a shorter month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def final_bound(anchor_date: date, end_date: Optional[date] = None,
                months_ahead: int = DEFAULT_MONTHS_AHEAD) -> date:
    """Last calendar day (inclusive) a rule may produce."""
    if end_date is not None:
        return end_date
    return add_months(anchor_date, months_ahead)


def expand(anchor_date: date, kind: str, end_date: Optional[date] = None,
           months_ahead: int = DEFAULT_MONTHS_AHEAD,
           days_of_week: Optional[Iterable[int]] = None,
           limit: Optional[int] = None) -> List[date]:
    """
    Expand a recurrence rule into occurrence dates.

    Args:
        anchor_date: Date of the primary booking (never part of the result)
        kind: 'daily', 'weekly', 'monthly' or 'custom'; anything else yields []
        end_date: Inclusive last day; defaults to anchor_date + months_ahead
        months_ahead: Horizon used when end_date is not given
        days_of_week: Days (0 = Sunday) for 'custom'
        limit: Stop once more than this many dates were found, so a caller
            can reject an oversized series without walking the whole range

    Returns:
        Ordered list of dates strictly after anchor_date (at most limit + 1)
    """
    if isinstance(anchor_date, datetime):
        anchor_date = anchor_date.date()
    if isinstance(end_date, datetime):
        end_date = end_date.date()

    selected_days = set(days_of_week or [])
    if kind == RECURRENCE_CUSTOM and not selected_days:
        return []

    matches = _matcher(anchor_date, kind, selected_days)
    if matches is None:
        return []

    last_day = final_bound(anchor_date, end_date, months_ahead)
    dates = []
    current = anchor_date + timedelta(days=1)
    while current <= last_day:
        if matches(current):
            dates.append(current)
            if limit is not None and len(dates) > limit:
                break
        if current == date.max:
            break
        current += timedelta(days=1)
    return dates


def _matcher(anchor_date, kind, selected_days):
    if kind == RECURRENCE_DAILY:
        return lambda day: True
    if kind == RECURRENCE_WEEKLY:
        anchor_weekday = day_of_week(anchor_date)
        return lambda day: day_of_week(day) == anchor_weekday
    if kind == RECURRENCE_MONTHLY:
        # Months without the anchor's day simply have no occurrence
        return lambda day: day.day == anchor_date.day
    if kind == RECURRENCE_CUSTOM:
        return lambda day: day_of_week(day) in selected_days
    return None


def occurrence_interval(day: date, anchor_start: datetime, anchor_end: datetime, tz):
    """
    Build the (start, end) UTC interval of an occurrence on ``day``.

    The anchor's local wall-clock start is kept, so a 09:00 meeting stays at
    09:00 across a DST change; the duration is copied as-is.
    """
    local_start = to_local(anchor_start, tz)
    wall_clock = datetime.combine(day, local_start.time())
    start = to_utc_naive(localize(wall_clock, tz))
    return start, start + (anchor_end - anchor_start)
