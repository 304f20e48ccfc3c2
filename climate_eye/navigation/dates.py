"""Calendar arithmetic for date-range navigation.

Pure functions over ``DateRange`` and plain ``date`` values.  "Today"
is always passed in by the caller, evaluated at the moment of the
check, never cached here.

Navigation bounds are ``[range.start, min(range.end, today)]``.
"""

from __future__ import annotations

import datetime as dt

from climate_eye.core.exceptions import ValidationError
from climate_eye.models.dates import DateRange

ONE_DAY = dt.timedelta(days=1)


class DateRangeError(ValidationError):
    """Raised when a date set violates ``start <= end <= today``."""

    default_stage = "dates"
    default_code = "DATE_RANGE_INVALID"


def default_range(today: dt.date, days: int) -> DateRange:
    """Range of ``days`` days before *today* up to and including today."""
    return DateRange(start=today - dt.timedelta(days=days), end=today)


def validate_range(start: dt.date, end: dt.date, today: dt.date) -> None:
    """Check ``start <= end <= today``.

    Raises:
        DateRangeError: Naming the violated bound.
    """
    if start > end:
        msg = f"Start date {start.isoformat()} is after end date {end.isoformat()}"
        raise DateRangeError(msg)
    if end > today:
        msg = f"End date {end.isoformat()} is after today ({today.isoformat()})"
        raise DateRangeError(msg)


def previous_date(current: dt.date, date_range: DateRange, today: dt.date) -> dt.date | None:
    """Date one step back from *current*, or ``None`` if that is before the start.

    If a range edit left *current* beyond ``min(end, today)``, the step
    lands on that bound instead of an out-of-range day.
    """
    candidate = current - ONE_DAY
    if candidate < date_range.start:
        return None
    return min(candidate, date_range.max_viewable(today))


def next_date(current: dt.date, date_range: DateRange, today: dt.date) -> dt.date | None:
    """Date one step forward from *current*, or ``None`` if already at the end.

    When the naive step overshoots ``min(end, today)`` and *current* is
    not already on it, the result is that bound itself.  This recovers
    from a range edit that moved the end backwards past *current*.
    If a range edit moved the start past *current*, the step lands on the
    start.
    """
    max_date = date_range.max_viewable(today)
    candidate = current + ONE_DAY
    if candidate > max_date:
        return max_date if current != max_date else None
    return max(candidate, date_range.start)


def can_go_previous(current: dt.date | None, date_range: DateRange) -> bool:
    """Whether ``previous_date`` would move *current*."""
    return current is not None and current - ONE_DAY >= date_range.start


def can_go_next(current: dt.date | None, date_range: DateRange, today: dt.date) -> bool:
    """Whether ``next_date`` would move *current*."""
    return current is not None and current != date_range.max_viewable(today)
