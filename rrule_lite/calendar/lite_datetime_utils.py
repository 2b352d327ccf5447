"""Date and time helpers for recurrence processing - rrule_lite.

All values are naive local wall-clock; timezone-aware inputs are reduced to
their wall-clock reading.
"""

import calendar
import logging
from datetime import date, datetime, time
from typing import Optional, Union

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]

UNTIL_FORMAT = "%Y%m%dT%H%M%SZ"
END_OF_DAY = time(23, 59, 59)


def as_date(value: DateLike) -> date:
    """Return the calendar date of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def to_wall_clock(dt: datetime) -> datetime:
    """Strip tzinfo from ``dt`` without converting it."""
    if dt.tzinfo is not None:
        return dt.replace(tzinfo=None)
    return dt


def window_start_bound(value: DateLike) -> datetime:
    """Lower window bound as a datetime; a plain date means start of that day."""
    if isinstance(value, datetime):
        return to_wall_clock(value)
    return datetime.combine(value, time.min)


def window_end_bound(value: DateLike) -> datetime:
    """Upper window bound as a datetime; a plain date means end of that day."""
    if isinstance(value, datetime):
        return to_wall_clock(value)
    return datetime.combine(value, time.max)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def add_months(d: date, months: int, day_of_month: Optional[int] = None) -> date:
    """Add ``months`` to ``d``.

    relativedelta already clamps to the last day of short months. When
    ``day_of_month`` is given the result is moved to
    ``min(day_of_month, days_in_target_month)``.
    """
    shifted = d + relativedelta(months=months)
    if day_of_month is None:
        return shifted
    return shifted.replace(day=min(day_of_month, days_in_month(shifted.year, shifted.month)))


def add_years(d: date, years: int) -> date:
    """Add ``years`` to ``d``; Feb 29 falls back to Feb 28 in common years."""
    return d + relativedelta(years=years)


def format_until(end_date: date) -> str:
    """Render the UNTIL value for ``end_date`` as an end-of-day instant."""
    return datetime.combine(end_date, END_OF_DAY).strftime(UNTIL_FORMAT)


def parse_until(value: str) -> Optional[date]:
    """Parse an UNTIL value and return its calendar date.

    Accepts ``YYYYMMDD``, ``YYYYMMDDTHHMMSS`` and ``YYYYMMDDTHHMMSSZ``.
    Returns None for anything else.
    """
    text = value.strip().upper()
    if len(text) < 8 or not text[:8].isdigit():
        logger.debug("Unparseable UNTIL value %r", value)
        return None
    try:
        return datetime.strptime(text[:8], "%Y%m%d").date()
    except ValueError:
        logger.debug("UNTIL value %r is not a valid calendar date", value)
        return None


def parse_datetime(value: str) -> datetime:
    """Parse an ISO-ish timestamp into a naive wall-clock datetime.

    Raises:
        ValueError: If the string cannot be parsed
    """
    try:
        parsed = dateutil_parser.isoparse(value)
    except ValueError:
        parsed = dateutil_parser.parse(value)
    return to_wall_clock(parsed)


def parse_date(value: str) -> date:
    """Parse a date string (time part, if any, is discarded).

    Raises:
        ValueError: If the string cannot be parsed
    """
    return parse_datetime(value).date()
