"""Occurrence generation for rrule_lite.

Turns a rule (or parsed pattern) plus an anchor date into the ordered list of
dates the series lands on. Time of day is not handled here; see the
materializer.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from .lite_datetime_utils import DateLike, add_months, add_years, as_date
from .lite_models import EndType, Frequency, RecurrencePattern, sunday_weekday
from .lite_rule_codec import rule_to_pattern

logger = logging.getLogger(__name__)

# Hard ceiling on loop iterations, as a multiple of the requested limit
ITERATION_MULTIPLIER = 100


def occurrences(
    rule: Optional[str],
    anchor_start: DateLike,
    limit: int,
    lower_bound: Optional[DateLike] = None,
) -> list[date]:
    """Generate occurrence dates for a rule string.

    Args:
        rule: Rule string, e.g. ``"FREQ=WEEKLY;BYDAY=MO,WE"``
        anchor_start: First, defining start of the series
        limit: Maximum number of dates to return
        lower_bound: Optional earliest date to return. Occurrences before it
            still count towards COUNT.

    Returns:
        Strictly increasing list of dates; empty if the rule does not parse
    """
    pattern = rule_to_pattern(rule)
    if pattern is None:
        return []
    return occurrences_for_pattern(pattern, anchor_start, limit, lower_bound)


def occurrences_for_pattern(
    pattern: RecurrencePattern,
    anchor_start: DateLike,
    limit: int,
    lower_bound: Optional[DateLike] = None,
) -> list[date]:
    """Generate occurrence dates for an already-parsed pattern.

    See ``occurrences`` for the argument semantics.
    """
    if limit < 1:
        return []

    anchor = as_date(anchor_start)
    after = as_date(lower_bound) if lower_bound is not None else None
    max_iterations = limit * ITERATION_MULTIPLIER

    if pattern.has_explicit_weekdays:
        return _weekday_occurrences(pattern, anchor, limit, after, max_iterations)
    return _stepped_occurrences(pattern, anchor, limit, after, max_iterations)


def _series_ended(pattern: RecurrencePattern, candidate: date, ordinal: int) -> bool:
    """True once ``candidate`` (the ``ordinal``-th of the series) is past the end."""
    if pattern.end_type == EndType.UNTIL and pattern.end_date is not None:
        return candidate > pattern.end_date
    if pattern.end_type == EndType.COUNT and pattern.occurrences is not None:
        return ordinal > pattern.occurrences
    return False


def _weekday_occurrences(
    pattern: RecurrencePattern,
    anchor: date,
    limit: int,
    after: Optional[date],
    max_iterations: int,
) -> list[date]:
    """Weekly series with an explicit weekday selection.

    Weeks start on Sunday. Every ``interval``-th week starting with the
    anchor's week contributes each selected weekday, in ascending order.
    """
    days = pattern.days_of_week
    first_week = anchor - timedelta(days=sunday_weekday(anchor))
    week_span = 7 * pattern.interval
    in_first_week = sum(1 for d in days if first_week + timedelta(days=d) >= anchor)

    # Skip straight to the series week containing the lower bound
    week_index = 0
    if after is not None and after > first_week:
        week_index = (after - first_week).days // week_span
    generated = 0 if week_index == 0 else in_first_week + (week_index - 1) * len(days)

    found: list[date] = []
    iteration = 0
    while len(found) < limit and iteration < max_iterations:
        iteration += 1
        try:
            week_start = first_week + timedelta(days=week_index * week_span)
        except OverflowError:
            logger.debug("Weekly expansion ran past the supported date range")
            return found

        for day in days:
            candidate = week_start + timedelta(days=day)
            if candidate < anchor:
                continue
            generated += 1
            if _series_ended(pattern, candidate, generated):
                return found
            if after is not None and candidate < after:
                continue
            found.append(candidate)
            if len(found) >= limit:
                return found

        week_index += 1

    if len(found) < limit and iteration >= max_iterations:
        logger.debug("Weekly expansion stopped at iteration ceiling (%d)", max_iterations)
    return found


def _advance(pattern: RecurrencePattern, cursor: date) -> date:
    """Move ``cursor`` forward one frequency step.

    Monthly steps re-clamp to ``day_of_month`` when it is set; otherwise a
    day lost to a short month stays lost (Jan 31, Feb 28, Mar 28, ...).
    """
    if pattern.frequency == Frequency.DAILY:
        return cursor + timedelta(days=pattern.interval)
    if pattern.frequency == Frequency.WEEKLY:
        return cursor + timedelta(weeks=pattern.interval)
    if pattern.frequency == Frequency.MONTHLY:
        return add_months(cursor, pattern.interval, pattern.day_of_month)
    return add_years(cursor, pattern.interval)


def _skip_to(pattern: RecurrencePattern, anchor: date, after: Optional[date]) -> tuple[date, int]:
    """Cursor position on or after ``after`` and the number of steps taken to reach it."""
    if after is None or after <= anchor:
        return anchor, 0

    if pattern.frequency in (Frequency.DAILY, Frequency.WEEKLY):
        # Fixed-length steps: the cursor position is plain arithmetic
        span = pattern.interval * (7 if pattern.frequency == Frequency.WEEKLY else 1)
        steps = -(-(after - anchor).days // span)
        return anchor + timedelta(days=steps * span), steps

    cursor, steps = anchor, 0
    while cursor < after:
        cursor = _advance(pattern, cursor)
        steps += 1
    return cursor, steps


def _stepped_occurrences(
    pattern: RecurrencePattern,
    anchor: date,
    limit: int,
    after: Optional[date],
    max_iterations: int,
) -> list[date]:
    """Daily, monthly, yearly and single-weekday weekly series.

    A single cursor starts at the anchor and advances one frequency step per
    iteration.
    """
    try:
        cursor, ordinal = _skip_to(pattern, anchor, after)
    except (OverflowError, ValueError):
        logger.debug("Lower bound %s is past the supported date range", after)
        return []

    found: list[date] = []
    iteration = 0
    while len(found) < limit and iteration < max_iterations:
        iteration += 1

        # Series ordinal counts from the anchor, not from the lower bound
        ordinal += 1
        if _series_ended(pattern, cursor, ordinal):
            break
        if after is None or cursor >= after:
            found.append(cursor)

        try:
            cursor = _advance(pattern, cursor)
        except (OverflowError, ValueError):
            logger.debug("Expansion ran past the supported date range")
            break

    if len(found) < limit and iteration >= max_iterations:
        logger.debug("Expansion stopped at iteration ceiling (%d)", max_iterations)
    return found
