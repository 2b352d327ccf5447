"""Human-readable recurrence descriptions for rrule_lite."""

from typing import Optional

from ..calendar.lite_models import WEEKDAY_NAMES, EndType, Frequency, RecurrencePattern
from ..calendar.lite_rule_codec import rule_to_pattern

FALLBACK_DESCRIPTION = "Repeating"

# Fixed English names; strftime %b follows the process locale
MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)

_UNIT_NAMES = {
    Frequency.DAILY: ("day", "days"),
    Frequency.WEEKLY: ("week", "weeks"),
    Frequency.MONTHLY: ("month", "months"),
    Frequency.YEARLY: ("year", "years"),
}


def ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 23 -> '23rd'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _join_names(names: list[str]) -> str:
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def describe(pattern: RecurrencePattern) -> str:
    """Describe a pattern in one English sentence.

    Examples:
        >>> describe(RecurrencePattern(frequency="weekly", interval=2, days_of_week=[1, 3]))
        'Every 2 weeks on Monday and Wednesday'
        >>> describe(RecurrencePattern(frequency="monthly", day_of_month=15))
        'Every month on the 15th'
    """
    singular, plural = _UNIT_NAMES[pattern.frequency]
    interval = pattern.interval

    if interval == 1:
        text = f"Every {singular}"
    else:
        text = f"Every {interval} {plural}"

    if pattern.frequency == Frequency.WEEKLY and pattern.days_of_week:
        names = [WEEKDAY_NAMES[d] for d in sorted(pattern.days_of_week)]
        if len(names) == 7:
            text = "Every day" if interval == 1 else f"Every {interval} weeks, every day"
        elif interval == 1:
            text = f"Every {_join_names(names)}"
        else:
            text = f"Every {interval} weeks on {_join_names(names)}"

    if pattern.frequency == Frequency.MONTHLY and pattern.day_of_month:
        text += f" on the {ordinal(pattern.day_of_month)}"

    if pattern.end_type == EndType.UNTIL and pattern.end_date is not None:
        end = pattern.end_date
        text += f", until {MONTH_ABBREVIATIONS[end.month - 1]} {end.day}, {end.year}"
    elif pattern.end_type == EndType.COUNT and pattern.occurrences:
        times = "time" if pattern.occurrences == 1 else "times"
        text += f", {pattern.occurrences} {times}"

    return text


def describe_rule(rule: Optional[str]) -> str:
    """Describe a rule string, or return 'Repeating' if it cannot be read."""
    pattern = rule_to_pattern(rule)
    if pattern is None:
        return FALLBACK_DESCRIPTION
    return describe(pattern)
