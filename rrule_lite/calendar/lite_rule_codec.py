"""Rule string codec for rrule_lite.

Maps a structured ``RecurrencePattern`` to the persisted rule string and back.

Rule string format (RFC 5545 RRULE subset)::

    FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE;UNTIL=20251231T235959Z
    FREQ=MONTHLY;BYMONTHDAY=15;COUNT=6

Reading is forgiving: unknown keys, unknown BYDAY tokens and malformed values
are dropped, and a rule without a usable FREQ reads as "no recurrence".
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import ValidationError

from ..exceptions import RuleParseError
from .lite_datetime_utils import DateLike, format_until, parse_until
from .lite_models import (
    WEEKDAY_CODES,
    WEEKDAY_NAMES,
    EndType,
    Frequency,
    RecurrencePattern,
    RecurrenceSuggestion,
)

logger = logging.getLogger(__name__)

RULE_PREFIX = "RRULE:"

_DAY_NAME_LOOKUP: dict[str, int] = {}
for _index, _name in enumerate(WEEKDAY_NAMES):
    _DAY_NAME_LOOKUP[_name.lower()] = _index
    _DAY_NAME_LOOKUP[_name[:3].lower()] = _index
    _DAY_NAME_LOOKUP[WEEKDAY_CODES[_index].lower()] = _index


def pattern_to_rule(pattern: RecurrencePattern, anchor_start: Optional[DateLike] = None) -> str:
    """Serialize a pattern to its rule string.

    Args:
        pattern: Pattern to serialize
        anchor_start: Start of the series. Not encoded; the series start is
            stored on the event itself.

    Returns:
        Rule string, e.g. ``"FREQ=WEEKLY;BYDAY=MO,WE"``
    """
    parts = [f"FREQ={pattern.frequency.value.upper()}"]

    if pattern.interval > 1:
        parts.append(f"INTERVAL={pattern.interval}")

    if pattern.frequency == Frequency.WEEKLY and pattern.days_of_week:
        days = ",".join(WEEKDAY_CODES[d] for d in sorted(set(pattern.days_of_week)))
        parts.append(f"BYDAY={days}")

    if pattern.frequency == Frequency.MONTHLY and pattern.day_of_month:
        parts.append(f"BYMONTHDAY={pattern.day_of_month}")

    if pattern.end_type == EndType.UNTIL and pattern.end_date is not None:
        parts.append(f"UNTIL={format_until(pattern.end_date)}")
    elif pattern.end_type == EndType.COUNT and pattern.occurrences:
        parts.append(f"COUNT={pattern.occurrences}")

    return ";".join(parts)


def _split_rule(rule: str) -> dict[str, str]:
    """Tokenize a rule string into an upper-cased key -> value mapping."""
    text = rule.strip()
    if text.upper().startswith(RULE_PREFIX):
        text = text[len(RULE_PREFIX):]

    rules: dict[str, str] = {}
    for part in text.split(";"):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        key = key.strip().upper()
        value = value.strip()
        if key and value:
            rules[key] = value
    return rules


def _positive_int(rules: dict[str, str], key: str) -> Optional[int]:
    raw = rules.get(key)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r in rule", key, raw)
        return None
    if value < 1:
        logger.warning("Ignoring non-positive %s=%r in rule", key, raw)
        return None
    return value


def _parse_byday(raw: str) -> list[int]:
    days = []
    for token in raw.split(","):
        code = token.strip().upper()
        if code in WEEKDAY_CODES:
            days.append(WEEKDAY_CODES.index(code))
        elif code:
            # e.g. "1MO" / "-1FR" from a richer rule producer
            logger.debug("Dropping unsupported BYDAY token %r", token)
    return days


def parse_rule(rule: Optional[str]) -> RecurrencePattern:
    """Parse a rule string into a pattern.

    Args:
        rule: Rule string

    Returns:
        Parsed pattern

    Raises:
        RuleParseError: If the rule is empty or FREQ is missing or unknown
    """
    if not rule or not rule.strip():
        raise RuleParseError("Empty rule string")

    rules = _split_rule(rule)

    freq_raw = rules.get("FREQ", "").lower()
    try:
        frequency = Frequency(freq_raw)
    except ValueError:
        raise RuleParseError(f"Rule has missing or unsupported FREQ: {rule!r}") from None

    fields: dict[str, Any] = {
        "frequency": frequency,
        "interval": _positive_int(rules, "INTERVAL") or 1,
    }

    if "BYDAY" in rules:
        if frequency == Frequency.WEEKLY:
            fields["days_of_week"] = _parse_byday(rules["BYDAY"])
        else:
            logger.debug("Ignoring BYDAY on %s rule", frequency.value)

    if "BYMONTHDAY" in rules:
        day_of_month = _positive_int(rules, "BYMONTHDAY")
        if frequency != Frequency.MONTHLY:
            logger.debug("Ignoring BYMONTHDAY on %s rule", frequency.value)
        elif day_of_month is not None and day_of_month <= 31:
            fields["day_of_month"] = day_of_month
        else:
            logger.warning("Ignoring out-of-range BYMONTHDAY=%r", rules["BYMONTHDAY"])

    until = parse_until(rules["UNTIL"]) if "UNTIL" in rules else None
    count = _positive_int(rules, "COUNT")
    if "UNTIL" in rules and until is None:
        logger.warning("Ignoring malformed UNTIL=%r in rule", rules["UNTIL"])

    # UNTIL takes precedence when both are present
    if until is not None:
        fields["end_type"] = EndType.UNTIL
        fields["end_date"] = until
    elif count is not None:
        fields["end_type"] = EndType.COUNT
        fields["occurrences"] = count

    try:
        return RecurrencePattern(**fields)
    except ValidationError as e:
        raise RuleParseError(f"Rule does not form a valid pattern: {rule!r}") from e


def rule_to_pattern(rule: Optional[str]) -> Optional[RecurrencePattern]:
    """Parse a rule string, returning None when it is not a usable rule.

    Callers treat None as "not recurring".
    """
    try:
        return parse_rule(rule)
    except RuleParseError as e:
        logger.debug("Treating rule as non-recurring: %s", e)
        return None


def pattern_from_suggestion(payload: Optional[Mapping[str, Any]]) -> Optional[RecurrencePattern]:
    """Build a pattern from the event assistant's recurrence payload.

    Args:
        payload: Mapping with ``frequency`` and optional ``interval``,
            ``days_of_week`` (day names), ``day_of_month``, ``until``
            (``YYYY-MM-DD``) and ``count``

    Returns:
        Pattern, or None if the payload is missing or invalid
    """
    if not payload:
        return None

    try:
        suggestion = RecurrenceSuggestion.model_validate(dict(payload))
    except ValidationError as e:
        logger.warning("Ignoring invalid recurrence suggestion %r: %s", payload, e)
        return None

    fields: dict[str, Any] = {
        "frequency": suggestion.frequency,
        "interval": suggestion.interval,
    }

    if suggestion.frequency == Frequency.WEEKLY and suggestion.days_of_week:
        days = []
        for name in suggestion.days_of_week:
            index = _DAY_NAME_LOOKUP.get(name.strip().lower())
            if index is None:
                logger.debug("Dropping unknown day name %r", name)
                continue
            days.append(index)
        fields["days_of_week"] = days

    if suggestion.frequency == Frequency.MONTHLY and suggestion.day_of_month:
        fields["day_of_month"] = suggestion.day_of_month

    if suggestion.until is not None:
        fields["end_type"] = EndType.UNTIL
        fields["end_date"] = suggestion.until
    elif suggestion.count is not None:
        fields["end_type"] = EndType.COUNT
        fields["occurrences"] = suggestion.count

    return RecurrencePattern(**fields)
