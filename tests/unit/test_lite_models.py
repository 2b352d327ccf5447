"""Unit tests for rrule_lite.calendar.lite_models."""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from rrule_lite.calendar.lite_models import (
    CalendarEvent,
    EndType,
    Frequency,
    InstanceKey,
    RecurrencePattern,
    sunday_weekday,
)

pytestmark = pytest.mark.unit


class TestRecurrencePattern:
    """Tests for RecurrencePattern validation."""

    def test_defaults(self):
        """Interval defaults to 1 and the series never ends."""
        pattern = RecurrencePattern(frequency="daily")

        assert pattern.frequency is Frequency.DAILY
        assert pattern.interval == 1
        assert pattern.days_of_week == ()
        assert pattern.end_type is EndType.NEVER

    def test_days_are_sorted_and_deduplicated(self):
        """Weekday selection is normalized to a sorted unique tuple."""
        pattern = RecurrencePattern(frequency="weekly", days_of_week=[5, 1, 3, 1])
        assert pattern.days_of_week == (1, 3, 5)

    def test_camel_case_aliases_accepted(self):
        """The JSON API field names validate directly."""
        pattern = RecurrencePattern.model_validate(
            {
                "frequency": "weekly",
                "daysOfWeek": [3, 1],
                "endType": "until",
                "endDate": "2025-12-31",
            }
        )

        assert pattern.days_of_week == (1, 3)
        assert pattern.end_type is EndType.UNTIL
        assert pattern.end_date == date(2025, 12, 31)

    def test_has_explicit_weekdays(self):
        """Only weekly patterns with a selection use weekday expansion."""
        assert RecurrencePattern(frequency="weekly", days_of_week=[2]).has_explicit_weekdays
        assert not RecurrencePattern(frequency="weekly").has_explicit_weekdays

    def test_pattern_is_frozen(self):
        """Patterns are immutable values."""
        pattern = RecurrencePattern(frequency="daily")
        with pytest.raises(ValidationError):
            pattern.interval = 3  # type: ignore[misc]

    @pytest.mark.parametrize(
        "fields",
        [
            {"frequency": "daily", "interval": 0},
            {"frequency": "weekly", "days_of_week": [7]},
            {"frequency": "weekly", "days_of_week": [-1]},
            {"frequency": "monthly", "days_of_week": [1]},
            {"frequency": "weekly", "day_of_month": 3},
            {"frequency": "monthly", "day_of_month": 32},
            {"frequency": "daily", "end_type": "until"},
            {"frequency": "daily", "end_type": "count"},
            {"frequency": "daily", "end_type": "count", "occurrences": 0},
            {"frequency": "daily", "end_date": "2025-01-01"},
            {"frequency": "daily", "end_type": "until", "end_date": "2025-01-01", "occurrences": 2},
            {"frequency": "hourly"},
        ],
    )
    def test_invalid_patterns_rejected(self, fields):
        """Invariant violations raise ValidationError."""
        with pytest.raises(ValidationError):
            RecurrencePattern(**fields)


class TestSundayWeekday:
    """Tests for the Sunday-based weekday index."""

    @pytest.mark.parametrize(
        "day,expected",
        [
            (date(2025, 1, 5), 0),  # Sunday
            (date(2025, 1, 6), 1),  # Monday
            (date(2025, 1, 11), 6),  # Saturday
        ],
    )
    def test_index(self, day, expected):
        assert sunday_weekday(day) == expected


class TestInstanceKey:
    """Tests for InstanceKey identity."""

    def test_string_form_uses_epoch_millis(self):
        """Legacy key format is '<origin>_<epoch ms>' with wall-clock read as UTC."""
        key = InstanceKey(origin_id="evt-1", occurrence=datetime(2025, 1, 6, 9, 0))

        assert key.epoch_millis == 1736154000000
        assert str(key) == "evt-1_1736154000000"

    def test_non_recurring_key(self):
        """A key without an occurrence renders as the bare id."""
        key = InstanceKey(origin_id="evt-1")

        assert key.epoch_millis is None
        assert str(key) == "evt-1"

    def test_ids_with_separator_do_not_collide(self):
        """Keys compare on both fields, not on the rendered string."""
        when = datetime(2025, 1, 6, 9, 0)
        first = InstanceKey(origin_id="a_b", occurrence=when)
        second = InstanceKey(origin_id="a", occurrence=when)

        assert first != second
        assert len({first, second}) == 2

    def test_equal_keys_hash_equal(self):
        when = datetime(2025, 1, 6, 9, 0)
        assert hash(InstanceKey(origin_id="x", occurrence=when)) == hash(
            InstanceKey(origin_id="x", occurrence=when)
        )


class TestCalendarEvent:
    """Tests for CalendarEvent."""

    def test_store_aliases_accepted(self):
        """start_time/end_time from the store map to start/end."""
        event = CalendarEvent.model_validate(
            {
                "id": "evt-1",
                "start_time": "2025-01-06T09:00:00",
                "end_time": "2025-01-06T10:30:00",
            }
        )

        assert event.start == datetime(2025, 1, 6, 9, 0)
        assert event.duration == timedelta(minutes=90)

    def test_extra_fields_are_kept(self):
        """Unknown fields pass through untouched."""
        event = CalendarEvent(
            id="evt-1", start=datetime(2025, 1, 6, 9), title="Piano", member_ids=["m1"]
        )

        assert event.title == "Piano"  # type: ignore[attr-defined]
        assert event.model_dump()["member_ids"] == ["m1"]

    def test_aware_datetimes_reduced_to_wall_clock(self):
        """Timezone info is dropped without converting the reading."""
        tz = timezone(timedelta(hours=-5))
        event = CalendarEvent(id="evt-1", start=datetime(2025, 1, 6, 9, 0, tzinfo=tz))

        assert event.start == datetime(2025, 1, 6, 9, 0)
        assert event.start.tzinfo is None

    def test_key_defaults_to_own_id(self):
        event = CalendarEvent(id="evt-1", start=datetime(2025, 1, 6, 9))
        assert event.key == InstanceKey(origin_id="evt-1")

    @pytest.mark.parametrize(
        "rule,expected",
        [(None, False), ("", False), ("   ", False), ("FREQ=DAILY", True)],
    )
    def test_is_recurring(self, rule, expected):
        event = CalendarEvent(id="evt-1", start=datetime(2025, 1, 6, 9), recurrence_rule=rule)
        assert event.is_recurring is expected

    def test_open_ended_event_has_no_duration(self):
        event = CalendarEvent(id="evt-1", start=datetime(2025, 1, 6, 9))
        assert event.duration is None

    def test_serializes_iso_datetimes(self):
        event = CalendarEvent(id="evt-1", start=datetime(2025, 1, 6, 9))
        dumped = event.model_dump(mode="json", by_alias=True)

        assert dumped["start_time"] == "2025-01-06T09:00:00"
        assert dumped["end_time"] is None
