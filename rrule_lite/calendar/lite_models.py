"""Data models for recurrence processing - rrule_lite."""

from __future__ import annotations

import calendar as _calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Frequency(str, Enum):
    """Supported recurrence frequencies."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class EndType(str, Enum):
    """How a recurring series ends."""

    NEVER = "never"
    UNTIL = "until"
    COUNT = "count"


# Weekday index 0 = Sunday, matching the store and UI convention
WEEKDAY_CODES: tuple[str, ...] = ("SU", "MO", "TU", "WE", "TH", "FR", "SA")
WEEKDAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def sunday_weekday(d: date) -> int:
    """Return the weekday index of ``d`` with 0 = Sunday."""
    return d.isoweekday() % 7


def _naive(dt: datetime) -> datetime:
    """Drop tzinfo, keeping the wall-clock reading."""
    return dt.replace(tzinfo=None) if dt.tzinfo is not None else dt


class RecurrencePattern(BaseModel):
    """Structured recurrence description (UI/API form of a rule string).

    Accepts both snake_case field names and the camelCase names used by the
    JSON API (``daysOfWeek``, ``dayOfMonth``, ``endType``, ``endDate``).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    frequency: Frequency = Field(..., description="Step unit of the series")
    interval: int = Field(default=1, ge=1, description="Step multiplier")
    days_of_week: tuple[int, ...] = Field(
        default=(), description="Weekday indices 0-6 (0 = Sunday), weekly only"
    )
    day_of_month: Optional[int] = Field(
        default=None, ge=1, le=31, description="Day of month 1-31, monthly only"
    )
    end_type: EndType = Field(default=EndType.NEVER, description="End condition")
    end_date: Optional[date] = Field(default=None, description="Last date for until patterns")
    occurrences: Optional[int] = Field(
        default=None, ge=1, description="Total occurrences for count patterns"
    )

    @field_validator("days_of_week", mode="before")
    @classmethod
    def _normalize_days(cls, value: Any) -> tuple[int, ...]:
        if value is None:
            return ()
        for day in value:
            if not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6:
                raise ValueError(f"weekday index out of range 0-6: {day!r}")
        return tuple(sorted(set(value)))

    @model_validator(mode="after")
    def _check_invariants(self) -> RecurrencePattern:
        if self.days_of_week and self.frequency != Frequency.WEEKLY:
            raise ValueError("days_of_week is only meaningful for weekly patterns")
        if self.day_of_month is not None and self.frequency != Frequency.MONTHLY:
            raise ValueError("day_of_month is only meaningful for monthly patterns")

        if self.end_type == EndType.UNTIL:
            if self.end_date is None:
                raise ValueError("end_date is required when end_type is 'until'")
            if self.occurrences is not None:
                raise ValueError("occurrences must be unset when end_type is 'until'")
        elif self.end_type == EndType.COUNT:
            if self.occurrences is None:
                raise ValueError("occurrences is required when end_type is 'count'")
            if self.end_date is not None:
                raise ValueError("end_date must be unset when end_type is 'count'")
        elif self.end_date is not None or self.occurrences is not None:
            raise ValueError("end_date/occurrences must be unset when end_type is 'never'")
        return self

    @property
    def has_explicit_weekdays(self) -> bool:
        """True for weekly patterns with a weekday selection."""
        return self.frequency == Frequency.WEEKLY and bool(self.days_of_week)


class RecurrenceSuggestion(BaseModel):
    """Recurrence payload produced by the natural-language event assistant.

    Example::

        {"frequency": "weekly", "interval": 1,
         "days_of_week": ["tuesday", "thursday"], "until": "2025-12-31"}
    """

    model_config = ConfigDict(extra="ignore")

    frequency: Frequency
    interval: int = Field(default=1, ge=1)
    days_of_week: list[str] = Field(default_factory=list)
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)
    until: Optional[date] = None
    count: Optional[int] = Field(default=None, ge=1)

    @field_validator("frequency", mode="before")
    @classmethod
    def _lower_frequency(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class InstanceKey(BaseModel):
    """Stable identity of a materialized calendar instance.

    Two fields instead of a concatenated string so an origin id containing the
    separator can never collide with another series.
    """

    model_config = ConfigDict(frozen=True)

    origin_id: str = Field(..., description="Id of the base event")
    occurrence: Optional[datetime] = Field(
        default=None, description="Start of the occurrence; None for non-recurring events"
    )

    @property
    def epoch_millis(self) -> Optional[int]:
        """Occurrence instant in milliseconds, wall-clock read as UTC."""
        if self.occurrence is None:
            return None
        occ = _naive(self.occurrence)
        return _calendar.timegm(occ.timetuple()) * 1000 + occ.microsecond // 1000

    def __str__(self) -> str:
        if self.occurrence is None:
            return self.origin_id
        return f"{self.origin_id}_{self.epoch_millis}"


class CalendarEvent(BaseModel):
    """Calendar event as stored, or as materialized for display.

    Only ``id``, ``start``, ``end`` and the rule are interpreted here. Every
    other field the store sends (title, color, location, member ids, ...) is
    kept as an extra field and copied onto each materialized instance.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    id: str = Field(..., description="Event ID")
    start: datetime = Field(..., alias="start_time", description="Start, naive wall-clock")
    end: Optional[datetime] = Field(default=None, alias="end_time", description="End, naive wall-clock")
    recurrence_rule: Optional[str] = Field(default=None, description="Persisted rule string")

    # Expansion tracking
    is_expanded_instance: bool = Field(
        default=False, description="True if generated from a recurrence rule"
    )
    instance_key: Optional[InstanceKey] = Field(
        default=None, description="Identity of the materialized instance"
    )

    @field_validator("start", "end")
    @classmethod
    def _wall_clock(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive(value) if value is not None else None

    @property
    def key(self) -> InstanceKey:
        """Instance identity; pass-through events are keyed by their own id."""
        return self.instance_key or InstanceKey(origin_id=self.id)

    @property
    def is_recurring(self) -> bool:
        """True when the event carries a non-blank rule string."""
        return bool(self.recurrence_rule and self.recurrence_rule.strip())

    @property
    def duration(self) -> Optional[timedelta]:
        """End minus start, or None for open-ended events."""
        if self.end is None:
            return None
        return self.end - self.start

    @field_serializer("start", "end", when_used="unless-none")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime fields to ISO format."""
        return dt.isoformat()
