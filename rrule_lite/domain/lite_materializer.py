"""Materialization of recurring events for a display window - rrule_lite.

Expands every base event carrying a rule into concrete, displayable instances
inside the requested window, then merges them with the non-recurring events.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Union

from ..calendar.lite_datetime_utils import (
    DateLike,
    as_date,
    window_end_bound,
    window_start_bound,
)
from ..calendar.lite_models import CalendarEvent, EndType, InstanceKey, RecurrencePattern
from ..calendar.lite_occurrences import occurrences_for_pattern
from ..calendar.lite_rule_codec import rule_to_pattern
from ..core.config_manager import get_config_value
from .lite_event_merger import LiteEventMerger

logger = logging.getLogger(__name__)

DEFAULT_MAX_OCCURRENCES_PER_SERIES = 50

EventInput = Union[CalendarEvent, Mapping[str, Any]]


@dataclass
class MaterializerConfig:
    """Settings used by the materializer."""

    max_occurrences_per_series: int = DEFAULT_MAX_OCCURRENCES_PER_SERIES

    @classmethod
    def from_settings(cls, settings: Any) -> "MaterializerConfig":
        """Extract materializer settings from a settings object or dict.

        Args:
            settings: Config object, mapping, or None for defaults

        Returns:
            MaterializerConfig with values from settings or defaults
        """
        if settings is None:
            return cls()
        cap = get_config_value(
            settings, "max_occurrences_per_series", DEFAULT_MAX_OCCURRENCES_PER_SERIES
        )
        return cls(max_occurrences_per_series=int(cap))


def _pattern_is_active(pattern: RecurrencePattern, anchor_start: DateLike, now: datetime) -> bool:
    if pattern.end_type == EndType.UNTIL and pattern.end_date is not None:
        return as_date(now) <= pattern.end_date

    if pattern.end_type == EndType.COUNT and pattern.occurrences is not None:
        dates = occurrences_for_pattern(pattern, anchor_start, pattern.occurrences + 1)
        if len(dates) < pattern.occurrences:
            # Generator could not reach COUNT; treat the rule as spent
            return False
        return as_date(now) <= dates[pattern.occurrences - 1]

    return True


def is_recurrence_active(rule: Optional[str], anchor_start: DateLike, now: datetime) -> bool:
    """Check whether a series can still produce occurrences.

    Args:
        rule: Rule string
        anchor_start: Start of the series
        now: Current time, supplied by the caller

    Returns:
        False for unparseable rules and for series that ended before ``now``'s date
    """
    pattern = rule_to_pattern(rule)
    if pattern is None:
        return False
    return _pattern_is_active(pattern, anchor_start, now)


class LiteMaterializer:
    """Expands base events into the instances visible in a window."""

    def __init__(self, settings: Any = None):
        """Initialize materializer.

        Args:
            settings: Optional config object or mapping; see MaterializerConfig
        """
        config = MaterializerConfig.from_settings(settings)
        self.max_occurrences = config.max_occurrences_per_series
        self.merger = LiteEventMerger()

    def expand(
        self,
        base_events: Iterable[EventInput],
        window_start: DateLike,
        window_end: DateLike,
        now: datetime,
    ) -> list[CalendarEvent]:
        """Materialize all events for display in ``[window_start, window_end]``.

        A ``date`` bound covers that whole day; a ``datetime`` bound is exact.

        Args:
            base_events: Events from the store (models or raw records)
            window_start: First moment of the window
            window_end: Last moment of the window
            now: Current time, used to drop series that have ended

        Returns:
            Pass-through and expanded events, ordered by start time
        """
        start_bound = window_start_bound(window_start)
        end_bound = window_end_bound(window_end)
        if end_bound < start_bound:
            logger.warning("Window ends (%s) before it starts (%s)", end_bound, start_bound)

        passthrough: list[CalendarEvent] = []
        expanded: list[CalendarEvent] = []

        for raw in base_events:
            event = raw if isinstance(raw, CalendarEvent) else CalendarEvent.model_validate(raw)

            if not event.is_recurring:
                passthrough.append(event)
                continue

            pattern = rule_to_pattern(event.recurrence_rule)
            if pattern is None:
                logger.debug(
                    "Event %s has unreadable rule %r; showing it once",
                    event.id,
                    event.recurrence_rule,
                )
                passthrough.append(event)
                continue

            if not _pattern_is_active(pattern, event.start, now):
                logger.debug("Series %s has ended; skipping", event.id)
                continue

            dates = occurrences_for_pattern(
                pattern, event.start, self.max_occurrences, lower_bound=start_bound
            )
            instances = [
                inst
                for inst in self.generate_event_instances(event, dates)
                if start_bound <= inst.start <= end_bound
            ]
            logger.debug(
                "Expanded series %s into %d instances (%d dates generated)",
                event.id,
                len(instances),
                len(dates),
            )
            expanded.extend(instances)

        return self.merger.merge_expanded_events(passthrough, expanded)

    def generate_event_instances(
        self,
        master_event: CalendarEvent,
        occurrence_dates: Iterable[date],
    ) -> list[CalendarEvent]:
        """Build one instance per occurrence date.

        Each instance takes its date from the occurrence and its time of day
        and duration from the master event. All other fields are copied.

        Args:
            master_event: Recurring base event
            occurrence_dates: Dates the series lands on

        Returns:
            List of expanded CalendarEvent instances
        """
        start_time = master_event.start.time()
        duration = master_event.duration

        instances = []
        for occurrence in occurrence_dates:
            start = datetime.combine(occurrence, start_time)
            instances.append(
                master_event.model_copy(
                    update={
                        "start": start,
                        "end": start + duration if duration is not None else None,
                        "is_expanded_instance": True,
                        "instance_key": InstanceKey(origin_id=master_event.id, occurrence=start),
                    }
                )
            )
        return instances


def expand(
    base_events: Iterable[EventInput],
    window_start: DateLike,
    window_end: DateLike,
    now: datetime,
    settings: Any = None,
) -> list[CalendarEvent]:
    """Materialize ``base_events`` for a window; see ``LiteMaterializer.expand``."""
    return LiteMaterializer(settings).expand(base_events, window_start, window_end, now)
