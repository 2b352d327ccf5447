"""Event merging and ordering for rrule_lite.

Combines materialized recurring instances with pass-through events into the
single time-ordered list the calendar view renders.
"""

import logging
from collections.abc import Iterable

from ..calendar.lite_models import CalendarEvent

logger = logging.getLogger(__name__)


class LiteEventMerger:
    """Merges, de-duplicates and orders calendar events."""

    def merge_expanded_events(
        self,
        passthrough_events: Iterable[CalendarEvent],
        expanded_events: Iterable[CalendarEvent],
    ) -> list[CalendarEvent]:
        """Merge pass-through events with expanded instances.

        Args:
            passthrough_events: Non-recurring events (and events whose rule could
                not be read), unchanged
            expanded_events: Materialized recurring instances

        Returns:
            De-duplicated list ordered by ``sort_events``
        """
        passthrough = list(passthrough_events)
        expanded = list(expanded_events)
        merged = self.deduplicate_events(passthrough + expanded)

        logger.debug(
            "Merged %d pass-through + %d expanded = %d total events",
            len(passthrough),
            len(expanded),
            len(merged),
        )
        return self.sort_events(merged)

    def deduplicate_events(self, events: Iterable[CalendarEvent]) -> list[CalendarEvent]:
        """Drop repeated expanded instances, keeping the first one seen.

        Expanded instances are duplicates when their instance keys are equal,
        i.e. the same origin id and the same occurrence. Pass-through events
        carry no instance key and are always kept, even when ids repeat.

        Args:
            events: Events to de-duplicate

        Returns:
            Events in their original order with repeats removed
        """
        seen = set()
        deduplicated = []
        total = 0

        for event in events:
            total += 1
            key = event.instance_key
            if key is not None:
                if key in seen:
                    continue
                seen.add(key)
            deduplicated.append(event)

        if total != len(deduplicated):
            logger.debug("Removed %d duplicate events", total - len(deduplicated))

        return deduplicated

    def sort_events(self, events: Iterable[CalendarEvent]) -> list[CalendarEvent]:
        """Order events by start time.

        Ties on start time are broken by origin id; events that still tie keep
        their arrival order (the sort is stable).
        """
        return sorted(events, key=lambda e: (e.start, e.key.origin_id))
