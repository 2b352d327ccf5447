"""Unit tests for rrule_lite.domain.lite_event_merger."""

from datetime import datetime
from typing import Optional

import pytest

from rrule_lite.calendar.lite_models import CalendarEvent, InstanceKey
from rrule_lite.domain.lite_event_merger import LiteEventMerger

pytestmark = pytest.mark.unit


class TestLiteEventMerger:
    """Tests for LiteEventMerger class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.merger = LiteEventMerger()

    def create_test_event(
        self,
        uid: str,
        start: datetime,
        expanded: bool = False,
        label: Optional[str] = None,
    ) -> CalendarEvent:
        """Create a test calendar event, optionally as an expanded instance."""
        return CalendarEvent(
            id=uid,
            start=start,
            is_expanded_instance=expanded,
            instance_key=InstanceKey(origin_id=uid, occurrence=start) if expanded else None,
            label=label,
        )

    def test_merge_orders_by_start(self):
        """Pass-through and expanded events are interleaved by start time."""
        single = self.create_test_event("single", datetime(2025, 1, 7, 12))
        monday = self.create_test_event("series", datetime(2025, 1, 6, 9), expanded=True)
        wednesday = self.create_test_event("series", datetime(2025, 1, 8, 9), expanded=True)

        result = self.merger.merge_expanded_events([single], [wednesday, monday])

        assert result == [monday, single, wednesday]

    def test_merge_empty(self):
        assert self.merger.merge_expanded_events([], []) == []

    def test_deduplicate_keeps_first(self):
        """Instances with the same key collapse to the first one seen."""
        when = datetime(2025, 1, 6, 9)
        first = self.create_test_event("series", when, expanded=True, label="first")
        second = self.create_test_event("series", when, expanded=True, label="second")

        result = self.merger.deduplicate_events([first, second])

        assert len(result) == 1
        assert result[0].label == "first"

    def test_deduplicate_distinguishes_origins(self):
        """Same start, different series: both kept."""
        when = datetime(2025, 1, 6, 9)
        events = [
            self.create_test_event("a_b", when, expanded=True),
            self.create_test_event("a", when, expanded=True),
        ]

        assert len(self.merger.deduplicate_events(events)) == 2

    def test_deduplicate_keeps_pass_through_with_same_id(self):
        """Pass-through events have no instance key and are never collapsed."""
        when = datetime(2025, 1, 6, 9)
        events = [
            self.create_test_event("x", when, label="one"),
            self.create_test_event("x", when, label="two"),
        ]

        result = self.merger.deduplicate_events(events)

        assert [e.label for e in result] == ["one", "two"]

    def test_sort_tie_broken_by_origin_id(self):
        when = datetime(2025, 1, 6, 9)
        zed = self.create_test_event("zed", when)
        alpha = self.create_test_event("alpha", when)

        assert self.merger.sort_events([zed, alpha]) == [alpha, zed]

    def test_sort_is_stable_for_full_ties(self):
        """Events with equal start and origin keep arrival order."""
        when = datetime(2025, 1, 6, 9)
        first = self.create_test_event("same", when, label="first")
        second = self.create_test_event("same", when, label="second")

        result = self.merger.sort_events([first, second])

        assert [e.label for e in result] == ["first", "second"]
