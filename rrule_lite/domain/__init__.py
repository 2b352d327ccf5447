"""Materialization, merging and descriptions for rrule_lite."""
