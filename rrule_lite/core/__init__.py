"""Configuration helpers for rrule_lite."""
