"""Rule codec, occurrence generation and models for rrule_lite."""
