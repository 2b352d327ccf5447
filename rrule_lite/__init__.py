"""rrule_lite - recurrence engine for the household calendar.

Converts recurrence patterns to rule strings and back, generates occurrence
dates, and materializes recurring events for a display window.
"""

__version__ = "0.1.0"

from typing import Optional

from .calendar.lite_models import (
    CalendarEvent,
    EndType,
    Frequency,
    InstanceKey,
    RecurrencePattern,
)
from .calendar.lite_occurrences import occurrences, occurrences_for_pattern
from .calendar.lite_rule_codec import (
    parse_rule,
    pattern_from_suggestion,
    pattern_to_rule,
    rule_to_pattern,
)
from .domain.lite_describer import describe, describe_rule
from .domain.lite_materializer import LiteMaterializer, expand, is_recurrence_active
from .exceptions import RecurrenceLiteError, RuleParseError

__all__ = [
    "CalendarEvent",
    "EndType",
    "Frequency",
    "InstanceKey",
    "LiteMaterializer",
    "RecurrenceLiteError",
    "RecurrencePattern",
    "RuleParseError",
    "describe",
    "describe_rule",
    "expand",
    "is_recurrence_active",
    "occurrences",
    "occurrences_for_pattern",
    "parse_rule",
    "pattern_from_suggestion",
    "pattern_to_rule",
    "rule_to_pattern",
]


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream colorized output to the console.

    Honors RRULE_LITE_DEBUG (truthy values: "1", "true", "yes", "on"), which
    forces DEBUG verbosity regardless of ``level_name``.
    """
    import logging
    import os
    import sys

    from colorlog import ColoredFormatter

    debug_env = os.environ.get("RRULE_LITE_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure a handler if none is present to avoid duplicate output.
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )
