"""Command-line entry for rrule_lite.

Small CLI over the recurrence engine: materialize an events file for a
window, describe a rule in English, or list the dates a rule lands on.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, NoReturn, Optional

import yaml
from pydantic import ValidationError

from . import _init_logging
from .calendar.lite_datetime_utils import parse_date, parse_datetime
from .calendar.lite_models import CalendarEvent
from .calendar.lite_occurrences import occurrences
from .calendar.lite_rule_codec import parse_rule
from .config_loader import Config, load_config
from .domain.lite_describer import describe
from .domain.lite_materializer import expand
from .exceptions import EventSourceError, RecurrenceLiteError
from .lite_logging import configure_lite_logging, get_logging_status

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 2


def _date_arg(value: str) -> date:
    try:
        return parse_date(value)
    except (ValueError, OverflowError) as exc:
        raise argparse.ArgumentTypeError(f"not a date: {value!r}") from exc


def _datetime_arg(value: str) -> datetime:
    try:
        return parse_datetime(value)
    except (ValueError, OverflowError) as exc:
        raise argparse.ArgumentTypeError(f"not a date/time: {value!r}") from exc


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the rrule_lite CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="rrule_lite",
        description="rrule_lite - recurrence rules for the household calendar",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m rrule_lite expand events.yaml --from 2025-01-01 --to 2025-01-31
  python -m rrule_lite describe "FREQ=WEEKLY;BYDAY=MO,WE"
  python -m rrule_lite occurrences "FREQ=MONTHLY;BYMONTHDAY=31" --anchor 2025-01-31
        """,
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="YAML config file (default: ./rrule_lite.yaml if present)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    expand_cmd = sub.add_parser("expand", help="Materialize an events file for a window")
    expand_cmd.add_argument("events_file", metavar="EVENTS_FILE", help="YAML or JSON list of events")
    expand_cmd.add_argument(
        "--from", dest="window_start", type=_date_arg, help="First day of the window (default: today)"
    )
    expand_cmd.add_argument(
        "--to",
        dest="window_end",
        type=_date_arg,
        help="Last day of the window (default: window start + default_window_days)",
    )
    expand_cmd.add_argument(
        "--now", type=_datetime_arg, help="Current time used for ended-series checks (default: now)"
    )

    describe_cmd = sub.add_parser("describe", help="Describe a rule string in English")
    describe_cmd.add_argument("rule", metavar="RULE")

    occ_cmd = sub.add_parser("occurrences", help="List the dates a rule lands on")
    occ_cmd.add_argument("rule", metavar="RULE")
    occ_cmd.add_argument("--anchor", type=_date_arg, required=True, help="First date of the series")
    occ_cmd.add_argument("--limit", type=int, default=10, help="Maximum dates to print (default: 10)")
    occ_cmd.add_argument("--after", type=_date_arg, help="Only print dates on or after this day")

    return parser


def load_events(path: str | Path) -> list[CalendarEvent]:
    """Read store records from a YAML or JSON file.

    Args:
        path: File holding a list of event records

    Returns:
        Validated events

    Raises:
        EventSourceError: If the file cannot be read, is not a list, or a
            record fails validation
    """
    p = Path(path)
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except OSError as exc:
        raise EventSourceError(f"Cannot read events file {p}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise EventSourceError(f"Cannot parse events file {p}: {exc}") from exc

    if raw is None:
        return []
    if not isinstance(raw, list):
        raise EventSourceError(f"Events file {p} must contain a list of events")

    events = []
    for index, record in enumerate(raw):
        try:
            events.append(CalendarEvent.model_validate(record))
        except ValidationError as exc:
            raise EventSourceError(f"Event #{index} in {p} is invalid: {exc}") from exc
    logger.debug("Loaded %d events from %s", len(events), p)
    return events


def _event_to_json(event: CalendarEvent) -> dict[str, Any]:
    data = event.model_dump(mode="json", by_alias=True, exclude={"instance_key"})
    data["key"] = str(event.key)
    return data


def _cmd_expand(args: argparse.Namespace, config: Config) -> int:
    now = args.now or datetime.now()
    window_start = args.window_start or now.date()
    window_end = args.window_end or window_start + timedelta(days=config.default_window_days)

    events = load_events(args.events_file)
    instances = expand(events, window_start, window_end, now, settings=config)
    print(json.dumps([_event_to_json(e) for e in instances], indent=2))
    return EXIT_OK


def _cmd_describe(args: argparse.Namespace, config: Config) -> int:
    print(describe(parse_rule(args.rule)))
    return EXIT_OK


def _cmd_occurrences(args: argparse.Namespace, config: Config) -> int:
    # Strict parse so a bad rule is reported instead of printing nothing
    parse_rule(args.rule)
    for day in occurrences(args.rule, args.anchor, args.limit, lower_bound=args.after):
        print(day.isoformat())
    return EXIT_OK


_COMMANDS = {
    "expand": _cmd_expand,
    "describe": _cmd_describe,
    "occurrences": _cmd_occurrences,
}


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Run the rrule_lite CLI.

    Exits with status 2 when the engine reports a RecurrenceLiteError.
    """
    parser = _create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        _init_logging("DEBUG" if args.debug else config.log_level)
        configure_lite_logging(debug_mode=args.debug, log_level=config.log_level)
        logger.debug("Logger levels: %s", get_logging_status())
        sys.exit(_COMMANDS[args.command](args, config))
    except RecurrenceLiteError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(EXIT_ERROR)


if __name__ == "__main__":
    main()
