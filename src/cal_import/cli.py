"""Command-line interface for importing events into a calendar."""

from __future__ import annotations

import argparse
import logging
import sys
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from cal_import import __version__
from cal_import.calendar import GoogleCalendarClient
from cal_import.config import Settings, get_settings
from cal_import.exceptions import CalImportError
from cal_import.importer import EventImporter
from cal_import.models import EventRecord
from cal_import.parser import read_event_file

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


class UsageError(CalImportError):
    """Raised when a required option is neither given nor configured."""


def _zone(value: str) -> ZoneInfo:
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise argparse.ArgumentTypeError(f"unknown timezone: '{value}'") from e


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cal-import",
        description="Insert events described in a text file into a Google Calendar",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    creds_parent = argparse.ArgumentParser(add_help=False)
    creds_parent.add_argument(
        "--creds",
        help="Credentials JSON file (default: $GOOGLE_CREDENTIALS_FILE)",
    )

    id_parent = argparse.ArgumentParser(add_help=False)
    id_parent.add_argument(
        "--id",
        dest="calendar_id",
        help="ID of calendar, typically the user's email address "
        "(default: $CALENDAR_ID)",
    )

    parse_parent = argparse.ArgumentParser(add_help=False)
    parse_parent.add_argument("events", help="Event file to read")
    parse_parent.add_argument(
        "--tz",
        type=_zone,
        help="Timezone for event times (default: $TIMEZONE or local time)",
    )
    parse_parent.add_argument(
        "--year",
        type=int,
        help="Year for date lines without one (default: $DEFAULT_YEAR or this year)",
    )

    # Import command
    import_parser = subparsers.add_parser(
        "import",
        parents=[parse_parent, creds_parent, id_parent],
        help="Insert events from a file",
    )
    import_parser.add_argument(
        "--start",
        type=int,
        default=1,
        help="1-based event to start inserting at",
    )
    import_parser.add_argument(
        "--end",
        type=int,
        default=-1,
        help="1-based event to end inserting at, inclusive",
    )
    import_parser.add_argument(
        "--doit",
        action="store_true",
        help="Nothing is inserted unless this is provided",
    )
    import_parser.set_defaults(handler=_cmd_import)

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        parents=[parse_parent],
        help="Parse an event file and print the events",
    )
    check_parser.set_defaults(handler=_cmd_check)

    # Calendars command
    calendars_parser = subparsers.add_parser(
        "calendars",
        parents=[creds_parent],
        help="List calendars the credentials can access",
    )
    calendars_parser.set_defaults(handler=_cmd_calendars)

    # Events command
    events_parser = subparsers.add_parser(
        "events",
        parents=[creds_parent, id_parent],
        help="List upcoming events in a calendar",
    )
    events_parser.set_defaults(handler=_cmd_events)

    return parser


def _require(value: str | None, option: str, env_var: str) -> str:
    if not value:
        raise UsageError(f"need {option} (or set {env_var})")
    return value


def _read_events(args: argparse.Namespace, settings: Settings) -> list[EventRecord]:
    tz = args.tz if args.tz is not None else settings.tzinfo
    year = args.year if args.year is not None else settings.default_year
    return read_event_file(args.events, tz=tz, default_year=year)


def _credentials_file(args: argparse.Namespace, settings: Settings) -> str:
    return _require(
        args.creds or settings.google_credentials_file,
        "--creds",
        "GOOGLE_CREDENTIALS_FILE",
    )


def _client(creds: str, settings: Settings) -> GoogleCalendarClient:
    return GoogleCalendarClient.from_credentials_file(
        creds, scopes=settings.google_calendar_scopes
    )


def _calendar_id(args: argparse.Namespace, settings: Settings) -> str:
    return _require(args.calendar_id or settings.calendar_id, "--id", "CALENDAR_ID")


def _cmd_import(args: argparse.Namespace, settings: Settings) -> int:
    creds = _credentials_file(args, settings)
    calendar_id = _calendar_id(args, settings)
    events = _read_events(args, settings)

    client = _client(creds, settings) if args.doit else None
    importer = EventImporter(client, calendar_id)
    importer.run(events, start=args.start, end=args.end, confirm=args.doit)
    return EXIT_OK


def _cmd_check(args: argparse.Namespace, settings: Settings) -> int:
    events = _read_events(args, settings)
    for number, event in enumerate(events, start=1):
        print(f"{number}: {event}")
    print(f"{len(events)} events.")
    return EXIT_OK


def _cmd_calendars(args: argparse.Namespace, settings: Settings) -> int:
    client = _client(_credentials_file(args, settings), settings)
    for i, calendar in enumerate(client.list_calendars()):
        print(f"{i}: {calendar}")
    return EXIT_OK


def _cmd_events(args: argparse.Namespace, settings: Settings) -> int:
    calendar_id = _calendar_id(args, settings)
    client = _client(_credentials_file(args, settings), settings)
    for i, event in enumerate(client.list_events(calendar_id)):
        print(f"{i}: {event}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"error: invalid configuration:\n{e}", file=sys.stderr)
        return EXIT_USAGE

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.handler(args, settings)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except CalImportError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
