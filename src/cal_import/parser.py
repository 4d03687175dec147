"""Event file parser.

## File Format

Events are separated by one or more blank lines. Each event is:

```
2018 January 19
7:00pm – 9:00pm
summary
optional description line 1
optional description line 2
...
```

- Line 1: the date. The year may come first or last and may be omitted,
  in which case the default year is used. A leading weekday name
  ("Friday January 19") is ignored. Months may be full names or the
  three-letter abbreviations ("Jan", "Sep"); "Sept" is also accepted, but no
  other four-letter forms are.
- Line 2: the time range. An en-dash is treated as a hyphen. Times use a
  12-hour clock with an am/pm suffix, with or without minutes ("7pm",
  "5:30pm").
- Line 3: the summary (event title).
- Remaining lines: the description, joined with newlines.

Both times share the event's date and are interpreted in the given timezone,
or the machine's local timezone when none is given.
"""

from __future__ import annotations

import calendar
import logging
import re
from datetime import date, datetime, time, tzinfo
from pathlib import Path

from pydantic import ValidationError

from cal_import.exceptions import EventFileError, EventParseError
from cal_import.models.event import EventRecord

logger = logging.getLogger(__name__)

# A line holding nothing but whitespace ends an event block
BLANK_LINE_PATTERN = re.compile(r"\n\s*\n")

EN_DASH = "–"

# Tried in order: "7pm" before "7:30pm"
TIME_FORMATS = ("%I%p", "%I:%M%p")

DATE_FORMATS = ("%Y %B %d", "%Y %b %d")

WEEKDAY_NAMES = frozenset(
    name.lower() for name in (*calendar.day_name, *calendar.day_abbr)
)

# Abbreviations strptime does not know, mapped to ones it does
MONTH_ALIASES = {"sept": "Sep"}


def split_blocks(text: str) -> list[str]:
    """Split event file text into per-event blocks.

    Leading and trailing blank lines are ignored, and runs of blank lines
    count as a single separator.
    """
    text = text.replace("\r\n", "\n").strip()
    if not text:
        return []
    return BLANK_LINE_PATTERN.split(text)


def parse_date(value: str, default_year: int | None = None) -> date:
    """Parse a date line such as '2018 January 17'.

    Args:
        value: The date line
        default_year: Year to use when the line has none (default: current year)

    Returns:
        The parsed date

    Raises:
        EventParseError: If the line is not a recognizable date
    """
    tokens = value.replace(",", " ").split()
    if tokens and tokens[0].lower() in WEEKDAY_NAMES:
        tokens = tokens[1:]

    if len(tokens) == 3 and tokens[-1].isdigit() and len(tokens[-1]) == 4:
        # "January 17 2018"
        tokens = [tokens[-1], *tokens[:-1]]
    elif len(tokens) == 2:
        year = default_year if default_year is not None else date.today().year
        tokens = [str(year), *tokens]

    tokens = [MONTH_ALIASES.get(token.lower(), token) for token in tokens]

    candidate = " ".join(tokens)
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue

    raise EventParseError(f"bad date line: {value!r}", text=value)


def parse_time(value: str, on: date, tz: tzinfo | None = None) -> datetime:
    """Parse a 12-hour clock time and combine it with a date.

    Args:
        value: Time such as '7pm', '5:30pm' or '5:30 PM'
        on: Date the time falls on
        tz: Timezone for the result (default: local timezone)

    Returns:
        Timezone-aware datetime

    Raises:
        EventParseError: If the value matches neither time format
    """
    compact = "".join(value.split())
    for fmt in TIME_FORMATS:
        try:
            clock = datetime.strptime(compact, fmt).time()
        except ValueError:
            continue
        return _localize(on, clock, tz)

    raise EventParseError(f"bad time: {value.strip()!r}", text=value)


def _localize(on: date, clock: time, tz: tzinfo | None) -> datetime:
    if tz is not None:
        return datetime.combine(on, clock, tzinfo=tz)
    # Naive datetimes are treated as local time by astimezone()
    return datetime.combine(on, clock).astimezone()


def parse_event(
    block: str,
    tz: tzinfo | None = None,
    default_year: int | None = None,
) -> EventRecord:
    """Parse one event block.

    Raises:
        EventParseError: If the block is malformed
    """
    lines = [line.strip().replace(EN_DASH, "-") for line in block.split("\n")]
    if len(lines) < 3:
        raise EventParseError(f"too few lines: {block!r}", text=block)

    date_line, time_line, summary = lines[0], lines[1], lines[2]
    description = "\n".join(lines[3:]).rstrip("\n")

    times = time_line.split("-")
    if len(times) != 2:
        raise EventParseError(f"bad time line: {time_line!r}", text=time_line)

    on = parse_date(date_line, default_year)
    start = parse_time(times[0], on, tz)
    end = parse_time(times[1], on, tz)

    try:
        return EventRecord(
            start=start,
            end=end,
            summary=summary,
            description=description,
        )
    except ValidationError as e:
        message = "; ".join(err["msg"] for err in e.errors())
        raise EventParseError(message, text=block) from e


def parse_events(
    text: str,
    tz: tzinfo | None = None,
    default_year: int | None = None,
) -> list[EventRecord]:
    """Parse every event in event file text.

    The first malformed block aborts parsing; no partial list is returned.

    Raises:
        EventParseError: With `block` set to the 1-based failing block
    """
    events = []
    for number, block in enumerate(split_blocks(text), start=1):
        try:
            event = parse_event(block, tz=tz, default_year=default_year)
        except EventParseError as e:
            e.block = number
            raise
        logger.debug(f"Parsed event {number}: {event}")
        events.append(event)
    return events


def read_event_file(
    path: str | Path,
    tz: tzinfo | None = None,
    default_year: int | None = None,
) -> list[EventRecord]:
    """Read and parse an event file.

    Args:
        path: Path to a UTF-8 event file
        tz: Timezone for event times (default: local timezone)
        default_year: Year for date lines without one

    Returns:
        Parsed events in file order

    Raises:
        EventFileError: If the file cannot be read
        EventParseError: If any event is malformed
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise EventFileError(f"Cannot read event file {path}: {e}") from e

    events = parse_events(text, tz=tz, default_year=default_year)
    logger.info(f"Read {len(events)} events from {path}")
    return events
