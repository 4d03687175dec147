"""Event import service.

Inserts parsed events into a calendar.

## Import Process

1. Resolve the 1-based inclusive event range against the parsed events
2. Report the selected range
3. Without confirmation, stop there (dry run)
4. Otherwise insert the selected events one at a time, in file order
5. Stop at the first failed insert; events already inserted stay inserted
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from cal_import.exceptions import CalendarError, ImportAborted, ImportRangeError
from cal_import.models.event import EventRecord

logger = logging.getLogger(__name__)


class EventInserter(Protocol):
    """Anything that can insert an event into a calendar."""

    def insert_event(self, calendar_id: str, event: EventRecord) -> dict: ...


@dataclass
class ImportResult:
    """Result of an import run."""

    first_index: int  # 0-based, inclusive
    last_index: int  # 0-based, inclusive
    selected: list[EventRecord] = field(default_factory=list)
    inserted: list[EventRecord] = field(default_factory=list)
    dry_run: bool = True

    @property
    def count(self) -> int:
        """Number of events inserted."""
        return len(self.inserted)

    @property
    def complete(self) -> bool:
        return not self.dry_run and len(self.inserted) == len(self.selected)


def resolve_range(count: int, start: int = 1, end: int = -1) -> tuple[int, int]:
    """Convert a 1-based inclusive range to 0-based inclusive indices.

    An `end` below 1 or past the last event selects through the last event.

    Args:
        count: Number of parsed events
        start: 1-based first event
        end: 1-based last event, inclusive

    Returns:
        Tuple of (first, last) 0-based indices

    Raises:
        ImportRangeError: If the range selects no events
    """
    if count <= 0:
        raise ImportRangeError("No events to import")
    if start < 1:
        raise ImportRangeError(f"Start must be at least 1, got {start}")

    first = start - 1
    last = end - 1
    if last < 0 or last >= count:
        last = count - 1

    if first > last:
        raise ImportRangeError(
            f"Start {start} is past the last selected event {last + 1} "
            f"(of {count})"
        )
    return first, last


class EventImporter:
    """Inserts a range of events into one calendar.

    Example:
        ```python
        importer = EventImporter(client, "me@example.com")
        result = importer.run(events, start=2, end=5, confirm=True)
        ```
    """

    def __init__(
        self,
        client: EventInserter | None,
        calendar_id: str,
        echo: Callable[[str], None] = print,
    ):
        """Initialize the importer.

        Args:
            client: Calendar client used for inserts; may be None for dry runs
            calendar_id: Calendar to insert into
            echo: Receives user-facing progress lines
        """
        self.client = client
        self.calendar_id = calendar_id
        self.echo = echo

    def run(
        self,
        events: Sequence[EventRecord],
        start: int = 1,
        end: int = -1,
        confirm: bool = False,
    ) -> ImportResult:
        """Import events `start` through `end` (1-based, inclusive).

        Args:
            events: Parsed events in file order
            start: 1-based first event
            end: 1-based last event, inclusive; below 1 means the last event
            confirm: Nothing is inserted unless this is True

        Returns:
            ImportResult describing what was selected and inserted

        Raises:
            ImportRangeError: If the range selects nothing
            ImportAborted: If an insert fails; carries the partial result
        """
        first, last = resolve_range(len(events), start, end)
        result = ImportResult(
            first_index=first,
            last_index=last,
            selected=list(events[first : last + 1]),
            dry_run=not confirm,
        )
        self.echo(f"start={first}, end={last}")

        if not confirm:
            self.echo("provide --doit to insert")
            logger.info(f"Dry run: {len(result.selected)} events selected")
            return result

        if self.client is None:
            raise ValueError("A calendar client is required to insert events")

        for index in range(first, last + 1):
            event = events[index]
            try:
                self.client.insert_event(self.calendar_id, event)
            except CalendarError as e:
                logger.error(f"Insert of event {index + 1} failed: {e}")
                raise ImportAborted(
                    f"event {index + 1}: {e} ({result.count} events inserted "
                    "before the failure)",
                    result=result,
                    index=index + 1,
                ) from e
            result.inserted.append(event)
            self.echo(f"inserted {event}")

        self.echo(f"inserted {result.count} events.")
        logger.info(f"Inserted {result.count} events into {self.calendar_id}")
        return result
