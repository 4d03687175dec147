"""Exceptions raised by cal-import.

Library code raises these; the CLI is the only place that catches them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cal_import.importer import ImportResult


class CalImportError(Exception):
    """Base exception for cal-import errors."""


class EventFileError(CalImportError):
    """Raised when an event file cannot be read."""


class EventParseError(EventFileError, ValueError):
    """Raised when an event block cannot be parsed.

    Attributes:
        text: The offending text (block, line or time value)
        block: 1-based block number within the file, if known
    """

    def __init__(self, message: str, text: str = "", block: int | None = None):
        super().__init__(message)
        self.message = message
        self.text = text
        self.block = block

    def __str__(self) -> str:
        if self.block is not None:
            return f"event {self.block}: {self.message}"
        return self.message


class ImportRangeError(CalImportError, ValueError):
    """Raised when the requested event range selects nothing."""


class CalendarError(CalImportError):
    """Base exception for calendar service errors."""


class CalendarAuthError(CalendarError):
    """Raised when credentials cannot be loaded."""


class CalendarAPIError(CalendarError):
    """Raised when the calendar API rejects a request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class ImportAborted(CalImportError):
    """Raised when an insert fails part way through an import.

    Attributes:
        result: Events inserted before the failure
        index: 1-based index of the event that failed
    """

    def __init__(self, message: str, result: ImportResult, index: int):
        super().__init__(message)
        self.result = result
        self.index = index
