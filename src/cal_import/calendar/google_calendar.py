"""Google Calendar API client.

Provides methods for interacting with Google Calendar:
- Insert events
- List calendars
- List upcoming events

## API Documentation

https://developers.google.com/calendar/api/v3/reference

## Authentication

Credentials are loaded from a JSON file, either an authorized-user file
holding a refresh token or a service-account key. Access tokens are
refreshed automatically by google-auth.

## Rate Limits

Google Calendar API has quotas:
- 1,000,000 queries per day (default)
- 500 queries per 100 seconds per user

Inserts are issued one at a time, so a large import stays well inside them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import google.auth
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from cal_import.config import CALENDAR_SCOPE
from cal_import.exceptions import CalendarAPIError, CalendarAuthError
from cal_import.models.event import EventRecord

logger = logging.getLogger(__name__)


@dataclass
class CalendarInfo:
    """Information about a calendar."""

    id: str
    summary: str
    description: str | None = None
    time_zone: str | None = None
    is_primary: bool = False
    access_role: str = "reader"  # freeBusyReader, reader, writer, owner

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> CalendarInfo:
        """Create from Google Calendar API response."""
        return cls(
            id=data["id"],
            summary=data.get("summary", ""),
            description=data.get("description"),
            time_zone=data.get("timeZone"),
            is_primary=data.get("primary", False),
            access_role=data.get("accessRole", "reader"),
        )

    def __str__(self) -> str:
        return f"ID:{self.id!r} Primary:{self.is_primary} Summary:{self.summary!r}"


@dataclass
class CalendarEvent:
    """An event read back from a calendar."""

    id: str
    calendar_id: str
    summary: str
    description: str | None = None
    start: str | None = None  # dateTime, or date for all-day events
    end: str | None = None
    is_all_day: bool = False
    html_link: str | None = None
    raw_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any], calendar_id: str) -> CalendarEvent:
        """Create from Google Calendar API response."""
        start_data = data.get("start", {})
        end_data = data.get("end", {})

        is_all_day = "date" in start_data

        return cls(
            id=data["id"],
            calendar_id=calendar_id,
            summary=data.get("summary", "(No title)"),
            description=data.get("description"),
            start=_event_time(start_data),
            end=_event_time(end_data),
            is_all_day=is_all_day,
            html_link=data.get("htmlLink"),
            raw_data=data,
        )

    def __str__(self) -> str:
        return f"Start:{self.start} End:{self.end}  Summary:{self.summary}"


def _event_time(data: dict[str, Any]) -> str | None:
    if data.get("date"):
        return data["date"]
    return data.get("dateTime")


def _api_error(action: str, e: HttpError) -> CalendarAPIError:
    status = e.resp.status if e.resp is not None else None
    body = e.content.decode("utf-8", errors="replace") if e.content else None
    return CalendarAPIError(
        f"{action} failed: {e.reason or e}",
        status_code=int(status) if status is not None else None,
        response_body=body,
    )


def _execute(request: Any, action: str) -> dict[str, Any]:
    """Execute an API request, mapping failures to CalendarError subclasses."""
    try:
        return request.execute()
    except HttpError as e:
        raise _api_error(action, e) from e
    except RefreshError as e:
        raise CalendarAuthError(f"Credentials could not be refreshed: {e}") from e
    except OSError as e:
        # Socket, SSL and timeout failures carry no HTTP status
        raise CalendarAPIError(f"{action} failed: {e}") from e


class GoogleCalendarClient:
    """Client for Google Calendar API.

    Example:
        ```python
        client = GoogleCalendarClient.from_credentials_file("creds.json")

        # Insert an event
        client.insert_event("me@example.com", event)

        # List calendars
        calendars = client.list_calendars()
        ```
    """

    def __init__(self, service: Any):
        """Initialize the client.

        Args:
            service: A Calendar v3 service resource from googleapiclient
        """
        self._service = service

    @classmethod
    def from_credentials(cls, credentials: Any) -> GoogleCalendarClient:
        """Build a client around google-auth credentials."""
        service = build(
            "calendar", "v3", credentials=credentials, cache_discovery=False
        )
        return cls(service)

    @classmethod
    def from_credentials_file(
        cls,
        path: str,
        scopes: list[str] | None = None,
    ) -> GoogleCalendarClient:
        """Build a client from a credentials JSON file.

        Args:
            path: Authorized-user or service-account JSON file
            scopes: OAuth scopes (default: full calendar access)

        Raises:
            CalendarAuthError: If the file is missing or not valid credentials
        """
        try:
            credentials, _ = google.auth.load_credentials_from_file(
                path, scopes=scopes or [CALENDAR_SCOPE]
            )
        except DefaultCredentialsError as e:
            raise CalendarAuthError(f"Cannot load credentials from {path}: {e}") from e

        logger.debug(f"Loaded credentials from {path}")
        return cls.from_credentials(credentials)

    def insert_event(self, calendar_id: str, event: EventRecord) -> dict[str, Any]:
        """Insert an event.

        Args:
            calendar_id: Calendar ID
            event: Event to insert

        Returns:
            The created event resource

        Raises:
            CalendarAPIError: If the API rejects the insert or the request fails
            CalendarAuthError: If the credentials cannot be refreshed
        """
        request = self._service.events().insert(
            calendarId=calendar_id, body=event.to_api_body()
        )
        result = _execute(request, f"Insert of {event.summary!r}")

        logger.debug(f"Inserted event {result.get('id')} into {calendar_id}")
        return result

    def list_calendars(self) -> list[CalendarInfo]:
        """List all calendars accessible to the user.

        Returns:
            List of CalendarInfo objects
        """
        calendars = []
        page_token = None

        while True:
            request = self._service.calendarList().list(pageToken=page_token)
            result = _execute(request, "Calendar list")

            for item in result.get("items", []):
                calendars.append(CalendarInfo.from_api(item))

            page_token = result.get("nextPageToken")
            if not page_token:
                break

        return calendars

    def list_events(
        self,
        calendar_id: str,
        time_min: datetime | None = None,
        max_results: int = 250,
    ) -> list[CalendarEvent]:
        """List upcoming events from a calendar.

        Args:
            calendar_id: Calendar ID (use 'primary' for primary calendar)
            time_min: Earliest end time to include (default: now)
            max_results: Maximum events per page

        Returns:
            Events ordered by start time
        """
        events = []
        page_token = None

        if time_min is None:
            time_min = datetime.now(timezone.utc)

        params: dict[str, Any] = {
            "calendarId": calendar_id,
            "maxResults": max_results,
            "singleEvents": True,  # Expand recurring events
            "orderBy": "startTime",
            "timeMin": time_min.isoformat(),
        }

        while True:
            if page_token:
                params["pageToken"] = page_token

            request = self._service.events().list(**params)
            result = _execute(request, f"Event list for {calendar_id}")

            for item in result.get("items", []):
                events.append(CalendarEvent.from_api(item, calendar_id))

            page_token = result.get("nextPageToken")
            if not page_token:
                break

        return events
