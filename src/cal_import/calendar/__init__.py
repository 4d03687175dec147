"""Calendar integration module.

Provides integration with Google Calendar for inserting imported events
and for inspecting calendars and upcoming events.

## Google Calendar API

Uses the Google Calendar API v3:
- https://developers.google.com/calendar/api/v3/reference
"""

from cal_import.calendar.google_calendar import (
    GoogleCalendarClient,
    CalendarInfo,
    CalendarEvent,
)

__all__ = [
    "GoogleCalendarClient",
    "CalendarInfo",
    "CalendarEvent",
]
