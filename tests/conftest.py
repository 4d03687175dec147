"""Pytest fixtures for cal-import tests.

This module provides test fixtures that ensure:
1. No Google API calls are made (the Calendar service is a MagicMock)
2. Settings come only from what each test sets
3. Event times use a fixed timezone rather than the machine's local one
"""

from datetime import datetime
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest

from cal_import.calendar.google_calendar import GoogleCalendarClient
from cal_import.models.event import EventRecord

SETTINGS_ENV_VARS = (
    "GOOGLE_CREDENTIALS_FILE",
    "CALENDAR_ID",
    "GOOGLE_CALENDAR_SCOPES",
    "TIMEZONE",
    "DEFAULT_YEAR",
    "LOG_LEVEL",
)

SAMPLE_EVENT_FILE = """\
2018 January 19
7:00pm – 9:00pm
Book club
Bring the second half of the novel
Snacks provided

2018 January 26
7pm - 8:30pm
Choir rehearsal

2018 February 2
10am - 12pm
Team brunch
"""


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Clear settings environment and cache so each test starts clean."""
    from cal_import.config import get_settings

    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a stray .env in the working directory out of the settings
    monkeypatch.chdir(tmp_path)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_service() -> MagicMock:
    """Mock Calendar v3 service resource."""
    service = MagicMock()
    service.events.return_value.insert.return_value.execute.return_value = {
        "id": "created-event-id",
        "status": "confirmed",
    }
    return service


@pytest.fixture
def calendar_client(mock_service: MagicMock) -> GoogleCalendarClient:
    """Calendar client wrapping the mock service."""
    return GoogleCalendarClient(mock_service)


@pytest.fixture
def eastern() -> ZoneInfo:
    return ZoneInfo("America/New_York")


@pytest.fixture
def sample_events(eastern: ZoneInfo) -> list[EventRecord]:
    """The events described by SAMPLE_EVENT_FILE."""
    return [
        EventRecord(
            start=datetime(2018, 1, 19, 19, 0, tzinfo=eastern),
            end=datetime(2018, 1, 19, 21, 0, tzinfo=eastern),
            summary="Book club",
            description="Bring the second half of the novel\nSnacks provided",
        ),
        EventRecord(
            start=datetime(2018, 1, 26, 19, 0, tzinfo=eastern),
            end=datetime(2018, 1, 26, 20, 30, tzinfo=eastern),
            summary="Choir rehearsal",
        ),
        EventRecord(
            start=datetime(2018, 2, 2, 10, 0, tzinfo=eastern),
            end=datetime(2018, 2, 2, 12, 0, tzinfo=eastern),
            summary="Team brunch",
        ),
    ]


@pytest.fixture
def sample_event_text() -> str:
    return SAMPLE_EVENT_FILE


@pytest.fixture
def event_file(tmp_path):
    """SAMPLE_EVENT_FILE written to disk."""
    path = tmp_path / "events.txt"
    path.write_text(SAMPLE_EVENT_FILE, encoding="utf-8")
    return path
