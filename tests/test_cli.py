"""Tests for the command-line interface."""

from unittest.mock import MagicMock, patch

import pytest

from cal_import import __version__
from cal_import.calendar.google_calendar import CalendarEvent, CalendarInfo
from cal_import.cli import EXIT_ERROR, EXIT_OK, EXIT_USAGE, main
from cal_import.exceptions import CalendarAPIError, CalendarAuthError


@pytest.fixture
def mock_client_class():
    """Patch the calendar client so no credentials or network are used."""
    with patch("cal_import.cli.GoogleCalendarClient") as mock_class:
        client = MagicMock()
        client.insert_event.return_value = {"id": "created"}
        mock_class.from_credentials_file.return_value = client
        yield mock_class


def import_args(event_file, *extra: str) -> list[str]:
    return [
        "import",
        str(event_file),
        "--creds",
        "creds.json",
        "--id",
        "me@example.com",
        "--tz",
        "America/New_York",
        *extra,
    ]


class TestMain:
    """Tests for top-level CLI behaviour."""

    def test_no_command_prints_help(self, capsys):
        """Test that running with no command shows help."""
        assert main([]) == EXIT_OK
        assert "usage:" in capsys.readouterr().out

    def test_version(self, capsys):
        """Test --version."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_invalid_timezone_flag(self, event_file):
        """Test that argparse rejects unknown timezones."""
        with pytest.raises(SystemExit) as exc_info:
            main(["check", str(event_file), "--tz", "Nowhere/Special"])
        assert exc_info.value.code == EXIT_USAGE

    def test_invalid_configuration(self, event_file, monkeypatch, capsys):
        """Test that bad settings are reported as a usage error."""
        monkeypatch.setenv("TIMEZONE", "Nowhere/Special")
        assert main(["check", str(event_file)]) == EXIT_USAGE
        assert "invalid configuration" in capsys.readouterr().err


class TestCheckCommand:
    """Tests for the check command."""

    def test_prints_numbered_events(self, event_file, capsys):
        """Test that every event is printed with its 1-based index."""
        assert main(["check", str(event_file), "--tz", "America/New_York"]) == EXIT_OK

        out = capsys.readouterr().out.splitlines()
        assert out[0].startswith("1: 2018-01-19T19:00:00-05:00 - ")
        assert any(line.startswith("2: 2018-01-26T19:00:00-05:00") for line in out)
        assert out[-1] == "3 events."

    def test_timezone_from_settings(self, event_file, monkeypatch, capsys):
        """Test that TIMEZONE applies when --tz is not given."""
        monkeypatch.setenv("TIMEZONE", "Europe/Oslo")
        assert main(["check", str(event_file)]) == EXIT_OK
        assert "2018-01-19T19:00:00+01:00" in capsys.readouterr().out

    def test_year_flag(self, tmp_path, capsys):
        """Test --year for date lines without a year."""
        path = tmp_path / "events.txt"
        path.write_text("Friday January 19\n7pm - 9pm\nBook club\n", encoding="utf-8")

        assert main(["check", str(path), "--tz", "UTC", "--year", "2018"]) == EXIT_OK
        assert "2018-01-19T19:00:00+00:00" in capsys.readouterr().out

    def test_parse_error(self, tmp_path, capsys):
        """Test that a malformed file exits with an error."""
        path = tmp_path / "events.txt"
        path.write_text("2018 January 19\n7pm\nBook club\n", encoding="utf-8")

        assert main(["check", str(path)]) == EXIT_ERROR
        assert "event 1: bad time line" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        """Test that a missing file exits with an error."""
        assert main(["check", str(tmp_path / "nope.txt")]) == EXIT_ERROR
        assert "Cannot read event file" in capsys.readouterr().err


class TestImportCommand:
    """Tests for the import command."""

    def test_dry_run(self, event_file, mock_client_class, capsys):
        """Test that nothing is inserted without --doit."""
        assert main(import_args(event_file, "--start", "2")) == EXIT_OK

        out = capsys.readouterr().out.splitlines()
        assert out == ["start=1, end=2", "provide --doit to insert"]
        mock_client_class.from_credentials_file.assert_not_called()

    def test_doit_inserts_range(self, event_file, mock_client_class, capsys):
        """Test that --doit inserts the selected events."""
        args = import_args(event_file, "--start", "2", "--end", "3", "--doit")
        assert main(args) == EXIT_OK

        client = mock_client_class.from_credentials_file.return_value
        mock_client_class.from_credentials_file.assert_called_once()
        assert mock_client_class.from_credentials_file.call_args.args == ("creds.json",)
        assert client.insert_event.call_count == 2
        calendar_id, first = client.insert_event.call_args_list[0].args
        assert calendar_id == "me@example.com"
        assert first.summary == "Choir rehearsal"

        out = capsys.readouterr().out.splitlines()
        assert out[0] == "start=1, end=2"
        assert out[1].startswith("inserted 2018-01-26T19:00:00-05:00")
        assert out[-1] == "inserted 2 events."

    def test_settings_supply_creds_and_id(self, event_file, mock_client_class, monkeypatch):
        """Test that credentials and calendar ID can come from settings."""
        monkeypatch.setenv("GOOGLE_CREDENTIALS_FILE", "/etc/cal/creds.json")
        monkeypatch.setenv("CALENDAR_ID", "team@example.com")

        assert main(["import", str(event_file), "--doit"]) == EXIT_OK

        assert mock_client_class.from_credentials_file.call_args.args == (
            "/etc/cal/creds.json",
        )
        client = mock_client_class.from_credentials_file.return_value
        assert client.insert_event.call_args.args[0] == "team@example.com"

    def test_missing_calendar_id(self, event_file, capsys):
        """Test that the calendar ID is required."""
        assert main(["import", str(event_file), "--creds", "creds.json"]) == EXIT_USAGE
        assert "need --id" in capsys.readouterr().err

    def test_missing_creds(self, event_file, capsys):
        """Test that credentials are required even for a dry run."""
        assert main(["import", str(event_file), "--id", "me@example.com"]) == EXIT_USAGE
        assert "need --creds" in capsys.readouterr().err

    def test_bad_range(self, event_file, mock_client_class, capsys):
        """Test that a range selecting nothing is an error."""
        assert main(import_args(event_file, "--start", "5")) == EXIT_ERROR
        assert "past the last" in capsys.readouterr().err

    def test_insert_failure_stops(self, event_file, mock_client_class, capsys):
        """Test that the first failed insert stops the import."""
        client = mock_client_class.from_credentials_file.return_value
        client.insert_event.side_effect = [
            {"id": "one"},
            CalendarAPIError("Insert of 'Choir rehearsal' failed: Forbidden", 403),
        ]

        assert main(import_args(event_file, "--doit")) == EXIT_ERROR

        assert client.insert_event.call_count == 2
        captured = capsys.readouterr()
        assert "inserted 1 events." not in captured.out
        assert "event 2:" in captured.err
        assert "1 events inserted before the failure" in captured.err

    def test_auth_failure(self, event_file, mock_client_class, capsys):
        """Test that unusable credentials exit with an error."""
        mock_client_class.from_credentials_file.side_effect = CalendarAuthError(
            "Cannot load credentials from creds.json"
        )
        assert main(import_args(event_file, "--doit")) == EXIT_ERROR
        assert "Cannot load credentials" in capsys.readouterr().err


class TestListCommands:
    """Tests for the calendars and events commands."""

    def test_calendars(self, mock_client_class, capsys):
        """Test listing calendars."""
        client = mock_client_class.from_credentials_file.return_value
        client.list_calendars.return_value = [
            CalendarInfo(id="me@example.com", summary="Me", is_primary=True),
        ]

        assert main(["calendars", "--creds", "creds.json"]) == EXIT_OK
        assert capsys.readouterr().out == (
            "0: ID:'me@example.com' Primary:True Summary:'Me'\n"
        )

    def test_events(self, mock_client_class, capsys):
        """Test listing upcoming events."""
        client = mock_client_class.from_credentials_file.return_value
        client.list_events.return_value = [
            CalendarEvent(
                id="abc",
                calendar_id="me@example.com",
                summary="Book club",
                start="2018-01-19T19:00:00-05:00",
                end="2018-01-19T21:00:00-05:00",
            ),
        ]

        args = ["events", "--creds", "creds.json", "--id", "me@example.com"]
        assert main(args) == EXIT_OK

        client.list_events.assert_called_once_with("me@example.com")
        assert "0: Start:2018-01-19T19:00:00-05:00" in capsys.readouterr().out

    def test_calendars_requires_creds(self, capsys):
        """Test that listing calendars needs credentials."""
        assert main(["calendars"]) == EXIT_USAGE
        assert "need --creds" in capsys.readouterr().err
