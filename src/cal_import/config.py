"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
Command-line flags take precedence over anything set here.

## Environment Variables

- GOOGLE_CREDENTIALS_FILE: Credentials JSON (authorized user or service account)
- CALENDAR_ID: Calendar to insert into (typically the owner's email address)
- GOOGLE_CALENDAR_SCOPES: JSON list of OAuth scopes
- TIMEZONE: IANA timezone for parsed times (default: local timezone)
- DEFAULT_YEAR: Year used when a date line has none (default: current year)
- LOG_LEVEL: Logging level for the CLI (default: WARNING)

## Example .env file

```
GOOGLE_CREDENTIALS_FILE=/home/me/.config/cal-import/creds.json
CALENDAR_ID=me@example.com
TIMEZONE=America/New_York
```
"""

from __future__ import annotations

import logging
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Google Calendar API
    google_credentials_file: str | None = Field(
        default=None,
        description="Path to a credentials JSON file",
    )
    calendar_id: str | None = Field(
        default=None,
        description="ID of calendar (typically, user email address)",
    )
    google_calendar_scopes: list[str] = Field(
        default=[CALENDAR_SCOPE],
        description="Google Calendar API scopes",
    )

    # Parsing
    timezone: str | None = Field(
        default=None,
        description="IANA timezone identifier (e.g., 'America/New_York')",
    )
    default_year: int | None = Field(default=None, ge=1, le=9999)

    # Logging
    log_level: str = "WARNING"

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        """Reject timezone names zoneinfo does not know."""
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: '{v}'") from e
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = str(v).upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: '{v}'")
        return level

    @property
    def tzinfo(self) -> ZoneInfo | None:
        """Timezone for parsed times, or None for the local timezone."""
        return ZoneInfo(self.timezone) if self.timezone else None


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
