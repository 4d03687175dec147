"""Event models for calendar import."""

from __future__ import annotations

from typing import Any, Self

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator


class EventRecord(BaseModel):
    """A single timed event parsed from an event file.

    Times are timezone-aware so they serialize to RFC 3339 with an offset,
    which is what the Calendar API expects for `dateTime` values.
    """

    model_config = ConfigDict(frozen=True)

    start: AwareDatetime = Field(..., description="Event start time")
    end: AwareDatetime = Field(..., description="Event end time")
    summary: str = Field(..., min_length=1, description="Event title")
    description: str = Field(default="", description="Free-form description")

    @model_validator(mode="after")
    def validate_time_order(self) -> Self:
        """Ensure the event does not end before it starts."""
        if self.end < self.start:
            raise ValueError(
                f"End time {self.end.isoformat()} is before start time "
                f"{self.start.isoformat()}"
            )
        return self

    @property
    def start_rfc3339(self) -> str:
        return self.start.isoformat(timespec="seconds")

    @property
    def end_rfc3339(self) -> str:
        return self.end.isoformat(timespec="seconds")

    def to_api_body(self) -> dict[str, Any]:
        """Convert to Google Calendar API insert body format."""
        return {
            "start": {"dateTime": self.start_rfc3339},
            "end": {"dateTime": self.end_rfc3339},
            "summary": self.summary,
            "description": self.description,
        }

    def __str__(self) -> str:
        return (
            f"{self.start_rfc3339} - {self.end_rfc3339}"
            f"\t{self.summary!r}\t{self.description}"
        )
